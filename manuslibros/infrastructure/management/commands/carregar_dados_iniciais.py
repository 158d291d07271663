from decimal import Decimal

from django.core.management.base import BaseCommand

from manuslibros.core import dependency_injection
from manuslibros.core.exceptions import DadosInvalidosError


class Command(BaseCommand):
    help = 'Carrega um acervo de demonstração e um vendedor de teste'

    LIVROS = [
        ('Dom Casmurro', Decimal('18.00'), Decimal('39.90'), 12),
        ('Memórias Póstumas de Brás Cubas', Decimal('20.00'), Decimal('44.90'), 8),
        ('Quincas Borba', Decimal('19.00'), Decimal('42.90'), 5),
        ('Grande Sertão: Veredas', Decimal('45.00'), Decimal('89.90'), 4),
        ('Vidas Secas', Decimal('15.00'), Decimal('34.90'), 10),
    ]
    BOX_MACHADO = ('Box Machado de Assis', Decimal('55.00'), Decimal('109.90'))

    def add_arguments(self, parser):
        parser.add_argument('--senha-vendedor', default='vendedor123', help='Senha do vendedor de demonstração')

    def handle(self, *args, **options):
        self.stdout.write('Criando dados iniciais...')

        catalogo = dependency_injection.get_gerenciar_catalogo_use_case()
        existentes = {livro.titulo: livro for livro in catalogo.listar()}

        for titulo, custo, venda, estoque in self.LIVROS:
            if titulo in existentes:
                continue
            livro = catalogo.adicionar({
                'titulo': titulo, 'preco_custo': custo, 'preco_venda': venda, 'estoque': estoque,
            })
            existentes[titulo] = livro
            self.stdout.write(self.style.SUCCESS(f'Criado livro "{livro.titulo}"'))

        titulo_box, custo_box, venda_box = self.BOX_MACHADO
        if titulo_box not in existentes:
            componentes = [existentes[titulo].id for titulo, *_ in self.LIVROS[:3]]
            catalogo.adicionar({
                'titulo': titulo_box, 'preco_custo': custo_box, 'preco_venda': venda_box,
                'is_box': True, 'itens': componentes,
            })
            self.stdout.write(self.style.SUCCESS(f'Criado box "{titulo_box}"'))

        vendedores = dependency_injection.get_gerenciar_vendedores_use_case()
        try:
            vendedor = vendedores.adicionar({
                'username': 'vendedor',
                'nome': 'Vendedor Demonstração',
                'senha': options['senha_vendedor'],
                'email': 'vendedor@manuslibros.com.br',
                'taxa_comissao': '15',
            })
            self.stdout.write(self.style.SUCCESS(f'Criado vendedor "{vendedor.username}"'))
        except DadosInvalidosError as e:
            self.stdout.write(self.style.WARNING(f'Vendedor não criado: {e.message}'))

        self.stdout.write(self.style.SUCCESS('Dados iniciais carregados com sucesso!'))
