# Modelos do banco de dados local (cache autoritativo das coleções).
# Cada coleção do Core vira uma tabela com chave primária textual (UUID).

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


PAPEIS = [('ADMIN', 'Administrador'), ('SELLER', 'Vendedor')]


class LivroModel(models.Model):
    """Livro avulso ou Box. O estoque é nulo para Boxes."""
    id = models.CharField(primary_key=True, max_length=64)
    titulo = models.CharField(max_length=255, verbose_name="Título")
    preco_custo = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="Preço de Custo")
    preco_venda = models.DecimalField(max_digits=12, decimal_places=2, verbose_name="Preço de Venda")
    estoque = models.IntegerField(null=True, blank=True)
    is_box = models.BooleanField(default=False, verbose_name="É Box")
    itens = models.JSONField(default=list, blank=True, verbose_name="Componentes do Box")

    class Meta:
        verbose_name = 'Livro'
        verbose_name_plural = 'Livros'
        db_table = 'books'
        ordering = ['titulo']

    def __str__(self):
        return self.titulo


class ContaModel(models.Model):
    """Contas de administrador (coleção `users`)."""
    id = models.CharField(primary_key=True, max_length=64)
    username = models.CharField(max_length=150, db_index=True)
    senha = models.CharField(max_length=255)
    papel = models.CharField(max_length=10, choices=PAPEIS, default='ADMIN')
    nome = models.CharField(max_length=255)
    avatar = models.TextField(null=True, blank=True)

    class Meta:
        verbose_name = 'Conta'
        verbose_name_plural = 'Contas'
        db_table = 'users'

    def __str__(self):
        return self.username


class VendedorModel(models.Model):
    """Equipe de vendas (coleção `sellers`)."""
    id = models.CharField(primary_key=True, max_length=64)
    username = models.CharField(max_length=150, db_index=True)
    senha = models.CharField(max_length=255)
    papel = models.CharField(max_length=10, choices=PAPEIS, default='SELLER')
    nome = models.CharField(max_length=255)
    email = models.CharField(max_length=255, blank=True, default='')
    telefone = models.CharField(max_length=30, blank=True, default='')
    conta_bancaria = models.TextField(blank=True, default='', verbose_name="Dados Bancários / PIX")
    taxa_comissao = models.DecimalField(max_digits=5, decimal_places=2, default=15, verbose_name="Comissão (%)")
    avatar = models.TextField(null=True, blank=True)

    class Meta:
        verbose_name = 'Vendedor'
        verbose_name_plural = 'Vendedores'
        db_table = 'sellers'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class PedidoModel(models.Model):
    """
    Pedido de venda. Cliente e itens ficam embutidos em JSON,
    pois são snapshots imutáveis do momento da venda.
    """
    STATUS_CHOICES = [
        ('PENDING_PAYMENT', 'Aguardando Pagamento'),
        ('CONFIRMED', 'Pago / Aguardando Envio'),
        ('SHIPPED', 'Enviado'),
    ]
    FRETE_CHOICES = [('Simples', 'Simples'), ('SEDEX', 'SEDEX')]

    id = models.CharField(primary_key=True, max_length=64)
    data = models.DateTimeField(db_index=True, verbose_name="Data do Pedido")
    cliente = models.JSONField(encoder=DjangoJSONEncoder)
    itens = models.JSONField(encoder=DjangoJSONEncoder, default=list)
    desconto = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    valor_frete = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tipo_frete = models.CharField(max_length=10, choices=FRETE_CHOICES, default='Simples')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='PENDING_PAYMENT', db_index=True)
    vendedor_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    valor_total = models.DecimalField(max_digits=12, decimal_places=2)
    custo_total = models.DecimalField(max_digits=12, decimal_places=2)
    lucro_total = models.DecimalField(max_digits=12, decimal_places=2)
    comissao_vendedor = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    comprovante = models.TextField(null=True, blank=True, verbose_name="Comprovante PIX")
    codigo_rastreio = models.CharField(max_length=100, null=True, blank=True, verbose_name="Código de Rastreio")
    documento_envio = models.TextField(null=True, blank=True, verbose_name="Etiqueta / Documento de Envio")

    class Meta:
        verbose_name = 'Pedido'
        verbose_name_plural = 'Pedidos'
        db_table = 'orders'
        ordering = ['-data']

    def __str__(self):
        return f"Pedido #{self.id} - {self.status}"
