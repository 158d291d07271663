# manuslibros/core/test_use_cases.py

import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import Mock

from manuslibros.core.entities import (
    Box, Cliente, Conta, ItemCarrinho, ItemPedido, LivroAvulso, Papel, Pedido, StatusPedido,
    TipoFrete, Vendedor
)
from manuslibros.core.exceptions import (
    AcessoNegadoError,
    CarrinhoVazioError,
    ComprovanteAusenteError,
    CredenciaisInvalidasError,
    DadosInvalidosError,
    DescontoBloqueadoError,
    LivroNaoEncontradoError,
    PedidoNaoEncontradoError,
    VendedorNaoEncontradoError,
)
from manuslibros.core.use_cases import (
    AjustarDescontoUseCase,
    AtualizarPerfilUseCase,
    AutenticarUseCase,
    ConfirmarPagamentoUseCase,
    CriarPedidoUseCase,
    DespacharPedidoUseCase,
    GerarRelatorioUseCase,
    GerenciarCatalogoUseCase,
    GerenciarVendedoresUseCase,
    ListarPedidosUseCase,
    OrcarPedidoUseCase,
)


def _repo(colecao):
    """Repositório simulado: devolve uma cópia rasa da coleção a cada leitura."""
    repo = Mock()
    repo.buscar_todos.side_effect = lambda: list(colecao)
    return repo


def _hasher():
    hasher = Mock()
    hasher.gerar_hash.side_effect = lambda senha: f'hash:{senha}'
    hasher.verificar.side_effect = lambda senha, senha_hash: senha_hash == f'hash:{senha}'
    return hasher


def _salvo(repo):
    """Coleção passada na última chamada de salvar_todos."""
    return repo.salvar_todos.call_args[0][0]


ADMIN = Conta(id='admin', username='admin', senha='hash:admin', nome='Admin', papel=Papel.ADMIN)


def _pedido(**kwargs):
    dados = dict(
        cliente=Cliente(nome='Maria Souza', endereco='Rua B, 2', cep='20040020', telefone='21988887777'),
        itens=[ItemPedido('l1', 'Dom Casmurro', 2, Decimal('50'), Decimal('20'))],
        tipo_frete=TipoFrete.SIMPLES,
        valor_frete=Decimal('15'),
        desconto=Decimal('10'),
        valor_total=Decimal('105'),
        custo_total=Decimal('40'),
        lucro_total=Decimal('50'),
    )
    dados.update(kwargs)
    return Pedido(**dados)


# ====================================================================
# CATÁLOGO
# ====================================================================

class TestGerenciarCatalogo(unittest.TestCase):

    def setUp(self):
        self.dom = LivroAvulso(id='l1', titulo='Dom Casmurro', preco_custo=Decimal('18'), preco_venda=Decimal('40'), estoque=5)
        self.vidas = LivroAvulso(id='l2', titulo='Vidas Secas', preco_custo=Decimal('15'), preco_venda=Decimal('35'), estoque=2)
        self.livro_repo = _repo([self.dom, self.vidas])
        self.use_case = GerenciarCatalogoUseCase(self.livro_repo)

    def test_listar_com_busca(self):
        self.assertEqual([l.id for l in self.use_case.listar('casmurro')], ['l1'])
        self.assertEqual(len(self.use_case.listar()), 2)

    def test_adicionar_grava_colecao_inteira(self):
        novo = self.use_case.adicionar({'titulo': 'Box', 'preco_custo': 30, 'preco_venda': 60, 'is_box': True, 'itens': ['l1', 'l2']})

        salvos = _salvo(self.livro_repo)
        self.assertEqual(len(salvos), 3)
        self.assertIs(salvos[-1], novo)
        self.assertIsInstance(novo, Box)

    def test_adicionar_invalido_nao_grava(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.adicionar({'titulo': '', 'preco_custo': 1, 'preco_venda': 1, 'estoque': 1})
        self.livro_repo.salvar_todos.assert_not_called()

    def test_editar_substitui_registro(self):
        editado = self.use_case.editar('l2', {'titulo': 'Vidas Secas', 'preco_custo': 15, 'preco_venda': 39, 'estoque': 9})

        salvos = _salvo(self.livro_repo)
        self.assertEqual(editado.id, 'l2')
        self.assertEqual([l.id for l in salvos], ['l1', 'l2'])
        self.assertEqual(salvos[1].estoque, 9)

    def test_editar_inexistente(self):
        with self.assertRaises(LivroNaoEncontradoError):
            self.use_case.editar('x', {'titulo': 'X', 'preco_custo': 1, 'preco_venda': 1, 'estoque': 1})

    def test_deletar(self):
        self.use_case.deletar('l1')
        self.assertEqual([l.id for l in _salvo(self.livro_repo)], ['l2'])

        with self.assertRaises(LivroNaoEncontradoError):
            self.use_case.deletar('nao-existe')


# ====================================================================
# VENDEDORES E CONTAS
# ====================================================================

class TestGerenciarVendedores(unittest.TestCase):

    def setUp(self):
        self.joana = Vendedor(id='v1', username='joana', senha='hash:123', nome='Joana')
        self.vendedor_repo = _repo([self.joana])
        self.conta_repo = _repo([ADMIN])
        self.use_case = GerenciarVendedoresUseCase(self.vendedor_repo, self.conta_repo, _hasher())

    def test_adicionar_com_taxa_padrao_e_senha_em_hash(self):
        vendedor = self.use_case.adicionar({'username': 'pedro', 'nome': 'Pedro', 'senha': 'segredo'})

        self.assertEqual(vendedor.taxa_comissao, Decimal('15'))
        self.assertEqual(vendedor.senha, 'hash:segredo')
        self.assertEqual(vendedor.papel, Papel.SELLER)
        self.assertEqual(len(_salvo(self.vendedor_repo)), 2)

    def test_adicionar_exige_campos(self):
        with self.assertRaises(DadosInvalidosError) as ctx:
            self.use_case.adicionar({'username': 'pedro'})
        self.assertEqual(set(ctx.exception.campos), {'nome', 'senha'})

    def test_username_unico_entre_admins_e_vendedores(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.adicionar({'username': 'ADMIN', 'nome': 'Outro', 'senha': 'x'})
        with self.assertRaises(DadosInvalidosError):
            self.use_case.adicionar({'username': 'joana', 'nome': 'Outra', 'senha': 'x'})

    def test_taxa_fora_do_intervalo(self):
        with self.assertRaises(DadosInvalidosError):
            self.use_case.adicionar({'username': 'pedro', 'nome': 'Pedro', 'senha': 'x', 'taxa_comissao': 101})
        with self.assertRaises(DadosInvalidosError):
            self.use_case.editar('v1', {'taxa_comissao': -1})

    def test_editar_sem_senha_mantem_a_atual(self):
        vendedor = self.use_case.editar('v1', {'nome': 'Joana Lima', 'senha': '', 'taxa_comissao': Decimal('20')})

        self.assertEqual(vendedor.nome, 'Joana Lima')
        self.assertEqual(vendedor.senha, 'hash:123')
        self.assertEqual(vendedor.taxa_comissao, Decimal('20'))

    def test_deletar_inexistente(self):
        with self.assertRaises(VendedorNaoEncontradoError):
            self.use_case.deletar('v9')


class TestAutenticar(unittest.TestCase):

    def setUp(self):
        self.joana = Vendedor(id='v1', username='joana', senha='hash:123', nome='Joana')
        self.use_case = AutenticarUseCase(_repo([ADMIN]), _repo([self.joana]), _hasher())

    def test_login_de_admin_e_vendedor(self):
        self.assertEqual(self.use_case.executar('admin', 'admin').id, 'admin')
        self.assertEqual(self.use_case.executar('Joana', '123').id, 'v1')

    def test_senha_incorreta(self):
        with self.assertRaises(CredenciaisInvalidasError):
            self.use_case.executar('joana', 'errada')

    def test_usuario_inexistente(self):
        with self.assertRaises(CredenciaisInvalidasError):
            self.use_case.executar('ninguem', '123')


class TestAtualizarPerfil(unittest.TestCase):

    def test_vendedor_atualiza_contato_e_senha(self):
        joana = Vendedor(id='v1', username='joana', senha='hash:123', nome='Joana')
        vendedor_repo = _repo([joana])
        conta_repo = _repo([ADMIN])
        use_case = AtualizarPerfilUseCase(conta_repo, vendedor_repo, _hasher())

        conta = use_case.executar('v1', {'telefone': '1190000', 'senha': 'nova'})

        self.assertEqual(conta.telefone, '1190000')
        self.assertEqual(conta.senha, 'hash:nova')
        vendedor_repo.salvar_todos.assert_called_once()
        conta_repo.salvar_todos.assert_not_called()

    def test_admin_atualiza_nome(self):
        admin = Conta(id='admin', username='admin', senha='hash:admin', nome='Admin')
        conta_repo = _repo([admin])
        use_case = AtualizarPerfilUseCase(conta_repo, _repo([]), _hasher())

        use_case.executar('admin', {'nome': 'Felipe'})

        self.assertEqual(_salvo(conta_repo)[0].nome, 'Felipe')


# ====================================================================
# PEDIDOS
# ====================================================================

class TestCriarPedido(unittest.TestCase):

    def setUp(self):
        self.dom = LivroAvulso(id='l1', titulo='Dom Casmurro', preco_custo=Decimal('20'), preco_venda=Decimal('50'), estoque=3)
        self.joana = Vendedor(id='v1', username='joana', senha='x', nome='Joana', taxa_comissao=Decimal('15'))
        self.livro_repo = _repo([self.dom])
        self.pedido_repo = _repo([])
        self.vendedor_repo = _repo([self.joana])
        self.use_case = CriarPedidoUseCase(self.livro_repo, self.pedido_repo, self.vendedor_repo)
        self.cliente = {'nome': 'Maria', 'endereco': 'Rua B, 2', 'cep': '20040-020', 'telefone': '21988887777'}

    def test_vendedor_vende_em_nome_proprio(self):
        pedido = self.use_case.executar(
            self.joana, self.cliente, [ItemCarrinho('l1', 2)], TipoFrete.SIMPLES, Decimal('10'), vendedor_id='outro'
        )

        self.assertEqual(pedido.vendedor_id, 'v1')
        self.assertEqual(pedido.status, StatusPedido.PENDING_PAYMENT)
        self.assertEqual(pedido.valor_frete, Decimal('18.00'))
        self.assertEqual(pedido.valor_total, Decimal('108.00'))  # 100 + 18 - 10
        self.assertEqual(pedido.lucro_total, Decimal('50'))
        self.assertEqual(pedido.comissao_vendedor, Decimal('7.5'))
        self.assertEqual(pedido.cliente.cep, '20040020')
        self.assertEqual(_salvo(self.pedido_repo), [pedido])

    def test_venda_direta_do_admin_sem_comissao(self):
        pedido = self.use_case.executar(ADMIN, self.cliente, [ItemCarrinho('l1', 1)])
        self.assertIsNone(pedido.vendedor_id)
        self.assertEqual(pedido.comissao_vendedor, Decimal('0'))

    def test_estoque_nao_e_baixado_na_criacao(self):
        self.use_case.executar(ADMIN, self.cliente, [ItemCarrinho('l1', 3)])
        self.livro_repo.salvar_todos.assert_not_called()
        self.assertEqual(self.dom.estoque, 3)

    def test_cliente_incompleto(self):
        with self.assertRaises(DadosInvalidosError) as ctx:
            self.use_case.executar(ADMIN, {'nome': 'Maria'}, [ItemCarrinho('l1', 1)])
        self.assertIn('cep', ctx.exception.campos)
        self.pedido_repo.salvar_todos.assert_not_called()

    def test_carrinho_vazio(self):
        with self.assertRaises(CarrinhoVazioError):
            self.use_case.executar(ADMIN, self.cliente, [])

    def test_vendedor_atribuido_inexistente(self):
        with self.assertRaises(VendedorNaoEncontradoError):
            self.use_case.executar(ADMIN, self.cliente, [ItemCarrinho('l1', 1)], vendedor_id='v9')


class TestOrcarPedido(unittest.TestCase):

    def test_orcamento_sem_cep_nao_cobra_frete(self):
        livro = LivroAvulso(id='l1', titulo='Livro', preco_custo=Decimal('20'), preco_venda=Decimal('50'), estoque=5)
        joana = Vendedor(id='v1', username='joana', senha='x', nome='Joana', taxa_comissao=Decimal('10'))
        use_case = OrcarPedidoUseCase(_repo([livro]), _repo([joana]))

        orcamento = use_case.executar(ADMIN, [ItemCarrinho('l1', 2)], vendedor_id='v1')

        self.assertEqual(orcamento.valor_frete, Decimal('0'))
        self.assertEqual(orcamento.totais.valor_final, Decimal('100'))
        self.assertEqual(orcamento.comissao_estimada, Decimal('6'))


class TestConfirmarPagamento(unittest.TestCase):

    def setUp(self):
        self.a = LivroAvulso(id='a', titulo='A', preco_custo=Decimal('10'), preco_venda=Decimal('20'), estoque=1)
        self.b = LivroAvulso(id='b', titulo='B', preco_custo=Decimal('10'), preco_venda=Decimal('20'), estoque=4)
        self.box = Box(id='box', titulo='Box', preco_custo=Decimal('20'), preco_venda=Decimal('35'), itens=['a', 'b'])
        self.pedido = _pedido(id='p1', itens=[ItemPedido('box', 'Box', 2, Decimal('35'), Decimal('20'), is_box=True)])
        self.pedido_repo = _repo([self.pedido])
        self.livro_repo = _repo([self.a, self.b, self.box])
        self.use_case = ConfirmarPagamentoUseCase(self.pedido_repo, self.livro_repo)

    def test_confirma_e_baixa_componentes(self):
        with self.assertLogs('manuslibros.core.use_cases', level='WARNING') as logs:
            pedido = self.use_case.executar('p1', 'comprovante-pix')

        self.assertEqual(pedido.status, StatusPedido.CONFIRMED)
        self.assertEqual(self.a.estoque, 0)
        self.assertEqual(self.b.estoque, 2)
        self.assertTrue(any('livro a insuficiente' in linha for linha in logs.output))
        self.livro_repo.salvar_todos.assert_called_once()
        self.pedido_repo.salvar_todos.assert_called_once()

    def test_sem_comprovante_nada_e_gravado(self):
        with self.assertRaises(ComprovanteAusenteError):
            self.use_case.executar('p1', None)
        self.livro_repo.salvar_todos.assert_not_called()
        self.pedido_repo.salvar_todos.assert_not_called()

    def test_pedido_inexistente(self):
        with self.assertRaises(PedidoNaoEncontradoError):
            self.use_case.executar('p9', 'pix')


class TestDespacharPedido(unittest.TestCase):

    def test_despacha_pedido_confirmado(self):
        pedido = _pedido(id='p1', status=StatusPedido.CONFIRMED)
        repo = _repo([pedido])

        DespacharPedidoUseCase(repo).executar('p1', 'BR123', None)

        self.assertEqual(_salvo(repo)[0].status, StatusPedido.SHIPPED)
        self.assertIsNone(pedido.documento_envio)


class TestAjustarDesconto(unittest.TestCase):

    def setUp(self):
        self.joana = Vendedor(id='v1', username='joana', senha='x', nome='Joana', taxa_comissao=Decimal('15'))
        self.pedido = _pedido(id='p1', vendedor_id='v1', comissao_vendedor=Decimal('7.5'))
        self.pedido_repo = _repo([self.pedido])

    def test_recalcula_com_taxa_atual_do_vendedor(self):
        use_case = AjustarDescontoUseCase(self.pedido_repo, _repo([self.joana]))
        pedido = use_case.executar(self.joana, 'p1', Decimal('20'))

        self.assertEqual(pedido.valor_total, Decimal('95'))
        self.assertEqual(pedido.comissao_vendedor, Decimal('6'))

    def test_vendedor_removido_zera_comissao(self):
        use_case = AjustarDescontoUseCase(self.pedido_repo, _repo([]))
        pedido = use_case.executar(ADMIN, 'p1', Decimal('0'))
        self.assertEqual(pedido.comissao_vendedor, Decimal('0'))

    def test_vendedor_nao_altera_pedido_alheio(self):
        pedro = Vendedor(id='v2', username='pedro', senha='x', nome='Pedro')
        use_case = AjustarDescontoUseCase(self.pedido_repo, _repo([self.joana, pedro]))
        with self.assertRaises(AcessoNegadoError):
            use_case.executar(pedro, 'p1', Decimal('5'))

    def test_pedido_confirmado_bloqueia_desconto(self):
        self.pedido.status = StatusPedido.CONFIRMED
        use_case = AjustarDescontoUseCase(self.pedido_repo, _repo([self.joana]))
        with self.assertRaises(DescontoBloqueadoError):
            use_case.executar(ADMIN, 'p1', Decimal('5'))
        self.pedido_repo.salvar_todos.assert_not_called()


class TestListarPedidos(unittest.TestCase):

    def setUp(self):
        self.joana = Vendedor(id='v1', username='joana', senha='x', nome='Joana')
        self.pedidos = [
            _pedido(id='p1', vendedor_id='v1'),
            _pedido(id='p2', status=StatusPedido.CONFIRMED, cliente=Cliente('Carlos', 'Rua', '01310000', '11')),
            _pedido(id='p3', status=StatusPedido.SHIPPED),
        ]
        self.use_case = ListarPedidosUseCase(_repo(self.pedidos))

    def test_vendedor_ve_apenas_os_proprios(self):
        self.assertEqual([p.id for p in self.use_case.listar(self.joana)], ['p1'])
        self.assertEqual(len(self.use_case.listar(ADMIN)), 3)

    def test_busca_por_cliente_e_status(self):
        self.assertEqual([p.id for p in self.use_case.listar(ADMIN, busca='carlos')], ['p2'])
        self.assertEqual([p.id for p in self.use_case.listar(ADMIN, status='SHIPPED')], ['p3'])

    def test_detalhar_pedido_alheio(self):
        with self.assertRaises(AcessoNegadoError):
            self.use_case.detalhar(self.joana, 'p2')

    def test_fila_de_envios(self):
        self.assertEqual([p.id for p in self.use_case.listar_envios_pendentes()], ['p2'])
        self.assertEqual([p.id for p in self.use_case.listar_envios_recentes()], ['p3'])


class TestGerarRelatorio(unittest.TestCase):

    def test_periodo_invertido(self):
        use_case = GerarRelatorioUseCase(_repo([]), _repo([]))
        with self.assertRaises(DadosInvalidosError):
            use_case.executar(inicio=date(2024, 6, 1), fim=date(2024, 5, 1))


if __name__ == '__main__':
    unittest.main()
