# manuslibros/core/test_regras.py

import unittest
from decimal import Decimal

from manuslibros.core import regras
from manuslibros.core.entities import (
    Box, Cliente, ItemCarrinho, ItemPedido, LivroAvulso, Pedido, StatusPedido, TipoFrete
)
from manuslibros.core.exceptions import (
    CodigoRastreioAusenteError,
    ComposicaoBoxInvalidaError,
    ComprovanteAusenteError,
    DadosInvalidosError,
    DescontoBloqueadoError,
    EstoqueInsuficienteError,
    LivroNaoEncontradoError,
    TransicaoInvalidaError,
)


def _pedido(**kwargs):
    dados = dict(
        cliente=Cliente(nome='Ana', endereco='Rua A, 1', cep='01310000', telefone='11999990000'),
        itens=[],
        tipo_frete=TipoFrete.SIMPLES,
        valor_frete=Decimal('15'),
        desconto=Decimal('10'),
        valor_total=Decimal('105'),
        custo_total=Decimal('40'),
        lucro_total=Decimal('50'),
    )
    dados.update(kwargs)
    return Pedido(**dados)


class TestCatalogo(unittest.TestCase):

    def setUp(self):
        self.dom = LivroAvulso(id='l1', titulo='Dom Casmurro', preco_custo=Decimal('18'), preco_venda=Decimal('40'), estoque=5)
        self.quincas = LivroAvulso(id='l2', titulo='Quincas Borba', preco_custo=Decimal('19'), preco_venda=Decimal('42'), estoque=3)
        self.bras = LivroAvulso(id='l3', titulo='Brás Cubas', preco_custo=Decimal('20'), preco_venda=Decimal('45'), estoque=2)
        self.helena = LivroAvulso(id='l4', titulo='Helena', preco_custo=Decimal('12'), preco_venda=Decimal('30'), estoque=1)
        self.box = Box(id='b1', titulo='Box Machado', preco_custo=Decimal('50'), preco_venda=Decimal('100'), itens=['l1', 'l2'])
        self.livros = [self.dom, self.quincas, self.bras, self.helena, self.box]

    def test_box_nao_tem_estoque_proprio(self):
        self.assertIsNone(self.box.estoque_efetivo)
        self.assertEqual(self.dom.estoque_efetivo, 5)

    def test_adicionar_componente_recusa_quarto_livro(self):
        itens = ['l1', 'l2', 'l3']
        with self.assertRaises(ComposicaoBoxInvalidaError):
            regras.adicionar_componente_box(itens, self.helena)

    def test_adicionar_componente_recusa_box_aninhado(self):
        with self.assertRaises(ComposicaoBoxInvalidaError):
            regras.adicionar_componente_box(['l1'], self.box)

    def test_adicionar_componente_repetido_nao_duplica(self):
        self.assertEqual(regras.adicionar_componente_box(['l1'], self.dom), ['l1'])
        self.assertEqual(regras.adicionar_componente_box(['l1'], self.quincas), ['l1', 'l2'])

    def test_adicionar_componente_inexistente(self):
        with self.assertRaises(LivroNaoEncontradoError):
            regras.adicionar_componente_box([], None)

    def test_montar_livro_avulso(self):
        livro = regras.montar_livro(
            {'titulo': ' Vidas Secas ', 'preco_custo': '15', 'preco_venda': '34.90', 'estoque': 7}, self.livros
        )
        self.assertIsInstance(livro, LivroAvulso)
        self.assertEqual(livro.titulo, 'Vidas Secas')
        self.assertEqual(livro.preco_venda, Decimal('34.90'))
        self.assertEqual(livro.estoque, 7)

    def test_montar_livro_valida_campos(self):
        with self.assertRaises(DadosInvalidosError) as ctx:
            regras.montar_livro({'titulo': '', 'preco_custo': -1, 'preco_venda': 10, 'estoque': -2}, self.livros)
        self.assertEqual(set(ctx.exception.campos), {'titulo', 'preco_custo', 'estoque'})

    def test_montar_livro_exige_estoque_para_avulso(self):
        with self.assertRaises(DadosInvalidosError) as ctx:
            regras.montar_livro({'titulo': 'X', 'preco_custo': 1, 'preco_venda': 2}, self.livros)
        self.assertEqual(ctx.exception.campos['estoque'], 'obrigatório')

    def test_montar_box_valido(self):
        box = regras.montar_livro(
            {'titulo': 'Trilogia', 'preco_custo': 50, 'preco_venda': 99, 'is_box': True, 'itens': ['l1', 'l2', 'l3']},
            self.livros,
        )
        self.assertIsInstance(box, Box)
        self.assertEqual(box.itens, ['l1', 'l2', 'l3'])
        self.assertIsNone(box.estoque_efetivo)

    def test_montar_box_com_mais_de_tres_livros(self):
        with self.assertRaises(ComposicaoBoxInvalidaError):
            regras.montar_livro(
                {'titulo': 'Grande', 'preco_custo': 1, 'preco_venda': 2, 'is_box': True, 'itens': ['l1', 'l2', 'l3', 'l4']},
                self.livros,
            )

    def test_montar_box_sem_componentes(self):
        with self.assertRaises(ComposicaoBoxInvalidaError):
            regras.montar_livro({'titulo': 'Vazio', 'preco_custo': 1, 'preco_venda': 2, 'is_box': True}, self.livros)

    def test_montar_box_contendo_box(self):
        with self.assertRaises(ComposicaoBoxInvalidaError):
            regras.montar_livro(
                {'titulo': 'Box de Box', 'preco_custo': 1, 'preco_venda': 2, 'is_box': True, 'itens': ['b1']},
                self.livros,
            )

    def test_editar_box_preserva_id(self):
        box = regras.montar_livro(
            {'titulo': 'Box Machado', 'preco_custo': 50, 'preco_venda': 110, 'is_box': True, 'itens': ['l1']},
            self.livros,
            livro_id='b1',
        )
        self.assertEqual(box.id, 'b1')

    def test_componente_de_box_nao_vira_box(self):
        # l1 compõe o Box Machado; transformá-lo em Box criaria um Box aninhado
        with self.assertRaises(ComposicaoBoxInvalidaError):
            regras.montar_livro(
                {'titulo': 'Dom Casmurro', 'preco_custo': 18, 'preco_venda': 40, 'is_box': True, 'itens': ['l3']},
                self.livros,
                livro_id='l1',
            )

    def test_livro_fora_de_box_pode_virar_box(self):
        box = regras.montar_livro(
            {'titulo': 'Helena e Brás', 'preco_custo': 30, 'preco_venda': 70, 'is_box': True, 'itens': ['l3']},
            self.livros,
            livro_id='l4',
        )
        self.assertIsInstance(box, Box)
        self.assertEqual(box.id, 'l4')

    def test_valores_nao_finitos_sao_recusados(self):
        for bruto in ('nan', 'Infinity', Decimal('-inf')):
            with self.assertRaises(DadosInvalidosError):
                regras.para_decimal(bruto, 'preco_venda')

        with self.assertRaises(DadosInvalidosError) as ctx:
            regras.montar_livro({'titulo': 'X', 'preco_custo': 'nan', 'preco_venda': 2, 'estoque': 1}, self.livros)
        self.assertEqual(ctx.exception.campos['preco_custo'], 'inválido')


class TestPrecificacao(unittest.TestCase):

    def setUp(self):
        self.livro = LivroAvulso(id='l1', titulo='Livro', preco_custo=Decimal('20'), preco_venda=Decimal('50'), estoque=2)
        self.esgotado = LivroAvulso(id='l2', titulo='Esgotado', preco_custo=Decimal('5'), preco_venda=Decimal('10'), estoque=0)
        self.box = Box(id='b1', titulo='Box', preco_custo=Decimal('30'), preco_venda=Decimal('70'), itens=['l1'])

    def test_exemplo_de_totais(self):
        """Carrinho [{50, 20, 2}], desconto 10, frete 15."""
        itens = [ItemPedido('l1', 'Livro', 2, Decimal('50'), Decimal('20'))]

        totais = regras.calcular_totais_carrinho(itens, desconto=Decimal('10'), valor_frete=Decimal('15'))

        self.assertEqual(totais.subtotal, Decimal('100'))
        self.assertEqual(totais.custo_total, Decimal('40'))
        self.assertEqual(totais.valor_final, Decimal('105'))
        self.assertEqual(totais.lucro_total, Decimal('50'))
        self.assertEqual(regras.calcular_comissao(totais.lucro_total, Decimal('15')), Decimal('7.5'))

    def test_valor_final_nunca_negativo(self):
        itens = [ItemPedido('l1', 'Livro', 1, Decimal('50'), Decimal('20'))]
        totais = regras.calcular_totais_carrinho(itens, desconto=Decimal('500'), valor_frete=Decimal('15'))
        self.assertEqual(totais.valor_final, Decimal('0'))
        self.assertEqual(totais.lucro_total, Decimal('-470'))

    def test_frete_nao_afeta_lucro(self):
        itens = [ItemPedido('l1', 'Livro', 1, Decimal('50'), Decimal('20'))]
        sem_frete = regras.calcular_totais_carrinho(itens, valor_frete=Decimal('0'))
        com_frete = regras.calcular_totais_carrinho(itens, valor_frete=Decimal('42'))
        self.assertEqual(sem_frete.lucro_total, com_frete.lucro_total)

    def test_comissao_nunca_negativa(self):
        self.assertEqual(regras.calcular_comissao(Decimal('-100'), Decimal('15')), Decimal('0'))

    def test_adicionar_ao_carrinho_limita_ao_estoque(self):
        carrinho = regras.adicionar_ao_carrinho([], self.livro, 1)
        carrinho = regras.adicionar_ao_carrinho(carrinho, self.livro, 1)
        self.assertEqual(carrinho, [ItemCarrinho('l1', 2)])

        with self.assertRaises(EstoqueInsuficienteError):
            regras.adicionar_ao_carrinho(carrinho, self.livro, 1)

    def test_adicionar_ao_carrinho_sem_estoque(self):
        with self.assertRaises(EstoqueInsuficienteError):
            regras.adicionar_ao_carrinho([], self.esgotado, 1)

    def test_box_nao_depende_de_estoque_no_carrinho(self):
        carrinho = regras.adicionar_ao_carrinho([], self.box, 5)
        self.assertEqual(carrinho[0].quantidade, 5)

    def test_montar_itens_congela_precos(self):
        itens = regras.montar_itens_pedido([ItemCarrinho('l1', 2), ItemCarrinho('b1', 1)], [self.livro, self.box])
        self.livro.preco_venda = Decimal('999')

        self.assertEqual(itens[0].preco_unitario, Decimal('50'))
        self.assertEqual(itens[0].custo_unitario, Decimal('20'))
        self.assertTrue(itens[1].is_box)

    def test_montar_itens_soma_linhas_repetidas(self):
        with self.assertRaises(EstoqueInsuficienteError):
            regras.montar_itens_pedido([ItemCarrinho('l1', 2), ItemCarrinho('l1', 1)], [self.livro])

    def test_montar_itens_livro_inexistente(self):
        with self.assertRaises(LivroNaoEncontradoError):
            regras.montar_itens_pedido([ItemCarrinho('fantasma', 1)], [self.livro])


class TestCicloDeVida(unittest.TestCase):

    def setUp(self):
        self.a = LivroAvulso(id='a', titulo='A', preco_custo=Decimal('10'), preco_venda=Decimal('20'), estoque=5)
        self.b = LivroAvulso(id='b', titulo='B', preco_custo=Decimal('10'), preco_venda=Decimal('20'), estoque=1)
        self.box = Box(id='box', titulo='Box AB', preco_custo=Decimal('20'), preco_venda=Decimal('35'), itens=['a', 'b'])
        self.livros = [self.a, self.b, self.box]

    def test_confirmar_baixa_componentes_do_box(self):
        pedido = _pedido(itens=[ItemPedido('box', 'Box AB', 2, Decimal('35'), Decimal('20'), is_box=True)])

        truncados = regras.confirmar_pagamento(pedido, 'pix.png', self.livros)

        self.assertEqual(pedido.status, StatusPedido.CONFIRMED)
        self.assertEqual(pedido.comprovante, 'pix.png')
        self.assertEqual(self.a.estoque, 3)
        self.assertEqual(self.b.estoque, 0)  # 1 - 2, limitado a zero
        self.assertEqual(truncados, ['b'])
        self.assertIsNone(self.box.estoque_efetivo)

    def test_confirmar_ignora_livro_removido(self):
        pedido = _pedido(itens=[
            ItemPedido('removido', 'Antigo', 1, Decimal('10'), Decimal('5')),
            ItemPedido('a', 'A', 1, Decimal('20'), Decimal('10')),
        ])
        regras.confirmar_pagamento(pedido, 'pix', self.livros)
        self.assertEqual(self.a.estoque, 4)

    def test_confirmar_exige_comprovante(self):
        pedido = _pedido()
        with self.assertRaises(ComprovanteAusenteError):
            regras.confirmar_pagamento(pedido, '', self.livros)
        self.assertEqual(pedido.status, StatusPedido.PENDING_PAYMENT)

    def test_confirmar_duas_vezes_falha(self):
        pedido = _pedido(itens=[ItemPedido('a', 'A', 1, Decimal('20'), Decimal('10'))])
        regras.confirmar_pagamento(pedido, 'pix', self.livros)

        with self.assertRaises(TransicaoInvalidaError):
            regras.confirmar_pagamento(pedido, 'pix', self.livros)
        self.assertEqual(self.a.estoque, 4)

    def test_despachar_exige_confirmacao(self):
        with self.assertRaises(TransicaoInvalidaError):
            regras.despachar_pedido(_pedido(), 'BR123')

    def test_despachar_exige_rastreio(self):
        pedido = _pedido(status=StatusPedido.CONFIRMED)
        with self.assertRaises(CodigoRastreioAusenteError):
            regras.despachar_pedido(pedido, '  ')

    def test_despachar_nao_mexe_no_estoque(self):
        pedido = _pedido(status=StatusPedido.CONFIRMED, itens=[ItemPedido('a', 'A', 1, Decimal('20'), Decimal('10'))])
        regras.despachar_pedido(pedido, 'BR123456789', 'etiqueta.pdf')

        self.assertEqual(pedido.status, StatusPedido.SHIPPED)
        self.assertEqual(pedido.codigo_rastreio, 'BR123456789')
        self.assertEqual(pedido.documento_envio, 'etiqueta.pdf')
        self.assertEqual(self.a.estoque, 5)

    def test_enviado_nao_volta_para_confirmado(self):
        pedido = _pedido(status=StatusPedido.SHIPPED)
        with self.assertRaises(TransicaoInvalidaError):
            regras.confirmar_pagamento(pedido, 'pix', self.livros)
        with self.assertRaises(TransicaoInvalidaError):
            regras.despachar_pedido(pedido, 'BR1')

    def test_ajustar_desconto_recalcula_valores(self):
        pedido = _pedido(vendedor_id='v1', comissao_vendedor=Decimal('7.5'))

        regras.ajustar_desconto(pedido, Decimal('20'), Decimal('15'))

        self.assertEqual(pedido.desconto, Decimal('20'))
        self.assertEqual(pedido.valor_total, Decimal('95'))
        self.assertEqual(pedido.lucro_total, Decimal('40'))
        self.assertEqual(pedido.comissao_vendedor, Decimal('6'))

    def test_ajustar_desconto_sem_vendedor_zera_comissao(self):
        pedido = _pedido()
        regras.ajustar_desconto(pedido, Decimal('0'), Decimal('15'))
        self.assertEqual(pedido.comissao_vendedor, Decimal('0'))
        self.assertEqual(pedido.valor_total, Decimal('115'))

    def test_ajustar_desconto_bloqueado_apos_confirmacao(self):
        pedido = _pedido(status=StatusPedido.CONFIRMED)
        with self.assertRaises(DescontoBloqueadoError):
            regras.ajustar_desconto(pedido, Decimal('5'))

    def test_ajustar_desconto_negativo(self):
        with self.assertRaises(DadosInvalidosError):
            regras.ajustar_desconto(_pedido(), Decimal('-1'))


if __name__ == '__main__':
    unittest.main()
