# manuslibros/core/regras.py
"""
Regras de negócio puras: catálogo, precificação de pedidos e ciclo de vida.

Nenhuma função aqui acessa persistência; todas operam sobre entidades já
carregadas e levantam exceções do Core quando uma regra é violada.
"""
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Sequence

from manuslibros.core.entities import (
    Box, ItemCarrinho, ItemPedido, Livro, LivroAvulso, Pedido, StatusPedido, TotaisCarrinho
)
from manuslibros.core.exceptions import (
    ComposicaoBoxInvalidaError,
    ComprovanteAusenteError,
    CodigoRastreioAusenteError,
    DadosInvalidosError,
    DescontoBloqueadoError,
    EstoqueInsuficienteError,
    LivroNaoEncontradoError,
    TransicaoInvalidaError,
)

ZERO = Decimal('0')
MAX_ITENS_BOX = 3


def para_decimal(valor, campo: str = 'valor') -> Decimal:
    """Converte números e strings para Decimal sem perda de precisão. NaN e infinito são recusados."""
    try:
        convertido = valor if isinstance(valor, Decimal) else Decimal(str(valor))
    except (InvalidOperation, ValueError, TypeError):
        convertido = None
    if convertido is None or not convertido.is_finite():
        raise DadosInvalidosError(f"Valor numérico inválido para '{campo}'.", campos={campo: 'inválido'})
    return convertido


def indexar(livros: Sequence[Livro]) -> Dict[str, Livro]:
    return {livro.id: livro for livro in livros}


# ====================================================================
# 1. CATÁLOGO
# ====================================================================

def adicionar_componente_box(itens: List[str], livro: Optional[Livro]) -> List[str]:
    """
    Inclui um livro na composição de um Box.
    Recusa o quarto componente e a inclusão de outro Box.
    """
    if livro is None:
        raise LivroNaoEncontradoError("Livro informado para o Box não existe.")
    if livro.is_box:
        raise ComposicaoBoxInvalidaError("Um Box não pode conter outro Box.")
    if livro.id in itens:
        return list(itens)
    if len(itens) >= MAX_ITENS_BOX:
        raise ComposicaoBoxInvalidaError(f"Um Box pode conter no máximo {MAX_ITENS_BOX} livros.")
    return list(itens) + [livro.id]


def montar_livro(dados: dict, livros: Sequence[Livro], livro_id: Optional[str] = None) -> Livro:
    """
    Valida os dados de cadastro/edição e constrói a entidade adequada
    (LivroAvulso ou Box). Nenhuma coleção é alterada aqui.
    """
    erros = {}

    titulo = (dados.get('titulo') or '').strip()
    if not titulo:
        erros['titulo'] = 'obrigatório'

    precos = {}
    for campo in ('preco_custo', 'preco_venda'):
        bruto = dados.get(campo)
        if bruto is None or bruto == '':
            erros[campo] = 'obrigatório'
            continue
        try:
            valor = para_decimal(bruto, campo)
        except DadosInvalidosError:
            erros[campo] = 'inválido'
            continue
        if valor < 0:
            erros[campo] = 'não pode ser negativo'
        precos[campo] = valor

    is_box = bool(dados.get('is_box'))
    itens: List[str] = []
    estoque = 0

    if is_box:
        solicitados = list(dados.get('itens') or [])
        # Um livro que já compõe outro Box não pode virar Box
        contido_em = next(
            (livro for livro in livros if livro.is_box and livro.id != livro_id and livro_id in livro.itens),
            None,
        ) if livro_id else None
        if contido_em is not None:
            erros['itens'] = f'o livro faz parte do Box "{contido_em.titulo}"'
        elif not solicitados:
            erros['itens'] = 'o Box precisa de ao menos um livro'
        elif len(solicitados) > MAX_ITENS_BOX:
            erros['itens'] = f'no máximo {MAX_ITENS_BOX} livros'
        elif len(set(solicitados)) != len(solicitados):
            erros['itens'] = 'livros repetidos na composição'
        else:
            por_id = indexar(livros)
            for componente_id in solicitados:
                componente = por_id.get(componente_id)
                if componente is None or componente.is_box or componente_id == livro_id:
                    erros['itens'] = f'componente inválido: {componente_id}'
                    break
                itens.append(componente_id)
    else:
        bruto = dados.get('estoque')
        if bruto is None or bruto == '':
            erros['estoque'] = 'obrigatório'
        else:
            try:
                estoque = int(bruto)
                if estoque < 0:
                    erros['estoque'] = 'não pode ser negativo'
            except (TypeError, ValueError):
                erros['estoque'] = 'inválido'

    if erros:
        if set(erros) == {'itens'}:
            raise ComposicaoBoxInvalidaError(f"Composição do Box inválida: {erros['itens']}.")
        raise DadosInvalidosError("Dados do livro inválidos.", campos=erros)

    extras = {'id': livro_id} if livro_id else {}
    if is_box:
        return Box(
            titulo=titulo,
            preco_custo=precos['preco_custo'],
            preco_venda=precos['preco_venda'],
            itens=itens,
            **extras
        )
    return LivroAvulso(
        titulo=titulo,
        preco_custo=precos['preco_custo'],
        preco_venda=precos['preco_venda'],
        estoque=estoque,
        **extras
    )


# ====================================================================
# 2. CARRINHO E PRECIFICAÇÃO
# ====================================================================

def adicionar_ao_carrinho(carrinho: List[ItemCarrinho], livro: Optional[Livro], quantidade: int = 1) -> List[ItemCarrinho]:
    """Adiciona ou incrementa um item no carrinho, verificando o estoque de títulos avulsos."""
    if quantidade <= 0:
        raise DadosInvalidosError("A quantidade a adicionar deve ser positiva.", campos={'quantidade': 'inválida'})
    if livro is None:
        raise LivroNaoEncontradoError()

    existente = next((item for item in carrinho if item.livro_id == livro.id), None)
    no_carrinho = existente.quantidade if existente else 0

    if not livro.is_box:
        if livro.estoque <= 0:
            raise EstoqueInsuficienteError(livro.id, livro.estoque, quantidade, message="Produto sem estoque.")
        if no_carrinho + quantidade > livro.estoque:
            raise EstoqueInsuficienteError(livro.id, livro.estoque, no_carrinho + quantidade)

    if existente:
        return [
            ItemCarrinho(item.livro_id, item.quantidade + quantidade) if item is existente else item
            for item in carrinho
        ]
    return list(carrinho) + [ItemCarrinho(livro.id, quantidade)]


def montar_itens_pedido(carrinho: Sequence[ItemCarrinho], livros: Sequence[Livro]) -> List[ItemPedido]:
    """Congela título, preço e custo de cada livro do carrinho no momento da venda."""
    por_id = indexar(livros)

    # Revalida o carrinho inteiro: o estoque pode ter mudado desde a inclusão
    validado: List[ItemCarrinho] = []
    for item in carrinho:
        livro = por_id.get(item.livro_id)
        if livro is None:
            raise LivroNaoEncontradoError(f"Livro ID {item.livro_id} não encontrado no acervo.")
        validado = adicionar_ao_carrinho(validado, livro, item.quantidade)

    return [
        ItemPedido(
            livro_id=item.livro_id,
            titulo_livro=por_id[item.livro_id].titulo,
            quantidade=item.quantidade,
            preco_unitario=por_id[item.livro_id].preco_venda,
            custo_unitario=por_id[item.livro_id].preco_custo,
            is_box=por_id[item.livro_id].is_box,
        )
        for item in validado
    ]


def calcular_totais_carrinho(itens: Sequence[ItemPedido], desconto=ZERO, valor_frete=ZERO) -> TotaisCarrinho:
    """
    Subtotal e custo somam preço/custo unitário × quantidade.
    O frete entra no valor final mas não no lucro (é repassado à transportadora).
    """
    desconto = para_decimal(desconto, 'desconto')
    valor_frete = para_decimal(valor_frete, 'valor_frete')

    subtotal = sum((item.subtotal for item in itens), ZERO)
    custo_total = sum((item.custo for item in itens), ZERO)

    return TotaisCarrinho(
        subtotal=subtotal,
        custo_total=custo_total,
        lucro_total=(subtotal - desconto) - custo_total,
        valor_final=max(ZERO, subtotal + valor_frete - desconto),
    )


def calcular_comissao(lucro_total, taxa_comissao) -> Decimal:
    """Comissão sobre o lucro do pedido, nunca negativa."""
    lucro_total = para_decimal(lucro_total, 'lucro_total')
    taxa_comissao = para_decimal(taxa_comissao, 'taxa_comissao')
    return max(ZERO, lucro_total * taxa_comissao / Decimal('100'))


# ====================================================================
# 3. CICLO DE VIDA DO PEDIDO
# ====================================================================

# Transições permitidas: {status_atual: próximo_status}
_TRANSICOES: Dict[StatusPedido, Optional[StatusPedido]] = {
    StatusPedido.PENDING_PAYMENT: StatusPedido.CONFIRMED,
    StatusPedido.CONFIRMED: StatusPedido.SHIPPED,
    StatusPedido.SHIPPED: None,  # terminal
}


def proximo_status(status: StatusPedido) -> Optional[StatusPedido]:
    return _TRANSICOES[StatusPedido(status)]


def _exigir_transicao(pedido: Pedido, destino: StatusPedido):
    if proximo_status(pedido.status) != destino:
        raise TransicaoInvalidaError(
            f"Pedido {pedido.id} está em {StatusPedido(pedido.status).value}; "
            f"não pode ir para {destino.value}."
        )


def baixar_estoque(pedido: Pedido, livros: Sequence[Livro]) -> List[str]:
    """
    Decrementa o estoque dos livros vendidos. Itens de Box baixam cada um dos
    componentes, nunca o próprio Box. O estoque é limitado a zero.

    Retorna os IDs dos livros cujo estoque foi insuficiente (truncado em zero).
    """
    por_id = indexar(livros)
    truncados = []

    for item in pedido.itens:
        livro = por_id.get(item.livro_id)
        if livro is None:
            continue
        alvos = livro.itens if livro.is_box else [livro.id]
        for alvo_id in alvos:
            alvo = por_id.get(alvo_id)
            if alvo is None or alvo.is_box:
                continue
            if alvo.estoque < item.quantidade:
                truncados.append(alvo.id)
            alvo.estoque = max(0, alvo.estoque - item.quantidade)

    return truncados


def confirmar_pagamento(pedido: Pedido, comprovante: Optional[str], livros: Sequence[Livro]) -> List[str]:
    """PENDING_PAYMENT → CONFIRMED. Registra o comprovante PIX e baixa o estoque."""
    _exigir_transicao(pedido, StatusPedido.CONFIRMED)
    if not comprovante:
        raise ComprovanteAusenteError()

    pedido.status = StatusPedido.CONFIRMED
    pedido.comprovante = comprovante
    return baixar_estoque(pedido, livros)


def despachar_pedido(pedido: Pedido, codigo_rastreio: Optional[str], documento_envio: Optional[str] = None):
    """CONFIRMED → SHIPPED. Anexa o rastreio; não mexe no estoque."""
    _exigir_transicao(pedido, StatusPedido.SHIPPED)
    codigo_rastreio = (codigo_rastreio or '').strip()
    if not codigo_rastreio:
        raise CodigoRastreioAusenteError()

    pedido.status = StatusPedido.SHIPPED
    pedido.codigo_rastreio = codigo_rastreio
    pedido.documento_envio = documento_envio or None


def ajustar_desconto(pedido: Pedido, novo_desconto, taxa_comissao=None):
    """
    Recalcula valor total, lucro e comissão a partir do novo desconto,
    mantendo subtotal e frete. Só é permitido enquanto o pedido aguarda pagamento.
    """
    if pedido.status != StatusPedido.PENDING_PAYMENT:
        raise DescontoBloqueadoError()

    novo_desconto = para_decimal(novo_desconto, 'desconto')
    if novo_desconto < 0:
        raise DadosInvalidosError("O desconto não pode ser negativo.", campos={'desconto': 'inválido'})

    antigo = pedido.desconto
    pedido.valor_total = max(ZERO, (pedido.valor_total + antigo) - novo_desconto)
    pedido.lucro_total = (pedido.lucro_total + antigo) - novo_desconto
    pedido.desconto = novo_desconto
    if pedido.vendedor_id and taxa_comissao is not None:
        pedido.comissao_vendedor = calcular_comissao(pedido.lucro_total, taxa_comissao)
    else:
        pedido.comissao_vendedor = ZERO
