# manuslibros/core/relatorios.py
"""
Agregações financeiras sobre pedidos pagos (confirmados ou despachados).
Pedidos aguardando pagamento nunca entram em faturamento, lucro ou comissão.
"""
from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from manuslibros.core.entities import (
    Conta, LinhaRelatorio, MetricasFinanceiras, Painel, Papel, Pedido, PosicaoRanking,
    Relatorio, StatusPedido, Vendedor
)

FILTRO_TODOS = 'ALL'
FILTRO_VENDA_DIRETA = 'DIRECT'

ROTULO_VENDA_DIRETA = 'Venda Direta'
ROTULO_VENDEDOR_INATIVO = 'Vendedor Inativo'

STATUS_PAGOS = (StatusPedido.CONFIRMED, StatusPedido.SHIPPED)


def _horario_local(momento: datetime) -> datetime:
    """Normaliza o horário do pedido para o fuso local, sem tzinfo."""
    if momento.tzinfo is not None:
        return momento.astimezone().replace(tzinfo=None)
    return momento


def filtrar_pedidos_pagos(
    pedidos: Sequence[Pedido],
    inicio: Optional[date] = None,
    fim: Optional[date] = None,
    filtro_vendedor: Optional[str] = FILTRO_TODOS,
) -> List[Pedido]:
    """
    Período inclusivo nas duas pontas: o fim vale até 23:59:59.999999 do dia.
    O filtro de vendedor aceita ALL, DIRECT (sem vendedor) ou o ID de um vendedor.
    """
    limite_inicio = datetime.combine(inicio, time.min) if inicio else None
    limite_fim = datetime.combine(fim, time.max) if fim else None
    filtro_vendedor = filtro_vendedor or FILTRO_TODOS

    selecionados = []
    for pedido in pedidos:
        if pedido.status not in STATUS_PAGOS:
            continue
        momento = _horario_local(pedido.data)
        if limite_inicio and momento < limite_inicio:
            continue
        if limite_fim and momento > limite_fim:
            continue
        if filtro_vendedor == FILTRO_VENDA_DIRETA:
            if pedido.vendedor_id is not None:
                continue
        elif filtro_vendedor != FILTRO_TODOS and pedido.vendedor_id != filtro_vendedor:
            continue
        selecionados.append(pedido)
    return selecionados


def somar_metricas(pedidos: Sequence[Pedido]) -> MetricasFinanceiras:
    metricas = MetricasFinanceiras()
    for pedido in pedidos:
        metricas.faturamento += pedido.valor_total
        metricas.custo += pedido.custo_total
        metricas.lucro += pedido.lucro_total
        metricas.comissoes += pedido.comissao_vendedor
    return metricas


def gerar_relatorio(
    pedidos: Sequence[Pedido],
    vendedores: Sequence[Vendedor],
    inicio: Optional[date] = None,
    fim: Optional[date] = None,
    filtro_vendedor: Optional[str] = FILTRO_TODOS,
) -> Relatorio:
    """Consolida vendas e comissões por vendedor, ordenadas pelo total vendido."""
    filtrados = filtrar_pedidos_pagos(pedidos, inicio, fim, filtro_vendedor)
    por_id = {vendedor.id: vendedor for vendedor in vendedores}

    linhas: Dict[Optional[str], LinhaRelatorio] = {}
    for pedido in filtrados:
        linha = linhas.get(pedido.vendedor_id)
        if linha is None:
            vendedor = por_id.get(pedido.vendedor_id)
            if pedido.vendedor_id is None:
                linha = LinhaRelatorio(None, ROTULO_VENDA_DIRETA, None)
            elif vendedor is None:
                linha = LinhaRelatorio(pedido.vendedor_id, ROTULO_VENDEDOR_INATIVO, None)
            else:
                linha = LinhaRelatorio(vendedor.id, vendedor.nome, vendedor.taxa_comissao)
            linhas[pedido.vendedor_id] = linha
        linha.total_vendas += pedido.valor_total
        linha.total_comissao += pedido.comissao_vendedor

    return Relatorio(
        linhas=sorted(linhas.values(), key=lambda l: l.total_vendas, reverse=True),
        metricas=somar_metricas(filtrados),
        total_pedidos=len(filtrados),
    )


def gerar_painel(pedidos: Sequence[Pedido], vendedores: Sequence[Vendedor], conta: Conta, limite_ranking: int = 5) -> Painel:
    """
    Resumo do painel geral. O administrador vê todos os pedidos e o lucro
    líquido; o vendedor vê apenas os seus e a comissão disponível.
    """
    is_admin = conta.papel == Papel.ADMIN
    visiveis = list(pedidos) if is_admin else [p for p in pedidos if p.vendedor_id == conta.id]
    pagos = [p for p in visiveis if p.status in STATUS_PAGOS]
    metricas = somar_metricas(pagos)

    # O ranking considera toda a equipe, apenas vendedores ainda cadastrados
    por_id = {vendedor.id: vendedor for vendedor in vendedores}
    totais: Dict[str, Decimal] = {}
    for pedido in pedidos:
        if pedido.status in STATUS_PAGOS and pedido.vendedor_id in por_id:
            totais[pedido.vendedor_id] = totais.get(pedido.vendedor_id, Decimal('0')) + pedido.valor_total
    ranking = [
        PosicaoRanking(vendedor_id, por_id[vendedor_id].nome, total, por_id[vendedor_id].avatar)
        for vendedor_id, total in sorted(totais.items(), key=lambda par: par[1], reverse=True)
    ][:limite_ranking]

    return Painel(
        pendentes_pagamento=sum(1 for p in visiveis if p.status == StatusPedido.PENDING_PAYMENT),
        pendentes_envio=sum(1 for p in visiveis if p.status == StatusPedido.CONFIRMED),
        faturamento_pago=metricas.faturamento,
        resultado=metricas.liquido if is_admin else metricas.comissoes,
        unidades_vendidas=sum(p.unidades for p in pagos),
        total_pedidos=len(visiveis),
        ranking=ranking,
    )
