from dataclasses import dataclass, field
from decimal import Decimal
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union
import uuid

# ====================================================================
# ENTIDADES CORE
# Representam os objetos de negócio puros.
# ====================================================================

def novo_id() -> str:
    return str(uuid.uuid4())


class Papel(str, Enum):
    """Papel de uma conta de acesso."""
    ADMIN = 'ADMIN'
    SELLER = 'SELLER'


class StatusPedido(str, Enum):
    """Estados do ciclo de vida de um pedido."""
    PENDING_PAYMENT = 'PENDING_PAYMENT'
    CONFIRMED = 'CONFIRMED'  # Pago, aguardando envio
    SHIPPED = 'SHIPPED'


class TipoFrete(str, Enum):
    SIMPLES = 'Simples'
    SEDEX = 'SEDEX'


# ====================================================================
# CATÁLOGO
# ====================================================================

@dataclass
class LivroAvulso:
    """Título vendido individualmente, com estoque próprio."""
    titulo: str
    preco_custo: Decimal
    preco_venda: Decimal
    estoque: int = 0
    id: str = field(default_factory=novo_id)

    @property
    def is_box(self) -> bool:
        return False

    @property
    def estoque_efetivo(self) -> Optional[int]:
        return self.estoque


@dataclass
class Box:
    """
    Produto composto por até três livros avulsos.
    Não possui estoque próprio: a disponibilidade depende dos componentes.
    """
    titulo: str
    preco_custo: Decimal
    preco_venda: Decimal
    itens: List[str] = field(default_factory=list)  # IDs dos livros que compõem o Box
    id: str = field(default_factory=novo_id)

    @property
    def is_box(self) -> bool:
        return True

    @property
    def estoque_efetivo(self) -> Optional[int]:
        return None


Livro = Union[LivroAvulso, Box]


# ====================================================================
# CONTAS E VENDEDORES
# ====================================================================

@dataclass
class Conta:
    """Conta de acesso ao sistema (o administrador é uma conta semeada)."""
    username: str
    senha: str  # Hash da senha, nunca o texto puro
    nome: str
    papel: Papel = Papel.ADMIN
    avatar: Optional[str] = None
    id: str = field(default_factory=novo_id)


@dataclass
class Vendedor(Conta):
    """Conta de vendedor com taxa de comissão sobre o lucro dos pedidos."""
    email: str = ''
    telefone: str = ''
    conta_bancaria: str = ''
    taxa_comissao: Decimal = Decimal('15')
    papel: Papel = Papel.SELLER


# ====================================================================
# PEDIDOS
# ====================================================================

@dataclass
class Cliente:
    """Dados do comprador, embutidos no pedido."""
    nome: str
    endereco: str
    cep: str
    telefone: str
    email: str = ''


@dataclass
class ItemCarrinho:
    livro_id: str
    quantidade: int = 1


@dataclass
class ItemPedido:
    """Snapshot de um item no momento da venda (preço e custo congelados)."""
    livro_id: str
    titulo_livro: str
    quantidade: int
    preco_unitario: Decimal
    custo_unitario: Decimal
    is_box: bool = False

    @property
    def subtotal(self) -> Decimal:
        return self.preco_unitario * self.quantidade

    @property
    def custo(self) -> Decimal:
        return self.custo_unitario * self.quantidade


@dataclass
class Pedido:
    """Entidade do Pedido de Venda."""
    # Campos obrigatórios
    cliente: Cliente
    itens: List[ItemPedido]
    tipo_frete: TipoFrete
    valor_frete: Decimal
    desconto: Decimal
    valor_total: Decimal
    custo_total: Decimal
    lucro_total: Decimal
    # Campos opcionais/calculados
    comissao_vendedor: Decimal = Decimal('0')
    vendedor_id: Optional[str] = None
    status: StatusPedido = StatusPedido.PENDING_PAYMENT
    comprovante: Optional[str] = None
    codigo_rastreio: Optional[str] = None
    documento_envio: Optional[str] = None
    data: datetime = field(default_factory=lambda: datetime.now().astimezone())
    id: str = field(default_factory=novo_id)

    @property
    def unidades(self) -> int:
        return sum(item.quantidade for item in self.itens)

    @property
    def pago(self) -> bool:
        return self.status != StatusPedido.PENDING_PAYMENT


# ====================================================================
# VALORES CALCULADOS
# ====================================================================

@dataclass
class TotaisCarrinho:
    subtotal: Decimal
    custo_total: Decimal
    lucro_total: Decimal
    valor_final: Decimal


@dataclass
class OpcaoFrete:
    tipo: TipoFrete
    valor: Decimal
    prazo_dias: int


@dataclass
class Orcamento:
    """Prévia de um pedido: itens congelados, totais e comissão estimada."""
    itens: List[ItemPedido]
    totais: TotaisCarrinho
    tipo_frete: TipoFrete
    valor_frete: Decimal
    desconto: Decimal
    comissao_estimada: Decimal = Decimal('0')
    vendedor_id: Optional[str] = None


@dataclass
class LinhaRelatorio:
    """Consolidado de vendas de um vendedor (ou do canal direto)."""
    vendedor_id: Optional[str]
    nome: str
    taxa_comissao: Optional[Decimal]
    total_vendas: Decimal = Decimal('0')
    total_comissao: Decimal = Decimal('0')


@dataclass
class MetricasFinanceiras:
    faturamento: Decimal = Decimal('0')
    custo: Decimal = Decimal('0')
    lucro: Decimal = Decimal('0')
    comissoes: Decimal = Decimal('0')

    @property
    def liquido(self) -> Decimal:
        return self.lucro - self.comissoes


@dataclass
class Relatorio:
    linhas: List[LinhaRelatorio]
    metricas: MetricasFinanceiras
    total_pedidos: int = 0


@dataclass
class PosicaoRanking:
    vendedor_id: str
    nome: str
    total: Decimal
    avatar: Optional[str] = None


@dataclass
class Painel:
    """Resumo exibido no painel geral."""
    pendentes_pagamento: int
    pendentes_envio: int
    faturamento_pago: Decimal
    resultado: Decimal  # Lucro líquido (admin) ou comissão disponível (vendedor)
    unidades_vendidas: int
    total_pedidos: int
    ranking: List[PosicaoRanking] = field(default_factory=list)
