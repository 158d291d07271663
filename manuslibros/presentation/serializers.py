from rest_framework import serializers

from manuslibros.core.entities import StatusPedido, TipoFrete
from manuslibros.core.relatorios import FILTRO_TODOS

TIPO_FRETE_CHOICES = [(tipo.value, tipo.value) for tipo in TipoFrete]
STATUS_CHOICES = [(status.value, status.value) for status in StatusPedido]


def _dinheiro(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=2, **kwargs)


# ====================================================================
# SERIALIZERS DE ACESSO
# ====================================================================

class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    senha = serializers.CharField(max_length=128, write_only=True, trim_whitespace=False)


class ContaSerializer(serializers.Serializer):
    """Representação pública de uma conta (a senha nunca é exposta)."""
    id = serializers.CharField(read_only=True)
    username = serializers.CharField(read_only=True)
    nome = serializers.CharField(read_only=True)
    papel = serializers.CharField(source='papel.value', read_only=True)
    avatar = serializers.CharField(read_only=True, allow_null=True)


class VendedorSerializer(ContaSerializer):
    email = serializers.CharField(read_only=True)
    telefone = serializers.CharField(read_only=True)
    conta_bancaria = serializers.CharField(read_only=True)
    taxa_comissao = serializers.DecimalField(max_digits=5, decimal_places=2, read_only=True)


class PerfilSerializer(serializers.Serializer):
    """Campos editáveis pela própria conta. Senha em branco mantém a atual."""
    nome = serializers.CharField(max_length=255, required=False)
    avatar = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    email = serializers.CharField(max_length=255, required=False, allow_blank=True)
    telefone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    senha = serializers.CharField(max_length=128, required=False, allow_blank=True, write_only=True)


class VendedorEntradaSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150, required=False)
    nome = serializers.CharField(max_length=255, required=False)
    senha = serializers.CharField(max_length=128, required=False, allow_blank=True, write_only=True)
    email = serializers.CharField(max_length=255, required=False, allow_blank=True)
    telefone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    conta_bancaria = serializers.CharField(required=False, allow_blank=True)
    taxa_comissao = serializers.DecimalField(max_digits=5, decimal_places=2, required=False)
    avatar = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# ====================================================================
# SERIALIZERS DO CATÁLOGO
# ====================================================================

class LivroSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    titulo = serializers.CharField(read_only=True)
    preco_custo = _dinheiro(read_only=True)
    preco_venda = _dinheiro(read_only=True)
    is_box = serializers.BooleanField(read_only=True)
    # Nulo para Boxes: a disponibilidade depende dos componentes
    estoque = serializers.IntegerField(source='estoque_efetivo', read_only=True, allow_null=True)
    itens = serializers.SerializerMethodField()

    def get_itens(self, livro):
        return list(livro.itens) if livro.is_box else []


class LivroEntradaSerializer(serializers.Serializer):
    """Tipagem da entrada; as regras de cadastro ficam no Core."""
    titulo = serializers.CharField(max_length=255, allow_blank=True)
    preco_custo = _dinheiro()
    preco_venda = _dinheiro()
    is_box = serializers.BooleanField(default=False)
    estoque = serializers.IntegerField(required=False, allow_null=True)
    itens = serializers.ListField(child=serializers.CharField(), required=False, default=list)


# ====================================================================
# SERIALIZERS DE FRETE E PEDIDOS
# ====================================================================

class CepSerializer(serializers.Serializer):
    cep = serializers.CharField(max_length=9)


class OpcaoFreteSerializer(serializers.Serializer):
    tipo = serializers.CharField(source='tipo.value')
    valor = _dinheiro()
    prazo_dias = serializers.IntegerField()


class ItemCarrinhoSerializer(serializers.Serializer):
    livro_id = serializers.CharField()
    quantidade = serializers.IntegerField(min_value=1, default=1)


class ClienteSerializer(serializers.Serializer):
    nome = serializers.CharField(max_length=255)
    endereco = serializers.CharField()
    cep = serializers.CharField(max_length=9)
    telefone = serializers.CharField(max_length=30)
    email = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class OrcamentoEntradaSerializer(serializers.Serializer):
    itens = ItemCarrinhoSerializer(many=True)
    cep = serializers.CharField(max_length=9, required=False, allow_blank=True)
    tipo_frete = serializers.ChoiceField(choices=TIPO_FRETE_CHOICES, default=TipoFrete.SIMPLES.value)
    desconto = _dinheiro(default=0)
    vendedor_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PedidoEntradaSerializer(serializers.Serializer):
    cliente = ClienteSerializer()
    itens = ItemCarrinhoSerializer(many=True)
    tipo_frete = serializers.ChoiceField(choices=TIPO_FRETE_CHOICES, default=TipoFrete.SIMPLES.value)
    desconto = _dinheiro(default=0)
    vendedor_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ItemPedidoSerializer(serializers.Serializer):
    livro_id = serializers.CharField()
    titulo_livro = serializers.CharField()
    quantidade = serializers.IntegerField()
    preco_unitario = _dinheiro()
    custo_unitario = _dinheiro()
    is_box = serializers.BooleanField()
    subtotal = _dinheiro()


class OrcamentoSerializer(serializers.Serializer):
    itens = ItemPedidoSerializer(many=True)
    subtotal = _dinheiro(source='totais.subtotal')
    custo_total = _dinheiro(source='totais.custo_total')
    lucro_total = _dinheiro(source='totais.lucro_total')
    valor_final = _dinheiro(source='totais.valor_final')
    tipo_frete = serializers.CharField(source='tipo_frete.value')
    valor_frete = _dinheiro()
    desconto = _dinheiro()
    comissao_estimada = _dinheiro()
    vendedor_id = serializers.CharField(allow_null=True)


class PedidoSerializer(serializers.Serializer):
    id = serializers.CharField()
    data = serializers.DateTimeField()
    cliente = ClienteSerializer()
    itens = ItemPedidoSerializer(many=True)
    tipo_frete = serializers.CharField(source='tipo_frete.value')
    valor_frete = _dinheiro()
    desconto = _dinheiro()
    valor_total = _dinheiro()
    custo_total = _dinheiro()
    lucro_total = _dinheiro()
    comissao_vendedor = _dinheiro()
    vendedor_id = serializers.CharField(allow_null=True)
    status = serializers.CharField(source='status.value')
    comprovante = serializers.CharField(allow_null=True)
    codigo_rastreio = serializers.CharField(allow_null=True)
    documento_envio = serializers.CharField(allow_null=True)


class ComprovanteSerializer(serializers.Serializer):
    """Comprovante PIX (texto ou imagem em data URL)."""
    comprovante = serializers.CharField(required=False, allow_blank=True, default='')


class DespachoSerializer(serializers.Serializer):
    codigo_rastreio = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    documento_envio = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class DescontoSerializer(serializers.Serializer):
    desconto = _dinheiro()


class FiltroPedidosSerializer(serializers.Serializer):
    busca = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, required=False)


# ====================================================================
# SERIALIZERS DE RELATÓRIOS E PAINEL
# ====================================================================

class FiltroRelatorioSerializer(serializers.Serializer):
    inicio = serializers.DateField(required=False)
    fim = serializers.DateField(required=False)
    vendedor = serializers.CharField(required=False, default=FILTRO_TODOS)


class LinhaRelatorioSerializer(serializers.Serializer):
    vendedor_id = serializers.CharField(allow_null=True)
    nome = serializers.CharField()
    taxa_comissao = serializers.DecimalField(max_digits=5, decimal_places=2, allow_null=True)
    total_vendas = _dinheiro()
    total_comissao = _dinheiro()


class MetricasSerializer(serializers.Serializer):
    faturamento = _dinheiro()
    custo = _dinheiro()
    lucro = _dinheiro()
    comissoes = _dinheiro()
    liquido = _dinheiro()


class RelatorioSerializer(serializers.Serializer):
    linhas = LinhaRelatorioSerializer(many=True)
    metricas = MetricasSerializer()
    total_pedidos = serializers.IntegerField()


class PosicaoRankingSerializer(serializers.Serializer):
    vendedor_id = serializers.CharField()
    nome = serializers.CharField()
    total = _dinheiro()
    avatar = serializers.CharField(allow_null=True)


class PainelSerializer(serializers.Serializer):
    pendentes_pagamento = serializers.IntegerField()
    pendentes_envio = serializers.IntegerField()
    faturamento_pago = _dinheiro()
    resultado = _dinheiro()
    unidades_vendidas = serializers.IntegerField()
    total_pedidos = serializers.IntegerField()
    ranking = PosicaoRankingSerializer(many=True)
