import logging

from rest_framework import exceptions, status
from rest_framework.permissions import AllowAny, BasePermission, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken

from manuslibros.core import dependency_injection as di
from manuslibros.core.entities import ItemCarrinho, Papel
from manuslibros.core.exceptions import (
    AcessoNegadoError,
    BaseErroCore,
    ContaNaoEncontradaError,
    CredenciaisInvalidasError,
    DadosInvalidosError,
    ItemNaoEncontradoError,
    PersistenciaError,
    TransicaoInvalidaError,
)
from manuslibros.core.frete import estimar_frete

from .serializers import (
    CepSerializer,
    ComprovanteSerializer,
    ContaSerializer,
    DescontoSerializer,
    DespachoSerializer,
    FiltroPedidosSerializer,
    FiltroRelatorioSerializer,
    LivroEntradaSerializer,
    LivroSerializer,
    LoginSerializer,
    OpcaoFreteSerializer,
    OrcamentoEntradaSerializer,
    OrcamentoSerializer,
    PainelSerializer,
    PedidoEntradaSerializer,
    PedidoSerializer,
    PerfilSerializer,
    RelatorioSerializer,
    VendedorEntradaSerializer,
    VendedorSerializer,
)

logger = logging.getLogger(__name__)


# ====================================================================
# VIEWS: Orquestram a requisição, a execução dos casos de uso e a resposta.
# ====================================================================

# Exceções do Core → status HTTP (a primeira classe compatível vence)
_STATUS_POR_ERRO = (
    (DadosInvalidosError, status.HTTP_400_BAD_REQUEST),
    (ItemNaoEncontradoError, status.HTTP_404_NOT_FOUND),
    (TransicaoInvalidaError, status.HTTP_409_CONFLICT),
    (CredenciaisInvalidasError, status.HTTP_401_UNAUTHORIZED),
    (AcessoNegadoError, status.HTTP_403_FORBIDDEN),
    (PersistenciaError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_para_erro(erro: BaseErroCore) -> int:
    for classe, codigo in _STATUS_POR_ERRO:
        if isinstance(erro, classe):
            return codigo
    return status.HTTP_400_BAD_REQUEST


def serializar_conta(conta):
    serializer_class = ContaSerializer if conta.papel == Papel.ADMIN else VendedorSerializer
    return serializer_class(conta).data


class IsAdmin(BasePermission):
    """Acesso restrito a contas com papel ADMIN (lido do token)."""
    message = 'Acesso restrito ao administrador.'

    def has_permission(self, request, view):
        token = getattr(request, 'auth', None)
        return bool(token) and token.get('papel') == Papel.ADMIN.value


class BaseAPIView(APIView):
    """Converte as exceções do Core em respostas JSON com o status adequado."""

    def handle_exception(self, exc):
        if isinstance(exc, BaseErroCore):
            corpo = {'message': exc.message}
            if isinstance(exc, DadosInvalidosError) and exc.campos:
                corpo['campos'] = exc.campos
            return Response(corpo, status=status_para_erro(exc))
        return super().handle_exception(exc)

    def validar(self, serializer_class, dados, **kwargs):
        serializer = serializer_class(data=dados, **kwargs)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def conta_logada(self, request):
        """Carrega a conta do token; contas removidas perdem o acesso."""
        try:
            return di.get_autenticar_use_case().obter_conta(str(request.user.id))
        except ContaNaoEncontradaError:
            raise exceptions.AuthenticationFailed('A conta deste token não existe mais.')


def _carrinho(itens):
    return [ItemCarrinho(livro_id=item['livro_id'], quantidade=item['quantidade']) for item in itens]


# ====================================================================
# 1. ACESSO
# ====================================================================

class LoginAPIView(BaseAPIView):
    """Autentica administrador ou vendedor e devolve um token de acesso."""
    authentication_classes = []
    permission_classes = [AllowAny]
    serializer_class = LoginSerializer

    def post(self, request):
        dados = self.validar(LoginSerializer, request.data)
        conta = di.get_autenticar_use_case().executar(dados['username'], dados['senha'])

        token = AccessToken()
        token['user_id'] = conta.id
        token['papel'] = Papel(conta.papel).value
        logger.info("Login realizado por %s (%s).", conta.username, token['papel'])
        return Response({'access': str(token), 'conta': serializar_conta(conta)})


class PerfilAPIView(BaseAPIView):
    serializer_class = PerfilSerializer

    def get(self, request):
        return Response(serializar_conta(self.conta_logada(request)))

    def patch(self, request):
        conta = self.conta_logada(request)
        dados = self.validar(PerfilSerializer, request.data, partial=True)
        conta = di.get_atualizar_perfil_use_case().executar(conta.id, dados)
        return Response(serializar_conta(conta))


# ====================================================================
# 2. CATÁLOGO
# ====================================================================

class LivrosAPIView(BaseAPIView):
    """Vendedores consultam o acervo para montar o carrinho; só o administrador cadastra."""
    serializer_class = LivroSerializer

    def get_permissions(self):
        if self.request.method == 'GET':
            return [IsAuthenticated()]
        return [IsAdmin()]

    def get(self, request):
        livros = di.get_gerenciar_catalogo_use_case().listar(request.query_params.get('busca'))
        return Response(LivroSerializer(livros, many=True).data)

    def post(self, request):
        dados = self.validar(LivroEntradaSerializer, request.data)
        livro = di.get_gerenciar_catalogo_use_case().adicionar(dados)
        return Response(LivroSerializer(livro).data, status=status.HTTP_201_CREATED)


class LivroDetalheAPIView(BaseAPIView):
    permission_classes = [IsAdmin]
    serializer_class = LivroSerializer

    def put(self, request, livro_id):
        dados = self.validar(LivroEntradaSerializer, request.data)
        livro = di.get_gerenciar_catalogo_use_case().editar(livro_id, dados)
        return Response(LivroSerializer(livro).data)

    def delete(self, request, livro_id):
        di.get_gerenciar_catalogo_use_case().deletar(livro_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ====================================================================
# 3. VENDEDORES
# ====================================================================

class VendedoresAPIView(BaseAPIView):
    permission_classes = [IsAdmin]
    serializer_class = VendedorSerializer

    def get(self, request):
        vendedores = di.get_gerenciar_vendedores_use_case().listar()
        return Response(VendedorSerializer(vendedores, many=True).data)

    def post(self, request):
        dados = self.validar(VendedorEntradaSerializer, request.data)
        vendedor = di.get_gerenciar_vendedores_use_case().adicionar(dados)
        return Response(VendedorSerializer(vendedor).data, status=status.HTTP_201_CREATED)


class VendedorDetalheAPIView(BaseAPIView):
    permission_classes = [IsAdmin]
    serializer_class = VendedorSerializer

    def put(self, request, vendedor_id):
        dados = self.validar(VendedorEntradaSerializer, request.data, partial=True)
        vendedor = di.get_gerenciar_vendedores_use_case().editar(vendedor_id, dados)
        return Response(VendedorSerializer(vendedor).data)

    def delete(self, request, vendedor_id):
        di.get_gerenciar_vendedores_use_case().deletar(vendedor_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ====================================================================
# 4. FRETE E PEDIDOS
# ====================================================================

class FreteAPIView(BaseAPIView):
    serializer_class = OpcaoFreteSerializer

    def post(self, request):
        dados = self.validar(CepSerializer, request.data)
        return Response(OpcaoFreteSerializer(estimar_frete(dados['cep']), many=True).data)


class OrcamentoAPIView(BaseAPIView):
    """Prévia dos totais do carrinho, sem gravar o pedido."""
    serializer_class = OrcamentoSerializer

    def post(self, request):
        conta = self.conta_logada(request)
        dados = self.validar(OrcamentoEntradaSerializer, request.data)
        orcamento = di.get_orcar_pedido_use_case().executar(
            conta,
            _carrinho(dados['itens']),
            cep=dados.get('cep') or None,
            tipo_frete=dados['tipo_frete'],
            desconto=dados['desconto'],
            vendedor_id=dados.get('vendedor_id') or None,
        )
        return Response(OrcamentoSerializer(orcamento).data)


class PedidosAPIView(BaseAPIView):
    serializer_class = PedidoSerializer

    def get(self, request):
        conta = self.conta_logada(request)
        filtros = self.validar(FiltroPedidosSerializer, request.query_params)
        pedidos = di.get_listar_pedidos_use_case().listar(conta, filtros.get('busca'), filtros.get('status'))
        return Response(PedidoSerializer(pedidos, many=True).data)

    def post(self, request):
        conta = self.conta_logada(request)
        dados = self.validar(PedidoEntradaSerializer, request.data)
        pedido = di.get_criar_pedido_use_case().executar(
            conta,
            dados['cliente'],
            _carrinho(dados['itens']),
            tipo_frete=dados['tipo_frete'],
            desconto=dados['desconto'],
            vendedor_id=dados.get('vendedor_id') or None,
        )
        return Response(PedidoSerializer(pedido).data, status=status.HTTP_201_CREATED)


class PedidoDetalheAPIView(BaseAPIView):
    serializer_class = PedidoSerializer

    def get(self, request, pedido_id):
        pedido = di.get_listar_pedidos_use_case().detalhar(self.conta_logada(request), pedido_id)
        return Response(PedidoSerializer(pedido).data)


class ConfirmarPagamentoAPIView(BaseAPIView):
    permission_classes = [IsAdmin]
    serializer_class = PedidoSerializer

    def post(self, request, pedido_id):
        dados = self.validar(ComprovanteSerializer, request.data)
        pedido = di.get_confirmar_pagamento_use_case().executar(pedido_id, dados['comprovante'])
        return Response(PedidoSerializer(pedido).data)


class DespacharPedidoAPIView(BaseAPIView):
    permission_classes = [IsAdmin]
    serializer_class = PedidoSerializer

    def post(self, request, pedido_id):
        dados = self.validar(DespachoSerializer, request.data)
        pedido = di.get_despachar_pedido_use_case().executar(
            pedido_id, dados['codigo_rastreio'], dados.get('documento_envio')
        )
        return Response(PedidoSerializer(pedido).data)


class DescontoPedidoAPIView(BaseAPIView):
    serializer_class = PedidoSerializer

    def patch(self, request, pedido_id):
        conta = self.conta_logada(request)
        dados = self.validar(DescontoSerializer, request.data)
        pedido = di.get_ajustar_desconto_use_case().executar(conta, pedido_id, dados['desconto'])
        return Response(PedidoSerializer(pedido).data)


class EnviosAPIView(BaseAPIView):
    """Fila de expedição: pedidos pagos aguardando envio e os últimos enviados."""
    permission_classes = [IsAdmin]
    serializer_class = PedidoSerializer

    def get(self, request):
        uc = di.get_listar_pedidos_use_case()
        return Response({
            'pendentes': PedidoSerializer(uc.listar_envios_pendentes(), many=True).data,
            'enviados': PedidoSerializer(uc.listar_envios_recentes(), many=True).data,
        })


# ====================================================================
# 5. RELATÓRIOS E PAINEL
# ====================================================================

class RelatoriosAPIView(BaseAPIView):
    permission_classes = [IsAdmin]
    serializer_class = RelatorioSerializer

    def get(self, request):
        filtros = self.validar(FiltroRelatorioSerializer, request.query_params)
        relatorio = di.get_gerar_relatorio_use_case().executar(
            inicio=filtros.get('inicio'),
            fim=filtros.get('fim'),
            filtro_vendedor=filtros['vendedor'],
        )
        return Response(RelatorioSerializer(relatorio).data)


class PainelAPIView(BaseAPIView):
    serializer_class = PainelSerializer

    def get(self, request):
        painel = di.get_painel_use_case().executar(self.conta_logada(request))
        return Response(PainelSerializer(painel).data)
