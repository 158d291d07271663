# manuslibros/core/dependency_injection.py
"""
Módulo de Injeção de Dependência (DI).
Responsável por instanciar os Use Cases com suas dependências de Repositórios/Gateways
concretos da camada de Infraestrutura, conforme as configurações do projeto.
"""
from functools import lru_cache

from django.conf import settings

from manuslibros.infrastructure.gateways import SupabaseGateway
from manuslibros.infrastructure.hashers import HasherSenhaDjango
from manuslibros.infrastructure.mappers import ContaMapper, LivroMapper, PedidoMapper, VendedorMapper
from manuslibros.infrastructure.repositories import (
    ColecaoRepositorySincronizado,
    ColecaoRepositorySupabase,
    ContaRepositoryComAdmin,
    ContaRepositoryDjango,
    LivroRepositoryDjango,
    PedidoRepositoryDjango,
    VendedorRepositoryDjango,
)
from .use_cases import (
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
    PainelUseCase,
)

hasher = HasherSenhaDjango()


class Repositorios:
    """Agrupa os repositórios concretos de cada coleção."""
    def __init__(self, livros, vendedores, pedidos, contas):
        self.livros = livros
        self.vendedores = vendedores
        self.pedidos = pedidos
        self.contas = contas


def _sincronizar(local, gateway: SupabaseGateway, tabela: str, mapper):
    return ColecaoRepositorySincronizado(local, ColecaoRepositorySupabase(gateway, tabela, mapper), nome=tabela)


@lru_cache(maxsize=None)
def get_repositorios() -> Repositorios:
    livros = LivroRepositoryDjango()
    vendedores = VendedorRepositoryDjango()
    pedidos = PedidoRepositoryDjango()
    contas = ContaRepositoryDjango()

    if settings.PERSISTENCIA_REMOTA:
        gateway = SupabaseGateway(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, settings.SUPABASE_TIMEOUT)
        livros = _sincronizar(livros, gateway, 'books', LivroMapper)
        vendedores = _sincronizar(vendedores, gateway, 'sellers', VendedorMapper)
        pedidos = _sincronizar(pedidos, gateway, 'orders', PedidoMapper)
        contas = _sincronizar(contas, gateway, 'users', ContaMapper)

    contas = ContaRepositoryComAdmin(
        contas,
        hasher,
        admin_id=settings.ADMIN_ID,
        username=settings.ADMIN_USERNAME,
        senha=settings.ADMIN_PASSWORD,
        nome=settings.ADMIN_NOME,
    )
    return Repositorios(livros, vendedores, pedidos, contas)


# ====================================================================
# Use Cases de Catálogo/Administração
# ====================================================================

def get_gerenciar_catalogo_use_case() -> GerenciarCatalogoUseCase:
    return GerenciarCatalogoUseCase(get_repositorios().livros)

def get_gerenciar_vendedores_use_case() -> GerenciarVendedoresUseCase:
    repos = get_repositorios()
    return GerenciarVendedoresUseCase(repos.vendedores, repos.contas, hasher)


# ====================================================================
# Use Cases de Acesso
# ====================================================================

def get_autenticar_use_case() -> AutenticarUseCase:
    repos = get_repositorios()
    return AutenticarUseCase(repos.contas, repos.vendedores, hasher)

def get_atualizar_perfil_use_case() -> AtualizarPerfilUseCase:
    repos = get_repositorios()
    return AtualizarPerfilUseCase(repos.contas, repos.vendedores, hasher)


# ====================================================================
# Use Cases de Vendas/Pedidos
# ====================================================================

def get_orcar_pedido_use_case() -> OrcarPedidoUseCase:
    repos = get_repositorios()
    return OrcarPedidoUseCase(repos.livros, repos.vendedores)

def get_criar_pedido_use_case() -> CriarPedidoUseCase:
    repos = get_repositorios()
    return CriarPedidoUseCase(repos.livros, repos.pedidos, repos.vendedores)

def get_confirmar_pagamento_use_case() -> ConfirmarPagamentoUseCase:
    repos = get_repositorios()
    return ConfirmarPagamentoUseCase(repos.pedidos, repos.livros)

def get_despachar_pedido_use_case() -> DespacharPedidoUseCase:
    return DespacharPedidoUseCase(get_repositorios().pedidos)

def get_ajustar_desconto_use_case() -> AjustarDescontoUseCase:
    repos = get_repositorios()
    return AjustarDescontoUseCase(repos.pedidos, repos.vendedores)

def get_listar_pedidos_use_case() -> ListarPedidosUseCase:
    return ListarPedidosUseCase(get_repositorios().pedidos)


# ====================================================================
# Use Cases de Relatórios
# ====================================================================

def get_gerar_relatorio_use_case() -> GerarRelatorioUseCase:
    repos = get_repositorios()
    return GerarRelatorioUseCase(repos.pedidos, repos.vendedores)

def get_painel_use_case() -> PainelUseCase:
    repos = get_repositorios()
    return PainelUseCase(repos.pedidos, repos.vendedores)
