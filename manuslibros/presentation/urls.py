"""
Rotas da API REST: acesso, catálogo, vendedores, pedidos, expedição e relatórios.
"""
from django.urls import path

from . import views

urlpatterns = [
    # 1. Acesso
    path('auth/login/', views.LoginAPIView.as_view(), name='login'),
    path('perfil/', views.PerfilAPIView.as_view(), name='perfil'),

    # 2. Catálogo (admin)
    path('livros/', views.LivrosAPIView.as_view(), name='livros'),
    path('livros/<str:livro_id>/', views.LivroDetalheAPIView.as_view(), name='livro_detalhe'),

    # 3. Equipe de vendas (admin)
    path('vendedores/', views.VendedoresAPIView.as_view(), name='vendedores'),
    path('vendedores/<str:vendedor_id>/', views.VendedorDetalheAPIView.as_view(), name='vendedor_detalhe'),

    # 4. Frete e pedidos
    path('frete/', views.FreteAPIView.as_view(), name='frete'),
    path('pedidos/orcamento/', views.OrcamentoAPIView.as_view(), name='pedido_orcamento'),
    path('pedidos/', views.PedidosAPIView.as_view(), name='pedidos'),
    path('pedidos/<str:pedido_id>/', views.PedidoDetalheAPIView.as_view(), name='pedido_detalhe'),
    path('pedidos/<str:pedido_id>/confirmar-pagamento/', views.ConfirmarPagamentoAPIView.as_view(), name='pedido_confirmar_pagamento'),
    path('pedidos/<str:pedido_id>/despachar/', views.DespacharPedidoAPIView.as_view(), name='pedido_despachar'),
    path('pedidos/<str:pedido_id>/desconto/', views.DescontoPedidoAPIView.as_view(), name='pedido_desconto'),
    path('envios/', views.EnviosAPIView.as_view(), name='envios'),

    # 5. Relatórios e painel
    path('relatorios/', views.RelatoriosAPIView.as_view(), name='relatorios'),
    path('painel/', views.PainelAPIView.as_view(), name='painel'),
]
