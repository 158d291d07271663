"""
Mapeadores (Mappers) para converter entre:
1. Modelos do Django ORM (cache local)
2. Registros JSON do armazenamento remoto (formato camelCase)
3. Entidades de Domínio (manuslibros.core.entities)
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Type

from django.apps import apps
from django.db import models

from manuslibros.core.entities import (
    Box, Cliente, Conta, ItemPedido, Livro, LivroAvulso, Papel, Pedido, StatusPedido,
    TipoFrete, Vendedor
)


def get_model(app_label: str, model_name: str):
    """Retorna um modelo do Django de forma segura (lazy loading)."""
    return apps.get_model(app_label, model_name)


def _decimal(valor, padrao='0') -> Decimal:
    if valor is None or valor == '':
        return Decimal(padrao)
    return Decimal(str(valor))


def _numero(valor: Optional[Decimal]) -> Optional[float]:
    """Decimal → número JSON aceito pela API remota."""
    return None if valor is None else float(valor)


class BaseMapper:
    """Contrato comum: ORM ↔ entidade e registro remoto ↔ entidade."""
    model_name: str = ''

    @classmethod
    def model_class(cls) -> Type[models.Model]:
        return get_model('infrastructure', cls.model_name)

    @staticmethod
    def to_entity(model: Any):
        raise NotImplementedError

    @classmethod
    def to_model(cls, entity, model: Optional[Any] = None) -> Any:
        raise NotImplementedError

    @staticmethod
    def para_registro(entity) -> Dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def de_registro(registro: Dict[str, Any]):
        raise NotImplementedError


# ====================================================================
# LIVROS
# ====================================================================

class LivroMapper(BaseMapper):
    model_name = 'LivroModel'

    @staticmethod
    def to_entity(model: Any) -> Optional[Livro]:
        if not model: return None
        if model.is_box:
            return Box(
                id=model.id,
                titulo=model.titulo,
                preco_custo=model.preco_custo,
                preco_venda=model.preco_venda,
                itens=list(model.itens or []),
            )
        return LivroAvulso(
            id=model.id,
            titulo=model.titulo,
            preco_custo=model.preco_custo,
            preco_venda=model.preco_venda,
            estoque=model.estoque or 0,
        )

    @classmethod
    def to_model(cls, entity: Livro, model: Optional[Any] = None) -> Any:
        if not model:
            model = cls.model_class()(id=entity.id)
        model.titulo = entity.titulo
        model.preco_custo = entity.preco_custo
        model.preco_venda = entity.preco_venda
        model.is_box = entity.is_box
        model.estoque = entity.estoque_efetivo
        model.itens = list(entity.itens) if entity.is_box else []
        return model

    @staticmethod
    def para_registro(entity: Livro) -> Dict[str, Any]:
        return {
            'id': entity.id,
            'title': entity.titulo,
            'costPrice': _numero(entity.preco_custo),
            'salePrice': _numero(entity.preco_venda),
            'stock': entity.estoque_efetivo,
            'isBundle': entity.is_box,
            'bundleItems': list(entity.itens) if entity.is_box else None,
        }

    @staticmethod
    def de_registro(registro: Dict[str, Any]) -> Livro:
        if registro.get('isBundle'):
            return Box(
                id=registro['id'],
                titulo=registro.get('title') or '',
                preco_custo=_decimal(registro.get('costPrice')),
                preco_venda=_decimal(registro.get('salePrice')),
                itens=list(registro.get('bundleItems') or []),
            )
        return LivroAvulso(
            id=registro['id'],
            titulo=registro.get('title') or '',
            preco_custo=_decimal(registro.get('costPrice')),
            preco_venda=_decimal(registro.get('salePrice')),
            estoque=int(registro.get('stock') or 0),
        )


# ====================================================================
# CONTAS E VENDEDORES
# ====================================================================

class ContaMapper(BaseMapper):
    model_name = 'ContaModel'

    @staticmethod
    def to_entity(model: Any) -> Optional[Conta]:
        if not model: return None
        return Conta(
            id=model.id,
            username=model.username,
            senha=model.senha,
            nome=model.nome,
            papel=Papel(model.papel),
            avatar=model.avatar,
        )

    @classmethod
    def to_model(cls, entity: Conta, model: Optional[Any] = None) -> Any:
        if not model:
            model = cls.model_class()(id=entity.id)
        model.username = entity.username
        model.senha = entity.senha
        model.nome = entity.nome
        model.papel = Papel(entity.papel).value
        model.avatar = entity.avatar
        return model

    @staticmethod
    def para_registro(entity: Conta) -> Dict[str, Any]:
        return {
            'id': entity.id,
            'username': entity.username,
            'password': entity.senha,
            'role': Papel(entity.papel).value,
            'name': entity.nome,
            'avatar': entity.avatar,
        }

    @staticmethod
    def de_registro(registro: Dict[str, Any]) -> Conta:
        return Conta(
            id=registro['id'],
            username=registro.get('username') or '',
            senha=registro.get('password') or '',
            nome=registro.get('name') or '',
            papel=Papel(registro.get('role') or Papel.ADMIN),
            avatar=registro.get('avatar'),
        )


class VendedorMapper(BaseMapper):
    model_name = 'VendedorModel'

    @staticmethod
    def to_entity(model: Any) -> Optional[Vendedor]:
        if not model: return None
        return Vendedor(
            id=model.id,
            username=model.username,
            senha=model.senha,
            nome=model.nome,
            avatar=model.avatar,
            email=model.email,
            telefone=model.telefone,
            conta_bancaria=model.conta_bancaria,
            taxa_comissao=model.taxa_comissao,
        )

    @classmethod
    def to_model(cls, entity: Vendedor, model: Optional[Any] = None) -> Any:
        if not model:
            model = cls.model_class()(id=entity.id)
        model.username = entity.username
        model.senha = entity.senha
        model.papel = Papel.SELLER.value
        model.nome = entity.nome
        model.email = entity.email or ''
        model.telefone = entity.telefone or ''
        model.conta_bancaria = entity.conta_bancaria or ''
        model.taxa_comissao = entity.taxa_comissao
        model.avatar = entity.avatar
        return model

    @staticmethod
    def para_registro(entity: Vendedor) -> Dict[str, Any]:
        registro = ContaMapper.para_registro(entity)
        registro.update({
            'role': Papel.SELLER.value,
            'email': entity.email,
            'phone': entity.telefone,
            'bankAccount': entity.conta_bancaria,
            'commissionRate': _numero(entity.taxa_comissao),
        })
        return registro

    @staticmethod
    def de_registro(registro: Dict[str, Any]) -> Vendedor:
        return Vendedor(
            id=registro['id'],
            username=registro.get('username') or '',
            senha=registro.get('password') or '',
            nome=registro.get('name') or '',
            avatar=registro.get('avatar'),
            email=registro.get('email') or '',
            telefone=registro.get('phone') or '',
            conta_bancaria=registro.get('bankAccount') or '',
            taxa_comissao=_decimal(registro.get('commissionRate'), '15'),
        )


# ====================================================================
# PEDIDOS
# ====================================================================

class PedidoMapper(BaseMapper):
    """Cliente e itens são gravados em JSON no ORM (snake_case) e no remoto (camelCase)."""
    model_name = 'PedidoModel'

    @staticmethod
    def _item_de_json(dados: Dict[str, Any]) -> ItemPedido:
        return ItemPedido(
            livro_id=dados['livro_id'],
            titulo_livro=dados.get('titulo_livro') or '',
            quantidade=int(dados.get('quantidade') or 0),
            preco_unitario=_decimal(dados.get('preco_unitario')),
            custo_unitario=_decimal(dados.get('custo_unitario')),
            is_box=bool(dados.get('is_box')),
        )

    @staticmethod
    def _item_para_json(item: ItemPedido) -> Dict[str, Any]:
        return {
            'livro_id': item.livro_id,
            'titulo_livro': item.titulo_livro,
            'quantidade': item.quantidade,
            'preco_unitario': item.preco_unitario,
            'custo_unitario': item.custo_unitario,
            'is_box': item.is_box,
        }

    @classmethod
    def to_entity(cls, model: Any) -> Optional[Pedido]:
        if not model: return None
        cliente = model.cliente or {}
        return Pedido(
            id=model.id,
            data=model.data,
            cliente=Cliente(
                nome=cliente.get('nome', ''),
                endereco=cliente.get('endereco', ''),
                cep=cliente.get('cep', ''),
                telefone=cliente.get('telefone', ''),
                email=cliente.get('email', ''),
            ),
            itens=[cls._item_de_json(item) for item in model.itens or []],
            tipo_frete=TipoFrete(model.tipo_frete),
            valor_frete=model.valor_frete,
            desconto=model.desconto,
            valor_total=model.valor_total,
            custo_total=model.custo_total,
            lucro_total=model.lucro_total,
            comissao_vendedor=model.comissao_vendedor,
            vendedor_id=model.vendedor_id,
            status=StatusPedido(model.status),
            comprovante=model.comprovante,
            codigo_rastreio=model.codigo_rastreio,
            documento_envio=model.documento_envio,
        )

    @classmethod
    def to_model(cls, entity: Pedido, model: Optional[Any] = None) -> Any:
        if not model:
            model = cls.model_class()(id=entity.id)
        model.data = entity.data
        model.cliente = {
            'nome': entity.cliente.nome,
            'endereco': entity.cliente.endereco,
            'cep': entity.cliente.cep,
            'telefone': entity.cliente.telefone,
            'email': entity.cliente.email,
        }
        model.itens = [cls._item_para_json(item) for item in entity.itens]
        model.tipo_frete = TipoFrete(entity.tipo_frete).value
        model.valor_frete = entity.valor_frete
        model.desconto = entity.desconto
        model.valor_total = entity.valor_total
        model.custo_total = entity.custo_total
        model.lucro_total = entity.lucro_total
        model.comissao_vendedor = entity.comissao_vendedor
        model.vendedor_id = entity.vendedor_id
        model.status = StatusPedido(entity.status).value
        model.comprovante = entity.comprovante
        model.codigo_rastreio = entity.codigo_rastreio
        model.documento_envio = entity.documento_envio
        return model

    @staticmethod
    def para_registro(entity: Pedido) -> Dict[str, Any]:
        return {
            'id': entity.id,
            'date': entity.data.isoformat(),
            'customer': {
                'name': entity.cliente.nome,
                'address': entity.cliente.endereco,
                'zip': entity.cliente.cep,
                'phone': entity.cliente.telefone,
                'email': entity.cliente.email,
            },
            'items': [
                {
                    'bookId': item.livro_id,
                    'bookTitle': item.titulo_livro,
                    'quantity': item.quantidade,
                    'unitPrice': _numero(item.preco_unitario),
                    'unitCost': _numero(item.custo_unitario),
                    'isBundle': item.is_box,
                }
                for item in entity.itens
            ],
            'discount': _numero(entity.desconto),
            'shippingCost': _numero(entity.valor_frete),
            'shippingType': TipoFrete(entity.tipo_frete).value,
            'status': StatusPedido(entity.status).value,
            'sellerId': entity.vendedor_id,
            'totalValue': _numero(entity.valor_total),
            'totalCost': _numero(entity.custo_total),
            'totalProfit': _numero(entity.lucro_total),
            'sellerCommission': _numero(entity.comissao_vendedor),
            'receiptData': entity.comprovante,
            'trackingNumber': entity.codigo_rastreio,
            'shippingDocument': entity.documento_envio,
        }

    @staticmethod
    def de_registro(registro: Dict[str, Any]) -> Pedido:
        cliente = registro.get('customer') or {}
        data = datetime.fromisoformat(registro['date']) if registro.get('date') else datetime.now().astimezone()
        return Pedido(
            id=registro['id'],
            data=data,
            cliente=Cliente(
                nome=cliente.get('name') or '',
                endereco=cliente.get('address') or '',
                cep=cliente.get('zip') or '',
                telefone=cliente.get('phone') or '',
                email=cliente.get('email') or '',
            ),
            itens=[
                ItemPedido(
                    livro_id=item['bookId'],
                    titulo_livro=item.get('bookTitle') or '',
                    quantidade=int(item.get('quantity') or 0),
                    preco_unitario=_decimal(item.get('unitPrice')),
                    custo_unitario=_decimal(item.get('unitCost')),
                    is_box=bool(item.get('isBundle')),
                )
                for item in registro.get('items') or []
            ],
            tipo_frete=TipoFrete(registro.get('shippingType') or TipoFrete.SIMPLES),
            valor_frete=_decimal(registro.get('shippingCost')),
            desconto=_decimal(registro.get('discount')),
            valor_total=_decimal(registro.get('totalValue')),
            custo_total=_decimal(registro.get('totalCost')),
            lucro_total=_decimal(registro.get('totalProfit')),
            comissao_vendedor=_decimal(registro.get('sellerCommission')),
            vendedor_id=registro.get('sellerId'),
            status=StatusPedido(registro.get('status') or StatusPedido.PENDING_PAYMENT),
            comprovante=registro.get('receiptData'),
            codigo_rastreio=registro.get('trackingNumber'),
            documento_envio=registro.get('shippingDocument'),
        )
