# manuslibros/core/ports.py
"""
Definição das Portas (Interfaces/Protocolos) da Arquitetura Limpa.

Estes protocolos definem o contrato que a camada de Infraestrutura (Repositórios,
Gateways) DEVE seguir para se conectar à camada Core (Casos de Uso).

A camada de negócio sempre lê e grava coleções inteiras: cada repositório expõe
apenas `buscar_todos` e `salvar_todos`.
"""

from typing import Protocol, List, TypeVar
from abc import abstractmethod

from manuslibros.core.entities import Livro, Vendedor, Pedido, Conta

T = TypeVar('T')


# ====================================================================
# 1. REPOSITÓRIOS (Portas de Persistência)
# ====================================================================

class IColecaoRepository(Protocol[T]):
    """Protocolo genérico de persistência por coleção completa."""

    @abstractmethod
    def buscar_todos(self) -> List[T]: ...

    @abstractmethod
    def salvar_todos(self, colecao: List[T]) -> None:
        """
        Grava a coleção inteira: atualiza/insere cada registro pela chave primária
        e remove os registros que não fazem mais parte da coleção.
        """
        ...


class ILivroRepository(IColecaoRepository[Livro], Protocol):
    """Coleção `books`."""


class IVendedorRepository(IColecaoRepository[Vendedor], Protocol):
    """Coleção `sellers`."""


class IPedidoRepository(IColecaoRepository[Pedido], Protocol):
    """Coleção `orders`."""


class IContaRepository(IColecaoRepository[Conta], Protocol):
    """
    Coleção `users` (administradores).
    Se estiver vazia, `buscar_todos` DEVE retornar a conta de administrador semeada.
    """


# ====================================================================
# 2. SERVIÇOS
# ====================================================================

class IHasherSenha(Protocol):
    """Protocolo para geração e verificação de hashes de senha."""

    @abstractmethod
    def gerar_hash(self, senha: str) -> str: ...

    @abstractmethod
    def verificar(self, senha: str, senha_hash: str) -> bool: ...
