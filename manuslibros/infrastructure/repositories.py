"""
Camada de Infraestrutura: Implementação dos Repositórios de coleção.

Esta camada traduz as operações abstratas `buscar_todos` / `salvar_todos`
definidas nas Portas do Core em chamadas concretas ao Django ORM (cache local)
e à API REST do Supabase (armazenamento remoto).
"""
import logging
from typing import Generic, List, Optional, Type, TypeVar

from django.apps import apps
from django.db import transaction

from manuslibros.core.entities import Conta, Papel
from manuslibros.core.exceptions import PersistenciaError
from manuslibros.core.ports import IColecaoRepository, IHasherSenha
from manuslibros.infrastructure.gateways import SupabaseGateway
from manuslibros.infrastructure.mappers import (
    BaseMapper, ContaMapper, LivroMapper, PedidoMapper, VendedorMapper
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


# ====================================================================
# 1. REPOSITÓRIOS LOCAIS (Django ORM)
# ====================================================================

class ColecaoRepositoryDjango(Generic[T]):
    """Coleção inteira gravada em uma tabela local."""
    mapper: Type[BaseMapper] = BaseMapper

    # Propriedade para carregar o modelo de forma LAZY
    @property
    def Model(self):
        return apps.get_model('infrastructure', self.mapper.model_name)

    def buscar_todos(self) -> List[T]:
        return [self.mapper.to_entity(model) for model in self.Model.objects.all()]

    @transaction.atomic
    def salvar_todos(self, colecao: List[T]) -> None:
        existentes = self.Model.objects.in_bulk()
        ids = []
        for entidade in colecao:
            model = self.mapper.to_model(entidade, existentes.get(entidade.id))
            model.save()
            ids.append(entidade.id)

        removidos, _ = self.Model.objects.exclude(pk__in=ids).delete()
        if removidos:
            logger.debug("%s registro(s) removido(s) de '%s'.", removidos, self.Model._meta.db_table)


class LivroRepositoryDjango(ColecaoRepositoryDjango):
    mapper = LivroMapper


class VendedorRepositoryDjango(ColecaoRepositoryDjango):
    mapper = VendedorMapper


class PedidoRepositoryDjango(ColecaoRepositoryDjango):
    mapper = PedidoMapper


class ContaRepositoryDjango(ColecaoRepositoryDjango):
    mapper = ContaMapper


# ====================================================================
# 2. REPOSITÓRIO REMOTO (Supabase)
# ====================================================================

class ColecaoRepositorySupabase(Generic[T]):
    """Coleção inteira gravada em uma tabela remota (upsert + remoção dos ausentes)."""
    def __init__(self, gateway: SupabaseGateway, tabela: str, mapper: Type[BaseMapper]):
        self.gateway = gateway
        self.tabela = tabela
        self.mapper = mapper

    def buscar_todos(self) -> List[T]:
        return [self.mapper.de_registro(registro) for registro in self.gateway.selecionar(self.tabela)]

    def salvar_todos(self, colecao: List[T]) -> None:
        self.gateway.upsert(self.tabela, [self.mapper.para_registro(entidade) for entidade in colecao])
        self.gateway.remover_ausentes(self.tabela, [entidade.id for entidade in colecao])


# ====================================================================
# 3. SINCRONIZAÇÃO LOCAL + REMOTO
# ====================================================================

class ColecaoRepositorySincronizado(Generic[T]):
    """
    O armazenamento remoto é a fonte preferencial; o cache local é atualizado a
    cada leitura bem-sucedida e gravado sempre primeiro. Falhas remotas são
    registradas em log e nunca chegam ao usuário.

    Enquanto uma gravação remota estiver pendente, o cache local é a fonte de
    verdade: a próxima leitura reenvia a coleção local em vez de sobrescrevê-la.
    """
    def __init__(self, local: IColecaoRepository, remoto: IColecaoRepository, nome: str = ''):
        self.local = local
        self.remoto = remoto
        self.nome = nome
        self.pendente = False

    def _reenviar_pendente(self) -> List[T]:
        colecao = self.local.buscar_todos()
        try:
            self.remoto.salvar_todos(colecao)
        except PersistenciaError as e:
            logger.warning("Reenvio de '%s' ao armazenamento remoto falhou; usando cache local. %s",
                           self.nome, e.message)
            return colecao
        self.pendente = False
        logger.info("Gravação pendente de '%s' reenviada ao armazenamento remoto.", self.nome)
        return colecao

    def buscar_todos(self) -> List[T]:
        if self.pendente:
            return self._reenviar_pendente()
        try:
            colecao = self.remoto.buscar_todos()
        except PersistenciaError as e:
            logger.warning("Leitura remota de '%s' falhou; usando cache local. %s", self.nome, e.message)
            return self.local.buscar_todos()
        self.local.salvar_todos(colecao)
        return colecao

    def salvar_todos(self, colecao: List[T]) -> None:
        self.local.salvar_todos(colecao)
        try:
            self.remoto.salvar_todos(colecao)
        except PersistenciaError as e:
            self.pendente = True
            logger.warning("Gravação remota de '%s' falhou; dados mantidos no cache local. %s", self.nome, e.message)
        else:
            self.pendente = False


# ====================================================================
# 4. CONTAS DE ADMINISTRADOR
# ====================================================================

class ContaRepositoryComAdmin:
    """Coleção `users`: quando vazia, devolve a conta de administrador semeada."""
    def __init__(
        self,
        repo: IColecaoRepository,
        hasher: IHasherSenha,
        admin_id: str,
        username: str,
        senha: str,
        nome: str,
    ):
        self.repo = repo
        self.hasher = hasher
        self.admin_id = admin_id
        self.username = username
        self.senha = senha
        self.nome = nome
        self._hash_senha: Optional[str] = None

    def conta_admin(self) -> Conta:
        if self._hash_senha is None:
            self._hash_senha = self.hasher.gerar_hash(self.senha)
        return Conta(
            id=self.admin_id,
            username=self.username,
            senha=self._hash_senha,
            nome=self.nome,
            papel=Papel.ADMIN,
        )

    def buscar_todos(self) -> List[Conta]:
        contas = self.repo.buscar_todos()
        if not contas:
            logger.debug("Nenhuma conta cadastrada; usando o administrador padrão.")
            return [self.conta_admin()]
        return contas

    def salvar_todos(self, colecao: List[Conta]) -> None:
        self.repo.salvar_todos(colecao)
