# manuslibros/infrastructure/gateways.py
import logging
from typing import Any, Dict, List, Optional

import requests

from manuslibros.core.exceptions import PersistenciaError

logger = logging.getLogger(__name__)


# ====================================================================
# GATEWAYS: Implementações concretas que se comunicam com APIs externas.
# ====================================================================

class SupabaseGateway:
    """
    Cliente mínimo da API REST (PostgREST) do Supabase.
    Cada coleção corresponde a uma tabela com chave primária `id`.
    """
    def __init__(self, url: str, chave: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.api_base_url = f"{url.rstrip('/')}/rest/v1"
        self.chave = chave
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configurado(self) -> bool:
        return bool(self.chave) and not self.api_base_url.startswith('/')

    def _headers(self, **extras) -> Dict[str, str]:
        headers = {
            "apikey": self.chave,
            "Authorization": f"Bearer {self.chave}",
            "Content-Type": "application/json",
        }
        headers.update(extras)
        return headers

    def _requisitar(self, metodo: str, tabela: str, **kwargs) -> requests.Response:
        url = f"{self.api_base_url}/{tabela}"
        try:
            response = self.session.request(metodo, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            raise PersistenciaError(f"Erro de comunicação com o Supabase ({metodo} {tabela}): {e}")

    def selecionar(self, tabela: str) -> List[Dict[str, Any]]:
        """Retorna todos os registros da tabela."""
        response = self._requisitar("GET", tabela, params={"select": "*"}, headers=self._headers())
        try:
            return response.json()
        except ValueError as e:
            raise PersistenciaError(f"Resposta inválida do Supabase para '{tabela}': {e}")

    def upsert(self, tabela: str, registros: List[Dict[str, Any]]) -> None:
        """Insere ou atualiza os registros pela chave primária."""
        if not registros:
            return
        self._requisitar(
            "POST", tabela,
            json=registros,
            params={"on_conflict": "id"},
            headers=self._headers(Prefer="resolution=merge-duplicates,return=minimal"),
        )

    def remover_ausentes(self, tabela: str, ids: List[str]) -> None:
        """Remove da tabela os registros cujo ID não está em `ids`."""
        if ids:
            filtro = "not.in.({})".format(",".join(f'"{i}"' for i in ids))
        else:
            filtro = "not.is.null"
        self._requisitar("DELETE", tabela, params={"id": filtro}, headers=self._headers())
        logger.debug("Registros ausentes removidos de '%s'.", tabela)
