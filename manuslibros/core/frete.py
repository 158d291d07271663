# manuslibros/core/frete.py
"""
Estimativa de frete local e determinística a partir do CEP de destino.

Não consulta a API dos Correios: a região postal (primeiro dígito do CEP)
define o ajuste sobre a tabela base.
"""
import re
from decimal import Decimal
from typing import List

from manuslibros.core.entities import OpcaoFrete, TipoFrete
from manuslibros.core.exceptions import CepInvalidoError

DIGITOS_CEP = 8

# Tabela base: (valor, prazo em dias úteis)
_TABELA_BASE = {
    TipoFrete.SIMPLES: (Decimal('18.00'), 7),
    TipoFrete.SEDEX: (Decimal('32.00'), 3),
}

# Regiões 4 a 9 (Nordeste, Norte, Centro-Oeste e Sul): acréscimo de valor e prazo
_ACRESCIMO_REMOTO = {
    TipoFrete.SIMPLES: (Decimal('12.00'), 4),
    TipoFrete.SEDEX: (Decimal('20.00'), 2),
}

# Regiões 0 e 1 (Grande São Paulo e interior paulista): desconto de valor e prazo
_DESCONTO_METROPOLE = {
    TipoFrete.SIMPLES: (Decimal('4.00'), 2),
    TipoFrete.SEDEX: (Decimal('7.00'), 1),
}


def limpar_cep(cep: str) -> str:
    """Remove pontuação e espaços, mantendo apenas os dígitos."""
    return re.sub(r'\D', '', cep or '')


def regiao_postal(cep: str) -> int:
    digitos = limpar_cep(cep)
    if len(digitos) < DIGITOS_CEP:
        raise CepInvalidoError()
    return int(digitos[0])


def estimar_frete(cep: str) -> List[OpcaoFrete]:
    """Retorna as cotações Simples e SEDEX para o CEP informado."""
    regiao = regiao_postal(cep)

    opcoes = []
    for tipo, (valor, prazo) in _TABELA_BASE.items():
        if regiao >= 4:
            acrescimo, dias = _ACRESCIMO_REMOTO[tipo]
            valor, prazo = valor + acrescimo, prazo + dias
        elif regiao <= 1:
            desconto, dias = _DESCONTO_METROPOLE[tipo]
            valor, prazo = valor - desconto, prazo - dias
        opcoes.append(OpcaoFrete(tipo=tipo, valor=valor, prazo_dias=prazo))
    return opcoes


def cotar(cep: str, tipo: TipoFrete) -> OpcaoFrete:
    """Cotação de um único tipo de envio."""
    tipo = TipoFrete(tipo)
    return next(opcao for opcao in estimar_frete(cep) if opcao.tipo == tipo)
