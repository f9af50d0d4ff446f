# autolegendas/core/validator.py

"""
validator.py: Validação dos Parâmetros de Entrada.

Todas as verificações deste módulo acontecem antes de qualquer efeito
colateral (rede ou disco). As funções recebem os conjuntos válidos como
argumentos, com os valores padrão vindos de `Config.DEFAULT_CONSTANTS`.

- `validate_encoding`: confere se a codificação existe e devolve o nome
  canônico registrado no módulo `codecs`.
- `validate_year`: confere se o TSE publica legendas municipais para o ano.
- `expand_federation_units`: transforma o filtro de UFs (uma sigla, várias
  siglas ou o sentinela "all") na lista ordenada de siglas a processar.
"""

import codecs
import logging
import numbers
from typing import Iterable, List, Optional, Sequence, Union

from ..config import Config
from ..exceptions import (
    InvalidEncodingError,
    InvalidFederationUnitError,
    UnsupportedYearError,
)

logger = logging.getLogger(__name__)

FederationUnitFilter = Union[str, Iterable[str]]


def validate_encoding(name: str) -> str:
    """Devolve o nome canônico da codificação ou levanta `InvalidEncodingError`."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidEncodingError(f"Codificação inválida: {name!r}")
    try:
        canonical = codecs.lookup(name.strip()).name
    except LookupError as e:
        raise InvalidEncodingError(f"Codificação inválida: {name!r}") from e
    logger.debug(f"Codificação '{name}' normalizada para '{canonical}'.")
    return canonical


def validate_year(
    year,
    supported_years: Optional[Sequence[int]] = None,
    known_years: Optional[Sequence[int]] = None,
) -> int:
    """
    Confere o ano da eleição.

    Valores não inteiros e anos fora de `known_years` levantam
    `UnsupportedYearError`. Anos conhecidos mas fora de `supported_years`
    levantam o mesmo erro com `informational=True`.
    """
    if supported_years is None:
        supported_years = Config.DEFAULT_CONSTANTS["SUPPORTED_YEARS"]
    if known_years is None:
        known_years = Config.DEFAULT_CONSTANTS["KNOWN_YEARS"]
    if isinstance(year, bool) or not isinstance(year, numbers.Integral):
        raise UnsupportedYearError(year, f"Ano inválido: {year!r}. Informe um número inteiro.")
    if int(year) in supported_years:
        return int(year)
    if int(year) in known_years:
        raise UnsupportedYearError(
            year,
            f"Ano {year} não disponível. Anos suportados: {list(supported_years)}",
            informational=True,
        )
    raise UnsupportedYearError(
        year,
        f"Ano inválido: {year}. Anos de eleição municipal: {sorted(set(known_years) | set(supported_years))}",
    )


def is_all_sentinel(federation_unit: FederationUnitFilter, sentinel: str = "all") -> bool:
    """Indica se o filtro pede todas as UFs."""
    if isinstance(federation_unit, str):
        return federation_unit.strip().lower() == sentinel.lower()
    try:
        return any(
            isinstance(item, str) and item.strip().lower() == sentinel.lower()
            for item in federation_unit
        )
    except TypeError:
        return False


def expand_federation_units(
    federation_unit: FederationUnitFilter,
    known_units: Optional[Sequence[str]] = None,
    sentinel: str = "all",
) -> List[str]:
    """
    Expande o filtro de UFs para a lista de siglas a processar.

    Aceita uma sigla ("SP"), uma sequência de siglas (["sp", "RJ"]) ou o
    sentinela "all". A comparação ignora maiúsculas e espaços e a lista
    devolvida segue a ordem canônica de `known_units`, sem repetições.
    """
    if known_units is None:
        known_units = Config.DEFAULT_CONSTANTS["FEDERATION_UNITS"]

    if is_all_sentinel(federation_unit, sentinel):
        return list(known_units)

    if isinstance(federation_unit, str):
        requested = [federation_unit]
    else:
        try:
            requested = list(federation_unit)
        except TypeError as e:
            raise InvalidFederationUnitError(
                f"Filtro de UF inválido: {federation_unit!r}"
            ) from e

    if not requested:
        raise InvalidFederationUnitError("Nenhuma UF informada.")

    normalized = set()
    for item in requested:
        if not isinstance(item, str):
            raise InvalidFederationUnitError(f"Sigla de UF inválida: {item!r}")
        code = item.strip().upper()
        if code not in known_units:
            raise InvalidFederationUnitError(f"Sigla de UF desconhecida: {item!r}")
        normalized.add(code)

    units = [code for code in known_units if code in normalized]
    logger.debug(f"Filtro de UF {federation_unit!r} expandido para {units}.")
    return units
