# autolegendas/core/post_processor.py

"""
post_processor.py: Módulo de Pós-processamento da Tabela de Legendas.

Etapas opcionais aplicadas sobre a tabela já agregada:

**Função `transliterate`:**
    Remove acentos e demais caracteres fora do ASCII de todos os campos de
    texto. Campos não textuais permanecem inalterados. Aplicar a função duas
    vezes produz o mesmo resultado que aplicá-la uma vez.

**Função `export`:**
    Grava a tabela em dois formatos estatísticos, `.dta` (Stata, via
    `pandas.DataFrame.to_stata`) e `.sav` (SPSS, via `pyreadstat`), com o
    mesmo nome base, no diretório de saída informado.
"""

import logging
import unicodedata
from pathlib import Path
from typing import List, Union

import pandas as pd
import pyreadstat

from ..exceptions import ExportError

logger = logging.getLogger(__name__)


def _to_ascii(value, source_encoding: str):
    if isinstance(value, bytes):
        value = value.decode(source_encoding, errors="replace")
    if not isinstance(value, str):
        return value
    s = "".join(
        c
        for c in unicodedata.normalize("NFKD", value)
        if unicodedata.category(c) != "Mn"
    )
    return s.encode("ascii", errors="ignore").decode("ascii")


def transliterate(df: pd.DataFrame, source_encoding: str = "latin-1") -> pd.DataFrame:
    """
    Converts every text field of the table to plain ASCII.
    """
    logger.info("Convertendo campos de texto para ASCII...")
    result = df.copy()
    text_columns = [
        col for col in result.columns
        if pd.api.types.is_object_dtype(result[col]) or pd.api.types.is_string_dtype(result[col])
    ]
    for col in text_columns:
        result[col] = result[col].map(lambda v: _to_ascii(v, source_encoding))
    logger.debug(f"Colunas convertidas para ASCII: {text_columns}")
    return result


def export(
    df: pd.DataFrame,
    base_name: str,
    output_dir: Union[str, Path] = ".",
    stata_version: int = 118,
) -> List[Path]:
    """Grava `<base_name>.dta` e `<base_name>.sav` e devolve os caminhos gerados."""
    output_dir = Path(output_dir)
    dta_path = output_dir / f"{base_name}.dta"
    sav_path = output_dir / f"{base_name}.sav"
    try:
        output_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Exportando dados para '{dta_path}'...")
        df.to_stata(dta_path, write_index=False, version=stata_version)

        logger.info(f"Exportando dados para '{sav_path}'...")
        pyreadstat.write_sav(df, str(sav_path))
    except Exception as e:
        logger.error(f"Falha ao exportar os dados: {e}", exc_info=True)
        for path in (dta_path, sav_path):
            if path.is_file():
                path.unlink()
        raise ExportError(f"Falha ao exportar '{base_name}': {e}") from e

    logger.info(f"Exportação concluída: {dta_path.name}, {sav_path.name}")
    return [dta_path, sav_path]
