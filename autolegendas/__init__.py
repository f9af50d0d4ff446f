"""
AutoLegendas: legendas das eleições municipais brasileiras publicadas pelo TSE.

Este arquivo é o ponto de entrada do pacote `autolegendas`. Ele define a
interface pública da biblioteca, expondo a função `legend_local`, a classe
`Config` e as exceções.

O `__all__` define explicitamente quais nomes são exportados quando um cliente
usa `from autolegendas import *`.
"""

__version__ = "0.1.0"

import logging
import os
import uuid
from typing import Any, Dict

import pandas as pd

from autolegendas.config import Config
from autolegendas.core.downloader import Downloader
from autolegendas.core.processor import Processor
from autolegendas.etl_pipeline import PipelineETL, legend_local, setup_logging
from autolegendas.exceptions import (AutoLegendasError, ConfigurationError,
                                     DownloadError, ExportError,
                                     ExtractionError, InvalidEncodingError,
                                     InvalidFederationUnitError,
                                     MissingFederationUnitFileError,
                                     ProcessingError, SchemaMismatchError,
                                     UnsupportedYearError)

__all__ = [
    "Config",
    "Downloader",
    "Processor",
    "PipelineETL",
    "legend_local",
    "run_legendas",
    "AutoLegendasError",
    "ConfigurationError",
    "InvalidEncodingError",
    "InvalidFederationUnitError",
    "UnsupportedYearError",
    "DownloadError",
    "ExtractionError",
    "ProcessingError",
    "MissingFederationUnitFileError",
    "SchemaMismatchError",
    "ExportError",
]

logger = logging.getLogger(__name__)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "False").lower() in ("true", "1")


def _load_config_from_env() -> Dict[str, Any]:
    year = os.getenv("AUTOLEGENDAS_YEAR")
    if not year:
        raise ConfigurationError("Variável de ambiente AUTOLEGENDAS_YEAR não definida.")
    try:
        year = int(year)
    except ValueError as e:
        raise ConfigurationError(f"AUTOLEGENDAS_YEAR inválido: {year}") from e

    uf = os.getenv("AUTOLEGENDAS_UF", "all")
    legendas_config = {
        "year": year,
        "federation_unit": [u for u in uf.split(",") if u.strip()] if "," in uf else uf,
        "transliterate": _env_flag("AUTOLEGENDAS_ASCII"),
        "source_encoding": os.getenv("AUTOLEGENDAS_ENCODING", "latin-1"),
        "export": _env_flag("AUTOLEGENDAS_EXPORT"),
        "download_dir": os.getenv("AUTOLEGENDAS_DOWNLOAD_DIR"),
        "output_dir": os.getenv("AUTOLEGENDAS_OUTPUT_DIR"),
    }
    if os.getenv("AUTOLEGENDAS_TIMEOUT"):
        legendas_config["timeout"] = os.getenv("AUTOLEGENDAS_TIMEOUT")
    return legendas_config


def run_legendas(legendas_config: Dict[str, Any] = None, log_level: str = 'INFO') -> Dict[str, Any]:
    """
    Executa o pipeline e devolve um sumário, sem propagar exceções.

    Se `legendas_config` não for informado, os parâmetros são lidos das
    variáveis de ambiente `AUTOLEGENDAS_*`.
    """
    run_id = str(uuid.uuid4())[:8]
    failure = Config.DEFAULT_CONSTANTS["STATUS_FAILURE"]

    if log_level.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
        return {
            "status": failure,
            "message": f"Erro de validação: log_level inválido: {log_level}.",
            "records": 0,
            "exported_files": [],
        }

    setup_logging(run_id=run_id, debug_mode=(log_level.upper() == 'DEBUG'))

    try:
        if legendas_config is None:
            legendas_config = _load_config_from_env()
        config = Config(legendas_config)
        pipeline = PipelineETL(config, run_id=run_id)
        result = pipeline.run()
    except AutoLegendasError as e:
        logger.error(f"Erro no pipeline: {e}", exc_info=True)
        return {
            "status": failure,
            "message": f"Erro de negócio: {e}",
            "records": 0,
            "exported_files": [],
        }
    except Exception as e:
        logger.critical(f"Ocorreu um erro inesperado e fatal no pipeline: {e}", exc_info=True)
        return {
            "status": failure,
            "message": f"Erro inesperado: {e}",
            "records": 0,
            "exported_files": [],
        }

    if not isinstance(result, pd.DataFrame):
        return {**result, "records": 0, "exported_files": []}

    return {
        "status": config.STATUS_SUCCESS,
        "message": "Dados de legendas obtidos com sucesso.",
        "records": len(result),
        "exported_files": [str(p) for p in pipeline.exported_files],
        "data": result,
    }
