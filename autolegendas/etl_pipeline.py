# autolegendas/etl_pipeline.py

"""
etl_pipeline.py: Orquestrador Principal do Pipeline do AutoLegendas.

Este módulo contém a classe `PipelineETL` e a função `legend_local`, ponto de
entrada público para obter as legendas (coligações e partidos isolados) das
eleições municipais brasileiras.

**Etapas (estritamente lineares):**

1.  **Validação:** Codificação, ano e filtro de UFs são conferidos antes de
    qualquer acesso à rede ou ao disco. Anos sem dados produzem um resultado
    informativo em vez de uma exceção.
2.  **Obtenção:** O `Downloader` baixa e descompacta o arquivo do ano em
    `download_dir/<ano>`.
3.  **Agregação:** O `Processor` concatena os arquivos das UFs solicitadas e
    aplica os nomes canônicos das colunas.
4.  **Pós-processamento:** Conversão opcional para ASCII e exportação
    opcional para `.dta` e `.sav`.
5.  **Limpeza:** O diretório extraído é removido em qualquer caminho de
    saída, com ou sem erro.

**Retorno:**
- `run()` e `legend_local()` retornam um `pd.DataFrame`, ou um dicionário
  informativo (`status`, `message`, `year`) quando o ano não está disponível.
  Erros são propagados ao chamador.
"""

import argparse
import logging
import sys
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

from autolegendas.config import Config
from autolegendas.core.downloader import Downloader
from autolegendas.core.post_processor import export as export_data
from autolegendas.core.post_processor import transliterate as transliterate_data
from autolegendas.core.processor import Processor
from autolegendas.core.validator import (
    expand_federation_units,
    is_all_sentinel,
    validate_encoding,
    validate_year,
)
from autolegendas.exceptions import UnsupportedYearError

logger = logging.getLogger("autolegendas")


class RunIdFilter(logging.Filter):
    def __init__(self, run_id):
        super().__init__()
        self.run_id = run_id

    def filter(self, record):
        record.run_id = self.run_id
        return True


def setup_logging(run_id: str, debug_mode=False, log_file: Optional[str] = None):
    level = logging.DEBUG if debug_mode else logging.INFO
    log_file_path = Path(log_file or Config.DEFAULT_CONSTANTS["LOG_FILE"])
    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    run_id_filter = RunIdFilter(run_id)
    file_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] [%(run_id)s] %(name)s: %(message)s"
    )
    stream_formatter_info = logging.Formatter("[%(levelname)s] [%(run_id)s] %(message)s")
    stream_formatter_debug = logging.Formatter(
        "%(asctime)s [%(levelname)s] [%(run_id)s] %(name)s: %(message)s"
    )
    file_handler = logging.FileHandler(log_file_path, mode="a")
    file_handler.setFormatter(file_formatter)
    file_handler.setLevel(level)
    file_handler.addFilter(run_id_filter)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(
        stream_formatter_debug if debug_mode else stream_formatter_info
    )
    stream_handler.setLevel(level)
    stream_handler.addFilter(run_id_filter)
    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    logger.setLevel(level)
    if not debug_mode:
        logging.getLogger("urllib3").setLevel(logging.WARNING)


class PipelineStage(Enum):
    VALIDATING = "VALIDACAO"
    FETCHING = "OBTENCAO"
    AGGREGATING = "AGREGACAO"
    POST_PROCESSING = "POS_PROCESSAMENTO"
    CLEANUP = "LIMPEZA"
    DONE = "CONCLUIDO"


class PipelineETL:
    def __init__(self, config: Config, run_id: Optional[str] = None):
        self.config = config
        self.run_id = run_id or str(uuid.uuid4())[:8]
        self.logger = logging.getLogger("autolegendas.pipeline")
        self.stage = None
        self.exported_files = []

    def _enter_stage(self, stage: PipelineStage):
        self.stage = stage
        self.logger.debug(f"Etapa atual: {stage.value}")

    def _unavailable(self, error: UnsupportedYearError) -> Dict[str, Any]:
        self.logger.info(f"{self.config.UNAVAILABLE_MESSAGE} ({error})")
        return {
            "status": self.config.STATUS_UNAVAILABLE,
            "message": self.config.UNAVAILABLE_MESSAGE,
            "year": error.year,
        }

    def _validate(self):
        """
        Etapa 1: valida os parâmetros. Nenhum efeito colateral acontece aqui.
        Retorna a codificação canônica, o ano e a lista de UFs.
        """
        self._enter_stage(PipelineStage.VALIDATING)
        self.logger.info("[ETAPA 1] Validando parâmetros de entrada.")
        encoding = validate_encoding(self.config.SOURCE_ENCODING)
        year = validate_year(self.config.YEAR, self.config.SUPPORTED_YEARS, self.config.KNOWN_YEARS)
        federation_units = expand_federation_units(
            self.config.FEDERATION_UNIT,
            self.config.FEDERATION_UNITS,
            self.config.ALL_SENTINEL,
        )
        return encoding, year, federation_units

    def _post_process(self, df: pd.DataFrame, encoding: str) -> pd.DataFrame:
        self._enter_stage(PipelineStage.POST_PROCESSING)
        self.logger.info("[ETAPA 4] Pós-processamento.")
        if self.config.TRANSLITERATE:
            df = transliterate_data(df, encoding)
        if self.config.EXPORT:
            self.exported_files = export_data(
                df,
                self.config.export_basename,
                self.config.OUTPUT_DIR,
                stata_version=self.config.STATA_VERSION,
            )
        return df

    def run(self) -> Union[pd.DataFrame, Dict[str, Any]]:
        """
        Método principal que orquestra a execução completa do pipeline.
        """
        self.logger.info(f"Iniciando execução do pipeline. Run ID: {self.run_id}")
        try:
            encoding, year, federation_units = self._validate()
        except UnsupportedYearError as e:
            if not e.informational or self.config.RAISE_ON_UNSUPPORTED_YEAR:
                raise
            self._enter_stage(PipelineStage.DONE)
            return self._unavailable(e)
        skip_missing = is_all_sentinel(self.config.FEDERATION_UNIT, self.config.ALL_SENTINEL)

        with Downloader(self.config) as downloader:
            self._enter_stage(PipelineStage.FETCHING)
            self.logger.info(f"[ETAPA 2] Obtendo dados de legendas de {year}.")
            try:
                with downloader.fetched_archive(year, self.config.DOWNLOAD_DIR) as extraction_path:
                    self._enter_stage(PipelineStage.AGGREGATING)
                    self.logger.info("[ETAPA 3] Processando os dados...")
                    df = Processor(self.config).aggregate(
                        extraction_path,
                        federation_units,
                        encoding=encoding,
                        year=year,
                        skip_missing=skip_missing,
                    )
                    df = self._post_process(df, encoding)
                    self._enter_stage(PipelineStage.CLEANUP)
                    self.logger.info("[ETAPA 5] Removendo arquivos temporários.")
            finally:
                if self.stage is not PipelineStage.CLEANUP:
                    self.logger.warning(
                        f"Pipeline interrompido na etapa {self.stage.value}; diretório de trabalho removido."
                    )

        self._enter_stage(PipelineStage.DONE)
        self.logger.info(f"Concluído: {len(df)} registros de legendas.")
        return df


def legend_local(
    year: int,
    federation_unit="all",
    transliterate: bool = False,
    source_encoding: str = "latin-1",
    export: bool = False,
    timeout: Optional[float] = None,
    download_dir: Optional[Union[str, Path]] = None,
    output_dir: Optional[Union[str, Path]] = None,
    custom_constants: Optional[Dict[str, Any]] = None,
) -> Union[pd.DataFrame, Dict[str, Any]]:
    """
    Baixa e agrega as legendas (coligações ou partidos isolados) das eleições
    municipais, desagregadas por município.

    Args:
        year: Ano da eleição (2008, 2012 ou 2016).
        federation_unit: "all", uma sigla de UF ou uma sequência de siglas.
        transliterate: Converte os campos de texto para ASCII.
        source_encoding: Codificação dos arquivos originais.
        export: Grava `legend_local_<ano>.dta` e `.sav` em `output_dir`.
        timeout: Timeout do download, em segundos.
        download_dir: Diretório de trabalho para o download e a extração.
        output_dir: Diretório dos arquivos exportados (padrão: diretório atual).
        custom_constants: Sobrescreve constantes de `Config`.

    Returns:
        Um `pd.DataFrame` com 18 colunas ou, para anos sem dados, um
        dicionário informativo.
    """
    legendas_config = {
        "year": year,
        "federation_unit": federation_unit,
        "transliterate": transliterate,
        "source_encoding": source_encoding,
        "export": export,
        "download_dir": download_dir,
        "output_dir": output_dir,
    }
    if timeout is not None:
        legendas_config["timeout"] = timeout
    config = Config(legendas_config, custom_constants=custom_constants)
    return PipelineETL(config).run()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Baixa as legendas das eleições municipais brasileiras (TSE)."
    )
    parser.add_argument("year", type=int, help="Ano da eleição.")
    parser.add_argument(
        "--uf", action="append", dest="federation_unit",
        help="Sigla da UF (pode ser repetido). Padrão: todas.",
    )
    parser.add_argument("--ascii", action="store_true", help="Converte o texto para ASCII.")
    parser.add_argument("--encoding", default="latin-1", help="Codificação dos arquivos originais.")
    parser.add_argument("--export", action="store_true", help="Exporta para .dta e .sav.")
    parser.add_argument("--download-dir", default=None, help="Diretório de trabalho.")
    parser.add_argument("--output-dir", default=None, help="Diretório dos arquivos exportados.")
    parser.add_argument("--timeout", type=float, default=None, help="Timeout do download (s).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Habilita logging em nível DEBUG.")
    args = parser.parse_args(argv)

    from autolegendas import run_legendas

    legendas_config = {
        "year": args.year,
        "federation_unit": args.federation_unit or "all",
        "transliterate": args.ascii,
        "source_encoding": args.encoding,
        "export": args.export,
        "download_dir": args.download_dir,
        "output_dir": args.output_dir,
    }
    if args.timeout is not None:
        legendas_config["timeout"] = args.timeout

    result = run_legendas(legendas_config, log_level="DEBUG" if args.verbose else "INFO")
    return 1 if result["status"] == Config.DEFAULT_CONSTANTS["STATUS_FAILURE"] else 0


if __name__ == "__main__":
    sys.exit(main())
