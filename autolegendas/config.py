"""
Módulo de configuração do AutoLegendas.

Este módulo define a classe `Config`, responsável por centralizar, validar e
gerenciar os parâmetros de uma execução (ano, UFs, codificação, exportação) e
as constantes que descrevem a fonte de dados do TSE.
"""

from typing import Any, Dict

from .exceptions import ConfigurationError


class Config:
    """Gerenciador de configurações do AutoLegendas."""

    # --- Seção de Constantes Padrão ---
    # Usado como fallback se não for fornecida uma configuração customizada.
    DEFAULT_CONSTANTS = {
        # --- Constantes do Downloader ---
        "BASE_URL": "https://cdn.tse.jus.br/estatistica/sead/odsele/consulta_legendas",
        "ARCHIVE_NAME_TEMPLATE": "consulta_legendas_{year}.zip",
        "DOWNLOAD_CHUNK_SIZE": 1024 * 256,
        "SHOW_PROGRESS": True,

        # --- Constantes do Validador ---
        "KNOWN_YEARS": [1996, 2000, 2004, 2008, 2012, 2016],
        "SUPPORTED_YEARS": [2008, 2012, 2016],
        "RAISE_ON_UNSUPPORTED_YEAR": False,
        "ALL_SENTINEL": "all",
        "FEDERATION_UNITS": [
            "AC", "AL", "AM", "AP", "BA", "CE", "DF", "ES", "GO",
            "MA", "MG", "MS", "MT", "PA", "PB", "PE", "PI", "PR",
            "RJ", "RN", "RO", "RR", "RS", "SC", "SE", "SP", "TO",
        ],

        # --- Constantes do Processor ---
        "SOURCE_FILE_REGEX": r"(?:^|_)(?P<year>\d{4})_(?P<uf>[A-Za-z]{2})$",
        "SOURCE_FILE_EXTENSIONS": [".txt", ".csv"],
        "CANDIDATE_SEPARATORS": [";", ","],
        "EXPECTED_COLUMN_COUNT": 18,
        "FEDERATION_UNIT_COLUMN": "SIGLA_UF",
        "COLUMN_NAMES": [
            "DATA_GERACAO", "HORA_GERACAO", "ANO_ELEICAO", "NUM_TURNO",
            "DESCRICAO_ELEICAO", "SIGLA_UF", "SIGLA_UE", "NOME_UE",
            "CODIGO_CARGO", "DESCRICAO_CARGO", "TIPO_LEGENDA", "NUM_PARTIDO",
            "SIGLA_PARTIDO", "NOME_PARTIDO", "SIGLA_COLIGACAO",
            "CODIGO_COLIGACAO", "COMPOSICAO_COLIGACAO", "SEQUENCIAL_COLIGACAO",
        ],

        # --- Constantes do Pós-processamento ---
        "EXPORT_BASENAME_TEMPLATE": "legend_local_{year}",
        "STATA_VERSION": 118,

        # --- Constantes do Pipeline ---
        "LOG_FILE": "./logs/autolegendas.log",
        "STATUS_SUCCESS": "SUCESSO",
        "STATUS_UNAVAILABLE": "INDISPONIVEL",
        "STATUS_FAILURE": "FALHA",
        "UNAVAILABLE_MESSAGE": "Não disponível. Consulte a documentação e tente novamente.",
    }

    REQUIRED_LEGENDAS_KEYS = {"year"}

    def __init__(self, legendas_config: Dict[str, Any], custom_constants: Dict[str, Any] = None):
        """
        Inicializa e valida as configurações do AutoLegendas.

        Args:
            legendas_config: Dicionário com os parâmetros da extração.
            custom_constants: Dicionário opcional para sobrescrever as constantes padrão.
        """
        self._validate_legendas_config(legendas_config)
        self.legendas_config = legendas_config

        # --- Expõe as configurações como atributos de alto nível ---
        self.YEAR = legendas_config["year"]
        self.FEDERATION_UNIT = legendas_config.get("federation_unit", "all")
        self.TRANSLITERATE = bool(legendas_config.get("transliterate", False))
        self.SOURCE_ENCODING = legendas_config.get("source_encoding", "latin-1")
        self.EXPORT = bool(legendas_config.get("export", False))
        self.DOWNLOAD_DIR = legendas_config.get("download_dir") or "./downloads"
        self.OUTPUT_DIR = legendas_config.get("output_dir") or "."
        self.TIMEOUT = self._validate_timeout(legendas_config.get("timeout", 30))

        constants = self.DEFAULT_CONSTANTS.copy()
        if custom_constants:
            constants.update(custom_constants)

        for key, value in constants.items():
            setattr(self, key, value)

    def _validate_legendas_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(config, dict):
            raise ConfigurationError("Configuração de legendas deve ser um dicionário.")
        missing = self.REQUIRED_LEGENDAS_KEYS - set(config.keys())
        if missing:
            raise ConfigurationError(f"Configurações de legendas ausentes: {missing}")
        return config

    def _validate_timeout(self, timeout):
        if timeout is None:
            return None
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Timeout inválido: {timeout}") from e
        if timeout <= 0:
            raise ConfigurationError(f"Timeout deve ser positivo: {timeout}")
        return timeout

    @property
    def export_basename(self) -> str:
        return self.EXPORT_BASENAME_TEMPLATE.format(year=self.YEAR)
