"""
Módulo de exceções customizadas para o AutoLegendas.

Este arquivo define a hierarquia de exceções do projeto. Cada etapa do
pipeline (validação, download, extração, agregação, exportação) possui um
erro próprio, permitindo que a aplicação cliente trate cada falha de forma
granular.

A exceção base `AutoLegendasError` garante que todos os erros gerados pela
biblioteca possam ser capturados de forma unificada, se necessário.
"""


class AutoLegendasError(Exception):
    """Exceção base para todos os erros do AutoLegendas."""
    pass


class ConfigurationError(AutoLegendasError):
    """Erro relacionado a configurações ou parâmetros inválidos."""
    pass


class InvalidEncodingError(ConfigurationError):
    """Codificação de texto desconhecida."""
    pass


class InvalidFederationUnitError(ConfigurationError):
    """Sigla de Unidade da Federação desconhecida."""
    pass


class UnsupportedYearError(ConfigurationError):
    """
    Ano sem arquivo de legendas para eleições municipais.

    `informational` é verdadeiro apenas para anos de eleição conhecidos que o
    TSE não publica neste formato; nesse caso o pipeline devolve um resultado
    informativo em vez de propagar o erro.
    """

    def __init__(self, year, message=None, informational=False):
        self.year = year
        self.informational = informational
        super().__init__(message or f"Ano não disponível: {year}")


class DownloadError(AutoLegendasError):
    """Erro durante o download do arquivo compactado."""
    pass


class ExtractionError(AutoLegendasError):
    """Arquivo baixado inválido ou descompactação incompleta."""
    pass


class ProcessingError(AutoLegendasError):
    """Erro durante a leitura ou agregação dos dados."""
    pass


class MissingFederationUnitFileError(ProcessingError):
    """UF solicitada explicitamente sem arquivo correspondente."""

    def __init__(self, federation_unit, directory=None):
        self.federation_unit = federation_unit
        self.directory = directory
        super().__init__(
            f"Arquivo da UF '{federation_unit}' não encontrado em {directory}"
        )


class SchemaMismatchError(ProcessingError):
    """Layout das colunas diferente do esperado."""
    pass


class ExportError(AutoLegendasError):
    """Falha ao gravar os arquivos exportados."""
    pass
