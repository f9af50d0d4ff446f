# autolegendas/core/processor.py

"""
processor.py: Módulo de Agregação dos Dados do AutoLegendas.

Este módulo transforma o diretório descompactado (um arquivo de texto
delimitado por UF) em uma única tabela com os nomes de colunas padronizados.

**Classe `Processor`:**

- **Inicialização:** Recebe um objeto `Config` com a expressão regular que
  identifica os arquivos por UF, os separadores aceitos, o número esperado
  de colunas e os nomes canônicos.

- **Transformações/Processos:**
    - **Localização dos arquivos:** Procura recursivamente arquivos
      `..._<ANO>_<UF>.txt|csv` e os agrupa por UF.
    - **Leitura:** Detecta o separador (`;` ou `,`) pela primeira linha e lê
      todos os campos como texto, na codificação de origem.
    - **Concatenação:** Empilha as linhas na ordem das UFs solicitadas, sem
      remover duplicatas.
    - **Renomeação:** A renomeação é posicional; por isso o número de colunas
      é conferido em cada arquivo e novamente antes de renomear.

- **Saídas:**
    - O método `aggregate` retorna um `pd.DataFrame` com 18 colunas.
"""

import csv
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ..config import Config
from ..exceptions import (
    MissingFederationUnitFileError,
    ProcessingError,
    SchemaMismatchError,
)


class Processor:
    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._file_regex = re.compile(self.config.SOURCE_FILE_REGEX, re.IGNORECASE)
        self.logger.info("Processador inicializado.")

    def find_source_files(
        self, directory: Union[str, Path], year: Optional[int] = None
    ) -> Dict[str, List[Path]]:
        """Agrupa por sigla de UF os arquivos de legendas encontrados em `directory`."""
        directory = Path(directory)
        files: Dict[str, List[Path]] = {}
        for path in sorted(directory.rglob("*")):
            if not path.is_file():
                continue
            if path.suffix.lower() not in self.config.SOURCE_FILE_EXTENSIONS:
                self.logger.debug(f"Ignorando arquivo com extensão não suportada: {path.name}")
                continue
            match = self._file_regex.search(path.stem)
            if not match:
                self.logger.debug(f"Ignorando arquivo fora do padrão: {path.name}")
                continue
            if year is not None and int(match.group("year")) != int(year):
                self.logger.debug(f"Ignorando arquivo de outro ano: {path.name}")
                continue
            files.setdefault(match.group("uf").upper(), []).append(path)
        self.logger.debug(f"Arquivos por UF: { {uf: [p.name for p in ps] for uf, ps in files.items()} }")
        return files

    def _detect_separator(self, path: Path, encoding: str) -> str:
        with open(path, "r", encoding=encoding, newline="") as f:
            first_line = f.readline()
        expected_delimiters = self.config.EXPECTED_COLUMN_COUNT - 1
        for sep in self.config.CANDIDATE_SEPARATORS:
            fields = next(csv.reader([first_line], delimiter=sep), [])
            if len(fields) - 1 >= expected_delimiters:
                return sep
        return self.config.CANDIDATE_SEPARATORS[0]

    def _check_row_lengths(self, path: Path, sep: str, encoding: str):
        expected = self.config.EXPECTED_COLUMN_COUNT
        with open(path, "r", encoding=encoding, newline="") as f:
            reader = csv.reader(f, delimiter=sep)
            for row in reader:
                if not row:
                    continue
                if len(row) != expected:
                    raise SchemaMismatchError(
                        f"O arquivo '{path.name}' possui {len(row)} colunas na linha {reader.line_num};"
                        f" esperado: {expected}."
                    )

    def read_source_file(self, path: Union[str, Path], encoding: str) -> pd.DataFrame:
        """Lê um arquivo de UF como texto, sem cabeçalho."""
        path = Path(path)
        try:
            sep = self._detect_separator(path, encoding)
            self._check_row_lengths(path, sep, encoding)
            self.logger.debug(f"Lendo '{path.name}' (separador '{sep}', codificação '{encoding}')")
            df = pd.read_csv(
                path,
                sep=sep,
                header=None,
                dtype=str,
                encoding=encoding,
                keep_default_na=False,
            )
        except pd.errors.EmptyDataError:
            self.logger.warning(f"Arquivo vazio: {path.name}")
            return pd.DataFrame(columns=range(self.config.EXPECTED_COLUMN_COUNT), dtype=str)
        except pd.errors.ParserError as e:
            raise SchemaMismatchError(f"Layout inconsistente em '{path.name}': {e}") from e
        except UnicodeDecodeError as e:
            raise ProcessingError(
                f"Não foi possível ler '{path.name}' com a codificação '{encoding}': {e}"
            ) from e

        if df.shape[1] != self.config.EXPECTED_COLUMN_COUNT:
            raise SchemaMismatchError(
                f"O arquivo '{path.name}' possui {df.shape[1]} colunas;"
                f" esperado: {self.config.EXPECTED_COLUMN_COUNT}."
            )
        self.logger.info(f"Arquivo '{path.name}' lido: {len(df)} linhas.")
        return df

    def _rename_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        names = self.config.COLUMN_NAMES
        if df.shape[1] != len(names):
            raise SchemaMismatchError(
                f"A tabela agregada possui {df.shape[1]} colunas; esperado: {len(names)}."
            )
        df.columns = list(names)
        return df

    def _check_federation_units(self, df: pd.DataFrame, federation_units: Sequence[str]):
        column = self.config.FEDERATION_UNIT_COLUMN
        found = set(df[column].fillna("").astype(str).str.strip().str.upper().unique())
        unexpected = sorted(found - set(federation_units))
        if unexpected:
            raise SchemaMismatchError(
                f"Coluna {column} contém UFs fora do filtro solicitado: {unexpected}."
                " Verifique a ordem das colunas do arquivo de origem."
            )

    def aggregate(
        self,
        directory: Union[str, Path],
        federation_units: Sequence[str],
        encoding: str = "latin-1",
        year: Optional[int] = None,
        skip_missing: bool = False,
    ) -> pd.DataFrame:
        """
        Concatena os arquivos das UFs solicitadas e aplica os nomes canônicos.

        Args:
            directory: Diretório com os arquivos descompactados.
            federation_units: Siglas das UFs, já validadas, na ordem desejada.
            encoding: Codificação dos arquivos de origem.
            year: Se informado, apenas arquivos deste ano são considerados.
            skip_missing: Ignora UFs sem arquivo (usado com o sentinela "all");
                caso contrário levanta `MissingFederationUnitFileError`.
        """
        self.logger.info(f"Agregando arquivos de {directory} para {len(federation_units)} UF(s).")
        source_files = self.find_source_files(directory, year)

        frames = []
        for uf in federation_units:
            paths = source_files.get(uf)
            if not paths:
                if skip_missing:
                    self.logger.debug(f"Nenhum arquivo para a UF {uf}. Pulando.")
                    continue
                raise MissingFederationUnitFileError(uf, directory)
            for path in paths:
                frames.append(self.read_source_file(path, encoding))

        if not frames:
            raise ProcessingError(f"Nenhum arquivo de legendas encontrado em {directory}")

        df = pd.concat(frames, ignore_index=True)
        df = self._rename_columns(df)
        self._check_federation_units(df, federation_units)
        self.logger.info(f"Agregação concluída: {len(df)} linhas, {df.shape[1]} colunas.")
        return df
