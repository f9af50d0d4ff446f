# autolegendas/core/downloader.py

"""
downloader.py: Módulo de Obtenção de Dados do AutoLegendas.

Este módulo é responsável por baixar e descompactar o arquivo de legendas
publicado pelo TSE para um ano de eleição municipal.

**Classe `Downloader`:**

- **Inicialização:** Recebe um objeto `Config` com a URL base, o template do
  nome do arquivo, o timeout e o tamanho dos blocos de download.

- **Transformações/Processos:**
    - **Construção de URL:** A URL depende apenas do ano
      (`consulta_legendas_<ANO>.zip`).
    - **Requisição HTTP:** Usa uma sessão `requests` em modo streaming,
      gravando o conteúdo em um arquivo `.zip` temporário dentro do diretório
      de trabalho e exibindo o progresso com `tqdm`. Downloads truncados
      (menos bytes que o `Content-Length`) são tratados como falha; a
      verificação é ignorada quando a resposta vem com `Content-Encoding`,
      pois `iter_content` entrega os bytes já descomprimidos.
    - **Descompactação:** Extrai todas as entradas para um diretório novo
      com o nome do ano e remove o arquivo temporário.

- **Saídas:**
    - `fetch_archive` devolve o `Path` do diretório extraído.
    - `fetched_archive` é um gerenciador de contexto que entrega o mesmo
      diretório e o remove na saída, com ou sem erro.
"""

import logging
import os
import shutil
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

import requests
from tqdm import tqdm

from ..config import Config
from ..exceptions import DownloadError, ExtractionError


class Downloader:
    """
    Classe responsável por obter e descompactar o arquivo de legendas do TSE.
    """

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self._session = requests.Session()
        self.logger.info("Downloader inicializado.")

    def build_url(self, year: int) -> str:
        """
        Constrói a URL do arquivo de legendas para o ano informado.
        """
        file_name = self.config.ARCHIVE_NAME_TEMPLATE.format(year=year)
        url = f"{self.config.BASE_URL.rstrip('/')}/{file_name}"
        self.logger.debug(f"URL construída: {url}")
        return url

    def extraction_path(self, year: int, download_dir: Union[str, Path]) -> Path:
        return Path(download_dir) / str(year)

    def fetch_archive(
        self,
        year: int,
        download_dir: Union[str, Path],
        timeout: Optional[float] = None,
    ) -> Path:
        """
        Baixa o arquivo do ano e o descompacta em `download_dir/<ano>`.

        Se a extração falhar, o diretório parcialmente criado é removido antes
        de propagar o erro.
        """
        download_dir = Path(download_dir)
        extraction_path = self.extraction_path(year, download_dir)
        self._ensure_fresh(extraction_path)
        download_dir.mkdir(parents=True, exist_ok=True)

        archive_path = self._download_to_tempfile(year, download_dir, timeout)
        try:
            self._unzip_file(archive_path, extraction_path)
        except ExtractionError:
            remove_tree(extraction_path, self.logger)
            raise
        finally:
            self.logger.debug(f"Removendo arquivo temporário: {archive_path}")
            archive_path.unlink(missing_ok=True)
        return extraction_path

    @contextmanager
    def fetched_archive(
        self,
        year: int,
        download_dir: Union[str, Path],
        timeout: Optional[float] = None,
    ) -> Iterator[Path]:
        """
        Versão com escopo de `fetch_archive`: o diretório extraído é removido
        em qualquer caminho de saída.
        """
        download_dir = Path(download_dir)
        extraction_path = self.extraction_path(year, download_dir)
        self._ensure_fresh(extraction_path)
        created_download_dir = not download_dir.exists()
        try:
            yield self.fetch_archive(year, download_dir, timeout=timeout)
        finally:
            self.logger.info(f"Limpando diretório de trabalho: {extraction_path}")
            remove_tree(extraction_path, self.logger)
            if created_download_dir and download_dir.is_dir() and not any(download_dir.iterdir()):
                download_dir.rmdir()

    def _ensure_fresh(self, extraction_path: Path):
        if extraction_path.exists():
            raise ExtractionError(
                f"O diretório de extração já existe e não será sobrescrito: {extraction_path}"
            )

    def _download_to_tempfile(self, year: int, download_dir: Path, timeout: Optional[float]) -> Path:
        url = self.build_url(year)
        timeout = timeout if timeout is not None else self.config.TIMEOUT
        fd, tmp_name = tempfile.mkstemp(prefix=f"legendas_{year}_", suffix=".zip", dir=download_dir)
        os.close(fd)
        archive_path = Path(tmp_name)
        response = None
        try:
            self.logger.info(f"Realizando download de: {url}")
            response = self._session.get(url, stream=True, timeout=timeout)
            response.raise_for_status()

            expected = response.headers.get("Content-Length")
            expected = int(expected) if expected and str(expected).isdigit() else None
            written = 0
            with open(archive_path, "wb") as f, tqdm(
                total=expected,
                unit="B",
                unit_scale=True,
                desc=f"consulta_legendas_{year}",
                disable=not self.config.SHOW_PROGRESS,
            ) as pbar:
                for chunk in response.iter_content(chunk_size=self.config.DOWNLOAD_CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    written += len(chunk)
                    pbar.update(len(chunk))

            encoded = response.headers.get("Content-Encoding", "identity").lower() != "identity"
            if expected is not None and not encoded and written != expected:
                raise DownloadError(
                    f"Download incompleto de {url}: {written} de {expected} bytes."
                )
            self.logger.info(f"Download de {url} concluído com sucesso ({written} bytes).")
            return archive_path

        except requests.RequestException as e:
            self.logger.error(f"Falha no download de {url}: {e}", exc_info=True)
            archive_path.unlink(missing_ok=True)
            raise DownloadError(f"Erro no download: {str(e)}") from e
        except BaseException:
            archive_path.unlink(missing_ok=True)
            raise
        finally:
            if response is not None:
                response.close()

    def _unzip_file(self, zip_path: Path, extraction_path: Path) -> Path:
        self.logger.info(f"Descompactando '{zip_path.name}' para: {extraction_path}")
        try:
            with zipfile.ZipFile(zip_path, "r") as zip_ref:
                bad_entry = zip_ref.testzip()
                if bad_entry is not None:
                    raise ExtractionError(f"Entrada corrompida no arquivo compactado: {bad_entry}")
                members = [info for info in zip_ref.infolist() if not info.is_dir()]
                if not members:
                    raise ExtractionError(f"O arquivo '{zip_path.name}' está vazio.")
                extraction_path.mkdir(parents=True)
                zip_ref.extractall(extraction_path)
        except zipfile.BadZipFile as e:
            raise ExtractionError(
                f"O arquivo '{zip_path.name}' não é um zip válido ou está corrompido."
            ) from e
        except OSError as e:
            raise ExtractionError(f"Falha ao descompactar '{zip_path.name}': {e}") from e

        missing = [m.filename for m in members if not (extraction_path / m.filename).is_file()]
        if missing:
            raise ExtractionError(f"Descompactação incompleta, entradas ausentes: {missing}")
        self.logger.info(f"Arquivo descompactado com sucesso em {extraction_path} ({len(members)} arquivos)")
        return extraction_path

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.debug("Fechando sessão HTTP do Downloader.")
        self._session.close()


def remove_tree(path: Path, logger: logging.Logger = None):
    """Remove um diretório, registrando (sem interromper) falhas de limpeza."""
    logger = logger or logging.getLogger(__name__)
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning(f"Não foi possível remover {path}: {e}")
