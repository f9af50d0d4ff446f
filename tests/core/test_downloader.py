"""
Testes unitários para o módulo de download.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from autolegendas.config import Config
from autolegendas.core.downloader import Downloader
from autolegendas.exceptions import DownloadError, ExtractionError


# Fixtures
@pytest.fixture
def config():
    """Fixture com configuração básica, sem barra de progresso."""
    return Config({"year": 2016, "timeout": 5}, custom_constants={"SHOW_PROGRESS": False})


@pytest.fixture
def mock_session():
    with patch("autolegendas.core.downloader.requests.Session") as session_cls:
        session = Mock()
        session_cls.return_value = session
        yield session


# Testes de URL
def test_build_url(config):
    """A URL depende apenas do ano."""
    url = Downloader(config).build_url(2016)
    assert url == (
        "https://cdn.tse.jus.br/estatistica/sead/odsele/consulta_legendas/"
        "consulta_legendas_2016.zip"
    )


def test_build_url_custom_base():
    config = Config({"year": 2012}, custom_constants={"BASE_URL": "http://localhost/legendas/"})
    assert Downloader(config).build_url(2012) == "http://localhost/legendas/consulta_legendas_2012.zip"


# Testes de Funcionalidade
def test_fetch_archive_extracts_and_removes_zip(config, mock_session, make_archive, make_response, tmp_path):
    """Deve extrair o conteúdo em <dir>/<ano> e apagar o arquivo temporário."""
    mock_session.get.return_value = make_response(make_archive({"AC": 3, "SP": 5}))

    extraction_path = Downloader(config).fetch_archive(2016, tmp_path)

    assert extraction_path == tmp_path / "2016"
    names = sorted(p.name for p in extraction_path.iterdir())
    assert names == ["LEIAME.pdf", "consulta_legendas_2016_AC.txt", "consulta_legendas_2016_SP.txt"]
    assert list(tmp_path.glob("*.zip")) == []
    mock_session.get.assert_called_once_with(
        "https://cdn.tse.jus.br/estatistica/sead/odsele/consulta_legendas/consulta_legendas_2016.zip",
        stream=True,
        timeout=5.0,
    )


def test_caller_timeout_overrides_config(config, mock_session, make_archive, make_response, tmp_path):
    mock_session.get.return_value = make_response(make_archive({"AC": 1}))
    Downloader(config).fetch_archive(2016, tmp_path, timeout=1.5)
    assert mock_session.get.call_args.kwargs["timeout"] == 1.5


def test_download_network_error(config, mock_session, tmp_path):
    """Deve tratar erro de rede corretamente."""
    mock_session.get.side_effect = requests.ConnectionError("Network error")

    with pytest.raises(DownloadError, match="Erro no download: Network error"):
        Downloader(config).fetch_archive(2016, tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_download_http_error(config, mock_session, make_response, tmp_path):
    response = make_response(b"")
    response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
    mock_session.get.return_value = response

    with pytest.raises(DownloadError, match="404"):
        Downloader(config).fetch_archive(2016, tmp_path)
    assert list(tmp_path.iterdir()) == []
    response.close.assert_called_once()


def test_truncated_download(config, mock_session, make_archive, make_response, tmp_path):
    """Menos bytes que o Content-Length indica download incompleto."""
    content = make_archive({"AC": 3})
    mock_session.get.return_value = make_response(content, content_length=len(content) + 100)

    with pytest.raises(DownloadError, match="incompleto"):
        Downloader(config).fetch_archive(2016, tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_compressed_response_skips_length_check(config, mock_session, make_archive, make_response, tmp_path):
    """Com Content-Encoding, o Content-Length se refere aos bytes comprimidos."""
    content = make_archive({"AC": 3})
    response = make_response(content, content_length=len(content) // 2)
    response.headers["Content-Encoding"] = "gzip"
    mock_session.get.return_value = response

    extraction_path = Downloader(config).fetch_archive(2016, tmp_path)
    assert (extraction_path / "consulta_legendas_2016_AC.txt").is_file()


def test_invalid_archive(config, mock_session, make_response, tmp_path):
    """Conteúdo que não é zip deve levantar ExtractionError sem deixar resíduos."""
    mock_session.get.return_value = make_response(b"<html>not a zip</html>")

    with pytest.raises(ExtractionError, match="não é um zip válido"):
        Downloader(config).fetch_archive(2016, tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_existing_extraction_dir_is_not_overwritten(config, mock_session, tmp_path):
    existing = tmp_path / "2016"
    existing.mkdir()
    (existing / "keep.txt").write_text("dados do usuário")

    with pytest.raises(ExtractionError, match="já existe"):
        Downloader(config).fetch_archive(2016, tmp_path)

    mock_session.get.assert_not_called()
    assert (existing / "keep.txt").read_text() == "dados do usuário"


def test_fetched_archive_cleans_up_on_success(config, mock_session, make_archive, make_response, tmp_path):
    mock_session.get.return_value = make_response(make_archive({"AC": 3}))
    work_dir = tmp_path / "work"

    with Downloader(config).fetched_archive(2016, work_dir) as extraction_path:
        assert (extraction_path / "consulta_legendas_2016_AC.txt").is_file()

    assert not extraction_path.exists()
    assert not work_dir.exists()


def test_fetched_archive_cleans_up_on_error(config, mock_session, make_archive, make_response, tmp_path):
    """O diretório extraído deve ser removido mesmo se o bloco falhar."""
    mock_session.get.return_value = make_response(make_archive({"AC": 3}))

    with pytest.raises(RuntimeError):
        with Downloader(config).fetched_archive(2016, tmp_path) as extraction_path:
            raise RuntimeError("falha na agregação")

    assert not extraction_path.exists()
    assert tmp_path.exists()


def test_context_manager_closes_session(config, mock_session):
    """Deve funcionar corretamente como context manager."""
    with Downloader(config) as d:
        assert isinstance(d, Downloader)
    mock_session.close.assert_called_once()
