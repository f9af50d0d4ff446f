# Ajuste de ambiente para execução dos testes pytest
#
# Este arquivo garante que o diretório raiz do projeto esteja no sys.path
# para que o pacote 'autolegendas' seja encontrado corretamente durante os
# testes, e oferece fixtures para gerar arquivos sintéticos do TSE.

import io
import os
import sys
import zipfile
from unittest.mock import Mock

import pytest

# Adiciona a raiz do projeto ao sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


def _row(uf, year, index):
    return [
        "07/10/2016", "18:45:12", str(year), "1", f"ELEIÇÕES MUNICIPAIS {year}",
        uf, str(10000 + index), "SÃO JOSÉ", "11", "PREFEITO", "COLIGAÇÃO",
        "13", "PT", "PARTIDO DOS TRABALHADORES", "FRENTE POPULAR",
        str(500 + index), "PT / PC do B / PSB", str(index),
    ]


@pytest.fixture
def make_source_text():
    """Fábrica de conteúdo no layout do TSE (18 colunas entre aspas)."""
    def _make(uf, n_rows, year=2016, sep=";", n_columns=18):
        lines = []
        for i in range(n_rows):
            fields = _row(uf, year, i)[:n_columns]
            fields += [f"EXTRA{j}" for j in range(n_columns - len(fields))]
            lines.append(sep.join(f'"{field}"' for field in fields))
        return "\n".join(lines) + "\n"
    return _make


@pytest.fixture
def make_archive(make_source_text):
    """Fábrica de arquivos .zip em memória: {uf: n_linhas} -> bytes."""
    def _make(rows_by_uf, year=2016, encoding="latin-1"):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("LEIAME.pdf", b"%PDF-1.4")
            for uf, n_rows in rows_by_uf.items():
                content = make_source_text(uf, n_rows, year=year)
                zf.writestr(f"consulta_legendas_{year}_{uf}.txt", content.encode(encoding))
        return buffer.getvalue()
    return _make


@pytest.fixture
def make_response():
    """Fábrica de respostas HTTP simuladas em modo streaming."""
    def _make(content, content_length=None):
        response = Mock()
        response.raise_for_status = Mock()
        response.iter_content.return_value = [content[:10], content[10:]]
        length = len(content) if content_length is None else content_length
        response.headers = {"Content-Length": str(length)}
        return response
    return _make
