"""
Testes unitários para o módulo de configuração.
"""
import pytest
from autolegendas.config import Config
from autolegendas.exceptions import ConfigurationError


# Fixtures
@pytest.fixture
def valid_legendas_config():
    return {
        'year': 2016,
        'federation_unit': 'SP',
        'transliterate': True,
        'source_encoding': 'latin1',
        'export': False,
    }


# Testes
def test_valid_config(valid_legendas_config):
    """Deve criar configuração válida com sucesso."""
    config = Config(valid_legendas_config)
    assert config.legendas_config == valid_legendas_config
    assert config.YEAR == 2016
    assert config.FEDERATION_UNIT == 'SP'
    assert config.TRANSLITERATE is True
    assert config.SOURCE_ENCODING == 'latin1'
    assert config.EXPORT is False


def test_defaults():
    """Deve aplicar os valores padrão da função pública."""
    config = Config({'year': 2012})
    assert config.FEDERATION_UNIT == 'all'
    assert config.TRANSLITERATE is False
    assert config.SOURCE_ENCODING == 'latin-1'
    assert config.EXPORT is False
    assert config.DOWNLOAD_DIR == './downloads'
    assert config.OUTPUT_DIR == '.'
    assert config.TIMEOUT == 30.0
    assert len(config.COLUMN_NAMES) == config.EXPECTED_COLUMN_COUNT == 18


def test_missing_year():
    """Deve levantar erro para config sem ano."""
    with pytest.raises(ConfigurationError) as exc_info:
        Config({'federation_unit': 'SP'})
    assert 'Configurações de legendas ausentes' in str(exc_info.value)


def test_config_not_dict():
    with pytest.raises(ConfigurationError):
        Config([2016])


@pytest.mark.parametrize('timeout', [0, -5, 'abc'])
def test_invalid_timeout(timeout):
    with pytest.raises(ConfigurationError):
        Config({'year': 2016, 'timeout': timeout})


def test_custom_constants_override():
    """Constantes customizadas devem sobrescrever as padrão."""
    config = Config({'year': 2016}, custom_constants={'SUPPORTED_YEARS': [2016, 2020]})
    assert config.SUPPORTED_YEARS == [2016, 2020]
    assert Config.DEFAULT_CONSTANTS['SUPPORTED_YEARS'] == [2008, 2012, 2016]


def test_export_basename():
    assert Config({'year': 2008}).export_basename == 'legend_local_2008'
