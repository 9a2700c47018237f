import pytest
from pydantic import ValidationError

from invoice_engine.app.config import PACKAGED_TEMPLATE_DIR, EngineConfig


_ENV_VARS = (
    "ENGINE_DEFAULT_PRESET",
    "ENGINE_ENABLE_DELIVERY_GATE",
    "ENGINE_MAX_LINE_ITEMS",
    "TEMPLATE_DIR",
    "ENGINE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_from_empty_environment():
    config = EngineConfig.from_env()

    assert config.DEFAULT_PRESET == "moderne"
    assert config.ENABLE_DELIVERY_GATE is False
    assert config.MAX_LINE_ITEMS == 500
    assert config.TEMPLATE_DIR == PACKAGED_TEMPLATE_DIR
    assert config.LOG_LEVEL == "INFO"
    assert (config.TEMPLATE_DIR / "preview.html.jinja").is_file()


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ENGINE_DEFAULT_PRESET", "compact")
    monkeypatch.setenv("ENGINE_ENABLE_DELIVERY_GATE", "yes")
    monkeypatch.setenv("ENGINE_MAX_LINE_ITEMS", "50")
    monkeypatch.setenv("TEMPLATE_DIR", str(tmp_path))
    monkeypatch.setenv("ENGINE_LOG_LEVEL", "debug")

    config = EngineConfig.from_env()

    assert config.DEFAULT_PRESET == "compact"
    assert config.ENABLE_DELIVERY_GATE is True
    assert config.MAX_LINE_ITEMS == 50
    assert config.TEMPLATE_DIR == tmp_path
    assert config.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize("raw", ["0", "false", "off", "no"])
def test_gate_flag_false_spellings(monkeypatch, raw):
    monkeypatch.setenv("ENGINE_ENABLE_DELIVERY_GATE", raw)

    assert EngineConfig.from_env().ENABLE_DELIVERY_GATE is False


def test_unknown_default_preset_is_rejected(monkeypatch):
    monkeypatch.setenv("ENGINE_DEFAULT_PRESET", "inexistant")

    with pytest.raises(ValidationError):
        EngineConfig.from_env()


def test_missing_template_dir_is_rejected(tmp_path):
    with pytest.raises(ValidationError):
        EngineConfig(TEMPLATE_DIR=tmp_path / "absent")


def test_line_item_limit_must_be_positive():
    with pytest.raises(ValidationError):
        EngineConfig(MAX_LINE_ITEMS=0)


def test_unsupported_log_level_is_rejected():
    with pytest.raises(ValidationError):
        EngineConfig(LOG_LEVEL="verbose")


def test_config_is_immutable():
    config = EngineConfig()

    with pytest.raises(ValidationError):
        config.MAX_LINE_ITEMS = 10
