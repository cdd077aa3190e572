import pytest
from app.config import AppConfig, load_config

FIELDS = ("INCLUDE_BUILTINS", "MAX_EXPRESSION_LENGTH", "LOG_LEVEL", "CONSTANTS")


@pytest.fixture
def clean_env(monkeypatch):
    for name in FIELDS:
        monkeypatch.delenv("CALCEXPR_" + name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    cfg = load_config()
    assert cfg.include_builtins is True
    assert cfg.max_expression_length == 4096
    assert cfg.log_level == "INFO"
    assert cfg.constants == {}

def test_from_environment(clean_env):
    clean_env.setenv("CALCEXPR_INCLUDE_BUILTINS", "false")
    clean_env.setenv("CALCEXPR_MAX_EXPRESSION_LENGTH", "10")
    clean_env.setenv("CALCEXPR_LOG_LEVEL", "debug")
    clean_env.setenv("CALCEXPR_CONSTANTS", '{"g": 9.81, "c": 3}')
    clean_env.setenv("MAX_EXPRESSION_LENGTH", "1")
    cfg = load_config()
    assert cfg.include_builtins is False
    assert cfg.max_expression_length == 10
    assert cfg.log_level == "debug"
    assert cfg.constants == {"g": 9.81, "c": 3.0}

def test_keyword_arguments_override_environment(clean_env):
    clean_env.setenv("CALCEXPR_MAX_EXPRESSION_LENGTH", "10")
    assert AppConfig(max_expression_length=20).max_expression_length == 20

@pytest.mark.parametrize("name,value", [
    ("CONSTANTS", "g=9.81"),
    ("CONSTANTS", '{"g": "heavy"}'),
    ("MAX_EXPRESSION_LENGTH", "many"),
    ("MAX_EXPRESSION_LENGTH", "0"),
])
def test_invalid(clean_env, name, value):
    clean_env.setenv("CALCEXPR_" + name, value)
    with pytest.raises(ValueError):
        load_config()
