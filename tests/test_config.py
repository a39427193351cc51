import pytest
from pydantic import ValidationError

from authenta.utils.config import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("STORE_PATH", "MAX_DOCUMENT_BYTES", "MIN_MASTER_PASSWORD_LENGTH", "LOG_LEVEL"):
        monkeypatch.delenv(f"AUTHENTA_{name}", raising=False)
    settings = Settings(_env_file=None)
    assert settings.INVENTIONS_COLLECTION == "inventions"
    assert settings.VAULT_ITEMS_COLLECTION == "vault_items"
    assert settings.MAX_DOCUMENT_BYTES == 1_048_576
    assert settings.MIN_MASTER_PASSWORD_LENGTH == 4


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("AUTHENTA_STORE_PATH", str(tmp_path / "s.json"))
    monkeypatch.setenv("authenta_log_level", " debug ")
    settings = get_settings()
    assert settings.STORE_PATH == str(tmp_path / "s.json")
    assert settings.LOG_LEVEL == "DEBUG"
    assert get_settings() is settings


@pytest.mark.parametrize("name", ["MAX_DOCUMENT_BYTES", "MIN_MASTER_PASSWORD_LENGTH"])
def test_limits_must_be_positive(monkeypatch, name):
    monkeypatch.setenv(f"AUTHENTA_{name}", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
