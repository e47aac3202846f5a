import pytest

from config import get_blob_storage_params, get_import_settings, get_postgres_connection_params


def test_postgres_connection_params(monkeypatch):
    monkeypatch.setenv("POSTGRES_HOST", "db.internal")
    monkeypatch.setenv("POSTGRES_DB", "greenbook")
    monkeypatch.setenv("POSTGRES_USER", "importer")
    monkeypatch.setenv("POSTGRES_PASSWORD", "secret")
    monkeypatch.delenv("POSTGRES_PORT", raising=False)
    monkeypatch.delenv("POSTGRES_SSLMODE", raising=False)

    params = get_postgres_connection_params()
    assert params["host"] == "db.internal"
    assert params["port"] == 5432
    assert params["dbname"] == "greenbook"
    assert params["sslmode"] == "prefer"


def test_postgres_connection_params_missing(monkeypatch):
    monkeypatch.delenv("POSTGRES_HOST", raising=False)
    with pytest.raises(KeyError):
        get_postgres_connection_params()


def test_blob_storage_params_from_env(monkeypatch):
    monkeypatch.setenv("AZURE_STORAGE_CONNECTION_STRING", "UseDevelopmentStorage=true")
    monkeypatch.setenv("AZURE_STORAGE_CONTAINER", "greenbook")

    params = get_blob_storage_params()
    assert params == {
        "connection_string": "UseDevelopmentStorage=true",
        "container_name": "greenbook",
    }


def test_blob_storage_params_from_secret_block(monkeypatch):
    loaded = []

    class DummySecret:
        @classmethod
        def load(cls, name):
            loaded.append(name)
            return cls()

        def get(self):
            return "from-block"

    monkeypatch.delenv("AZURE_STORAGE_CONNECTION_STRING", raising=False)
    monkeypatch.setenv("AZURE_STORAGE_SECRET_BLOCK", "greenbook-storage")
    monkeypatch.setenv("AZURE_STORAGE_CONTAINER", "greenbook")
    monkeypatch.setattr("config.Secret", DummySecret)

    params = get_blob_storage_params()
    assert params["connection_string"] == "from-block"
    assert loaded == ["greenbook-storage"]


def test_import_settings_defaults(monkeypatch):
    for var in ("IMPORT_BATCH_SIZE", "IMPORT_CRON", "IMPORT_TIMEZONE"):
        monkeypatch.delenv(var, raising=False)

    settings = get_import_settings()
    assert settings == {"batch_size": 10, "cron": "0 * * * *", "timezone": "UTC"}


def test_import_settings_rejects_bad_batch_size(monkeypatch):
    monkeypatch.setenv("IMPORT_BATCH_SIZE", "0")
    with pytest.raises(ValueError):
        get_import_settings()
