import pytest

from config import get_blob_storage_params, get_import_settings, get_postgres_connection_params


class FakeDatabase:
    """In-memory tables with a unique constraint on name."""

    def __init__(self):
        self.tables = {"Office": {}, "Department": {}}
        self.transactions = 0

    def upsert(self, conn, entity, records):
        table = self.tables[entity.table_name]
        for record in records:
            if record.name in table:
                table[record.name]["seen"] += 1
            else:
                table[record.name] = {"seen": 1}
        self.transactions += 1
        return len(records)

    def names(self, table_name):
        return set(self.tables[table_name])


class DummyConn:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def clear_config_cache():
    yield
    get_postgres_connection_params.cache_clear()
    get_blob_storage_params.cache_clear()
    get_import_settings.cache_clear()


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def write_csv(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
