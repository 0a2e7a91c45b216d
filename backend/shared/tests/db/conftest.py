import pytest

from shared.db.connection import Database


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "daydle.db")
    database.connect()
    yield database
    database.close()
