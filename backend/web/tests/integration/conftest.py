import pytest

from web.tests.helpers.client import ADMIN_KEY, make_client


@pytest.fixture
def demo_client(tmp_path):
    return make_client(tmp_path)


@pytest.fixture
def db_client(tmp_path):
    with make_client(tmp_path, database_path=tmp_path / "daydle.db") as client:
        yield client


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
