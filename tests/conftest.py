import pytest

from helpers import SMALL_FRAGMENTS, load_schema_fixture

from sourcing.fragments import InMemoryFragments
from sourcing.node_store import InMemoryNodeStore
from sourcing.schema import build_remote_schema
from sourcing.sourcing_config import create_sourcing_config


@pytest.fixture
def schema_data():
    return load_schema_fixture()


@pytest.fixture
def schema(schema_data):
    return build_remote_schema(schema_data)


@pytest.fixture
def fragments():
    return InMemoryFragments(SMALL_FRAGMENTS)


@pytest.fixture
def node_store():
    return InMemoryNodeStore()


@pytest.fixture
def make_config(fragments, tmp_path):
    def _make(executor, **kwargs):
        kwargs.setdefault("fragments", fragments)
        return create_sourcing_config(executor, str(tmp_path / "gql-fragments"), **kwargs)
    return _make
