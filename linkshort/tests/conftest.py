import os

# Settings are read at import time; give the test run a base address and keep it off disk
os.environ.setdefault("BASE_URL", "https://short.ly")
os.environ.setdefault("STORE_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from linkshort.core.config import Settings
from linkshort.db import database
from linkshort.db.memory import InMemoryMappingStore
from linkshort.db.models import Base
from linkshort.db.repository import SQLMappingStore
from linkshort.main import create_app
from linkshort.services.codegen import CodeGenerator, RandomCodeGenerator


BASE_URL = "https://short.ly"


class StubCodeGenerator(CodeGenerator):
    """Hands out the given codes in order, then falls back to random ones."""

    def __init__(self, codes, length=7):
        super().__init__(length)
        self.codes = list(codes)
        self.calls = 0
        self._fallback = RandomCodeGenerator(length)

    def generate(self, long_url):
        self.calls += 1
        if self.codes:
            return self.codes.pop(0)
        return self._fallback.generate(long_url)


@pytest.fixture
def settings():
    return Settings(BASE_URL=BASE_URL, STORE_BACKEND="memory", REDIS_URL=None)


@pytest.fixture
def store():
    return InMemoryMappingStore()


@pytest.fixture
def sql_store():
    """SQLite in-memory store with a fresh schema for each test."""
    engine = database.build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    store = SQLMappingStore(database.build_session_factory(engine), engine=engine)
    try:
        yield store
    finally:
        Base.metadata.drop_all(bind=engine)
        store.close()


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    """Runs a test against every store backend."""
    if request.param == "memory":
        return InMemoryMappingStore()
    return request.getfixturevalue("sql_store")


@pytest.fixture
def make_client(settings, store):
    """Builds a test client around the shared in-memory store."""
    clients = []

    def _make(generator=None, **overrides):
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        client = TestClient(create_app(app_settings, store=store, generator=generator))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]
