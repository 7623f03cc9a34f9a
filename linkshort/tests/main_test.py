from fastapi.testclient import TestClient

from conftest import BASE_URL
from linkshort.core.config import Settings
from linkshort.db.repository import SQLMappingStore
from linkshort.main import create_app


def test_sqlite_backed_app(tmp_path):
    settings = Settings(
        BASE_URL=BASE_URL,
        STORE_BACKEND="sql",
        DATABASE_URL=f"sqlite:///{tmp_path / 'url.db'}",
    )
    app = create_app(settings)
    assert isinstance(app.state.store, SQLMappingStore)

    with TestClient(app) as client:
        code = client.post("/", json={"url": "https://example.com/persisted"}).json()["code"]
        response = client.get(f"/{code}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/persisted"

    # mappings survive a restart
    restarted = create_app(settings)
    assert restarted.state.store.get(code).long_url == "https://example.com/persisted"
    restarted.state.store.close()


def test_counter_strategy_app(tmp_path):
    settings = Settings(
        BASE_URL=BASE_URL,
        STORE_BACKEND="sql",
        DATABASE_URL=f"sqlite:///{tmp_path / 'url.db'}",
        CODE_STRATEGY="counter",
    )
    with TestClient(create_app(settings)) as client:
        first = client.post("/", json={"url": "https://example.com/1"}).json()["code"]
        second = client.post("/", json={"url": "https://example.com/2"}).json()["code"]
    assert (first, second) == ("0000000", "0000001")

    # the counter resumes after the stored mappings
    with TestClient(create_app(settings)) as client:
        third = client.post("/", json={"url": "https://example.com/3"}).json()["code"]
    assert third == "0000002"


def test_old_links_resolve_after_code_length_change(tmp_path):
    settings = Settings(
        BASE_URL=BASE_URL,
        STORE_BACKEND="sql",
        DATABASE_URL=f"sqlite:///{tmp_path / 'url.db'}",
    )
    with TestClient(create_app(settings)) as client:
        code = client.post("/", json={"url": "https://example.com/issued-earlier"}).json()["code"]
    assert len(code) == 7

    wider = settings.model_copy(update={"SHORT_CODE_LENGTH": 8})
    with TestClient(create_app(wider)) as client:
        response = client.get(f"/{code}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/issued-earlier"

        new_code = client.post("/", json={"url": "https://example.com/issued-later"}).json()["code"]
        assert len(new_code) == 8
