import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from galaxery.core.errors import PersistenceFailure, translate_storage_errors
from galaxery.services import tag_store

def storage_down(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))

class TestTranslateStorageErrors:
    def test_operational_error_becomes_persistence_failure(self):
        wrapped = translate_storage_errors(storage_down)
        with pytest.raises(PersistenceFailure) as exc_info:
            wrapped()
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_other_errors_pass_through(self):
        @translate_storage_errors
        def duplicate():
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(IntegrityError):
            duplicate()

    def test_return_value(self):
        assert translate_storage_errors(lambda x: x * 2)(21) == 42

class TestHttpMapping:
    def test_storage_failure_is_503(self, client, monkeypatch):
        monkeypatch.setattr(tag_store, "_ranked_tags", storage_down)
        response = client.get("/api/tags/popular")
        assert response.status_code == 503
        assert response.json() == {"detail": "Storage is unavailable"}

    def test_autocomplete_storage_failure_is_503(self, client, monkeypatch):
        monkeypatch.setattr(tag_store, "_ranked_tags", storage_down)
        assert client.get("/api/tags/autocomplete", params={"q": "ca"}).status_code == 503

    def test_ping(self, client):
        response = client.get("/ping")
        assert response.status_code == 200
        assert response.text == "ok"
