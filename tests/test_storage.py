import json
import threading
from unittest.mock import MagicMock

import pytest

from formsmith.exceptions import AuthenticationError, StorageError
from formsmith.models.forms import Form, FormResponse, SubmissionPayload
from formsmith.services import editor
from formsmith.storage import JsonFileStore, SupabaseStore, get_store
from tests.conftest import SAMPLE_QUESTIONS

FORM_ROW = {
    "id": "form123",
    "title": "Pizza survey",
    "description": "",
    "questions": [q.model_dump(mode="json") for q in SAMPLE_QUESTIONS],
    "published": False,
    "user_id": "user-1",
    "created_at": "2025-01-01T12:00:00+00:00",
    "updated_at": "2025-01-01T12:00:00+00:00",
}

RESPONSE_ROW = {
    "id": "resp1",
    "form_id": "form123",
    "answers": ["Alice", "", ["Cheese"]],
    "created_at": "2025-01-03T09:30:00+00:00",
}


def _payload(user_id="user-1", publish=False, title="Pizza survey"):
    return editor.serialize(title, "", SAMPLE_QUESTIONS, user_id, publish)


class TestJsonFileStore:
    def test_insert_and_get(self, store):
        created = store.insert_form(_payload())
        assert isinstance(created, Form)
        assert created.id
        assert created.created_at is not None
        fetched = store.get_form(created.id)
        assert fetched == created
        assert fetched.questions == SAMPLE_QUESTIONS

    def test_get_missing_returns_none(self, store):
        assert store.get_form("nope") is None

    def test_file_layout(self, store):
        created = store.insert_form(_payload())
        data = json.loads(store.path.read_text())
        assert data["forms"][created.id]["user_id"] == "user-1"
        assert data["forms"][created.id]["questions"][0]["type"] == "short_text"
        assert "options" not in data["forms"][created.id]["questions"][0]

    def test_list_forms_filters_by_owner(self, store):
        mine = store.insert_form(_payload())
        store.insert_form(_payload(user_id="someone-else"))
        assert [f.id for f in store.list_forms("user-1")] == [mine.id]

    def test_update_form(self, store):
        created = store.insert_form(_payload())
        updated = store.update_form(created.id, _payload(title="Renamed", publish=True))
        assert updated.title == "Renamed"
        assert updated.published is True
        assert updated.created_at == created.created_at

    def test_update_missing_raises(self, store):
        with pytest.raises(StorageError):
            store.update_form("nope", _payload())

    def test_set_published(self, store):
        created = store.insert_form(_payload())
        assert store.set_published(created.id, True).published is True
        assert store.get_form(created.id).published is True

    def test_responses(self, store):
        form = store.insert_form(_payload())
        first = store.insert_response(SubmissionPayload(form_id=form.id, answers=["A", "", ["Ham"]]))
        store.insert_response(SubmissionPayload(form_id="other", answers=[]))
        assert isinstance(first, FormResponse)
        assert store.count_responses(form.id) == 1
        assert store.list_responses(form.id)[0].answers == ["A", "", ["Ham"]]

    def test_delete_removes_responses(self, store):
        form = store.insert_form(_payload())
        store.insert_response(SubmissionPayload(form_id=form.id, answers=["A", "", []]))
        store.delete_form(form.id)
        assert store.get_form(form.id) is None
        assert store.count_responses(form.id) == 0

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json")
        with pytest.raises(StorageError):
            JsonFileStore(path).get_form("x")

    def test_write_leaves_no_temp_file(self, store):
        store.insert_form(_payload())
        assert [p.name for p in store.path.parent.iterdir()] == [store.path.name]

    def test_reads_never_see_partial_writes(self, store):
        form = store.insert_form(_payload())
        other = JsonFileStore(store.path)
        stop = threading.Event()
        errors = []

        def flip():
            published = False
            while not stop.is_set():
                published = not published
                store.set_published(form.id, published)

        writer = threading.Thread(target=flip)
        writer.start()
        try:
            for _ in range(300):
                for reader in (store, other):
                    try:
                        assert reader.get_form(form.id).id == form.id
                    except StorageError as e:
                        errors.append(e)
        finally:
            stop.set()
            writer.join()
        assert errors == []

    def test_resolve_user(self, store):
        assert store.resolve_user("user-1") == "user-1"
        with pytest.raises(AuthenticationError):
            store.resolve_user("  ")


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def supabase_store(mock_client):
    return SupabaseStore(mock_client)


class TestSupabaseStore:
    def test_insert_form(self, supabase_store, mock_client):
        mock_client.table().insert().execute.return_value = MagicMock(data=[FORM_ROW])
        form = supabase_store.insert_form(_payload())
        assert form.id == "form123"
        assert form.questions == SAMPLE_QUESTIONS
        mock_client.table.assert_called_with("forms")

    def test_insert_sends_form_payload(self, supabase_store, mock_client):
        mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock(data=[FORM_ROW])
        supabase_store.insert_form(_payload())
        sent = mock_client.table.return_value.insert.call_args[0][0]
        assert set(sent) == {"title", "description", "questions", "user_id", "published"}

    def test_get_form_missing(self, supabase_store, mock_client):
        mock_client.table().select().eq().execute.return_value = MagicMock(data=[])
        assert supabase_store.get_form("nope") is None

    def test_list_forms(self, supabase_store, mock_client):
        mock_client.table().select().eq().order().execute.return_value = MagicMock(data=[FORM_ROW])
        forms = supabase_store.list_forms("user-1")
        assert [f.id for f in forms] == ["form123"]

    def test_list_responses(self, supabase_store, mock_client):
        mock_client.table().select().eq().order().execute.return_value = MagicMock(data=[RESPONSE_ROW])
        responses = supabase_store.list_responses("form123")
        assert responses[0].answers == ["Alice", "", ["Cheese"]]

    def test_count_responses(self, supabase_store, mock_client):
        mock_client.table().select().eq().execute.return_value = MagicMock(count=7)
        assert supabase_store.count_responses("form123") == 7

    def test_backend_failure_wrapped(self, supabase_store, mock_client):
        mock_client.table().select().eq().execute.side_effect = RuntimeError("connection reset")
        with pytest.raises(StorageError):
            supabase_store.get_form("form123")

    def test_empty_insert_result_raises(self, supabase_store, mock_client):
        mock_client.table().insert().execute.return_value = MagicMock(data=[])
        with pytest.raises(StorageError):
            supabase_store.insert_response(SubmissionPayload(form_id="form123", answers=[]))

    def test_resolve_user(self, supabase_store, mock_client):
        mock_client.auth.get_user.return_value = MagicMock(user=MagicMock(id="user-1"))
        assert supabase_store.resolve_user("jwt") == "user-1"
        mock_client.auth.get_user.assert_called_once_with("jwt")

    def test_resolve_user_rejected(self, supabase_store, mock_client):
        mock_client.auth.get_user.side_effect = Exception("invalid JWT")
        with pytest.raises(AuthenticationError):
            supabase_store.resolve_user("bad")

    def test_resolve_user_without_user(self, supabase_store, mock_client):
        mock_client.auth.get_user.return_value = MagicMock(user=None)
        with pytest.raises(AuthenticationError):
            supabase_store.resolve_user("jwt")


class TestGetStore:
    @pytest.fixture(autouse=True)
    def clear_cache(self):
        get_store.cache_clear()
        yield
        get_store.cache_clear()

    def test_json_backend(self, mocker, tmp_path):
        settings = MagicMock(storage_backend="json", data_file=tmp_path / "d.json")
        mocker.patch("formsmith.storage.get_settings", return_value=settings)
        assert isinstance(get_store(), JsonFileStore)

    def test_supabase_backend(self, mocker):
        mocker.patch("formsmith.storage.get_settings", return_value=MagicMock(storage_backend="supabase"))
        mocker.patch("formsmith.storage.get_supabase_client", return_value=MagicMock())
        assert isinstance(get_store(), SupabaseStore)

    def test_unknown_backend(self, mocker):
        mocker.patch("formsmith.storage.get_settings", return_value=MagicMock(storage_backend="redis"))
        with pytest.raises(StorageError):
            get_store()
