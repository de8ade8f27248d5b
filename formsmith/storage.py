"""Data access for forms and responses.

``FormStore`` is the interface the services talk to. ``JsonFileStore`` keeps
everything in a local JSON file for development and tests; ``SupabaseStore``
talks to the hosted ``forms`` and ``responses`` tables and validates access
tokens against Supabase auth.
"""

import json
import logging
import os
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path

from formsmith.config import get_settings
from formsmith.exceptions import AuthenticationError, StorageError
from formsmith.models.forms import Form, FormPayload, FormResponse, SubmissionPayload

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FormStore(ABC):
    name: str = "abstract"

    @abstractmethod
    def resolve_user(self, token: str) -> str:
        """Return the user id that owns ``token``; raise AuthenticationError otherwise."""

    @abstractmethod
    def insert_form(self, payload: FormPayload) -> Form: ...

    @abstractmethod
    def update_form(self, form_id: str, payload: FormPayload) -> Form: ...

    @abstractmethod
    def set_published(self, form_id: str, published: bool) -> Form: ...

    @abstractmethod
    def delete_form(self, form_id: str) -> None: ...

    @abstractmethod
    def get_form(self, form_id: str) -> Form | None: ...

    @abstractmethod
    def list_forms(self, user_id: str) -> list[Form]:
        """Forms owned by ``user_id``, newest first."""

    @abstractmethod
    def insert_response(self, payload: SubmissionPayload) -> FormResponse: ...

    @abstractmethod
    def list_responses(self, form_id: str) -> list[FormResponse]:
        """Responses to ``form_id``, newest first."""

    @abstractmethod
    def count_responses(self, form_id: str) -> int: ...


class JsonFileStore(FormStore):
    """Reads/writes forms and responses to a local JSON file.

    Access tokens are taken to be the user id itself; there is no password
    check. Use the Supabase store for anything beyond local development.
    """

    name = "json"

    def __init__(self, path: Path):
        self.path = path
        # Reentrant: writers hold it across their own read-modify-write.
        self._lock = threading.RLock()

    def _read_all(self) -> dict:
        try:
            with self._lock:
                if not self.path.exists():
                    return {"forms": {}, "responses": []}
                data = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        data.setdefault("forms", {})
        data.setdefault("responses", [])
        return data

    def _write_all(self, data: dict) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=2))
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def resolve_user(self, token: str) -> str:
        if not token.strip():
            raise AuthenticationError("Empty access token.")
        return token.strip()

    def insert_form(self, payload: FormPayload) -> Form:
        with self._lock:
            data = self._read_all()
            now = _now()
            row = {"id": str(uuid.uuid4()), **payload.model_dump(mode="json"), "created_at": now, "updated_at": now}
            data["forms"][row["id"]] = row
            self._write_all(data)
        return Form.model_validate(row)

    def update_form(self, form_id: str, payload: FormPayload) -> Form:
        with self._lock:
            data = self._read_all()
            row = data["forms"].get(form_id)
            if row is None:
                raise StorageError(f"Form {form_id} does not exist.")
            row.update(payload.model_dump(mode="json"))
            row["updated_at"] = _now()
            self._write_all(data)
        return Form.model_validate(row)

    def set_published(self, form_id: str, published: bool) -> Form:
        with self._lock:
            data = self._read_all()
            row = data["forms"].get(form_id)
            if row is None:
                raise StorageError(f"Form {form_id} does not exist.")
            row["published"] = published
            row["updated_at"] = _now()
            self._write_all(data)
        return Form.model_validate(row)

    def delete_form(self, form_id: str) -> None:
        with self._lock:
            data = self._read_all()
            data["forms"].pop(form_id, None)
            data["responses"] = [r for r in data["responses"] if r["form_id"] != form_id]
            self._write_all(data)

    def get_form(self, form_id: str) -> Form | None:
        row = self._read_all()["forms"].get(form_id)
        return Form.model_validate(row) if row else None

    def list_forms(self, user_id: str) -> list[Form]:
        rows = [r for r in self._read_all()["forms"].values() if r["user_id"] == user_id]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return [Form.model_validate(r) for r in rows]

    def insert_response(self, payload: SubmissionPayload) -> FormResponse:
        with self._lock:
            data = self._read_all()
            row = {"id": str(uuid.uuid4()), **payload.model_dump(mode="json"), "created_at": _now()}
            data["responses"].append(row)
            self._write_all(data)
        return FormResponse.model_validate(row)

    def list_responses(self, form_id: str) -> list[FormResponse]:
        rows = [r for r in self._read_all()["responses"] if r["form_id"] == form_id]
        rows.sort(key=lambda r: r["created_at"], reverse=True)
        return [FormResponse.model_validate(r) for r in rows]

    def count_responses(self, form_id: str) -> int:
        return sum(1 for r in self._read_all()["responses"] if r["form_id"] == form_id)


class SupabaseStore(FormStore):
    """Forms and responses in Supabase tables, users from Supabase auth."""

    name = "supabase"

    def __init__(self, client):
        self.client = client

    def _execute(self, action: str, query):
        try:
            return query.execute()
        except Exception as e:
            logger.exception("Supabase %s failed", action)
            raise StorageError(f"Supabase {action} failed: {e}") from e

    def _single(self, action: str, result) -> dict:
        if not result.data:
            raise StorageError(f"Supabase {action} returned no rows.")
        return result.data[0]

    def resolve_user(self, token: str) -> str:
        try:
            result = self.client.auth.get_user(token)
        except Exception as e:
            raise AuthenticationError(f"Invalid or expired access token: {e}") from e
        if result is None or result.user is None:
            raise AuthenticationError("Invalid or expired access token.")
        return str(result.user.id)

    def insert_form(self, payload: FormPayload) -> Form:
        result = self._execute("insert form", self.client.table("forms").insert(payload.model_dump(mode="json")))
        return Form.model_validate(self._single("insert form", result))

    def update_form(self, form_id: str, payload: FormPayload) -> Form:
        row = {**payload.model_dump(mode="json"), "updated_at": _now()}
        result = self._execute("update form", self.client.table("forms").update(row).eq("id", form_id))
        return Form.model_validate(self._single("update form", result))

    def set_published(self, form_id: str, published: bool) -> Form:
        row = {"published": published, "updated_at": _now()}
        result = self._execute("publish form", self.client.table("forms").update(row).eq("id", form_id))
        return Form.model_validate(self._single("publish form", result))

    def delete_form(self, form_id: str) -> None:
        self._execute("delete responses", self.client.table("responses").delete().eq("form_id", form_id))
        self._execute("delete form", self.client.table("forms").delete().eq("id", form_id))

    def get_form(self, form_id: str) -> Form | None:
        result = self._execute("fetch form", self.client.table("forms").select("*").eq("id", form_id))
        return Form.model_validate(result.data[0]) if result.data else None

    def list_forms(self, user_id: str) -> list[Form]:
        query = self.client.table("forms").select("*").eq("user_id", user_id).order("created_at", desc=True)
        result = self._execute("list forms", query)
        return [Form.model_validate(row) for row in result.data or []]

    def insert_response(self, payload: SubmissionPayload) -> FormResponse:
        result = self._execute(
            "insert response", self.client.table("responses").insert(payload.model_dump(mode="json")),
        )
        return FormResponse.model_validate(self._single("insert response", result))

    def list_responses(self, form_id: str) -> list[FormResponse]:
        query = self.client.table("responses").select("*").eq("form_id", form_id).order("created_at", desc=True)
        result = self._execute("list responses", query)
        return [FormResponse.model_validate(row) for row in result.data or []]

    def count_responses(self, form_id: str) -> int:
        query = self.client.table("responses").select("id", count="exact").eq("form_id", form_id)
        result = self._execute("count responses", query)
        return result.count or 0


_supabase_client = None


def get_supabase_client():
    """Get or create the Supabase client (singleton)."""
    global _supabase_client
    if _supabase_client is None:
        from supabase import create_client

        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            raise StorageError("SUPABASE_URL and SUPABASE_KEY must be set for the supabase storage backend.")
        _supabase_client = create_client(settings.supabase_url, settings.supabase_key)
    return _supabase_client


@lru_cache
def get_store() -> FormStore:
    settings = get_settings()
    if settings.storage_backend == "supabase":
        return SupabaseStore(get_supabase_client())
    if settings.storage_backend == "json":
        return JsonFileStore(settings.data_file)
    raise StorageError(f"Unknown storage backend: {settings.storage_backend}")
