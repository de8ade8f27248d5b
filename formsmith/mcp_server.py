from fastmcp import FastMCP
from pydantic import ValidationError as PydanticValidationError

from formsmith.exceptions import AuthenticationError, NotFoundError, StorageError, ValidationError
from formsmith.models.forms import SaveFormRequest
from formsmith.services import forms as forms_service
from formsmith.storage import get_store

mcp = FastMCP("Formsmith")

_HANDLED = (AuthenticationError, NotFoundError, StorageError, ValidationError)


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, AuthenticationError):
        return {"error": "auth_error", "message": str(e), "action": "Ask the user for a valid access token"}
    if isinstance(e, NotFoundError):
        return {"error": "not_found", "message": str(e)}
    if isinstance(e, ValidationError):
        return {
            "error": "validation_error",
            "message": str(e),
            "missing_indices": e.missing_indices,
            "invalid_indices": e.invalid_indices,
            "action": "Ask the user for the missing or mistyped answers and submit again",
        }
    if isinstance(e, StorageError):
        return {"error": "storage_error", "message": str(e), "action": "Retry once the backend is reachable"}
    return {"error": "unknown_error", "message": str(e)}


def _user(access_token: str) -> str:
    return get_store().resolve_user(access_token)


@mcp.tool
def forms_list(access_token: str) -> dict:
    """List the signed-in user's forms, newest first, with publish state and response counts."""
    try:
        forms = forms_service.list_forms(_user(access_token))
        return {"forms": [f.model_dump(mode="json") for f in forms], "count": len(forms)}
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_get(form_id: str, access_token: str) -> dict:
    """Get one of the user's forms including its ordered question list."""
    try:
        return forms_service.get_owned_form(_user(access_token), form_id).model_dump(mode="json")
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_create(
    title: str,
    access_token: str,
    description: str = "",
    questions: list[dict] | None = None,
    publish: bool = False,
) -> dict:
    """Create a form. Each question is a dict with id, type (short_text, long_text, multiple_choice,
    checkbox, dropdown, date, number, email), title, required, and optionally options or placeholder.
    Set publish=True to make it available for responses immediately."""
    try:
        request = SaveFormRequest.model_validate(
            {"title": title, "description": description, "questions": questions or [], "publish": publish}
        )
    except PydanticValidationError as e:
        return {"error": "invalid_question", "message": str(e)}
    try:
        form = forms_service.save_form(
            _user(access_token), request.title, request.description, request.questions, request.publish,
        )
        return form.model_dump(mode="json")
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_publish(form_id: str, access_token: str, published: bool = True) -> dict:
    """Publish (or unpublish with published=False) one of the user's forms."""
    try:
        return forms_service.set_published(_user(access_token), form_id, published).model_dump(mode="json")
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_responses(form_id: str, access_token: str) -> dict:
    """List responses to one of the user's forms, newest first. Answers are aligned with the questions."""
    try:
        responses = forms_service.list_responses(_user(access_token), form_id)
        return {"responses": [r.model_dump(mode="json") for r in responses], "count": len(responses)}
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_export_csv(form_id: str, access_token: str) -> dict:
    """Export a form's responses as CSV text (Submission Date column followed by one column per question)."""
    try:
        filename, content = forms_service.export_responses(_user(access_token), form_id)
        return {"filename": filename, "csv": content}
    except _HANDLED as e:
        return _handle_mcp_error(e)


@mcp.tool
def forms_submit(form_id: str, answers: list[str | list[str] | None]) -> dict:
    """Submit a response to a published form. Give one answer per question in order:
    a string, or a list of strings for checkbox questions. Use "" to skip an optional question."""
    try:
        return forms_service.submit_response(form_id, answers).model_dump(mode="json")
    except _HANDLED as e:
        return _handle_mcp_error(e)
