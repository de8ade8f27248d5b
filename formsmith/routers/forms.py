from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from formsmith.auth import get_current_user
from formsmith.models.forms import (
    Form,
    FormResponse,
    FormSummary,
    PublishRequest,
    SaveFormRequest,
    ShareInfo,
)
from formsmith.services import forms as forms_service

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.get("")
def list_forms(user_id: str = Depends(get_current_user)) -> list[FormSummary]:
    return forms_service.list_forms(user_id)


@router.post("")
def save_form(request: SaveFormRequest, user_id: str = Depends(get_current_user)) -> Form:
    return forms_service.save_form(
        user_id, request.title, request.description, request.questions, request.publish,
    )


@router.get("/{form_id}")
def get_form(form_id: str, user_id: str = Depends(get_current_user)) -> Form:
    return forms_service.get_owned_form(user_id, form_id)


@router.put("/{form_id}")
def update_form(form_id: str, request: SaveFormRequest, user_id: str = Depends(get_current_user)) -> Form:
    return forms_service.update_form(
        user_id, form_id, request.title, request.description, request.questions, request.publish,
    )


@router.delete("/{form_id}")
def delete_form(form_id: str, user_id: str = Depends(get_current_user)) -> dict:
    forms_service.delete_form(user_id, form_id)
    return {"deleted": form_id}


@router.post("/{form_id}/publish")
def publish_form(form_id: str, request: PublishRequest, user_id: str = Depends(get_current_user)) -> Form:
    return forms_service.set_published(user_id, form_id, request.published)


@router.get("/{form_id}/responses")
def list_responses(form_id: str, user_id: str = Depends(get_current_user)) -> list[FormResponse]:
    return forms_service.list_responses(user_id, form_id)


@router.get("/{form_id}/responses/export")
def export_responses(form_id: str, user_id: str = Depends(get_current_user)) -> Response:
    filename, content = forms_service.export_responses(user_id, form_id)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.get("/{form_id}/share")
def share_form(form_id: str, user_id: str = Depends(get_current_user)) -> ShareInfo:
    return forms_service.share_info(user_id, form_id)
