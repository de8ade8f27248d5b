from fastapi import APIRouter

from formsmith.models.forms import Form, FormResponse, SubmitResponseRequest
from formsmith.models.rendering import RenderedForm
from formsmith.services import forms as forms_service

router = APIRouter(prefix="/api/public/forms", tags=["public"])


@router.get("/{form_id}")
def get_form(form_id: str) -> Form:
    return forms_service.get_public_form(form_id)


@router.get("/{form_id}/render")
def render_form(form_id: str) -> RenderedForm:
    return forms_service.render_public_form(form_id)


@router.post("/{form_id}/responses")
def submit_response(form_id: str, request: SubmitResponseRequest) -> FormResponse:
    return forms_service.submit_response(form_id, request.answers)
