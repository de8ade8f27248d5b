import logging

from formsmith.config import get_settings
from formsmith.exceptions import NotFoundError
from formsmith.models.forms import (
    AnswerValue,
    Form,
    FormResponse,
    FormSummary,
    ShareInfo,
)
from formsmith.models.questions import Question
from formsmith.models.rendering import RenderedForm
from formsmith.services import editor, export, renderer
from formsmith.storage import FormStore, get_store

logger = logging.getLogger(__name__)


def _store(store: FormStore | None) -> FormStore:
    return store if store is not None else get_store()


def _summary(form: Form, responses_count: int) -> FormSummary:
    return FormSummary(
        id=form.id,
        title=form.title,
        description=form.description,
        published=form.published,
        question_count=len(form.questions),
        responses_count=responses_count,
        created_at=form.created_at,
        updated_at=form.updated_at,
    )


def save_form(
    user_id: str,
    title: str,
    description: str,
    questions: list[Question],
    publish: bool = False,
    store: FormStore | None = None,
) -> Form:
    """Store a new form as a draft, or published when ``publish`` is set."""
    payload = editor.serialize(title, description, questions, user_id, publish)
    form = _store(store).insert_form(payload)
    logger.info("Saved form %s for user %s (published=%s)", form.id, user_id, form.published)
    return form


def get_owned_form(user_id: str, form_id: str, store: FormStore | None = None) -> Form:
    form = _store(store).get_form(form_id)
    if form is None or form.user_id != user_id:
        raise NotFoundError(f"Form {form_id} not found.")
    return form


def update_form(
    user_id: str,
    form_id: str,
    title: str,
    description: str,
    questions: list[Question],
    publish: bool = False,
    store: FormStore | None = None,
) -> Form:
    store = _store(store)
    get_owned_form(user_id, form_id, store=store)
    payload = editor.serialize(title, description, questions, user_id, publish)
    form = store.update_form(form_id, payload)
    logger.info("Updated form %s (published=%s)", form_id, form.published)
    return form


def set_published(user_id: str, form_id: str, published: bool, store: FormStore | None = None) -> Form:
    store = _store(store)
    get_owned_form(user_id, form_id, store=store)
    form = store.set_published(form_id, published)
    logger.info("Form %s %s", form_id, "published" if published else "unpublished")
    return form


def delete_form(user_id: str, form_id: str, store: FormStore | None = None) -> None:
    store = _store(store)
    get_owned_form(user_id, form_id, store=store)
    store.delete_form(form_id)
    logger.info("Deleted form %s", form_id)


def list_forms(user_id: str, store: FormStore | None = None) -> list[FormSummary]:
    """Dashboard listing: the user's forms, newest first, with response counts."""
    store = _store(store)
    return [_summary(form, store.count_responses(form.id)) for form in store.list_forms(user_id)]


def get_public_form(form_id: str, store: FormStore | None = None) -> Form:
    form = _store(store).get_form(form_id)
    if form is None or not form.published:
        raise NotFoundError(f"Form {form_id} not found.")
    return form


def render_public_form(form_id: str, store: FormStore | None = None) -> RenderedForm:
    form = get_public_form(form_id, store=store)
    return RenderedForm(
        form_id=form.id,
        title=form.title,
        description=form.description,
        controls=renderer.render(form, renderer.initial_answers(form)),
    )


def submit_response(form_id: str, answers: list[AnswerValue | None], store: FormStore | None = None) -> FormResponse:
    """Validate answers against the published form and store them."""
    store = _store(store)
    form = get_public_form(form_id, store=store)
    payload = renderer.submit(form, answers)
    response = store.insert_response(payload)
    logger.info("Recorded response %s for form %s", response.id, form_id)
    return response


def list_responses(user_id: str, form_id: str, store: FormStore | None = None) -> list[FormResponse]:
    store = _store(store)
    get_owned_form(user_id, form_id, store=store)
    return store.list_responses(form_id)


def export_responses(user_id: str, form_id: str, store: FormStore | None = None) -> tuple[str, str]:
    """Return (filename, csv_text) for the form's responses."""
    store = _store(store)
    form = get_owned_form(user_id, form_id, store=store)
    responses = store.list_responses(form_id)
    return export.export_filename(form), export.export_csv(form, responses)


def share_info(user_id: str, form_id: str, store: FormStore | None = None) -> ShareInfo:
    get_owned_form(user_id, form_id, store=store)
    url = f"{get_settings().public_base_url.rstrip('/')}/form/{form_id}"
    embed = f'<iframe src="{url}" width="100%" height="500" frameborder="0"></iframe>'
    return ShareInfo(form_id=form_id, url=url, embed_code=embed)
