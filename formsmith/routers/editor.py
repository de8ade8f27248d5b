from fastapi import APIRouter, HTTPException
from pydantic import ValidationError as PydanticValidationError

from formsmith.models.editor import (
    EditorState,
    ReorderRequest,
    UpdateOptionRequest,
    UpdateQuestionFieldRequest,
)
from formsmith.services import editor as editor_service

router = APIRouter(prefix="/api/editor", tags=["editor"])


@router.post("/new")
def new_form() -> EditorState:
    return EditorState(questions=editor_service.initial_questions())


@router.post("/questions")
def add_question(request: EditorState) -> EditorState:
    return EditorState(questions=editor_service.add_question(request.questions))


@router.patch("/questions/{question_id}")
def update_question_field(question_id: str, request: UpdateQuestionFieldRequest) -> EditorState:
    try:
        questions = editor_service.update_question_field(
            request.questions, question_id, request.field, request.value,
        )
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid value for {request.field}: {e.errors()[0]['msg']}") from e
    return EditorState(questions=questions)


@router.post("/questions/{question_id}/remove")
def remove_question(question_id: str, request: EditorState) -> EditorState:
    return EditorState(questions=editor_service.remove_question(request.questions, question_id))


@router.post("/questions/{question_id}/options")
def add_option(question_id: str, request: EditorState) -> EditorState:
    return EditorState(questions=editor_service.add_option(request.questions, question_id))


@router.patch("/questions/{question_id}/options/{index}")
def update_option(question_id: str, index: int, request: UpdateOptionRequest) -> EditorState:
    return EditorState(
        questions=editor_service.update_option(request.questions, question_id, index, request.value),
    )


@router.post("/questions/{question_id}/options/{index}/remove")
def remove_option(question_id: str, index: int, request: EditorState) -> EditorState:
    return EditorState(questions=editor_service.remove_option(request.questions, question_id, index))


@router.post("/reorder")
def reorder(request: ReorderRequest) -> EditorState:
    return EditorState(
        questions=editor_service.reorder(request.questions, request.source_index, request.destination_index),
    )
