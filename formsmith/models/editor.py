from typing import Any, Literal

from pydantic import BaseModel, field_validator

from formsmith.models.questions import Question, check_unique_ids

EditableField = Literal["type", "title", "required", "options", "placeholder"]


class EditorState(BaseModel):
    questions: list[Question]

    @field_validator("questions")
    @classmethod
    def unique_question_ids(cls, questions: list[Question]) -> list[Question]:
        return check_unique_ids(questions)


class UpdateQuestionFieldRequest(EditorState):
    field: EditableField
    value: Any = None


class UpdateOptionRequest(EditorState):
    value: str


class ReorderRequest(EditorState):
    source_index: int
    destination_index: int
