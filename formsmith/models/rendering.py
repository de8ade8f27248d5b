from typing import Literal

from pydantic import BaseModel

from formsmith.models.forms import AnswerValue

Widget = Literal["input", "textarea", "radio", "checkbox_group", "select"]


class Control(BaseModel):
    """Input affordance for one question, bound to one answer position."""
    index: int
    question_id: str
    label: str
    required: bool
    widget: Widget
    input_type: str | None = None  # text, number, email, date for widget == "input"
    placeholder: str | None = None
    options: list[str] | None = None
    value: AnswerValue


class RenderedForm(BaseModel):
    form_id: str
    title: str
    description: str | None = None
    controls: list[Control]


class ValidationResult(BaseModel):
    ok: bool
    missing_required: bool = False
    missing_indices: list[int] = []
    invalid_indices: list[int] = []
