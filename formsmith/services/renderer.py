"""Map a stored form to input controls and collect/validate its answers."""

from typing import Callable

from formsmith.exceptions import ValidationError
from formsmith.models.forms import AnswerValue, Form, SubmissionPayload
from formsmith.models.questions import (
    Question,
    QuestionType,
    is_option_bearing,
    is_placeholder_bearing,
)
from formsmith.models.rendering import Control, ValidationResult

MISSING_REQUIRED_MESSAGE = "Please fill in all required fields"
INVALID_ANSWER_MESSAGE = "Some answers do not match their question type"


def _empty_answer(question: Question) -> AnswerValue:
    return [] if question.type == QuestionType.CHECKBOX else ""


def initial_answers(form: Form) -> list[AnswerValue]:
    return [_empty_answer(q) for q in form.questions]


def set_answer(answers: list[AnswerValue], index: int, value: AnswerValue) -> list[AnswerValue]:
    updated = list(answers)
    if 0 <= index < len(updated):
        updated[index] = value
    return updated


def toggle_option(answers: list[AnswerValue], index: int, option: str, checked: bool) -> list[AnswerValue]:
    """Checkbox helper: add or remove one option from the set at ``index``."""
    if not 0 <= index < len(answers):
        return list(answers)
    current = answers[index]
    selected = list(current) if isinstance(current, list) else []
    if checked and option not in selected:
        selected.append(option)
    elif not checked:
        selected = [o for o in selected if o != option]
    return set_answer(answers, index, selected)


def is_empty_answer(value: AnswerValue | None) -> bool:
    return value is None or value == "" or value == []


def _normalized(question: Question, value: AnswerValue | None) -> AnswerValue | None:
    """Coerce one answer to its question's shape, or None when it cannot hold that shape."""
    if value is None:
        return _empty_answer(question)
    if question.type == QuestionType.CHECKBOX:
        if isinstance(value, list) and all(isinstance(option, str) for option in value):
            return list(dict.fromkeys(value))
        return None
    return value if isinstance(value, str) else None


def _aligned(form: Form, answers: list[AnswerValue | None]) -> tuple[list[AnswerValue], list[int]]:
    """Pad/truncate answers to one position per question; gaps become empty values.

    Returns the aligned answers and the indices whose value had the wrong shape
    for its question (a list for a text question, a string for a checkbox).
    Those positions are reset to the empty value.
    """
    aligned = []
    invalid = []
    for index, question in enumerate(form.questions):
        value = _normalized(question, answers[index] if index < len(answers) else None)
        if value is None:
            invalid.append(index)
            value = _empty_answer(question)
        aligned.append(value)
    return aligned, invalid


def validate(form: Form, answers: list[AnswerValue | None]) -> ValidationResult:
    aligned, invalid = _aligned(form, answers)
    missing = [
        index
        for index, question in enumerate(form.questions)
        if question.required and is_empty_answer(aligned[index])
    ]
    if missing or invalid:
        return ValidationResult(
            ok=False,
            missing_required=bool(missing),
            missing_indices=missing,
            invalid_indices=invalid,
        )
    return ValidationResult(ok=True)


def submit(form: Form, answers: list[AnswerValue | None]) -> SubmissionPayload:
    result = validate(form, answers)
    if not result.ok:
        message = INVALID_ANSWER_MESSAGE if result.invalid_indices else MISSING_REQUIRED_MESSAGE
        raise ValidationError(message, result.missing_indices, result.invalid_indices)
    aligned, _ = _aligned(form, answers)
    return SubmissionPayload(form_id=form.id, answers=aligned)


# --- Rendering ---

def _text_input(input_type: str) -> Callable[[Question], dict]:
    return lambda question: {"widget": "input", "input_type": input_type}


CONTROL_BUILDERS: dict[QuestionType, Callable[[Question], dict]] = {
    QuestionType.SHORT_TEXT: _text_input("text"),
    QuestionType.NUMBER: _text_input("number"),
    QuestionType.EMAIL: _text_input("email"),
    QuestionType.DATE: _text_input("date"),
    QuestionType.LONG_TEXT: lambda question: {"widget": "textarea"},
    QuestionType.MULTIPLE_CHOICE: lambda question: {"widget": "radio"},
    QuestionType.CHECKBOX: lambda question: {"widget": "checkbox_group"},
    QuestionType.DROPDOWN: lambda question: {"widget": "select"},
}


def render_control(question: Question, index: int, value: AnswerValue) -> Control:
    qtype = QuestionType(question.type)
    fields = CONTROL_BUILDERS[qtype](question)
    if is_placeholder_bearing(qtype):
        fields["placeholder"] = question.placeholder or ""
    if is_option_bearing(qtype):
        fields["options"] = list(question.options or [])
    return Control(
        index=index,
        question_id=question.id,
        label=question.title,
        required=question.required,
        value=value,
        **fields,
    )


def render(form: Form, answers: list[AnswerValue | None] | None = None) -> list[Control]:
    aligned, _ = _aligned(form, answers or [])
    return [render_control(q, i, aligned[i]) for i, q in enumerate(form.questions)]
