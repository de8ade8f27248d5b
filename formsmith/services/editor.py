"""Form editor state: pure operations over an ordered list of questions.

Every operation returns a new list and leaves its input untouched. Unknown
question ids and out-of-range indices are silent no-ops, since they cannot
arise from the editor UI but may arrive in a malformed request.
"""

from typing import Any, get_args

from formsmith.models.editor import EditableField
from formsmith.models.forms import FormPayload
from formsmith.models.questions import (
    Question,
    QuestionType,
    create_default,
    new_question_id,
)

EDITABLE_FIELDS = get_args(EditableField)


def initial_questions() -> list[Question]:
    """Questions a brand-new form starts with."""
    return [
        Question(
            id=new_question_id(),
            type=QuestionType.SHORT_TEXT,
            title="What is your name?",
            required=True,
            placeholder="Enter your name",
        )
    ]


def add_question(current: list[Question]) -> list[Question]:
    return [*current, create_default(QuestionType.SHORT_TEXT)]


def update_question_field(current: list[Question], question_id: str, field: str, value: Any) -> list[Question]:
    """Replace one field on the matching question.

    Switching ``type`` keeps options/placeholder that no longer apply; they are
    just not rendered. Raises pydantic's ValidationError for a value the field
    cannot hold (e.g. an unknown type).
    """
    if field not in EDITABLE_FIELDS:
        return list(current)
    updated = []
    for question in current:
        if question.id == question_id:
            question = Question.model_validate({**question.model_dump(), field: value})
        updated.append(question)
    return updated


def remove_question(current: list[Question], question_id: str) -> list[Question]:
    return [q for q in current if q.id != question_id]


def _map_options(current: list[Question], question_id: str, change) -> list[Question]:
    updated = []
    for question in current:
        if question.id == question_id:
            options = change(list(question.options or []))
            if options is not None:
                question = question.model_copy(update={"options": options})
        updated.append(question)
    return updated


def add_option(current: list[Question], question_id: str) -> list[Question]:
    """Append a default option label; numbering follows position, not existing labels."""
    return _map_options(current, question_id, lambda opts: [*opts, f"Option {len(opts) + 1}"])


def update_option(current: list[Question], question_id: str, index: int, value: str) -> list[Question]:
    def change(opts: list[str]) -> list[str] | None:
        if not 0 <= index < len(opts):
            return None
        opts[index] = value
        return opts

    return _map_options(current, question_id, change)


def remove_option(current: list[Question], question_id: str, index: int) -> list[Question]:
    def change(opts: list[str]) -> list[str] | None:
        if not 0 <= index < len(opts):
            return None
        del opts[index]
        return opts

    return _map_options(current, question_id, change)


def reorder(current: list[Question], source_index: int, destination_index: int) -> list[Question]:
    """Move the question at source_index to destination_index (stable move, not swap)."""
    items = list(current)
    size = len(items)
    if source_index == destination_index:
        return items
    if not (0 <= source_index < size and 0 <= destination_index < size):
        return items
    moved = items.pop(source_index)
    items.insert(destination_index, moved)
    return items


def serialize(
    title: str,
    description: str,
    questions: list[Question],
    owner_id: str,
    publish: bool,
) -> FormPayload:
    """Package editor state for the store. Publishing is not gated on content."""
    return FormPayload(
        title=title,
        description=description,
        questions=list(questions),
        user_id=owner_id,
        published=publish,
    )


def parse_questions(raw: list[dict] | None) -> list[Question]:
    """Rebuild the question list from its stored form."""
    return [Question.model_validate(item) for item in raw or []]
