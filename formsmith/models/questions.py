import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_serializer


class QuestionType(str, Enum):
    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    DATE = "date"
    NUMBER = "number"
    EMAIL = "email"


QUESTION_TYPE_LABELS = {
    QuestionType.SHORT_TEXT: "Short Text",
    QuestionType.LONG_TEXT: "Long Text",
    QuestionType.MULTIPLE_CHOICE: "Multiple Choice",
    QuestionType.CHECKBOX: "Checkbox",
    QuestionType.DROPDOWN: "Dropdown",
    QuestionType.DATE: "Date",
    QuestionType.NUMBER: "Number",
    QuestionType.EMAIL: "Email",
}

OPTION_BEARING_TYPES = frozenset({
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.CHECKBOX,
    QuestionType.DROPDOWN,
})

PLACEHOLDER_BEARING_TYPES = frozenset({
    QuestionType.SHORT_TEXT,
    QuestionType.LONG_TEXT,
    QuestionType.NUMBER,
    QuestionType.EMAIL,
})

DEFAULT_QUESTION_TITLE = "New Question"
DEFAULT_PLACEHOLDER = "Enter your answer"


class Question(BaseModel):
    """One field of a form. Stored as-is inside the form's ``questions`` list."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: str
    type: QuestionType = QuestionType.SHORT_TEXT
    title: str = DEFAULT_QUESTION_TITLE
    required: bool = False
    options: list[str] | None = None  # multiple_choice, checkbox, dropdown
    placeholder: str | None = None  # short_text, long_text, number, email

    @model_serializer(mode="wrap")
    def drop_absent_optionals(self, handler):
        # options/placeholder are optional on the wire; omit them rather than send null
        data = handler(self)
        for key in ("options", "placeholder"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


def new_question_id() -> str:
    """Generate a fresh question id; ids are never recycled."""
    return f"q{uuid.uuid4().hex}"


def is_option_bearing(question_type: QuestionType | str) -> bool:
    return QuestionType(question_type) in OPTION_BEARING_TYPES


def is_placeholder_bearing(question_type: QuestionType | str) -> bool:
    return QuestionType(question_type) in PLACEHOLDER_BEARING_TYPES


def create_default(question_type: QuestionType | str = QuestionType.SHORT_TEXT) -> Question:
    """Build a fresh question with defaults appropriate to its type."""
    qtype = QuestionType(question_type)
    question = Question(id=new_question_id(), type=qtype)
    if is_option_bearing(qtype):
        question.options = ["Option 1"]
    if is_placeholder_bearing(qtype):
        question.placeholder = DEFAULT_PLACEHOLDER
    return question


def check_unique_ids(questions: list[Question]) -> list[Question]:
    """Reject a question list where two questions share an id."""
    seen = set()
    for question in questions:
        if question.id in seen:
            raise ValueError(f"Duplicate question id: {question.id}")
        seen.add(question.id)
    return questions
