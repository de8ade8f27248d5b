from datetime import datetime

from pydantic import BaseModel, field_validator

from formsmith.models.questions import Question, check_unique_ids

# Answer at one position: str for text-like types, list[str] for checkbox
AnswerValue = str | list[str]


class FormPayload(BaseModel):
    """Editor state handed to the store on save/publish."""
    title: str
    description: str
    questions: list[Question]
    user_id: str
    published: bool

    @field_validator("questions")
    @classmethod
    def unique_question_ids(cls, questions: list[Question]) -> list[Question]:
        return check_unique_ids(questions)


class Form(BaseModel):
    id: str
    title: str
    description: str | None = None
    questions: list[Question] = []
    published: bool = False
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FormSummary(BaseModel):
    id: str
    title: str
    description: str | None = None
    published: bool
    question_count: int
    responses_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SubmissionPayload(BaseModel):
    """Respondent answers handed to the store on submit."""
    form_id: str
    answers: list[AnswerValue]


class FormResponse(BaseModel):
    id: str
    form_id: str
    answers: list[AnswerValue | None] = []
    created_at: datetime | None = None


class ShareInfo(BaseModel):
    form_id: str
    url: str
    embed_code: str


# --- Requests ---

class SaveFormRequest(BaseModel):
    title: str = "Untitled Form"
    description: str = ""
    questions: list[Question] = []
    publish: bool = False

    @field_validator("questions")
    @classmethod
    def unique_question_ids(cls, questions: list[Question]) -> list[Question]:
        return check_unique_ids(questions)


class PublishRequest(BaseModel):
    published: bool = True


class SubmitResponseRequest(BaseModel):
    answers: list[AnswerValue | None]
