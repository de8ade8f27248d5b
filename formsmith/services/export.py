from formsmith.models.forms import AnswerValue, Form, FormResponse

DATE_HEADER = "Submission Date"


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _header_cell(text: str) -> str:
    if any(ch in text for ch in (",", '"', "\n", "\r")):
        return _quote(text)
    return text


def _answer_cell(value: AnswerValue | None) -> str:
    if value is None:
        return _quote("")
    if isinstance(value, list):
        return _quote(", ".join(str(v) for v in value))
    return _quote(str(value))


def _date_cell(response: FormResponse) -> str:
    if response.created_at is None:
        return ""
    return response.created_at.date().isoformat()


def export_csv(form: Form, responses: list[FormResponse]) -> str:
    """Render responses as CSV: submission date, then one column per question.

    Answers are always quoted; positions past the end of a response's answer
    list (questions added after it was submitted) render as empty cells.
    """
    header = [DATE_HEADER] + [q.title for q in form.questions]
    lines = [",".join(_header_cell(cell) for cell in header)]
    for response in responses:
        cells = [_date_cell(response)]
        for index in range(len(form.questions)):
            value = response.answers[index] if index < len(response.answers) else None
            cells.append(_answer_cell(value))
        lines.append(",".join(cells))
    return "\n".join(lines)


def export_filename(form: Form) -> str:
    return f"{form.title}_responses.csv"
