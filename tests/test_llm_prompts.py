import pytest

from core.enums import MessageRole
from core.models import ChatMessage, SelectionContext
from grid.ranges import parse_range
from grid.store import new_sheet, set_cell
from llm.assistant import SpreadsheetAssistant, to_history
from llm.prompts import SpreadsheetAssistantPrompt, build_sheet_context


def make_sheet(rows):
    sheet = new_sheet("sheet1", "Trips")
    for row_number, row in enumerate(rows, start=1):
        for column, raw in zip("ABC", row):
            set_cell(sheet, f"{column}{row_number}", {"raw": raw})
    return sheet


def test_build_sheet_context_resolves_formulas():
    sheet = make_sheet([["City", "Miles"], ["Paris", "10"], ["Rome", "=2*5"]])
    context = build_sheet_context(
        SelectionContext(range=parse_range("A1:B2"), active_sheet=sheet)
    )
    assert context["sheet_name"] == "Trips"
    assert context["headers"] == ["City", "Miles"]
    assert context["rows"] == [["Paris", "10"], ["Rome", "10"]]
    assert context["total_rows"] == 2
    assert context["selection"] == "A1:B2"


def test_prompt_includes_table_and_trailer():
    rows = [["Name", "Score"]] + [[f"P{i}", str(i)] for i in range(25)]
    sheet = make_sheet(rows)
    prompt = SpreadsheetAssistantPrompt().build_prompt(
        build_sheet_context(SelectionContext(range=parse_range("B2:B5"), active_sheet=sheet))
    )
    assert "Headers: Name, Score" in prompt
    assert "Total rows: 25" in prompt
    assert "Current selection: B2:B5" in prompt
    assert "Name | Score" in prompt
    assert "P19 | 19" in prompt
    assert "P20 | 20" not in prompt
    assert "... and 5 more rows" in prompt


def test_prompt_for_empty_sheet():
    sheet = new_sheet("sheet1", "Sheet 1")
    prompt = SpreadsheetAssistantPrompt().build_prompt(
        build_sheet_context(SelectionContext(active_sheet=sheet))
    )
    assert "No spreadsheet data is currently available" in prompt


def test_to_history_keeps_conversation_roles():
    transcript = [
        ChatMessage(role=MessageRole.USER, content="hi"),
        ChatMessage(role=MessageRole.ERROR, content="oops"),
        ChatMessage(role=MessageRole.ASSISTANT, content="hello"),
        ChatMessage(role=MessageRole.SYSTEM, content="Imported 1 sheet(s)"),
    ]
    assert to_history(transcript) == [
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "hello"},
    ]


class FakeClient:
    def __init__(self):
        self.calls = []

    async def complete(self, prompt, system=None, history=None, **kwargs):
        self.calls.append({"prompt": prompt, "system": system, "history": history})
        return "answer"


@pytest.mark.asyncio
async def test_assistant_sends_sheet_as_system_prompt():
    client = FakeClient()
    sheet = make_sheet([["City", "Miles"], ["Paris", "10"]])
    transcript = [ChatMessage(role=MessageRole.USER, content="earlier")]

    reply = await SpreadsheetAssistant(client=client).complete(
        "Which city?", transcript, SelectionContext(active_sheet=sheet)
    )

    assert reply == "answer"
    call = client.calls[0]
    assert call["prompt"] == "Which city?"
    assert "Paris | 10" in call["system"]
    assert call["history"] == [{"role": "user", "content": "earlier"}]
