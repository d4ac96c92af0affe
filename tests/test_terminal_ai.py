import pytest

from packages.core.errors import (
    BadPromptError,
    DecisionMakingAIError,
    IncorrectParametersError,
    ProceduralError,
)
from packages.core.schemas.suggestion import SuggestionAction
from tests.doubles import StubDecisionMakingAI, editing_terminal


def test_consult_and_ask_ai_stores_response() -> None:
    ai = StubDecisionMakingAI(response="Consider lowering the dose.")
    terminal = editing_terminal(ai=ai)

    terminal.consult_ai()
    answer = terminal.ask_ai("Is the current dose adequate?")

    assert answer == "Consider lowering the dose."
    assert terminal.last_ai_response == answer
    assert ai.prompts == ["Is the current dose adequate?"]
    assert terminal.session.phase() == "ai_ready"


def test_ai_initialization_failure_is_surfaced() -> None:
    terminal = editing_terminal(ai=StubDecisionMakingAI(fail_init=True))

    with pytest.raises(DecisionMakingAIError):
        terminal.consult_ai()
    assert not terminal.session.ai_initialized


def test_bad_prompt_is_surfaced_and_keeps_previous_response() -> None:
    ai = StubDecisionMakingAI(response="first answer")
    terminal = editing_terminal(ai=ai)
    terminal.consult_ai()
    terminal.ask_ai("first question")

    ai.bad_prompt = True
    with pytest.raises(BadPromptError):
        terminal.ask_ai("???")
    assert terminal.last_ai_response == "first answer"


@pytest.mark.parametrize("prompt", [None, "", "   "])
def test_empty_prompt_is_rejected(prompt) -> None:
    ai = StubDecisionMakingAI()
    terminal = editing_terminal(ai=ai)
    terminal.consult_ai()

    with pytest.raises(IncorrectParametersError):
        terminal.ask_ai(prompt)
    assert ai.prompts == []


def test_extract_suggestions_requires_a_response() -> None:
    terminal = editing_terminal()
    terminal.consult_ai()
    with pytest.raises(ProceduralError):
        terminal.extract_suggestions()


def test_extract_suggestions_does_not_touch_prescription() -> None:
    ai = StubDecisionMakingAI()
    terminal = editing_terminal(ai=ai)
    terminal.consult_ai()
    terminal.ask_ai("pain management")

    suggestions = terminal.extract_suggestions()

    assert [item.action for item in suggestions] == [
        SuggestionAction.INSERT,
        SuggestionAction.MODIFY,
        SuggestionAction.ELIMINATE,
    ]
    assert ai.parsed == [ai.response]
    assert terminal.prescription.lines == {}


def test_insert_suggestion_goes_through_the_line_builder() -> None:
    terminal = editing_terminal()
    terminal.consult_ai()
    terminal.ask_ai("pain management")
    insert = terminal.extract_suggestions()[0]

    terminal.add_line(insert.product_id, insert.guideline_fields.to_fields())

    assert terminal.prescription.has_line(insert.product_id)
