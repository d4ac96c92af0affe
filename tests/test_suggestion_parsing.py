from packages.advisors.parsing import parse_suggestions
from packages.core.schemas.suggestion import SuggestionAction


def test_parses_insert_modify_and_eliminate() -> None:
    text = (
        "Based on your query I recommend:\n"
        "<I, 243516578917, BEFORELUNCH, 15, 1, 1, DAY, Take with plenty of water>\n"
        "<M, 640557143200, , , 3, , , >\n"
        "<E, 789012345678>\n"
    )

    insert, modify, eliminate = parse_suggestions(text)

    assert insert.action is SuggestionAction.INSERT
    assert insert.product_id.code == "243516578917"
    assert insert.guideline_fields.to_fields() == [
        "BEFORELUNCH", "15", "1", "1", "DAY", "Take with plenty of water"
    ]
    assert modify.action is SuggestionAction.MODIFY
    assert modify.guideline_fields.to_fields() == ["", "", "3", "", "", ""]
    assert eliminate.action is SuggestionAction.ELIMINATE
    assert eliminate.guideline_fields is None


def test_full_action_names_and_commas_in_instructions() -> None:
    (suggestion,) = parse_suggestions(
        "<INSERT, 243516578917, AFTERMEALS, 5, 2, 12, HOUR, Shake well, then drink>"
    )
    assert suggestion.guideline_fields.instructions == "Shake well, then drink"


def test_modify_with_missing_trailing_fields_is_padded() -> None:
    (suggestion,) = parse_suggestions("<m, 640557143200, , , 3>")
    assert suggestion.guideline_fields.to_fields() == ["", "", "3", "", "", ""]


def test_malformed_items_are_skipped() -> None:
    text = (
        "<X, 243516578917>\n"
        "<I, 243516578917, BEFORELUNCH, 15>\n"
        "<E, 12-34>\n"
        "<M, 640557143200, , , , , , >\n"
        "<E, 789012345678>"
    )
    suggestions = parse_suggestions(text)
    assert [item.product_id.code for item in suggestions] == ["789012345678"]


def test_empty_or_plain_text_yields_nothing() -> None:
    assert parse_suggestions("") == []
    assert parse_suggestions(None) == []
    assert parse_suggestions("No changes recommended.") == []
