"""Tests for the note tools exposed to the chat model."""

import pytest

from src.modules.chat.tools import (
    TOOL_DEFINITIONS,
    TOOL_NAMES,
    execute_tool,
    parse_arguments,
)
from tests.factories import NoteFactory


def test_tool_names_match_definitions():
    assert TOOL_NAMES == {"create_note", "list_notes", "search_notes"}
    for tool in TOOL_DEFINITIONS:
        assert tool["function"]["parameters"]["additionalProperties"] is False


@pytest.mark.parametrize(
    "arguments,expected",
    [
        (None, {}),
        ("", {}),
        ('{"query": "milk"}', {"query": "milk"}),
        ({"query": "milk"}, {"query": "milk"}),
    ],
)
def test_parse_arguments(arguments, expected):
    assert parse_arguments(arguments) == expected


@pytest.mark.parametrize("arguments", ["[1, 2]", "{not json"])
def test_parse_arguments_rejects_non_objects(arguments):
    with pytest.raises(ValueError):
        parse_arguments(arguments)


@pytest.mark.asyncio
async def test_unknown_tool(db_session, test_user):
    result = await execute_tool(db_session, "drop_tables", "{}", test_user.id)

    assert result == {"error": "Unknown tool: drop_tables"}


@pytest.mark.asyncio
async def test_invalid_json_arguments(db_session, test_user):
    result = await execute_tool(db_session, "search_notes", "{oops", test_user.id)

    assert result["error"].startswith("Invalid arguments")


@pytest.mark.asyncio
async def test_create_note_requires_title_and_content(db_session, test_user):
    result = await execute_tool(
        db_session, "create_note", {"title": "Only a title"}, test_user.id
    )

    assert result == {"error": "Both 'title' and 'content' are required"}


@pytest.mark.asyncio
async def test_search_requires_query(db_session, test_user):
    result = await execute_tool(db_session, "search_notes", "{}", test_user.id)

    assert result == {"error": "'query' is required"}


@pytest.mark.asyncio
async def test_create_then_list_notes(db_session, test_user):
    created = await execute_tool(
        db_session,
        "create_note",
        '{"title": "Books", "content": "Read Dune"}',
        test_user.id,
    )

    listed = await execute_tool(db_session, "list_notes", None, test_user.id)

    assert created["title"] == "Books"
    assert created["createdAt"] is not None
    assert [note["id"] for note in listed["notes"]] == [created["id"]]


@pytest.mark.asyncio
async def test_search_matches_title_or_content(db_session, test_user, user_factory):
    other = await user_factory.create_async(db_session)
    await NoteFactory.create_async(
        db_session, user_id=test_user.id, title="Recipes", content="Pancakes"
    )
    await NoteFactory.create_async(
        db_session, user_id=test_user.id, title="Errands", content="Buy PANCAKE mix"
    )
    await NoteFactory.create_async(
        db_session, user_id=test_user.id, title="Work", content="Ship release"
    )
    await NoteFactory.create_async(
        db_session, user_id=other.id, title="Pancake day", content="Flip"
    )

    result = await execute_tool(
        db_session, "search_notes", {"query": "pancake"}, test_user.id
    )

    assert sorted(note["title"] for note in result["notes"]) == ["Errands", "Recipes"]
