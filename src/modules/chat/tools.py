"""Note tools exposed to the chat model as JSON-schema functions."""

import json
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.database.models import Note
from src.modules.chat.notes import NoteService
from src.utils.logger import get_logger

logger = get_logger(__name__)

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "create_note",
            "description": (
                "Create a new note for the user. Use when the user asks to save, "
                "remember, or jot down something."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "title": {
                        "type": "string",
                        "description": "A short title for the note",
                    },
                    "content": {
                        "type": "string",
                        "description": "The body content of the note",
                    },
                },
                "required": ["title", "content"],
                "additionalProperties": False,
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "list_notes",
            "description": (
                "List all notes for the current user. Use when the user wants to "
                "see their notes."
            ),
            "parameters": {
                "type": "object",
                "properties": {},
                "additionalProperties": False,
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "search_notes",
            "description": (
                "Search the user's notes by keyword. Use when the user wants to "
                "find a specific note."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": (
                            "Search term to match against note titles and content"
                        ),
                    },
                },
                "required": ["query"],
                "additionalProperties": False,
            },
        },
    },
]

TOOL_NAMES = {tool["function"]["name"] for tool in TOOL_DEFINITIONS}


def serialize_note(note: Note) -> dict[str, Any]:
    return {
        "id": str(note.id),
        "title": note.title,
        "content": note.content,
        "createdAt": note.created_at.isoformat() if note.created_at else None,
    }


def parse_arguments(arguments: str | dict | None) -> dict[str, Any]:
    """Tool arguments arrive as a JSON string from the model."""
    if isinstance(arguments, dict):
        return arguments
    if not arguments:
        return {}
    parsed = json.loads(arguments)
    if not isinstance(parsed, dict):
        raise ValueError("Tool arguments must be a JSON object")
    return parsed


async def execute_tool(
    db: AsyncSession, name: str, arguments: str | dict | None, user_id: UUID
) -> dict[str, Any]:
    """Run a tool call for ``user_id``.

    Bad calls come back as ``{"error": ...}`` so the model can recover.
    """
    if name not in TOOL_NAMES:
        return {"error": f"Unknown tool: {name}"}

    try:
        args = parse_arguments(arguments)
    except ValueError as e:
        return {"error": f"Invalid arguments: {e}"}

    notes = NoteService(db)
    match name:
        case "create_note":
            title, content = args.get("title"), args.get("content")
            if not isinstance(title, str) or not isinstance(content, str):
                return {"error": "Both 'title' and 'content' are required"}
            note = await notes.create_note(user_id, title, content)
            logger.info("Note created by assistant", user_id=str(user_id))
            return serialize_note(note)
        case "list_notes":
            return {"notes": [serialize_note(n) for n in await notes.list_notes(user_id)]}
        case "search_notes":
            query = args.get("query")
            if not isinstance(query, str):
                return {"error": "'query' is required"}
            found = await notes.search_notes(user_id, query)
            return {"notes": [serialize_note(n) for n in found]}
