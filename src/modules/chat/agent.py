"""Chat assistant running an OpenAI tool-calling loop over the note tools."""

import json
from typing import Any
from uuid import UUID

from fastapi import status
from openai import AsyncOpenAI, OpenAIError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.database.models import Message, MessageRole
from src.modules.chat.threads import message_text
from src.modules.chat.tools import TOOL_DEFINITIONS, execute_tool
from src.utils.logger import get_logger
from src.utils.settings.llm import LLMSettings

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant. You can create, list, and search the user's "
    "notes using the available tools."
)

TITLE_PROMPT = (
    "Generate a concise, descriptive title (max 6 words) for this conversation. "
    "The title should capture the main topic or question being discussed.\n\n"
    "Conversation:\n{conversation}\n\n"
    "Generate only the title, no quotes or extra text."
)
MAX_TITLE_LENGTH = 100


def history_to_openai(messages: list[Message]) -> list[dict[str, str]]:
    """Stored messages as plain-text chat turns; tool traces are left out."""
    history = []
    for message in messages:
        text = message_text(message.content or [])
        if not text:
            continue
        role = "user" if message.role == MessageRole.USER else "assistant"
        history.append({"role": role, "content": text})
    return history


class ChatAgent:
    def __init__(
        self,
        db: AsyncSession,
        client: AsyncOpenAI | None = None,
        settings: LLMSettings | None = None,
    ):
        self.db = db
        self.settings = settings or LLMSettings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(
            self.settings.OPENAI_API_KEY.get_secret_value()
        )

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.is_configured:
                raise IridiumException(
                    MessageCode.CHAT_UNAVAILABLE, status.HTTP_503_SERVICE_UNAVAILABLE
                )
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY.get_secret_value(),
                base_url=self.settings.OPENAI_BASE_URL,
            )
        return self._client

    async def run(
        self, history: list[Message], user_text: str, user_id: UUID
    ) -> list[dict[str, Any]]:
        """
        Answer ``user_text`` given the thread ``history``.

        The model may call tools for up to ``CHAT_MAX_STEPS`` rounds. Returns the
        assistant parts in order: tool calls, tool results and the final text.
        """
        conversation: list[dict[str, Any]] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            *history_to_openai(history),
            {"role": "user", "content": user_text},
        ]
        parts: list[dict[str, Any]] = []

        for step in range(self.settings.CHAT_MAX_STEPS):
            try:
                response = await self.client.chat.completions.create(
                    model=self.settings.OPENAI_MODEL,
                    messages=conversation,
                    tools=TOOL_DEFINITIONS,
                )
            except OpenAIError as e:
                logger.error(f"Chat completion failed: {e}", step=step)
                raise IridiumException(
                    MessageCode.EXTERNAL_SERVICE_ERROR,
                    status.HTTP_502_BAD_GATEWAY,
                    {"provider": "openai"},
                ) from e

            reply = response.choices[0].message
            if not reply.tool_calls:
                parts.append({"type": "text", "text": reply.content or ""})
                break

            conversation.append(
                {
                    "role": "assistant",
                    "content": reply.content,
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {
                                "name": call.function.name,
                                "arguments": call.function.arguments,
                            },
                        }
                        for call in reply.tool_calls
                    ],
                }
            )
            for call in reply.tool_calls:
                parts.append(
                    {
                        "type": "tool-call",
                        "toolCallId": call.id,
                        "toolName": call.function.name,
                        "input": call.function.arguments,
                    }
                )
                output = await execute_tool(
                    self.db, call.function.name, call.function.arguments, user_id
                )
                parts.append(
                    {
                        "type": "tool-result",
                        "toolCallId": call.id,
                        "toolName": call.function.name,
                        "output": output,
                    }
                )
                conversation.append(
                    {
                        "role": "tool",
                        "tool_call_id": call.id,
                        "content": json.dumps(output),
                    }
                )
        else:
            logger.warning("Chat agent hit the step limit", user_id=str(user_id))

        return parts

    async def generate_title(self, messages: list[Message]) -> str | None:
        """Short title for a conversation. Best effort: None on any failure."""
        conversation = "\n".join(
            f"{MessageRole(message.role).value.lower()}: "
            f"{message_text(message.content or [])}"
            for message in messages[:4]
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.OPENAI_MODEL,
                messages=[
                    {
                        "role": "user",
                        "content": TITLE_PROMPT.format(conversation=conversation),
                    }
                ],
            )
        except (OpenAIError, IridiumException) as e:
            logger.warning(f"Thread title generation failed: {e}")
            return None

        title = (response.choices[0].message.content or "").strip().strip("\"'")
        return title[:MAX_TITLE_LENGTH] or None
