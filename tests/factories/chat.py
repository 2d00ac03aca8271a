"""Factories for chat threads, messages and notes."""

import uuid
from datetime import datetime, timezone

import factory
from src.database.models import (
    DEFAULT_THREAD_TITLE,
    Message,
    MessageRole,
    Note,
    Thread,
)
from .base import AsyncSQLAlchemyModelFactory, UUIDFactory


class ThreadFactory(AsyncSQLAlchemyModelFactory[Thread]):
    class Meta:
        model = Thread

    id = UUIDFactory()
    title = DEFAULT_THREAD_TITLE
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))
    updated_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))


class MessageFactory(AsyncSQLAlchemyModelFactory[Message]):
    class Meta:
        model = Message

    id = factory.LazyFunction(lambda: uuid.uuid4().hex)
    role = MessageRole.USER
    content = factory.LazyAttribute(
        lambda _: [{"type": "text", "text": "Hello there"}]
    )
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))


class NoteFactory(AsyncSQLAlchemyModelFactory[Note]):
    class Meta:
        model = Note

    id = UUIDFactory()
    title = factory.Faker("sentence", nb_words=3)
    content = factory.Faker("paragraph")
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))
    updated_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))
