from typing import Any, TypeVar

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.utils.logger import get_logger

ModelT = TypeVar("ModelT")


class BaseService:
    """Base service class with database dependency injection."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = get_logger(self.__class__.__name__)

    async def get_or_404(
        self,
        model: type[ModelT],
        ident: Any,
        message_code: MessageCode = MessageCode.RESOURCE_NOT_FOUND,
    ) -> ModelT:
        instance = await self.db.get(model, ident)
        if instance is None:
            raise IridiumException(message_code, status.HTTP_404_NOT_FOUND)
        return instance
