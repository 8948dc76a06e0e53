"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """Base use case orchestrating domain services for one entry flow."""

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
