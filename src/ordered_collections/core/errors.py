"""
Errors — иерархия исключений ordered_collections

Все исключения наследуют OrderedCollectionError и одновременно стандартный
класс Python (ValueError / TypeError), чтобы вызывающий код мог ловить
их привычным способом.
"""

from typing import Any


class OrderedCollectionError(Exception):
    """
    Базовое исключение библиотеки.

    Attributes:
        message: Человекочитаемое сообщение
        context: Дополнительный контекст (аргументы вызова и т.п.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class InvalidArgumentError(OrderedCollectionError, ValueError):
    """Недопустимый аргумент (например, пустой разделитель в from_string)."""


class FlattenError(OrderedCollectionError, TypeError):
    """Collection.flatten: пустая коллекция или значение, не являющееся массивом."""


class JsonEncodeError(OrderedCollectionError, ValueError):
    """Ошибка сериализации в JSON (глубина, NaN/Inf, неподдерживаемый тип)."""
