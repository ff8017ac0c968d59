"""
Collection — неизменяемая упорядоченная коллекция пар (key, value)

Immutable Pydantic модель (frozen=True) с небольшим fluent API:
map / filter / sort / slice / flatten и базовыми аксессорами.

Каждая трансформация возвращает НОВЫЙ экземпляр; исходный экземпляр
никогда не изменяется (в том числе при ошибке).
"""

from collections.abc import Callable, Hashable, Iterator
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .core.errors import FlattenError
from .core.logger import logger
from .core.ordered_ops import (
    DEFAULT_SPLIT_LIMIT,
    Pairs,
    is_array,
    iter_array_pairs,
    merge_pairs,
    reindex,
    slice_pairs,
    sort_pairs,
    split_with_limit,
    to_pairs,
    validate_pairs,
)


class Collection(BaseModel):
    """
    Неизменяемая упорядоченная коллекция.

    Создаётся только через фабрики: empty(), from_items(), from_string().

    first()/last() работают по ПОРЯДКУ пар (первая/последняя пара),
    а не по ключам 0 и count-1.

    Копирование поверхностное: новый экземпляр владеет собственным tuple
    пар, но вложенные изменяемые значения (list, dict) разделяются с
    источником и с результатом to_dict().
    """

    pairs: tuple[tuple[Any, Any], ...] = Field(
        default_factory=tuple, description="Пары (key, value) в порядке вставки"
    )

    model_config = {"frozen": True}

    @field_validator("pairs")
    @classmethod
    def validate_keys(cls, v: Pairs) -> Pairs:
        return validate_pairs(v)

    # =========================================================================
    # ФАБРИКИ
    # =========================================================================

    @classmethod
    def empty(cls) -> "Collection":
        """Пустая коллекция."""
        return cls(pairs=())

    @classmethod
    def from_items(cls, items: Any) -> "Collection":
        """
        Обёртка над Mapping (ключи и порядок сохраняются) или list/tuple
        (ключи 0..n-1).

        Raises:
            TypeError: Для любого другого типа
        """
        return cls(pairs=to_pairs(items))

    @classmethod
    def from_string(
        cls, string: str, separator: str, limit: int = DEFAULT_SPLIT_LIMIT
    ) -> "Collection":
        """
        Разбиение строки на фрагменты с ключами 0..n-1.

        Args:
            string: Исходная строка
            separator: Непустой разделитель
            limit: > 0 — максимум фрагментов (остаток в последнем),
                   0 — как 1, < 0 — отбросить -limit последних фрагментов

        Raises:
            InvalidArgumentError: Если separator пустой
        """
        return cls(pairs=reindex(split_with_limit(string, separator, limit)))

    # =========================================================================
    # АКСЕССОРЫ
    # =========================================================================

    def to_dict(self) -> dict[Hashable, Any]:
        """
        Новый dict с текущими парами в текущем порядке.

        Копия поверхностная: вложенные значения не копируются.
        """
        return dict(self.pairs)

    def keys(self) -> list[Hashable]:
        return [key for key, _ in self.pairs]

    def values(self) -> list[Any]:
        return [value for _, value in self.pairs]

    def __iter__(self) -> Iterator[tuple[Hashable, Any]]:  # type: ignore[override]
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def first(self) -> Any:
        """Значение первой пары или None для пустой коллекции."""
        if not self.pairs:
            return None
        return self.pairs[0][1]

    def last(self) -> Any:
        """Значение последней пары или None для пустой коллекции."""
        if not self.pairs:
            return None
        return self.pairs[-1][1]

    def is_empty(self) -> bool:
        return len(self.pairs) == 0

    def is_not_empty(self) -> bool:
        return len(self.pairs) > 0

    def count(self) -> int:
        return len(self.pairs)

    # =========================================================================
    # ТРАНСФОРМАЦИИ
    # =========================================================================

    def map(self, fn: Callable[[Any], Any]) -> "Collection":
        """fn(value) для каждого значения; ключи и порядок не меняются."""
        return self.__class__(pairs=tuple((key, fn(value)) for key, value in self.pairs))

    def filter(
        self, fn: Callable[[Any], Any] | None = None, preserve_keys: bool = True
    ) -> "Collection":
        """
        Оставить значения, для которых fn(value) истинно.

        Args:
            fn: Предикат; None — проверка bool(value)
            preserve_keys: False — переиндексировать 0..n-1
        """
        predicate = fn if fn is not None else bool
        kept = tuple((key, value) for key, value in self.pairs if predicate(value))
        if preserve_keys:
            return self.__class__(pairs=kept)
        return self.__class__(pairs=reindex(value for _, value in kept))

    def sort(
        self, fn: Callable[[Any, Any], int] | None = None, preserve_keys: bool = True
    ) -> "Collection":
        """
        Стабильная сортировка.

        Без компаратора ключи всегда отбрасываются (0..n-1); значения должны
        быть попарно сравнимы, иначе TypeError ([3, None, 1] требует компаратора).
        С компаратором fn(a, b) -> int ключи сохраняются при preserve_keys=True.
        """
        return self.__class__(pairs=sort_pairs(self.pairs, fn, preserve_keys))

    def slice(
        self, offset: int, length: int | None = None, preserve_keys: bool = False
    ) -> "Collection":
        """Непрерывный срез; отрицательные offset/length отсчитываются от конца."""
        return self.__class__(pairs=slice_pairs(self.pairs, offset, length, preserve_keys))

    def flatten(self) -> "Collection":
        """
        Слияние всех вложенных массивов в один.

        Целые ключи перенумеровываются подряд, строковые — перезаписываются
        более поздними значениями.

        Raises:
            FlattenError: Если коллекция пуста или какое-то значение не массив
        """
        if not self.pairs:
            logger.debug("flatten called on an empty Collection")
            raise FlattenError("cannot flatten an empty Collection")

        for key, value in self.pairs:
            if not is_array(value):
                logger.debug("flatten rejected value of type %s at key %r", type(value).__name__, key)
                raise FlattenError(
                    f"value at key {key!r} must be a mapping or a sequence, "
                    f"{type(value).__name__} given",
                    context={"key": key, "type": type(value).__name__},
                )

        return self.__class__(
            pairs=merge_pairs(*(iter_array_pairs(value) for _, value in self.pairs))
        )
