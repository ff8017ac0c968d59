"""
DataSet — неизменяемый набор данных с расширенным API

Immutable Pydantic модель (frozen=True), надмножество Collection:
add / contains / min / max / join / deduplicate / reverse / column /
reduce / some / every / flatten / json_encode.

Отличия от Collection (сохраняются намеренно):
1. first()/last() — по КЛЮЧАМ 0 и count-1, а не по порядку пар
2. flatten() пропускает не-массивы и не падает на пустом наборе
3. reverse() возвращает обычный list, а не DataSet
"""

from collections.abc import Callable, Hashable, Iterator, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .core.json_encoding import DEFAULT_JSON_DEPTH, encode_pairs
from .core.ordered_ops import (
    DEFAULT_SPLIT_LIMIT,
    Pairs,
    coerce_number,
    coerce_str,
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


# =============================================================================
# ENUMS
# =============================================================================


class CompareMode(str, Enum):
    """
    Режим сравнения для deduplicate.

    STRING: значения сравниваются как строки (1 и "1" — дубликаты)
    NUMERIC: значения сравниваются как числа ("1.0" и 1 — дубликаты,
             нечисловые строки равны 0)
    """

    STRING = "string"
    NUMERIC = "numeric"


# =============================================================================
# DATASET MODEL
# =============================================================================


class DataSet(BaseModel):
    """
    Неизменяемый упорядоченный набор данных.

    Все изменения (add_item, add_items, ...) создают новый экземпляр.

    Копирование поверхностное: новый экземпляр владеет собственным tuple
    пар, но вложенные изменяемые значения (list, dict) разделяются с
    источником и с результатом to_dict(). Изменение такого значения на
    месте видно во всех экземплярах, которые его содержат.
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
    def empty(cls) -> "DataSet":
        return cls(pairs=())

    @classmethod
    def from_items(cls, items: "Mapping[Hashable, Any] | list[Any] | tuple[Any, ...] | DataSet") -> "DataSet":
        """
        Обёртка над Mapping, list/tuple или другим DataSet.

        Для DataSet копируются его текущие пары.
        """
        if isinstance(items, DataSet):
            return cls(pairs=items.pairs)
        return cls(pairs=to_pairs(items))

    @classmethod
    def from_string(
        cls, string: str, separator: str, limit: int = DEFAULT_SPLIT_LIMIT
    ) -> "DataSet":
        """
        Разбиение строки на фрагменты с ключами 0..n-1.

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

    def json_encode(self, flags: int = 0, depth: int = DEFAULT_JSON_DEPTH) -> str:
        """
        Сериализация текущих пар в JSON.

        Args:
            flags: Комбинация JsonFlag (PRETTY_PRINT, UNESCAPED_SLASHES, ...)
            depth: Максимальная глубина вложенности (ограничена снизу 1)

        Returns:
            JSON текст или "" при ошибке (без JsonFlag.THROW_ON_ERROR)
        """
        return encode_pairs(self.pairs, flags, max(1, depth))

    def __iter__(self) -> Iterator[tuple[Hashable, Any]]:  # type: ignore[override]
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def first(self) -> Any:
        """Значение по ключу 0 (None, если ключа нет)."""
        return self.to_dict().get(0)

    def last(self) -> Any:
        """Значение по ключу count()-1 (None, если ключа нет)."""
        return self.to_dict().get(len(self.pairs) - 1)

    def count(self) -> int:
        return len(self.pairs)

    def is_empty(self) -> bool:
        return self.count() == 0

    def is_not_empty(self) -> bool:
        return self.count() > 0

    # =========================================================================
    # ДОБАВЛЕНИЕ
    # =========================================================================

    def add_item(self, value: Any, key: Hashable | None = None) -> "DataSet":
        """
        Добавить одно значение.

        Без key — в конец со следующим целым ключом; со строковым key —
        вставка или перезапись по этому ключу.
        """
        if key is None:
            return self.add_items([value])
        return self.add_items({key: value})

    def add_items(self, items: "Mapping[Hashable, Any] | list[Any] | tuple[Any, ...] | DataSet") -> "DataSet":
        """
        Слияние items с текущими парами.

        Целые ключи обеих сторон перенумеровываются и конкатенируются
        (items после текущих), строковые ключи items перезаписывают текущие.
        """
        incoming = items.pairs if isinstance(items, DataSet) else to_pairs(items)
        return self.__class__(pairs=merge_pairs(self.pairs, incoming))

    # =========================================================================
    # ЗАПРОСЫ
    # =========================================================================

    def contains(self, item: Any) -> bool:
        """Строгая проверка вхождения: совпадают и тип, и значение."""
        return any(type(value) is type(item) and value == item for _, value in self.pairs)

    def min(self) -> int | float | None:
        """
        Минимальное значение или None для пустого набора.

        Значения должны быть числами; это не проверяется.
        """
        if not self.pairs:
            return None
        return min(self.values())

    def max(self) -> int | float | None:
        """Максимальное значение или None для пустого набора."""
        if not self.pairs:
            return None
        return max(self.values())

    def join(self, delimiter: str) -> str:
        """Склейка значений (приведённых к строке) через delimiter."""
        return delimiter.join(coerce_str(value) for _, value in self.pairs)

    def reduce(self, fn: Callable[[Any, Any], Any], initial: Any = None) -> Any:
        """Левая свёртка: acc = fn(acc, value), начиная с initial."""
        accumulator = initial
        for _, value in self.pairs:
            accumulator = fn(accumulator, value)
        return accumulator

    def some(self, fn: Callable[[Any], Any]) -> bool:
        for _, value in self.pairs:
            if fn(value):
                return True
        return False

    def every(self, fn: Callable[[Any], Any]) -> bool:
        for _, value in self.pairs:
            if not fn(value):
                return False
        return True

    def reverse(self) -> list[Any]:
        """
        Значения в обратном порядке.

        Возвращает обычный list (ключи 0..n-1), а не DataSet.
        """
        return [value for _, value in reversed(self.pairs)]

    # =========================================================================
    # ТРАНСФОРМАЦИИ
    # =========================================================================

    def slice(
        self, offset: int, length: int | None = None, preserve_keys: bool = False
    ) -> "DataSet":
        return self.__class__(pairs=slice_pairs(self.pairs, offset, length, preserve_keys))

    def deduplicate(self, mode: CompareMode = CompareMode.STRING) -> "DataSet":
        """
        Удаление повторов: остаётся первое вхождение со своим ключом.

        Args:
            mode: CompareMode.STRING (сравнение строковых форм) или
                  CompareMode.NUMERIC (сравнение числовых форм)
        """
        normalize = coerce_number if CompareMode(mode) is CompareMode.NUMERIC else coerce_str
        seen: set[Any] = set()
        unique = []
        for key, value in self.pairs:
            marker = normalize(value)
            if marker in seen:
                continue
            seen.add(marker)
            unique.append((key, value))
        return self.__class__(pairs=tuple(unique))

    def map(self, fn: Callable[[Any], Any], preserve_keys: bool = True) -> "DataSet":
        mapped = tuple((key, fn(value)) for key, value in self.pairs)
        if preserve_keys:
            return self.__class__(pairs=mapped)
        return self.__class__(pairs=reindex(value for _, value in mapped))

    def filter(
        self, fn: Callable[[Any], Any] | None = None, preserve_keys: bool = True
    ) -> "DataSet":
        """Без fn отбрасываются ложные значения (bool(value) is False)."""
        predicate = fn if fn is not None else bool
        kept = tuple((key, value) for key, value in self.pairs if predicate(value))
        if preserve_keys:
            return self.__class__(pairs=kept)
        return self.__class__(pairs=reindex(value for _, value in kept))

    def column(self, name: Hashable, preserve_keys: bool = False) -> "DataSet":
        """
        Извлечение поля name из каждой записи.

        Массивы (Mapping, list/tuple, Collection/DataSet) — по ключу
        (для list/tuple это целый индекс), прочие объекты — по атрибуту.
        Записи без поля пропускаются. preserve_keys=True сохраняет ключ
        верхнего уровня каждой извлечённой записи.
        """
        extracted = []
        for key, row in self.pairs:
            if is_array(row):
                fields = dict(iter_array_pairs(row))
                if name in fields:
                    extracted.append((key, fields[name]))
            elif isinstance(name, str) and hasattr(row, name):
                extracted.append((key, getattr(row, name)))

        if preserve_keys:
            return self.__class__(pairs=tuple(extracted))
        return self.__class__(pairs=reindex(value for _, value in extracted))

    def sort(
        self, fn: Callable[[Any, Any], int] | None = None, preserve_keys: bool = True
    ) -> "DataSet":
        """
        Стабильная сортировка, как Collection.sort.

        Без компаратора значения должны быть попарно сравнимы (TypeError
        для смешанных типов вроде [3, None, 1]).
        """
        return self.__class__(pairs=sort_pairs(self.pairs, fn, preserve_keys))

    def flatten(self) -> "DataSet":
        """
        Запись пар всех вложенных массивов в один набор по их собственным
        ключам; более поздние значения перезаписывают ранние.

        Значения, не являющиеся массивами, пропускаются.
        """
        flattened: dict[Hashable, Any] = {}
        for _, item in self.pairs:
            if is_array(item):
                for key, value in iter_array_pairs(item):
                    flattened[key] = value
        return self.__class__(pairs=tuple(flattened.items()))
