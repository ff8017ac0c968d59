"""
Ordered Ops — примитивы над упорядоченными парами (key, value)

Чистые функции, на которых построены Collection и DataSet:
- Разбиение строки с лимитом (split_with_limit)
- Срез с отрицательными offset/length (slice_pairs)
- Слияние с перенумерацией целых ключей (merge_pairs)
- Стабильная сортировка с компаратором (sort_pairs)
- Приведение значений к строке/числу для join и deduplicate

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Входные последовательности никогда не модифицируются
2. Каждая функция возвращает новый tuple пар
3. Порядок пар сохраняется, если операция явно не сортирует/переиндексирует
"""

import math
import re
import sys
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Final

from .errors import InvalidArgumentError

Pair = tuple[Hashable, Any]
Pairs = tuple[Pair, ...]


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Лимит по умолчанию для from_string (фактически "без ограничений")
DEFAULT_SPLIT_LIMIT: Final[int] = sys.maxsize

# Границы десятичной записи float в coerce_str (вне них — "1.0E+20")
EXP_UPPER_BOUND: Final[float] = 1e15
EXP_LOWER_BOUND: Final[float] = 1e-4

# Ведущий числовой префикс строки: "12abc" -> 12, " 1.5e3x" -> 1500.0
_NUMERIC_PREFIX: Final[re.Pattern[str]] = re.compile(
    r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?"
)


# =============================================================================
# КОНСТРУИРОВАНИЕ ПАР
# =============================================================================


def reindex(values: Iterable[Any]) -> Pairs:
    """Пары с ключами 0..n-1 для значений в исходном порядке."""
    return tuple(enumerate(values))


def validate_pairs(v: Pairs) -> Pairs:
    """
    Проверка уникальности и хешируемости ключей.

    Общий валидатор для Collection и DataSet.
    """
    seen: set[Hashable] = set()
    for key, _ in v:
        if not isinstance(key, Hashable):
            raise ValueError(f"key {key!r} is not hashable")
        if key in seen:
            raise ValueError(f"duplicate key {key!r}")
        seen.add(key)
    return v


def _wrapper_types() -> tuple[type, ...]:
    # Локальный импорт: collection/dataset сами импортируют этот модуль
    from ..collection import Collection
    from ..dataset import DataSet

    return (Collection, DataSet)


def is_array(value: Any) -> bool:
    """
    Является ли значение "массивом" (упорядоченным контейнером пар).

    Массивы: Mapping, list, tuple и экземпляры Collection / DataSet.
    """
    return isinstance(value, (Mapping, list, tuple, *_wrapper_types()))


def iter_array_pairs(value: Any) -> Iterator[Pair]:
    """
    Итерация пар массива.

    Args:
        value: Mapping, list/tuple или Collection/DataSet

    Raises:
        TypeError: Если value не является массивом
    """
    if isinstance(value, Mapping):
        yield from value.items()
    elif isinstance(value, (list, tuple)):
        yield from enumerate(value)
    elif isinstance(value, _wrapper_types()):
        yield from value.pairs
    else:
        raise TypeError(
            f"expected a mapping or a sequence, got {type(value).__name__}"
        )


def to_pairs(items: Any) -> Pairs:
    """
    Нормализация входа фабрики from_items в tuple пар.

    Допустимы только Mapping и list/tuple; строки и bytes не считаются
    последовательностями.
    """
    if isinstance(items, Mapping):
        return tuple(items.items())
    if isinstance(items, (list, tuple)):
        return reindex(items)
    raise TypeError(f"expected a mapping or a sequence, got {type(items).__name__}")


# =============================================================================
# РАЗБИЕНИЕ СТРОКИ
# =============================================================================


def split_with_limit(string: str, separator: str, limit: int = DEFAULT_SPLIT_LIMIT) -> list[str]:
    """
    Разбиение строки по разделителю с лимитом.

    Семантика лимита:
    - limit > 0: не более limit фрагментов, остаток целиком в последнем
    - limit == 0: трактуется как 1 (вся строка одним фрагментом)
    - limit < 0: все фрагменты, кроме последних -limit

    Args:
        string: Исходная строка
        separator: Непустой разделитель
        limit: Лимит фрагментов

    Returns:
        Список фрагментов

    Raises:
        InvalidArgumentError: Если separator пустой

    Examples:
        >>> split_with_limit("a,b,c", ",", 2)
        ['a', 'b,c']
        >>> split_with_limit("a,b,c", ",", -1)
        ['a', 'b']
    """
    if separator == "":
        raise InvalidArgumentError(
            "separator must be a non-empty string",
            context={"string": string, "limit": limit},
        )

    if limit > 0:
        return string.split(separator, limit - 1)
    if limit == 0:
        return [string]
    return string.split(separator)[:limit]


# =============================================================================
# СРЕЗ
# =============================================================================


def slice_pairs(
    pairs: Pairs,
    offset: int,
    length: int | None = None,
    preserve_keys: bool = False,
) -> Pairs:
    """
    Непрерывный срез пар.

    Args:
        pairs: Исходные пары
        offset: Начало среза (отрицательный — от конца)
        length: Количество элементов (None — до конца,
                отрицательный — остановиться за -length элементов до конца)
        preserve_keys: Сохранить исходные ключи (иначе 0..n-1)

    Returns:
        Пары среза

    Examples:
        >>> slice_pairs(((0, "a"), (1, "b"), (2, "c")), -2)
        ((0, 'b'), (1, 'c'))
        >>> slice_pairs(((0, "a"), (1, "b"), (2, "c")), 0, -1, True)
        ((0, 'a'), (1, 'b'))
    """
    count = len(pairs)

    start = max(count + offset, 0) if offset < 0 else min(offset, count)

    if length is None:
        stop = count
    elif length < 0:
        stop = max(count + length, start)
    else:
        stop = min(start + length, count)

    selected = pairs[start:stop]
    if preserve_keys:
        return selected
    return reindex(value for _, value in selected)


# =============================================================================
# СЛИЯНИЕ
# =============================================================================


def merge_pairs(*sources: Iterable[Pair]) -> Pairs:
    """
    Слияние последовательностей пар.

    - Целые ключи перенумеровываются подряд (0, 1, 2, ...) в порядке появления
    - Нецелые ключи перезаписывают существующую запись (позиция первой
      записи сохраняется, значение берётся из последней)

    Examples:
        >>> merge_pairs(((0, "a"), ("k", 1)), ((0, "b"), ("k", 2)))
        ((0, 'a'), ('k', 2), (1, 'b'))
    """
    merged: dict[Hashable, Any] = {}
    next_index = 0

    for source in sources:
        for key, value in source:
            if isinstance(key, int) and not isinstance(key, bool):
                merged[next_index] = value
                next_index += 1
            else:
                merged[key] = value

    return tuple(merged.items())


# =============================================================================
# СОРТИРОВКА
# =============================================================================


def sort_pairs(
    pairs: Pairs,
    comparator: Callable[[Any, Any], int] | None = None,
    preserve_keys: bool = True,
) -> Pairs:
    """
    Стабильная сортировка пар по значениям.

    - Без компаратора: естественный порядок значений, ключи ОТБРАСЫВАЮТСЯ
      (результат всегда 0..n-1, preserve_keys игнорируется)
    - С компаратором: comparator(a, b) -> int (<0, 0, >0);
      preserve_keys=True сохраняет ключи при значениях, False — переиндексирует

    Python sorted() стабилен: равные по компаратору элементы сохраняют
    исходный относительный порядок.

    Предусловие для сортировки без компаратора: значения попарно сравнимы
    через "<" (например, только числа или только строки). Смешанные типы
    ([3, None, 1]) не упорядочиваются и приводят к TypeError; для них
    нужен явный компаратор.

    Raises:
        TypeError: Без компаратора, если значения несравнимы
    """
    if comparator is None:
        return reindex(sorted(value for _, value in pairs))

    key = cmp_to_key(comparator)
    ordered = sorted(pairs, key=lambda pair: key(pair[1]))
    if preserve_keys:
        return tuple(ordered)
    return reindex(value for _, value in ordered)


# =============================================================================
# ПРИВЕДЕНИЕ ТИПОВ
# =============================================================================


def coerce_str(value: Any) -> str:
    """
    Приведение значения к строке (для join и строкового deduplicate).

    Examples:
        >>> coerce_str(None), coerce_str(True), coerce_str(False)
        ('', '1', '')
        >>> coerce_str(1.0), coerce_str(1.5)
        ('1', '1.5')
        >>> coerce_str(1e20), coerce_str(1.5e-7)
        ('1.0E+20', '1.5E-7')
    """
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and math.isfinite(value):
        return _float_to_str(value)
    return str(value)


def _float_to_str(value: float) -> str:
    """
    Кратчайшее представление float; экспоненциальная форма вида "1.0E+20"
    для |value| >= 1e15 и 0 < |value| < 1e-4.
    """
    magnitude = abs(value)
    if value == 0 or EXP_LOWER_BOUND <= magnitude < EXP_UPPER_BOUND:
        if value.is_integer():
            return str(int(value))
        return repr(value)

    _, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(str(digit) for digit in digits)
    power = len(text) + exponent - 1
    mantissa = f"{text[0]}.{text[1:] or '0'}"
    sign = "-" if value < 0 else ""
    return f"{sign}{mantissa}E{'+' if power >= 0 else '-'}{abs(power)}"


def coerce_number(value: Any) -> int | float:
    """
    Приведение значения к числу (для числового deduplicate).

    - bool/int/float: как есть (bool -> 0/1)
    - None: 0
    - str: ведущий числовой префикс, иначе 0

    Examples:
        >>> coerce_number("12abc"), coerce_number("abc"), coerce_number(" 1.5")
        (12, 0, 1.5)
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if match is None:
            return 0
        text = match.group(0).strip()
        if match.group(2) is None and match.group(3) is None and not text.lstrip("+-").startswith("."):
            return int(text)
        return float(text)
    raise TypeError(f"cannot convert {type(value).__name__} to a number")
