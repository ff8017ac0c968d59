"""
JSON Encoding — сериализация упорядоченных пар в JSON текст

Модуль переводит пары (key, value) в стандартный JSON:
- Массив с ключами ровно 0..n-1 -> JSON array
- Любой другой массив -> JSON object (ключи приводятся к строке)
- Вложенные Mapping/list/tuple/Collection/DataSet обрабатываются рекурсивно

Флаги JsonFlag совпадают по значениям с флагами json_encode, поэтому
допускается передача обычного int.
"""

import json
import math
import re
from dataclasses import dataclass
from enum import IntFlag
from typing import Any, Final

from .errors import JsonEncodeError
from .logger import logger
from .ordered_ops import Pairs, is_array, iter_array_pairs

# Максимальная глубина вложенности по умолчанию
DEFAULT_JSON_DEPTH: Final[int] = 512

# Отступ для PRETTY_PRINT
PRETTY_PRINT_INDENT: Final[int] = 4


# =============================================================================
# ФЛАГИ
# =============================================================================


class JsonFlag(IntFlag):
    """Опции сериализатора"""

    NONE = 0
    HEX_TAG = 1
    HEX_AMP = 2
    HEX_APOS = 4
    HEX_QUOT = 8
    FORCE_OBJECT = 16
    UNESCAPED_SLASHES = 64
    PRETTY_PRINT = 128
    UNESCAPED_UNICODE = 256
    PRESERVE_ZERO_FRACTION = 1024
    THROW_ON_ERROR = 4194304


# =============================================================================
# КОНФИГУРАЦИЯ
# =============================================================================


@dataclass(frozen=True)
class JsonEncodeConfig:
    """
    Конфигурация сериализации.

    depth ограничен снизу единицей: верхний уровень всегда допустим.
    """

    flags: JsonFlag = JsonFlag.NONE
    depth: int = DEFAULT_JSON_DEPTH

    @classmethod
    def from_options(cls, flags: int = 0, depth: int = DEFAULT_JSON_DEPTH) -> "JsonEncodeConfig":
        return cls(flags=JsonFlag(flags), depth=max(1, depth))

    def has(self, flag: JsonFlag) -> bool:
        return bool(self.flags & flag)


# =============================================================================
# КОНВЕРСИЯ
# =============================================================================


# JSON строковый литерал (с учётом экранированных символов)
_STRING_TOKEN: Final[re.Pattern[str]] = re.compile(r'"(?:[^"\\]|\\.)*"')


def _is_list(pairs: list[tuple[Any, Any]]) -> bool:
    return all(
        isinstance(key, int) and not isinstance(key, bool) and key == index
        for index, (key, _) in enumerate(pairs)
    )


def _convert_pairs(pairs: list[tuple[Any, Any]], config: JsonEncodeConfig, level: int) -> Any:
    if level > config.depth:
        raise JsonEncodeError("Maximum stack depth exceeded", context={"depth": config.depth})
    if _is_list(pairs) and not config.has(JsonFlag.FORCE_OBJECT):
        return [_convert(item, config, level + 1) for _, item in pairs]
    return {str(key): _convert(item, config, level + 1) for key, item in pairs}


def _convert(value: Any, config: JsonEncodeConfig, level: int) -> Any:
    """Перевод значения в структуру, понятную json.dumps."""
    if value is None or isinstance(value, (bool, str, int)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise JsonEncodeError("Inf and NaN cannot be JSON encoded", context={"value": value})
        if value.is_integer() and not config.has(JsonFlag.PRESERVE_ZERO_FRACTION):
            return int(value)
        return value

    if is_array(value):
        return _convert_pairs(list(iter_array_pairs(value)), config, level)

    raise JsonEncodeError(
        f"Type is not supported: {type(value).__name__}",
        context={"type": type(value).__name__},
    )


def _escape_token(match: re.Match[str], config: JsonEncodeConfig) -> str:
    token = match.group(0)
    # Внутри токена '"' встречается только как \" (кроме обрамляющих кавычек)
    body = token[1:-1]
    if not config.has(JsonFlag.UNESCAPED_SLASHES):
        body = body.replace("/", "\\/")
    if config.has(JsonFlag.HEX_TAG):
        body = body.replace("<", "\\u003C").replace(">", "\\u003E")
    if config.has(JsonFlag.HEX_AMP):
        body = body.replace("&", "\\u0026")
    if config.has(JsonFlag.HEX_APOS):
        body = body.replace("'", "\\u0027")
    if config.has(JsonFlag.HEX_QUOT):
        body = re.sub(r'(?<!\\)((?:\\\\)*)\\"', r"\1\\u0022", body)
    return f'"{body}"'


def encode_pairs(pairs: Pairs, flags: int = 0, depth: int = DEFAULT_JSON_DEPTH) -> str:
    """
    Сериализация пар в JSON текст.

    Args:
        pairs: Пары (key, value) верхнего уровня
        flags: Комбинация JsonFlag (или int с теми же значениями)
        depth: Максимальная глубина вложенности (минимум 1)

    Returns:
        JSON текст; пустая строка при ошибке без THROW_ON_ERROR

    Raises:
        JsonEncodeError: При ошибке, если установлен THROW_ON_ERROR

    Examples:
        >>> encode_pairs(((0, "a/b"), (1, 2.0)))
        '["a\\\\/b",2]'
        >>> encode_pairs((("x", 1),), JsonFlag.PRETTY_PRINT)
        '{\\n    "x": 1\\n}'
    """
    config = JsonEncodeConfig.from_options(flags, depth)

    try:
        payload = _convert_pairs(list(pairs), config, 1)
    except JsonEncodeError as exc:
        logger.debug("json_encode failed: %s (context=%s)", exc.message, exc.context)
        if config.has(JsonFlag.THROW_ON_ERROR):
            raise
        return ""

    pretty = config.has(JsonFlag.PRETTY_PRINT)
    text = json.dumps(
        payload,
        ensure_ascii=not config.has(JsonFlag.UNESCAPED_UNICODE),
        indent=PRETTY_PRINT_INDENT if pretty else None,
        separators=(",", ": ") if pretty else (",", ":"),
    )
    return _STRING_TOKEN.sub(lambda match: _escape_token(match, config), text)
