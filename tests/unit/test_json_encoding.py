"""
Тесты для модуля JSON Encoding

Проверяет:
1. JsonEncodeConfig (ограничение depth, флаги)
2. Выбор array/object по ключам
3. Экранирование (слэши, HEX_* флаги)
4. Float: PRESERVE_ZERO_FRACTION, NaN/Inf
5. Ошибки: пустая строка или JsonEncodeError
"""

import pytest

from ordered_collections.core.errors import JsonEncodeError
from ordered_collections.core.json_encoding import (
    DEFAULT_JSON_DEPTH,
    JsonEncodeConfig,
    JsonFlag,
    encode_pairs,
)


# =============================================================================
# КОНФИГУРАЦИЯ
# =============================================================================


class TestJsonEncodeConfig:
    """Тесты для JsonEncodeConfig"""

    def test_defaults(self) -> None:
        config = JsonEncodeConfig()
        assert config.flags == JsonFlag.NONE
        assert config.depth == DEFAULT_JSON_DEPTH == 512

    def test_depth_clamped(self) -> None:
        assert JsonEncodeConfig.from_options(0, 0).depth == 1
        assert JsonEncodeConfig.from_options(0, -3).depth == 1
        assert JsonEncodeConfig.from_options(0, 7).depth == 7

    def test_has_flag(self) -> None:
        config = JsonEncodeConfig.from_options(JsonFlag.PRETTY_PRINT | JsonFlag.HEX_TAG)
        assert config.has(JsonFlag.PRETTY_PRINT)
        assert config.has(JsonFlag.HEX_TAG)
        assert not config.has(JsonFlag.FORCE_OBJECT)

    def test_frozen(self) -> None:
        config = JsonEncodeConfig()
        with pytest.raises(AttributeError):
            config.depth = 3  # type: ignore


# =============================================================================
# СТРУКТУРА
# =============================================================================


class TestStructure:
    """Выбор JSON array / object"""

    def test_sequential_keys_array(self) -> None:
        assert encode_pairs(((0, 1), (1, 2))) == "[1,2]"

    def test_gap_in_keys_object(self) -> None:
        assert encode_pairs(((0, 1), (2, 2))) == '{"0":1,"2":2}'

    def test_wrong_order_object(self) -> None:
        assert encode_pairs(((1, "b"), (0, "a"))) == '{"1":"b","0":"a"}'

    def test_force_object(self) -> None:
        assert encode_pairs(((0, [1]),), JsonFlag.FORCE_OBJECT) == '{"0":{"0":1}}'

    def test_nested_mapping_and_tuple(self) -> None:
        assert encode_pairs((("a", {"b": (1, 2)}),)) == '{"a":{"b":[1,2]}}'

    def test_unsupported_type(self) -> None:
        assert encode_pairs(((0, object()),)) == ""
        with pytest.raises(JsonEncodeError):
            encode_pairs(((0, object()),), JsonFlag.THROW_ON_ERROR)


# =============================================================================
# ЭКРАНИРОВАНИЕ
# =============================================================================


class TestEscaping:
    """Экранирование строк"""

    def test_slash_escaped_by_default(self) -> None:
        assert encode_pairs(((0, "http://x"),)) == '["http:\\/\\/x"]'

    def test_slash_in_key_escaped(self) -> None:
        assert encode_pairs((("a/b", 1),)) == '{"a\\/b":1}'

    def test_hex_tag_amp_apos(self) -> None:
        flags = JsonFlag.HEX_TAG | JsonFlag.HEX_AMP | JsonFlag.HEX_APOS
        assert encode_pairs(((0, "<a&'>"),), flags) == '["\\u003Ca\\u0026\\u0027\\u003E"]'

    def test_hex_quot(self) -> None:
        assert encode_pairs(((0, 'say "hi"'),), JsonFlag.HEX_QUOT) == '["say \\u0022hi\\u0022"]'

    def test_hex_quot_keeps_escaped_backslash(self) -> None:
        """Строка, оканчивающаяся обратным слэшем, не ломается"""
        assert encode_pairs(((0, "a\\"),), JsonFlag.HEX_QUOT) == '["a\\\\"]'

    def test_unicode(self) -> None:
        assert encode_pairs(((0, "ж"),)) == '["\\u0436"]'
        assert encode_pairs(((0, "ж"),), JsonFlag.UNESCAPED_UNICODE) == '["ж"]'


# =============================================================================
# ЧИСЛА
# =============================================================================


class TestFloats:
    """Тесты для float значений"""

    def test_integral_float_loses_fraction(self) -> None:
        assert encode_pairs(((0, 10.0),)) == "[10]"

    def test_preserve_zero_fraction(self) -> None:
        assert encode_pairs(((0, 10.0),), JsonFlag.PRESERVE_ZERO_FRACTION) == "[10.0]"

    def test_fractional_float(self) -> None:
        assert encode_pairs(((0, 0.1),)) == "[0.1]"

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite(self, value: float) -> None:
        assert encode_pairs(((0, value),)) == ""
        with pytest.raises(JsonEncodeError):
            encode_pairs(((0, value),), JsonFlag.THROW_ON_ERROR)


# =============================================================================
# ГЛУБИНА
# =============================================================================


class TestDepth:
    """Ограничение вложенности"""

    def test_exact_depth_allowed(self) -> None:
        assert encode_pairs(((0, [[1]]),), depth=3) == "[[[1]]]"

    def test_depth_exceeded(self) -> None:
        assert encode_pairs(((0, [[1]]),), depth=2) == ""

    def test_depth_exceeded_throws(self) -> None:
        with pytest.raises(JsonEncodeError) as exc_info:
            encode_pairs(((0, [[1]]),), JsonFlag.THROW_ON_ERROR, depth=2)
        assert exc_info.value.context["depth"] == 2
