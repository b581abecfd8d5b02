"""
Тесты для модуля Checked Conversion

Проверяет:
1. Нормализацию целевого типа (resolve_target)
2. int → целый / bool / float / complex
3. float → целый / float (default и strict конфигурация)
4. complex → вещественный / complex
5. Атрибуты ConversionRangeError и логирование отказов
"""

import logging
import math

import ml_dtypes
import numpy as np
import pytest

from src.core.math.checked_conversion import (
    CONVERTIBLE_TYPES,
    DEFAULT_CONVERSION_CONFIG,
    ConversionConfig,
    ConversionRangeError,
    UnsupportedTargetTypeError,
    checked_convert,
    resolve_target,
)
from src.core.math.numeric_types import ComplexHalf, NumericType, ScalarTag

STRICT = ConversionConfig(exact_float_narrowing=True)


# =============================================================================
# ЦЕЛЕВОЙ ТИП
# =============================================================================


class TestResolveTarget:
    """Тесты для resolve_target"""

    def test_numeric_type_passthrough(self) -> None:
        assert resolve_target(NumericType.INT8) is NumericType.INT8

    @pytest.mark.parametrize(
        "target, expected",
        [
            (np.int8, NumericType.INT8),
            (np.uint64, NumericType.UINT64),
            (ml_dtypes.bfloat16, NumericType.BFLOAT16),
            (np.complex64, NumericType.COMPLEX64),
            (bool, NumericType.BOOL),
            (int, NumericType.INT64),
            (float, NumericType.FLOAT64),
            (complex, NumericType.COMPLEX128),
        ],
    )
    def test_scalar_types(self, target: type, expected: NumericType) -> None:
        assert resolve_target(target) is expected

    @pytest.mark.parametrize(
        "target", [NumericType.COMPLEX32, ComplexHalf, str, "int8", None, 3]
    )
    def test_unsupported_targets(self, target) -> None:
        """complex32 и нечисловые типы не имеют accessor'а"""
        with pytest.raises(UnsupportedTargetTypeError, match="to\\(\\) cast to unexpected type"):
            resolve_target(target)

    def test_unsupported_target_is_type_error(self) -> None:
        assert issubclass(UnsupportedTargetTypeError, TypeError)

    def test_convertible_types(self) -> None:
        assert NumericType.COMPLEX32 not in CONVERTIBLE_TYPES
        assert len(CONVERTIBLE_TYPES) == len(NumericType) - 1


# =============================================================================
# CONFIG
# =============================================================================


class TestConversionConfig:
    """Тесты для ConversionConfig"""

    def test_defaults(self) -> None:
        assert DEFAULT_CONVERSION_CONFIG.exact_float_narrowing is False
        assert DEFAULT_CONVERSION_CONFIG.allow_non_finite is True

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONVERSION_CONFIG.exact_float_narrowing = True  # type: ignore[misc]


# =============================================================================
# INT → *
# =============================================================================


class TestIntegerSource:
    """Тесты для источника INTEGER / BOOL"""

    def test_in_range_int8(self) -> None:
        result = checked_convert(100, ScalarTag.INTEGER, NumericType.INT8)
        assert result == 100
        assert isinstance(result, np.int8)

    def test_overflow_int8(self) -> None:
        """300 > int8 max 127"""
        with pytest.raises(ConversionRangeError, match="int8") as exc_info:
            checked_convert(300, ScalarTag.INTEGER, NumericType.INT8)
        error = exc_info.value
        assert error.source is ScalarTag.INTEGER
        assert error.target is NumericType.INT8
        assert error.value == 300
        assert "outside range [-128, 127]" in error.reason

    def test_negative_to_unsigned(self) -> None:
        with pytest.raises(ConversionRangeError):
            checked_convert(-1, ScalarTag.INTEGER, NumericType.UINT8)

    @pytest.mark.parametrize(
        "value, target",
        [
            (255, NumericType.UINT8),
            (-32768, NumericType.INT16),
            (2**31 - 1, NumericType.INT32),
            (-(2**63), NumericType.INT64),
            (65535, NumericType.UINT16),
            (2**63 - 1, NumericType.UINT64),
        ],
    )
    def test_boundaries(self, value: int, target: NumericType) -> None:
        """Граничные значения диапазона допустимы"""
        assert checked_convert(value, ScalarTag.INTEGER, target) == value

    def test_to_bool(self) -> None:
        assert checked_convert(1, ScalarTag.BOOL, NumericType.BOOL) == True  # noqa: E712
        assert checked_convert(0, ScalarTag.INTEGER, NumericType.BOOL) == False  # noqa: E712
        with pytest.raises(ConversionRangeError, match="0 or 1"):
            checked_convert(2, ScalarTag.INTEGER, NumericType.BOOL)

    def test_bool_source_to_int64(self) -> None:
        assert checked_convert(1, ScalarTag.BOOL, NumericType.INT64) == 1

    def test_to_float_exact(self) -> None:
        result = checked_convert(2048, ScalarTag.INTEGER, NumericType.FLOAT16)
        assert result == 2048.0
        assert isinstance(result, np.float16)

    @pytest.mark.parametrize(
        "value, target",
        [
            (2049, NumericType.FLOAT16),
            (257, NumericType.BFLOAT16),
            (16777217, NumericType.FLOAT32),
            (2**53 + 1, NumericType.FLOAT64),
        ],
    )
    def test_to_float_inexact_rejected(self, value: int, target: NumericType) -> None:
        """int → float всегда требует точности, даже в default конфигурации"""
        with pytest.raises(ConversionRangeError, match="not exactly representable"):
            checked_convert(value, ScalarTag.INTEGER, target)

    def test_to_float16_overflow(self) -> None:
        with pytest.raises(ConversionRangeError, match="exceeds largest finite value"):
            checked_convert(70000, ScalarTag.INTEGER, NumericType.FLOAT16)

    def test_to_complex(self) -> None:
        result = checked_convert(5, ScalarTag.INTEGER, NumericType.COMPLEX64)
        assert result == 5 + 0j
        assert isinstance(result, np.complex64)

    def test_to_complex_inexact_rejected(self) -> None:
        with pytest.raises(ConversionRangeError):
            checked_convert(16777217, ScalarTag.INTEGER, NumericType.COMPLEX64)


# =============================================================================
# FLOAT → *
# =============================================================================


class TestFloatingSource:
    """Тесты для источника FLOATING"""

    def test_integral_float_to_int(self) -> None:
        result = checked_convert(2.0, ScalarTag.FLOATING, NumericType.INT32)
        assert result == 2
        assert isinstance(result, np.int32)

    def test_fractional_float_to_int(self) -> None:
        with pytest.raises(ConversionRangeError, match="fractional part"):
            checked_convert(2.5, ScalarTag.FLOATING, NumericType.INT64)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_to_int(self, value: float) -> None:
        with pytest.raises(ConversionRangeError, match="non-finite"):
            checked_convert(value, ScalarTag.FLOATING, NumericType.INT64)

    def test_float_out_of_integer_range(self) -> None:
        with pytest.raises(ConversionRangeError, match="outside range"):
            checked_convert(256.0, ScalarTag.FLOATING, NumericType.UINT8)

    def test_float_to_bool(self) -> None:
        assert checked_convert(1.0, ScalarTag.FLOATING, NumericType.BOOL) == True  # noqa: E712
        with pytest.raises(ConversionRangeError):
            checked_convert(0.5, ScalarTag.FLOATING, NumericType.BOOL)

    def test_narrowing_rounds_by_default(self) -> None:
        """По умолчанию IEEE round-to-nearest допустим"""
        result = checked_convert(0.1, ScalarTag.FLOATING, NumericType.FLOAT32)
        assert result == np.float32(0.1)
        assert isinstance(result, np.float32)

    def test_narrowing_strict_rejects_precision_loss(self) -> None:
        with pytest.raises(ConversionRangeError, match="not exactly representable"):
            checked_convert(0.1, ScalarTag.FLOATING, NumericType.FLOAT32, STRICT)

    def test_narrowing_strict_accepts_exact(self) -> None:
        result = checked_convert(1.5, ScalarTag.FLOATING, NumericType.BFLOAT16, STRICT)
        assert float(result) == 1.5
        assert isinstance(result, ml_dtypes.bfloat16)

    def test_overflow_float32(self) -> None:
        with pytest.raises(ConversionRangeError, match="exceeds largest finite value"):
            checked_convert(1e300, ScalarTag.FLOATING, NumericType.FLOAT32)

    def test_non_finite_passes_through(self) -> None:
        """NaN/Inf сохраняются при сужении"""
        assert math.isinf(checked_convert(math.inf, ScalarTag.FLOATING, NumericType.FLOAT16))
        assert math.isnan(checked_convert(math.nan, ScalarTag.FLOATING, NumericType.FLOAT32))

    def test_non_finite_rejected_when_disallowed(self) -> None:
        config = ConversionConfig(allow_non_finite=False)
        with pytest.raises(ConversionRangeError, match="non-finite"):
            checked_convert(math.nan, ScalarTag.FLOATING, NumericType.FLOAT64, config)

    def test_float_to_complex(self) -> None:
        result = checked_convert(0.25, ScalarTag.FLOATING, NumericType.COMPLEX128)
        assert result == complex(0.25, 0.0)
        assert isinstance(result, np.complex128)


# =============================================================================
# COMPLEX → *
# =============================================================================


class TestComplexSource:
    """Тесты для источника COMPLEX"""

    def test_zero_imag_to_double(self) -> None:
        result = checked_convert(complex(1.0, 0.0), ScalarTag.COMPLEX, NumericType.FLOAT64)
        assert result == 1.0

    def test_nonzero_imag_to_double(self) -> None:
        with pytest.raises(ConversionRangeError, match="imaginary") as exc_info:
            checked_convert(complex(1.0, 2.0), ScalarTag.COMPLEX, NumericType.FLOAT64)
        assert exc_info.value.source is ScalarTag.COMPLEX
        assert exc_info.value.value == complex(1.0, 2.0)

    def test_nan_imag_rejected(self) -> None:
        with pytest.raises(ConversionRangeError, match="imaginary"):
            checked_convert(complex(1.0, math.nan), ScalarTag.COMPLEX, NumericType.FLOAT64)

    def test_zero_imag_to_int(self) -> None:
        """Вещественная часть проверяется как float → int"""
        assert checked_convert(complex(3.0, 0.0), ScalarTag.COMPLEX, NumericType.INT8) == 3
        with pytest.raises(ConversionRangeError, match="fractional part"):
            checked_convert(complex(3.5, 0.0), ScalarTag.COMPLEX, NumericType.INT8)

    def test_complex128_to_complex64(self) -> None:
        result = checked_convert(complex(0.1, 0.2), ScalarTag.COMPLEX, NumericType.COMPLEX64)
        assert result == np.complex64(complex(0.1, 0.2))
        assert isinstance(result, np.complex64)

    def test_complex64_component_overflow(self) -> None:
        """Компоненты проверяются независимо"""
        with pytest.raises(ConversionRangeError, match="exceeds largest finite value"):
            checked_convert(complex(0.0, 1e300), ScalarTag.COMPLEX, NumericType.COMPLEX64)

    def test_complex64_strict(self) -> None:
        with pytest.raises(ConversionRangeError):
            checked_convert(
                complex(0.5, 0.1), ScalarTag.COMPLEX, NumericType.COMPLEX64, STRICT
            )
        result = checked_convert(
            complex(0.5, -0.25), ScalarTag.COMPLEX, NumericType.COMPLEX64, STRICT
        )
        assert result == complex(0.5, -0.25)

    def test_complex32_target_rejected(self) -> None:
        with pytest.raises(UnsupportedTargetTypeError):
            checked_convert(complex(1.0, 0.0), ScalarTag.COMPLEX, NumericType.COMPLEX32)


# =============================================================================
# ЛОГИРОВАНИЕ
# =============================================================================


class TestRejectionLogging:
    """Тесты логирования отказов"""

    def test_rejection_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="src.core.math.checked_conversion")
        with pytest.raises(ConversionRangeError):
            checked_convert(300, ScalarTag.INTEGER, NumericType.INT8)
        assert "Rejected conversion integer -> int8 of 300" in caplog.text

    def test_success_not_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="src.core.math.checked_conversion")
        checked_convert(100, ScalarTag.INTEGER, NumericType.INT8)
        assert caplog.text == ""
