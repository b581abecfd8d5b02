"""
Checked Conversion — Приведение значения Scalar к запрошенному числовому типу

Модуль выполняет приведение с проверкой сохранения значения:
- int → целый/float: значение должно быть представимо точно
- float → целый: без дробной части и в диапазоне типа
- float → float: без переполнения; округление по ConversionConfig
- complex → вещественный: мнимая часть строго 0.0
- → complex: каждая компонента проверяется как → float

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Молчаливого усечения не бывает: либо точный результат, либо ConversionRangeError
2. Модуль не выполняет retry и не выбирает другой тип за вызывающего
3. complex32 не является допустимой целью (UnsupportedTargetTypeError)
"""

import logging
from dataclasses import dataclass
from typing import Any, Final

import numpy as np

from src.core.math.numeric_types import (
    NumericType,
    ScalarTag,
    integer_limits,
    numeric_type_for,
)
from src.core.math.numerical_safeguards import (
    fits_integer_range,
    is_exactly_representable,
    is_integer_valued,
    is_valid_float,
    narrow_float,
    overflows_float,
)

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ConversionRangeError(ValueError):
    """
    Значение не представимо в целевом типе без потерь.

    Переполнение, усечение дробной части или ненулевая мнимая часть.
    Ошибка восстановимая: вызывающий код может выбрать другой тип.
    """

    def __init__(self, source: ScalarTag, target: NumericType, value: Any, reason: str):
        self.source = source
        self.target = target
        self.value = value
        self.reason = reason
        super().__init__(
            f"value cannot be converted to type {target.value} without overflow: "
            f"{value!r} (source={source.value}, {reason})"
        )


class UnsupportedTargetTypeError(TypeError):
    """Запрошен тип, для которого нет accessor'а"""

    def __init__(self, target: Any):
        self.target = target
        super().__init__(f"to() cast to unexpected type: {target!r}")


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ConversionConfig:
    """Конфигурация checked conversion.

    По умолчанию сужение float → более узкий float допускает IEEE
    round-to-nearest; при exact_float_narrowing=True любая потеря точности
    считается ошибкой.
    """

    exact_float_narrowing: bool = False

    # NaN/Inf проходят float → float (и в компоненты complex)
    allow_non_finite: bool = True


DEFAULT_CONVERSION_CONFIG: Final[ConversionConfig] = ConversionConfig()

# Все типы, кроме complex половинной точности
CONVERTIBLE_TYPES: Final[frozenset[NumericType]] = frozenset(NumericType) - {
    NumericType.COMPLEX32
}


# =============================================================================
# ЦЕЛЕВОЙ ТИП
# =============================================================================


def resolve_target(target: Any) -> NumericType:
    """
    Нормализация запрошенного типа к NumericType.

    Args:
        target: NumericType, numpy/ml_dtypes скалярный тип или builtin
            bool/int/float/complex

    Returns:
        NumericType из CONVERTIBLE_TYPES

    Raises:
        UnsupportedTargetTypeError: Если для типа нет accessor'а
    """
    if isinstance(target, NumericType):
        numeric_type = target
    elif isinstance(target, type):
        try:
            numeric_type = numeric_type_for(target)
        except TypeError:
            raise UnsupportedTargetTypeError(target) from None
    else:
        raise UnsupportedTargetTypeError(target)

    if numeric_type not in CONVERTIBLE_TYPES:
        raise UnsupportedTargetTypeError(target)
    return numeric_type


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def _bool_rejection(value: int | float) -> str | None:
    if value == 0 or value == 1:
        return None
    return "bool accepts only 0 or 1"


def _integer_rejection(value: int | float, target: NumericType) -> str | None:
    if isinstance(value, float):
        if not is_valid_float(value):
            return "non-finite value"
        if not is_integer_valued(value):
            return "fractional part would be truncated"
        value = int(value)
    min_value, max_value = integer_limits(target)
    if not fits_integer_range(value, min_value, max_value):
        return f"outside range [{min_value}, {max_value}]"
    return None


def _float_rejection(
    value: int | float, target: NumericType, config: ConversionConfig
) -> str | None:
    if isinstance(value, float) and not is_valid_float(value):
        return None if config.allow_non_finite else "non-finite value"
    if overflows_float(value, target):
        return "exceeds largest finite value"
    # int проверяется на точность всегда, float только в строгом режиме
    if isinstance(value, int) or config.exact_float_narrowing:
        if not is_exactly_representable(value, target):
            return "not exactly representable"
    return None


# =============================================================================
# CHECKED CONVERT
# =============================================================================


def checked_convert(
    value: int | float | complex,
    source: ScalarTag,
    target: NumericType,
    config: ConversionConfig = DEFAULT_CONVERSION_CONFIG,
) -> np.generic:
    """
    Приведение активного значения Scalar к целевому типу с проверкой.

    Args:
        value: Активное значение payload (int для BOOL/INTEGER, float, complex)
        source: Категория источника (для сообщения об ошибке)
        target: Целевой тип из CONVERTIBLE_TYPES
        config: Правила точности (default: DEFAULT_CONVERSION_CONFIG)

    Returns:
        Экземпляр target.scalar_type (numpy / ml_dtypes скаляр)

    Raises:
        ConversionRangeError: Если значение не представимо в target
        UnsupportedTargetTypeError: Если target = complex32

    Examples:
        >>> checked_convert(100, ScalarTag.INTEGER, NumericType.INT8)
        np.int8(100)
        >>> checked_convert(300, ScalarTag.INTEGER, NumericType.INT8)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ConversionRangeError: value cannot be converted to type int8 without overflow: 300 ...
    """
    if target not in CONVERTIBLE_TYPES:
        raise UnsupportedTargetTypeError(target)

    if target.category is ScalarTag.COMPLEX:
        return _convert_to_complex(value, source, target, config)

    real = value
    if isinstance(value, complex):
        if value.imag != 0.0:
            raise _reject(source, target, value, "nonzero imaginary part would be discarded")
        real = value.real

    if target.category is ScalarTag.BOOL:
        reason = _bool_rejection(real)
    elif target.category is ScalarTag.INTEGER:
        reason = _integer_rejection(real, target)
    else:
        reason = _float_rejection(real, target, config)

    if reason is not None:
        raise _reject(source, target, value, reason)

    if target.category is ScalarTag.FLOATING:
        return target.scalar_type(float(real))
    if isinstance(real, float):
        real = int(real)
    return target.scalar_type(real)


def _convert_to_complex(
    value: int | float | complex,
    source: ScalarTag,
    target: NumericType,
    config: ConversionConfig,
) -> np.generic:
    component = target.component_type
    if isinstance(value, complex):
        parts = (value.real, value.imag)
    else:
        parts = (value, 0.0)

    for part in parts:
        reason = _float_rejection(part, component, config)
        if reason is not None:
            raise _reject(source, target, value, reason)

    real, imag = (narrow_float(part, component) for part in parts)
    return target.scalar_type(complex(real, imag))


def _reject(
    source: ScalarTag, target: NumericType, value: Any, reason: str
) -> ConversionRangeError:
    logger.debug(
        "Rejected conversion %s -> %s of %r: %s", source.value, target.value, value, reason
    )
    return ConversionRangeError(source, target, value, reason)
