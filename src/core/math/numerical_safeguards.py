"""
Numerical Safeguards — Предикаты диапазона и точности

Модуль содержит примитивы, на которых строится checked conversion:
- Проверка конечности float (NaN/Inf)
- Проверка целочисленности float без усечения
- Проверка попадания целого в диапазон типа
- Проверка переполнения float типа
- Проверка точной представимости значения в более узком типе

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одна функция не модифицирует значение, только проверяет
2. Сравнения int с float выполняются точно (семантика Python, без округления)
3. Все операции детерминированы и воспроизводимы
"""

import math

from src.core.math.numeric_types import NumericType, float_max


# =============================================================================
# NaN/Inf
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное, False если NaN или Inf
    """
    return math.isfinite(value)


def is_integer_valued(value: float) -> bool:
    """
    Проверка, что float конечен и не имеет дробной части.

    Examples:
        >>> is_integer_valued(3.0)
        True
        >>> is_integer_valued(3.5)
        False
        >>> is_integer_valued(float('inf'))
        False
    """
    return is_valid_float(value) and value.is_integer()


# =============================================================================
# ДИАПАЗОНЫ
# =============================================================================


def fits_integer_range(value: int, min_value: int, max_value: int) -> bool:
    """
    Проверка, что целое значение лежит в [min_value, max_value].

    Examples:
        >>> fits_integer_range(100, -128, 127)
        True
        >>> fits_integer_range(300, -128, 127)
        False
    """
    return min_value <= value <= max_value


def overflows_float(value: int | float, numeric_type: NumericType) -> bool:
    """
    Проверка переполнения float типа.

    Конечное значение переполняет тип, если его модуль больше максимального
    конечного значения типа. NaN/Inf не считаются переполнением.

    Args:
        value: Исходное значение (int сравнивается точно)
        numeric_type: Целевой floating тип

    Returns:
        True если |value| > max finite типа

    Examples:
        >>> overflows_float(70000.0, NumericType.FLOAT16)
        True
        >>> overflows_float(float('inf'), NumericType.FLOAT16)
        False
    """
    if isinstance(value, float) and not is_valid_float(value):
        return False
    return abs(value) > float_max(numeric_type)


# =============================================================================
# ТОЧНОСТЬ
# =============================================================================


def narrow_float(value: int | float, numeric_type: NumericType) -> float:
    """
    Приведение значения к floating типу и обратно к double.

    Использует IEEE round-to-nearest целевого типа. Вызывающий код обязан
    заранее исключить переполнение (overflows_float).

    Examples:
        >>> narrow_float(0.1, NumericType.FLOAT64)
        0.1
        >>> narrow_float(2049, NumericType.FLOAT16)
        2048.0
    """
    return float(numeric_type.scalar_type(float(value)))


def is_exactly_representable(value: int | float, numeric_type: NumericType) -> bool:
    """
    Проверка, что значение представимо в floating типе без потери информации.

    Сравнение результата с исходным значением точное (в т.ч. float с int):
    2**53 + 1 не представимо в float64.
    NaN/Inf считаются представимыми в любом floating типе.

    Args:
        value: Исходное значение
        numeric_type: Целевой floating тип

    Returns:
        True если значение сохраняется без изменений
    """
    if isinstance(value, float) and not is_valid_float(value):
        return True
    if overflows_float(value, numeric_type):
        return False
    return narrow_float(value, numeric_type) == value
