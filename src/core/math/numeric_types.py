"""
Numeric Types — Закрытый набор поддерживаемых числовых типов

Единственный источник истины для:
- внешних тегов числовых типов (NumericType), которые потребляет слой dispatch ядер
- категорий представления Scalar (ScalarTag)
- соответствия Python/NumPy типов → NumericType
- диапазонов целых типов и max finite для float типов

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Классификация выполняется только по ТИПУ значения, никогда по содержимому
2. Любой тип вне NUMERIC_TYPE_SPECS отклоняется (TypeError)
3. Каждый NumericType имеет ровно одну категорию
"""

from enum import Enum
from typing import Final, NamedTuple

import ml_dtypes
import numpy as np


# =============================================================================
# ENUMS
# =============================================================================


class ScalarTag(str, Enum):
    """Категория представления Scalar"""

    BOOL = "bool"
    INTEGER = "integer"
    FLOATING = "floating"
    COMPLEX = "complex"


class NumericType(str, Enum):
    """
    Внешний тег числового типа.

    Потребляется слоем dispatch, который выбирает numeric kernel по
    Scalar.type_tag(). Порядок членов повторяет порядок в NUMERIC_TYPE_SPECS.
    """

    BOOL = "bool"
    UINT8 = "uint8"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT16 = "float16"
    BFLOAT16 = "bfloat16"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    COMPLEX32 = "complex32"
    COMPLEX64 = "complex64"
    COMPLEX128 = "complex128"

    @property
    def spec(self) -> "NumericTypeSpec":
        return NUMERIC_TYPE_SPECS[self]

    @property
    def category(self) -> ScalarTag:
        return self.spec.category

    @property
    def scalar_type(self) -> type:
        return self.spec.scalar_type

    @property
    def bits(self) -> int:
        return self.spec.bits

    @property
    def component_type(self) -> "NumericType":
        """
        Вещественный тип компоненты для complex типов.

        Raises:
            ValueError: Если тип не complex
        """
        if self.category is not ScalarTag.COMPLEX:
            raise ValueError(f"{self.value} is not a complex type")
        return _COMPLEX_COMPONENTS[self]

    def is_floating_point(self) -> bool:
        return self.category is ScalarTag.FLOATING

    def is_complex(self) -> bool:
        return self.category is ScalarTag.COMPLEX

    def is_integral(self, include_bool: bool) -> bool:
        """Целый тип; bool считается целым только при include_bool=True"""
        if self.category is ScalarTag.INTEGER:
            return True
        return include_bool and self.category is ScalarTag.BOOL


# =============================================================================
# COMPLEX HALF
# =============================================================================


class ComplexHalf(NamedTuple):
    """
    Комплексное число половинной точности (пара float16).

    Ни Python, ни NumPy не предоставляют complex32, поэтому тип определён здесь.
    Используется только как источник при конструировании Scalar.
    """

    real: np.float16
    imag: np.float16

    @classmethod
    def from_complex(cls, value: complex) -> "ComplexHalf":
        """Округление обеих компонент до float16 (IEEE round-to-nearest)"""
        value = complex(value)
        return cls(np.float16(value.real), np.float16(value.imag))

    def __complex__(self) -> complex:
        return complex(float(self.real), float(self.imag))


# =============================================================================
# ТАБЛИЦА ТИПОВ
# =============================================================================


class NumericTypeSpec(NamedTuple):
    """Свойства одного поддерживаемого числового типа"""

    category: ScalarTag
    scalar_type: type
    bits: int


NUMERIC_TYPE_SPECS: Final[dict[NumericType, NumericTypeSpec]] = {
    NumericType.BOOL: NumericTypeSpec(ScalarTag.BOOL, np.bool_, 8),
    NumericType.UINT8: NumericTypeSpec(ScalarTag.INTEGER, np.uint8, 8),
    NumericType.INT8: NumericTypeSpec(ScalarTag.INTEGER, np.int8, 8),
    NumericType.INT16: NumericTypeSpec(ScalarTag.INTEGER, np.int16, 16),
    NumericType.INT32: NumericTypeSpec(ScalarTag.INTEGER, np.int32, 32),
    NumericType.INT64: NumericTypeSpec(ScalarTag.INTEGER, np.int64, 64),
    NumericType.UINT16: NumericTypeSpec(ScalarTag.INTEGER, np.uint16, 16),
    NumericType.UINT32: NumericTypeSpec(ScalarTag.INTEGER, np.uint32, 32),
    NumericType.UINT64: NumericTypeSpec(ScalarTag.INTEGER, np.uint64, 64),
    NumericType.FLOAT16: NumericTypeSpec(ScalarTag.FLOATING, np.float16, 16),
    NumericType.BFLOAT16: NumericTypeSpec(ScalarTag.FLOATING, ml_dtypes.bfloat16, 16),
    NumericType.FLOAT32: NumericTypeSpec(ScalarTag.FLOATING, np.float32, 32),
    NumericType.FLOAT64: NumericTypeSpec(ScalarTag.FLOATING, np.float64, 64),
    NumericType.COMPLEX32: NumericTypeSpec(ScalarTag.COMPLEX, ComplexHalf, 32),
    NumericType.COMPLEX64: NumericTypeSpec(ScalarTag.COMPLEX, np.complex64, 64),
    NumericType.COMPLEX128: NumericTypeSpec(ScalarTag.COMPLEX, np.complex128, 128),
}

_COMPLEX_COMPONENTS: Final[dict[NumericType, NumericType]] = {
    NumericType.COMPLEX32: NumericType.FLOAT16,
    NumericType.COMPLEX64: NumericType.FLOAT32,
    NumericType.COMPLEX128: NumericType.FLOAT64,
}

# Встроенные типы Python как синонимы канонических 64-битных типов
BUILTIN_NUMERIC_TYPES: Final[dict[type, NumericType]] = {
    bool: NumericType.BOOL,
    int: NumericType.INT64,
    float: NumericType.FLOAT64,
    complex: NumericType.COMPLEX128,
}

_SCALAR_TYPE_LOOKUP: Final[dict[type, NumericType]] = {
    **{spec.scalar_type: numeric_type for numeric_type, spec in NUMERIC_TYPE_SPECS.items()},
    **BUILTIN_NUMERIC_TYPES,
}

# Поиск по dtype: платформенные синонимы (np.longlong, np.intc, ...)
_DTYPE_LOOKUP: Final[tuple[tuple[np.dtype, NumericType], ...]] = tuple(
    (np.dtype(spec.scalar_type), numeric_type)
    for numeric_type, spec in NUMERIC_TYPE_SPECS.items()
    if issubclass(spec.scalar_type, np.generic)
)


# =============================================================================
# КЛАССИФИКАЦИЯ
# =============================================================================


def numeric_type_for(source_type: type) -> NumericType:
    """
    Определение NumericType по типу значения.

    Порядок поиска:
    1. Точное совпадение типа (numpy, ml_dtypes, ComplexHalf, builtin)
    2. Для numpy скаляров: совпадение dtype (платформенные синонимы)
    3. Для подклассов builtin (например, IntEnum): первый builtin в MRO

    Args:
        source_type: Тип исходного значения

    Returns:
        Соответствующий NumericType

    Raises:
        TypeError: Если тип не входит в поддерживаемый набор

    Examples:
        >>> numeric_type_for(np.int8)
        <NumericType.INT8: 'int8'>
        >>> numeric_type_for(float)
        <NumericType.FLOAT64: 'float64'>
    """
    numeric_type = _SCALAR_TYPE_LOOKUP.get(source_type)
    if numeric_type is not None:
        return numeric_type

    if issubclass(source_type, np.generic):
        source_dtype = np.dtype(source_type)
        for dtype, numeric_type in _DTYPE_LOOKUP:
            if dtype == source_dtype:
                return numeric_type
    else:
        for base in source_type.__mro__[1:]:
            if base in BUILTIN_NUMERIC_TYPES:
                return BUILTIN_NUMERIC_TYPES[base]

    raise TypeError(f"Unsupported numeric source type: {source_type.__name__}")


# =============================================================================
# ДИАПАЗОНЫ
# =============================================================================


def integer_limits(numeric_type: NumericType) -> tuple[int, int]:
    """
    Диапазон [min, max] целого типа (bool: [0, 1]).

    Raises:
        ValueError: Если тип не целый
    """
    if numeric_type is NumericType.BOOL:
        return 0, 1
    if numeric_type.category is not ScalarTag.INTEGER:
        raise ValueError(f"{numeric_type.value} is not an integral type")
    info = np.iinfo(numeric_type.scalar_type)
    return int(info.min), int(info.max)


def float_max(numeric_type: NumericType) -> float:
    """
    Максимальное конечное значение float типа.

    Raises:
        ValueError: Если тип не floating
    """
    if numeric_type.category is not ScalarTag.FLOATING:
        raise ValueError(f"{numeric_type.value} is not a floating type")
    return float(ml_dtypes.finfo(numeric_type.scalar_type).max)
