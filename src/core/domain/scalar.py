"""
Scalar — Одно число неизвестной до runtime категории

Immutable Pydantic модель, представляющая ровно одно значение категории
BOOL, INTEGER, FLOATING или COMPLEX. Позволяет API, принимающим либо массив,
либо голое число, работать с единым типом операнда.

Представление:
- payload: discriminated union (discriminator = tag): у каждого варианта
  есть только собственные поля, чтение "чужого" члена невозможно
- BOOL хранится как int 0/1, INTEGER как int64, FLOATING как double,
  COMPLEX как пара double (real, imag)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. tag однозначно определяет вариант payload
2. Категория выбирается по типу источника, никогда по содержимому
3. Значение неизменяемо (frozen=True); negate() создаёт новый Scalar
4. Приведение к другому типу только через checked conversion
"""

import warnings
from typing import Annotated, Any, Final, Literal, Optional, Union, overload

import ml_dtypes
import numpy as np
from pydantic import BaseModel, Field

from src.core.math.checked_conversion import (
    DEFAULT_CONVERSION_CONFIG,
    ConversionConfig,
    checked_convert,
    resolve_target,
)
from src.core.math.numeric_types import (
    BUILTIN_NUMERIC_TYPES,
    ComplexHalf,
    NumericType,
    ScalarTag,
    integer_limits,
    numeric_type_for,
)

INT64_MIN, INT64_MAX = integer_limits(NumericType.INT64)

# Внешний тег для каждой категории
_TAG_TO_NUMERIC_TYPE: Final[dict[ScalarTag, NumericType]] = {
    ScalarTag.COMPLEX: NumericType.COMPLEX128,
    ScalarTag.FLOATING: NumericType.FLOAT64,
    ScalarTag.INTEGER: NumericType.INT64,
    ScalarTag.BOOL: NumericType.BOOL,
}

NumericValue = Union[bool, int, float, complex, np.generic, ComplexHalf]


# =============================================================================
# EXCEPTIONS
# =============================================================================


class InternalConsistencyError(RuntimeError):
    """
    tag вне определённого набора.

    Означает нарушенный инвариант (дефект), а не плохие входные данные.
    Не предназначена для обработки в обычном потоке управления.
    """

    pass


# =============================================================================
# PAYLOAD VARIANTS
# =============================================================================


class BoolPayload(BaseModel):
    """BOOL: хранится как целое 0/1"""

    tag: Literal[ScalarTag.BOOL] = ScalarTag.BOOL
    value: int = Field(..., ge=0, le=1, description="0 = False, 1 = True")

    model_config = {"frozen": True}

    @property
    def number(self) -> int:
        return self.value


class IntegerPayload(BaseModel):
    """INTEGER: 64-битное знаковое целое"""

    tag: Literal[ScalarTag.INTEGER] = ScalarTag.INTEGER
    value: int = Field(..., ge=INT64_MIN, le=INT64_MAX, description="int64")

    model_config = {"frozen": True}

    @property
    def number(self) -> int:
        return self.value


class FloatingPayload(BaseModel):
    """FLOATING: IEEE double (NaN/Inf допустимы)"""

    tag: Literal[ScalarTag.FLOATING] = ScalarTag.FLOATING
    value: float = Field(..., description="float64")

    model_config = {"frozen": True}

    @property
    def number(self) -> float:
        return self.value


class ComplexPayload(BaseModel):
    """COMPLEX: упорядоченная пара double (real, imag)"""

    tag: Literal[ScalarTag.COMPLEX] = ScalarTag.COMPLEX
    real: float = Field(..., description="Вещественная часть")
    imag: float = Field(..., description="Мнимая часть")

    model_config = {"frozen": True}

    @property
    def number(self) -> complex:
        return complex(self.real, self.imag)


ScalarPayload = Annotated[
    Union[BoolPayload, IntegerPayload, FloatingPayload, ComplexPayload],
    Field(discriminator="tag"),
]


def _zero_payload() -> IntegerPayload:
    return IntegerPayload(value=0)


def _wrap_int64(value: int) -> int:
    """Приведение к int64 с two's complement wrap (как fixed-width cast)"""
    return (value - INT64_MIN) % 2**64 + INT64_MIN


# =============================================================================
# SCALAR MODEL
# =============================================================================


class Scalar(BaseModel):
    """
    Модель одного числа с runtime-тегом категории.

    Immutable модель (frozen=True). Scalar() без аргументов даёт INTEGER 0.
    Конструирование из значения выполняется через from_value() или именованные
    from_bool/from_int/from_float/from_complex.

    Examples:
        >>> Scalar.from_value(3.14).type_tag()
        <NumericType.FLOAT64: 'float64'>
        >>> Scalar.from_value(100).to(np.int8)
        np.int8(100)
        >>> -Scalar.from_value(5)
        Scalar(-5)
    """

    payload: ScalarPayload = Field(
        default_factory=_zero_payload, description="Активный вариант значения"
    )

    model_config = {"frozen": True}

    # -------------------------------------------------------------------------
    # Конструирование
    # -------------------------------------------------------------------------

    @classmethod
    def from_value(cls, value: NumericValue) -> "Scalar":
        """
        Конструирование Scalar с выбором категории по типу значения.

        Порядок классификации: complex → целый (без bool) → floating → bool.
        Проверка диапазона не выполняется: int64/double вмещают любой
        поддерживаемый fixed-width источник.

        Args:
            value: Значение поддерживаемого числового типа

        Returns:
            Новый Scalar

        Raises:
            TypeError: Если тип значения не поддерживается
            OverflowError: Если builtin int не помещается в int64
        """
        numeric_type = numeric_type_for(type(value))

        if numeric_type.is_complex():
            return cls.from_complex(value)
        if numeric_type.is_integral(include_bool=False):
            return cls.from_int(value)
        if numeric_type.is_floating_point():
            return cls.from_float(value)
        if numeric_type is NumericType.BOOL:
            return cls.from_bool(value)

        raise InternalConsistencyError(f"Unknown category for {numeric_type.value}")

    @classmethod
    def from_bool(cls, value: Union[bool, np.bool_]) -> "Scalar":
        return cls(payload=BoolPayload(value=int(bool(value))))

    @classmethod
    def from_int(cls, value: Union[int, np.integer]) -> "Scalar":
        """
        INTEGER из целого любой ширины.

        numpy целые приводятся к int64 с wrap (uint64 > 2**63-1 становится
        отрицательным); builtin int обязан помещаться в int64.
        """
        if isinstance(value, np.integer):
            number = _wrap_int64(int(value))
        else:
            number = int(np.int64(value))
        return cls(payload=IntegerPayload(value=number))

    @classmethod
    def from_float(cls, value: Union[float, np.floating, ml_dtypes.bfloat16]) -> "Scalar":
        return cls(payload=FloatingPayload(value=float(value)))

    @classmethod
    def from_complex(cls, value: Union[complex, np.complexfloating, ComplexHalf]) -> "Scalar":
        number = complex(value)
        return cls(payload=ComplexPayload(real=number.real, imag=number.imag))

    # -------------------------------------------------------------------------
    # Категория
    # -------------------------------------------------------------------------

    @property
    def tag(self) -> ScalarTag:
        return self.payload.tag

    @property
    def value(self) -> Union[bool, int, float, complex]:
        """Активное значение как число Python (bool для BOOL)"""
        if self.tag is ScalarTag.BOOL:
            return bool(self.payload.number)
        return self.payload.number

    def is_floating_point(self) -> bool:
        return self.tag is ScalarTag.FLOATING

    def is_integral(self, include_bool: Optional[bool] = None) -> bool:
        """
        Целая категория.

        Args:
            include_bool: Считать ли BOOL целым. Вызов без аргумента устарел
                и эквивалентен include_bool=False.
        """
        if include_bool is None:
            warnings.warn(
                "is_integral() is deprecated, pass include_bool explicitly",
                DeprecationWarning,
                stacklevel=2,
            )
            include_bool = False
        return self.tag is ScalarTag.INTEGER or (include_bool and self.is_boolean())

    def is_complex(self) -> bool:
        return self.tag is ScalarTag.COMPLEX

    def is_boolean(self) -> bool:
        return self.tag is ScalarTag.BOOL

    def type_tag(self) -> NumericType:
        """
        Внешний тег числового типа для слоя dispatch.

        COMPLEX → complex128, FLOATING → float64, INTEGER → int64, BOOL → bool.

        Raises:
            InternalConsistencyError: Если tag вне определённого набора
        """
        numeric_type = _TAG_TO_NUMERIC_TYPE.get(self.tag)
        if numeric_type is None:
            raise InternalConsistencyError(f"Unknown scalar type: {self.tag!r}")
        return numeric_type

    # -------------------------------------------------------------------------
    # Отрицание
    # -------------------------------------------------------------------------

    def negate(self) -> "Scalar":
        """
        Арифметическое отрицание с сохранением категории.

        BOOL отрицается через int64 и становится INTEGER (-True → -1).
        -(-2**63) заворачивается в -2**63.
        """
        payload = self.payload
        if isinstance(payload, ComplexPayload):
            return Scalar(payload=ComplexPayload(real=-payload.real, imag=-payload.imag))
        if isinstance(payload, FloatingPayload):
            return Scalar(payload=FloatingPayload(value=-payload.value))
        return Scalar(payload=IntegerPayload(value=_wrap_int64(-payload.number)))

    def __neg__(self) -> "Scalar":
        return self.negate()

    # -------------------------------------------------------------------------
    # Checked conversion
    # -------------------------------------------------------------------------

    @overload
    def to(self, target: type[bool], config: Optional[ConversionConfig] = None) -> bool: ...

    @overload
    def to(self, target: type[int], config: Optional[ConversionConfig] = None) -> int: ...

    @overload
    def to(self, target: type[float], config: Optional[ConversionConfig] = None) -> float: ...

    @overload
    def to(self, target: type[complex], config: Optional[ConversionConfig] = None) -> complex: ...

    @overload
    def to(
        self,
        target: Union[
            type[np.bool_],
            type[np.integer],
            type[np.floating],
            type[np.complexfloating],
            type[ml_dtypes.bfloat16],
        ],
        config: Optional[ConversionConfig] = None,
    ) -> np.generic: ...

    @overload
    def to(self, target: NumericType, config: Optional[ConversionConfig] = None) -> np.generic: ...

    def to(self, target: Any, config: Optional[ConversionConfig] = None) -> Any:
        """
        Приведение значения к запрошенному типу с проверкой сохранения значения.

        Args:
            target: NumericType, numpy/ml_dtypes скалярный тип или builtin
                bool/int/float/complex (возвращают значения Python)
            config: Правила точности (default: DEFAULT_CONVERSION_CONFIG)

        Returns:
            Значение целевого типа

        Raises:
            ConversionRangeError: Если значение не представимо в target
            UnsupportedTargetTypeError: Если для target нет accessor'а
        """
        numeric_type = resolve_target(target)
        result = checked_convert(
            self.payload.number,
            self.tag,
            numeric_type,
            config or DEFAULT_CONVERSION_CONFIG,
        )
        if isinstance(target, type) and target in BUILTIN_NUMERIC_TYPES:
            return target(result)
        return result

    def to_bool(self, config: Optional[ConversionConfig] = None) -> np.bool_:
        return self.to(NumericType.BOOL, config)

    def to_uint8(self, config: Optional[ConversionConfig] = None) -> np.uint8:
        return self.to(NumericType.UINT8, config)

    def to_int8(self, config: Optional[ConversionConfig] = None) -> np.int8:
        return self.to(NumericType.INT8, config)

    def to_int16(self, config: Optional[ConversionConfig] = None) -> np.int16:
        return self.to(NumericType.INT16, config)

    def to_int32(self, config: Optional[ConversionConfig] = None) -> np.int32:
        return self.to(NumericType.INT32, config)

    def to_int64(self, config: Optional[ConversionConfig] = None) -> np.int64:
        return self.to(NumericType.INT64, config)

    def to_uint16(self, config: Optional[ConversionConfig] = None) -> np.uint16:
        return self.to(NumericType.UINT16, config)

    def to_uint32(self, config: Optional[ConversionConfig] = None) -> np.uint32:
        return self.to(NumericType.UINT32, config)

    def to_uint64(self, config: Optional[ConversionConfig] = None) -> np.uint64:
        return self.to(NumericType.UINT64, config)

    def to_float16(self, config: Optional[ConversionConfig] = None) -> np.float16:
        return self.to(NumericType.FLOAT16, config)

    def to_bfloat16(self, config: Optional[ConversionConfig] = None) -> ml_dtypes.bfloat16:
        return self.to(NumericType.BFLOAT16, config)

    def to_float32(self, config: Optional[ConversionConfig] = None) -> np.float32:
        return self.to(NumericType.FLOAT32, config)

    def to_float64(self, config: Optional[ConversionConfig] = None) -> np.float64:
        return self.to(NumericType.FLOAT64, config)

    def to_complex64(self, config: Optional[ConversionConfig] = None) -> np.complex64:
        return self.to(NumericType.COMPLEX64, config)

    def to_complex128(self, config: Optional[ConversionConfig] = None) -> np.complex128:
        return self.to(NumericType.COMPLEX128, config)

    def __repr__(self) -> str:
        return f"Scalar({self.value!r})"
