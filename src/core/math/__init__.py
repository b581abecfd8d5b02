"""
Core math modules для числового Scalar

Закрытый набор числовых типов и checked conversion с гарантией сохранения значения.
"""

# Numeric Types
from src.core.math.numeric_types import (
    BUILTIN_NUMERIC_TYPES,
    NUMERIC_TYPE_SPECS,
    ComplexHalf,
    NumericType,
    NumericTypeSpec,
    ScalarTag,
    float_max,
    integer_limits,
    numeric_type_for,
)

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    fits_integer_range,
    is_exactly_representable,
    is_integer_valued,
    is_valid_float,
    narrow_float,
    overflows_float,
)

# Checked Conversion
from src.core.math.checked_conversion import (
    CONVERTIBLE_TYPES,
    DEFAULT_CONVERSION_CONFIG,
    ConversionConfig,
    ConversionRangeError,
    UnsupportedTargetTypeError,
    checked_convert,
    resolve_target,
)

__all__ = [
    # Numeric Types: Enums
    "NumericType",
    "ScalarTag",
    # Numeric Types: Registry
    "BUILTIN_NUMERIC_TYPES",
    "NUMERIC_TYPE_SPECS",
    "NumericTypeSpec",
    "ComplexHalf",
    # Numeric Types: Functions
    "float_max",
    "integer_limits",
    "numeric_type_for",
    # Numerical Safeguards
    "fits_integer_range",
    "is_exactly_representable",
    "is_integer_valued",
    "is_valid_float",
    "narrow_float",
    "overflows_float",
    # Checked Conversion: Constants
    "CONVERTIBLE_TYPES",
    "DEFAULT_CONVERSION_CONFIG",
    # Checked Conversion: Config
    "ConversionConfig",
    # Checked Conversion: Exceptions
    "ConversionRangeError",
    "UnsupportedTargetTypeError",
    # Checked Conversion: Functions
    "checked_convert",
    "resolve_target",
]
