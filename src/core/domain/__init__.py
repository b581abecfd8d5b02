"""
Domain models and value objects.

Contains the Scalar value type and its payload variants.
"""

from src.core.domain.scalar import (
    BoolPayload,
    ComplexPayload,
    FloatingPayload,
    IntegerPayload,
    InternalConsistencyError,
    Scalar,
    ScalarPayload,
)

__all__ = [
    # Scalar model
    "Scalar",
    "InternalConsistencyError",
    # Payload variants
    "ScalarPayload",
    "BoolPayload",
    "IntegerPayload",
    "FloatingPayload",
    "ComplexPayload",
]
