"""
Core numeric primitives: the tagged Scalar value, its numeric type registry,
and checked conversion.

This module is independent of any array or kernel dispatch layer; the
dispatcher consumes Scalar.type_tag() from the outside.
"""
