"""
Test suite for the tagged numeric Scalar

Contains:
- tests/unit/          : Unit tests for individual modules
"""
