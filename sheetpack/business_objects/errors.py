# -*- coding: utf-8 -*-
"""
Common exceptions for the business objects layer.
"""


class SchemaError(ValueError):
    """Raised when an input file (topics/constraints/reference JSON) violates the expected schema."""


class StateValidationError(ValueError):
    """Raised when an in-memory record violates domain constraints (ids, ranges, enums)."""
