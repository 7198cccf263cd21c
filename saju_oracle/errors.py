from __future__ import annotations


class SajuOracleError(RuntimeError):
    pass


class ValidationError(ValueError):
    """Malformed birth date/time or an out-of-range calendar field."""


class CatalogUnavailableError(SajuOracleError):
    pass


class InternalInvariantViolation(SajuOracleError):
    """A closed-enumeration lookup fell outside its table. Always a programming defect."""
