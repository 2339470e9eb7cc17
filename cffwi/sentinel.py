"""
Domain-violation signalling for FWI calculations.

Every formula in this package reports out-of-range primary inputs by
returning ``INVALID`` (-98.0) instead of raising, matching the reference
FWI implementation bit for bit. Formulas do not recognise the sentinel
when it is passed back in as an input: a sentinel fed to a downstream
formula silently produces another, meaningless number. Callers composing
formulas must check results first; ``IndexValue`` makes that check
explicit.
"""

from __future__ import annotations

from typing import NamedTuple

INVALID = -98.0


class FWIDomainError(ValueError):
    """Raised when an invalid (sentinel) index value is unwrapped."""


def is_invalid(value: float) -> bool:
    """Return True if ``value`` is the domain-violation sentinel."""
    return value == INVALID


class IndexValue(NamedTuple):
    """
    A calculated index together with its validity.

    Attributes
    ----------
    value : float
        Raw result, ``INVALID`` when the calculation was rejected.
    valid : bool
        False when the calculation received out-of-domain inputs.
    name : str
        Index name used in error messages.
    """

    value: float
    valid: bool
    name: str = "value"

    @classmethod
    def of(cls, raw: float, name: str = "value") -> "IndexValue":
        """Classify a raw formula result."""
        raw = float(raw)
        return cls(raw, not is_invalid(raw), name)

    def unwrap(self) -> float:
        """
        Return the value, raising if it is the sentinel.

        Raises
        ------
        FWIDomainError
            If the calculation was rejected.
        """
        if not self.valid:
            raise FWIDomainError(f"{self.name} is invalid: inputs were outside the valid domain")
        return self.value

    def unwrap_or(self, default: float) -> float:
        """Return the value, or ``default`` if it is the sentinel."""
        return self.value if self.valid else default

    def __float__(self) -> float:
        return self.value
