"""Ordered record severities.

The member values coincide with the stdlib :mod:`logging` level numbers so a
:class:`Severity` can be handed straight to :meth:`logging.Logger.log` and
compared against :attr:`logging.LogRecord.levelno`.
"""
from __future__ import annotations

import logging
from enum import IntEnum

__all__ = ["Severity"]


class Severity(IntEnum):
    """Total order ``INFO < WARNING < ERROR``."""

    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @property
    def tag(self) -> str:
        """Bracketed form used inside a log line, e.g. ``[ERROR]``."""
        return f"[{self.name}]"

    @classmethod
    def parse(cls, value: Severity | int | str) -> Severity:
        """Coerce *value* (member, level number or name) into a :class:`Severity`.

        Names are matched case-insensitively after stripping whitespace.

        Raises
        ------
        ValueError
            If *value* does not name one of the three severities.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown severity name: {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"Unknown severity: {value!r}")

    def __str__(self) -> str:  # pragma: no cover – trivial
        return self.name
