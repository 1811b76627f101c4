"""Enumerations for resbundle type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so plain identifiers such as
"textual" compare equal to the corresponding member.

Python 3.13+.
"""

from enum import StrEnum


class BundleFormat(StrEnum):
    """Bundle representation a provider may attempt.

    StrEnum provides automatic string conversion: str(BundleFormat.TEXTUAL) == "textual"
    """

    COMPILED_TYPE = "compiled-type"
    """Bundle implemented as a constructible ResourceBundle subclass."""

    TEXTUAL = "textual"
    """Bundle stored as a key/value resource decoded from a byte stream."""


class LoadStatus(StrEnum):
    """Outcome of a single format attempt.

    StrEnum provides automatic string conversion: str(LoadStatus.FOUND) == "found"
    """

    FOUND = "found"
    """The format produced a bundle."""

    NOT_FOUND = "not_found"
    """Nothing applicable for this format (normal outcome)."""

    FAILED = "failed"
    """The attempt raised; the error propagates to the caller."""


__all__ = [
    "BundleFormat",
    "LoadStatus",
]
