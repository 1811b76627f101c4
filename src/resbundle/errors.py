"""Exception hierarchy for resource bundle loading.

All library exceptions derive from ResourceBundleError. "Not found" is
never an exception: loaders and providers return None for it.

Python 3.13+.
"""

__all__ = [
    "BundleInvariantError",
    "DecodeError",
    "InvalidFormatError",
    "MissingResourceError",
    "ResourceBundleError",
]


class ResourceBundleError(Exception):
    """Base exception for all resbundle errors."""


class InvalidFormatError(ResourceBundleError, ValueError):
    """Provider configured with an unrecognized format identifier.

    A programming error detected at construction time. Never retried.

    Attributes:
        format: The rejected identifier
    """

    def __init__(self, format: object) -> None:  # noqa: A002 - mirrors provider argument
        """Initialize InvalidFormatError.

        Args:
            format: The rejected format identifier
        """
        self.format = format
        super().__init__(f"Unsupported bundle format: {format!r}")


class DecodeError(ResourceBundleError):
    """Textual bundle could not be read or decoded.

    Raised for I/O failures while opening or reading a resource and for
    malformed content. The underlying OSError, if any, is chained as
    ``__cause__``.

    Attributes:
        resource_name: Resource path being decoded (empty if unknown)
        line: 1-based line number of malformed content (None if not applicable)
    """

    def __init__(
        self,
        message: str,
        *,
        resource_name: str = "",
        line: int | None = None,
    ) -> None:
        """Initialize DecodeError.

        Args:
            message: Human-readable description
            resource_name: Resource path being decoded
            line: Line number of malformed content
        """
        super().__init__(message)
        self.resource_name = resource_name
        self.line = line


class BundleInvariantError(ResourceBundleError, RuntimeError):
    """Construction failed for a reason unrelated to the bundle's own logic.

    Signals a broken environment assumption (for example a constructor
    that returned an object of the wrong type). Fatal; never reported as
    "not found".
    """


class MissingResourceError(ResourceBundleError, KeyError):
    """Key absent from a resource bundle.

    Attributes:
        key: The missing key
        bundle_type: Name of the bundle class that was queried
    """

    def __init__(self, key: str, bundle_type: str) -> None:
        """Initialize MissingResourceError.

        Args:
            key: The missing key
            bundle_type: Name of the bundle class that was queried
        """
        self.key = key
        self.bundle_type = bundle_type
        super().__init__(f"Can't find resource for bundle {bundle_type}, key {key}")

    def __str__(self) -> str:
        """Return the message instead of KeyError's quoted repr."""
        return str(self.args[0])
