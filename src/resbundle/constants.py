"""Shared constants for resbundle.

Centralized configuration constants used by the loaders, scopes and the
default textual decoder. Placing them here avoids circular imports and
provides a single source of truth.

Constants are grouped by domain:
- Resource naming: How bundle names map onto resource paths
- Decoding: Encodings and size limits for textual bundles

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Resource naming
    "NAME_SEPARATOR",
    "PATH_SEPARATOR",
    "PROPERTIES_SUFFIX",
    "SCHEME_MARKER",
    # Decoding
    "DEFAULT_ENCODING",
    "FALLBACK_ENCODING",
    "MAX_RESOURCE_SIZE",
]

# ============================================================================
# RESOURCE NAMING
# ============================================================================

# Bundle names are dotted ("l10n.Messages_fr"); resource paths use "/".
NAME_SEPARATOR: str = "."
PATH_SEPARATOR: str = "/"

# File suffix of textual bundles (without the leading dot).
PROPERTIES_SUFFIX: str = "properties"

# A bundle name containing this marker looks like a URL and is never
# mapped onto a resource path.
SCHEME_MARKER: str = "://"

# ============================================================================
# DECODING
# ============================================================================

# Textual bundles are read as UTF-8 first. Legacy files that are not valid
# UTF-8 are re-read as ISO-8859-1, the historical encoding of the format.
DEFAULT_ENCODING: str = "utf-8"
FALLBACK_ENCODING: str = "iso-8859-1"

# Maximum size of a single textual bundle in bytes (10 MiB).
# Larger streams are rejected before decoding.
MAX_RESOURCE_SIZE: int = 10 * 1024 * 1024
