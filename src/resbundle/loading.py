"""Leaf-level bundle loaders.

Two loaders, one per bundle format. Both take a scope and a fully mangled
bundle name and return a fresh bundle, or None when nothing applicable
exists in that format.

Components:
    load_type_bundle - Resolve a class and construct it with no arguments
    load_textual_bundle - Open a resource (scope, then shared) and decode it
    to_resource_name - Map a dotted bundle name onto a resource path

Error policy:
    - Absence (no class, no resource, unsuitable class) returns None
    - Exceptions from a bundle's own constructor propagate unchanged
    - I/O failures while opening or reading become DecodeError
    - Broken construction invariants raise BundleInvariantError

Python 3.13+.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

from resbundle.access import ConstructionGrant
from resbundle.bundle import ResourceBundle
from resbundle.constants import (
    NAME_SEPARATOR,
    PATH_SEPARATOR,
    PROPERTIES_SUFFIX,
    SCHEME_MARKER,
)
from resbundle.errors import DecodeError

if TYPE_CHECKING:
    from resbundle.decoding import TextualDecoder
    from resbundle.scope import Scope

__all__ = [
    "is_constructible_bundle",
    "load_textual_bundle",
    "load_type_bundle",
    "to_resource_name",
]

logger = logging.getLogger(__name__)


def to_resource_name(bundle_name: str, suffix: str) -> str | None:
    """Convert a bundle name into a resource path.

    Args:
        bundle_name: Dotted bundle name (e.g., "l10n.Messages_fr")
        suffix: File suffix without the leading dot (e.g., "properties")

    Returns:
        Resource path (e.g., "l10n/Messages_fr.properties"), or None if the
        name looks like a URL

    Example:
        >>> to_resource_name("l10n.Messages_fr", "properties")
        'l10n/Messages_fr.properties'
        >>> to_resource_name("http://example.com/x", "properties") is None
        True
    """
    if SCHEME_MARKER in bundle_name:
        return None
    return f"{bundle_name.replace(NAME_SEPARATOR, PATH_SEPARATOR)}.{suffix}"


def is_constructible_bundle(candidate: object) -> bool:
    """Check whether candidate can be instantiated as a compiled-type bundle.

    A constructible bundle is a public (no leading underscore), concrete
    ResourceBundle subclass whose constructor accepts zero arguments.
    """
    if not isinstance(candidate, type) or not issubclass(candidate, ResourceBundle):
        return False
    if candidate.__name__.startswith("_") or inspect.isabstract(candidate):
        return False
    try:
        inspect.signature(candidate).bind()
    except (TypeError, ValueError):
        return False
    return True


def load_type_bundle(scope: Scope, bundle_name: str) -> ResourceBundle | None:
    """Load a compiled-type bundle from scope.

    Args:
        scope: Scope the bundle class is resolved in
        bundle_name: Mangled bundle name

    Returns:
        A new instance of the resolved class, or None if no constructible
        bundle class exists under that name

    Raises:
        BundleInvariantError: If construction breaks an environment invariant
        Exception: Whatever the bundle's own constructor raises, unchanged
    """
    candidate = scope.resolve_type(bundle_name)
    if candidate is None:
        return None
    if not is_constructible_bundle(candidate):
        logger.debug("Type %r is not a constructible bundle; skipping", candidate)
        return None

    with ConstructionGrant(candidate) as grant:
        return grant.construct()


def load_textual_bundle(
    scope: Scope,
    bundle_name: str,
    decoder: TextualDecoder,
) -> ResourceBundle | None:
    """Load a textual bundle from scope, falling back to its shared location.

    Args:
        scope: Scope the resource is looked up in first
        bundle_name: Mangled bundle name
        decoder: Decoder turning the byte stream into a bundle

    Returns:
        Decoded bundle, or None if the name is URL-like or no resource exists
        in either location

    Raises:
        DecodeError: If opening or reading the resource fails, or the decoder
            rejects its content
    """
    resource_name = to_resource_name(bundle_name, PROPERTIES_SUFFIX)
    if resource_name is None:
        logger.debug("Bundle name %r is URL-like; no textual lookup", bundle_name)
        return None

    try:
        stream = scope.open_resource(resource_name)
        if stream is None:
            # Bundles not yet moved into a scope still live in the shared location.
            stream = scope.open_shared_resource(resource_name)
            if stream is not None:
                logger.debug("Using shared resource for %s", resource_name)
    except OSError as e:
        msg = f"Failed to open textual bundle {resource_name}: {e}"
        raise DecodeError(msg, resource_name=resource_name) from e

    if stream is None:
        return None

    try:
        with stream:
            return decoder.decode(stream)
    except OSError as e:
        msg = f"Failed to read textual bundle {resource_name}: {e}"
        raise DecodeError(msg, resource_name=resource_name) from e
    except DecodeError as e:
        if not e.resource_name:
            e.resource_name = resource_name
        raise
