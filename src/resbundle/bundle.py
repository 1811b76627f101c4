"""Resource bundle abstraction and stock implementations.

A ResourceBundle is a read-only set of localized objects looked up by
string key. Providers return freshly constructed instances and keep no
reference to them.

Components:
    ResourceBundle - Abstract base for every bundle a provider may return
    ListResourceBundle - Compiled-type bundle built from get_contents() pairs
    PropertyResourceBundle - Bundle over decoded textual key/value pairs

Python 3.13+.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from resbundle.errors import MissingResourceError

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "ListResourceBundle",
    "PropertyResourceBundle",
    "ResourceBundle",
]


class ResourceBundle(ABC):
    """Abstract base for locale-specific resource bundles.

    Subclasses implement handle_get_object() and handle_keys(). Compiled-type
    bundles must be public classes whose constructor takes no arguments, so
    that a provider can instantiate them.

    Attributes:
        locale: Locale the bundle was loaded for, set by the caller (None
            until assigned)
    """

    locale: Locale | None = None

    @abstractmethod
    def handle_get_object(self, key: str) -> object | None:
        """Return the object for key, or None if this bundle lacks it."""

    @abstractmethod
    def handle_keys(self) -> Iterable[str]:
        """Return the keys contained in this bundle."""

    def get_object(self, key: str) -> object:
        """Get an object for the given key.

        Args:
            key: Resource key

        Returns:
            The stored object

        Raises:
            MissingResourceError: If the bundle has no object for key
        """
        value = self.handle_get_object(key)
        if value is None:
            raise MissingResourceError(key, type(self).__name__)
        return value

    def get_string(self, key: str) -> str:
        """Get a string for the given key.

        Raises:
            MissingResourceError: If the bundle has no object for key
            TypeError: If the stored object is not a string
        """
        value = self.get_object(key)
        if not isinstance(value, str):
            msg = f"Resource {key!r} is {type(value).__name__}, not str"
            raise TypeError(msg)
        return value

    def keys(self) -> frozenset[str]:
        """Return all keys of this bundle."""
        return frozenset(self.handle_keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.handle_get_object(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.keys()))

    def __len__(self) -> int:
        return len(self.keys())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={len(self)}, locale={self.locale!s})"


class ListResourceBundle(ResourceBundle):
    """Compiled-type bundle whose contents come from get_contents().

    Subclasses override get_contents() to return key/value pairs. Contents
    are materialized on first lookup, once per instance. Later duplicates
    of a key replace earlier ones.

    Example:
        >>> class Messages_fr(ListResourceBundle):
        ...     def get_contents(self):
        ...         return [("greeting", "Bonjour"), ("farewell", "Au revoir")]
        >>> Messages_fr().get_string("greeting")
        'Bonjour'
    """

    def __init__(self) -> None:
        self._lookup: Mapping[str, object] | None = None
        self._lock = threading.Lock()

    @abstractmethod
    def get_contents(self) -> Iterable[tuple[str, object]]:
        """Return the key/value pairs of this bundle."""

    def _materialize(self) -> Mapping[str, object]:
        lookup = self._lookup
        if lookup is not None:
            return lookup
        with self._lock:
            if self._lookup is None:
                table: dict[str, object] = {}
                for key, value in self.get_contents():
                    if key is None or value is None:
                        msg = f"{type(self).__name__}.get_contents() yielded a None key or value"
                        raise TypeError(msg)
                    table[key] = value
                self._lookup = MappingProxyType(table)
            return self._lookup

    def handle_get_object(self, key: str) -> object | None:
        return self._materialize().get(key)

    def handle_keys(self) -> Iterable[str]:
        return self._materialize().keys()


class PropertyResourceBundle(ResourceBundle):
    """Bundle over string key/value pairs decoded from a textual resource.

    The mapping is copied at construction; later changes to the source
    mapping are not visible through the bundle.
    """

    def __init__(self, entries: Mapping[str, str]) -> None:
        """Initialize PropertyResourceBundle.

        Args:
            entries: Decoded key/value pairs
        """
        self._lookup: Mapping[str, str] = MappingProxyType(dict(entries))

    def handle_get_object(self, key: str) -> object | None:
        return self._lookup.get(key)

    def handle_keys(self) -> Iterable[str]:
        return self._lookup.keys()

    def as_dict(self) -> dict[str, str]:
        """Return a mutable copy of the bundle contents."""
        return dict(self._lookup)
