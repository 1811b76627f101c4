"""Abstract resource bundle provider.

ResourceBundleProvider is the entry point a bundle framework calls with a
base name and one resolved locale. Concrete providers supply the
name-mangling hook; the provider tries its configured formats in order
and returns the first bundle found.

Thread Safety:
    Configuration is fixed at construction and every call builds fresh
    objects, so get_bundle() may be called concurrently without locking.

Python 3.13+.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from resbundle.decoding import PropertiesDecoder
from resbundle.enums import BundleFormat, LoadStatus
from resbundle.errors import InvalidFormatError
from resbundle.loading import load_textual_bundle, load_type_bundle
from resbundle.scope import scope_for_type

if TYPE_CHECKING:
    from babel import Locale

    from resbundle.bundle import ResourceBundle
    from resbundle.decoding import TextualDecoder
    from resbundle.scope import Scope

__all__ = ["DEFAULT_FORMATS", "ResourceBundleProvider"]

logger = logging.getLogger(__name__)

DEFAULT_FORMATS: tuple[BundleFormat, ...] = (BundleFormat.COMPILED_TYPE, BundleFormat.TEXTUAL)
"""Formats used when a provider is constructed without any."""


def _validate_format(value: object) -> BundleFormat:
    if isinstance(value, str):
        try:
            return BundleFormat(value)
        except ValueError:
            pass
    raise InvalidFormatError(value)


class ResourceBundleProvider(ABC):
    """Locates and instantiates bundles local to the provider's scope.

    Subclasses implement to_bundle_name(). The scope defaults to the
    package defining the subclass; override the ``scope`` property to look
    elsewhere.

    Example:
        >>> class MessagesProvider(ResourceBundleProvider):
        ...     def to_bundle_name(self, base_name, locale):
        ...         return to_bundle_name(base_name, locale)
        >>> provider = MessagesProvider("textual")
        >>> bundle = provider.get_bundle("l10n.Messages", "fr")

    Args:
        *formats: Format identifiers ("compiled-type", "textual") in the
            order they are attempted. An empty call selects DEFAULT_FORMATS
            unless use_defaults is False.
        decoder: Decoder for textual bundles (default: PropertiesDecoder())
        use_defaults: Whether an empty formats list means DEFAULT_FORMATS.
            With False, an empty list is kept and get_bundle() always
            returns None (default: True)

    Raises:
        InvalidFormatError: If any identifier is not a recognized format
    """

    __slots__ = ("_decoder", "_formats")

    def __init__(
        self,
        *formats: BundleFormat | str,
        decoder: TextualDecoder | None = None,
        use_defaults: bool = True,
    ) -> None:
        if not formats and use_defaults:
            formats = DEFAULT_FORMATS
        self._formats: tuple[BundleFormat, ...] = tuple(_validate_format(f) for f in formats)
        self._decoder: TextualDecoder = decoder if decoder is not None else PropertiesDecoder()

    @property
    def formats(self) -> tuple[BundleFormat, ...]:
        """Formats attempted by get_bundle(), in order."""
        return self._formats

    @property
    def decoder(self) -> TextualDecoder:
        """Decoder used for textual bundles."""
        return self._decoder

    @property
    def scope(self) -> Scope:
        """Scope bundles are looked up in: the package defining this provider."""
        return scope_for_type(type(self))

    @abstractmethod
    def to_bundle_name(self, base_name: str, locale: Locale | str) -> str:
        """Mangle base_name and locale into a bundle name.

        Must be pure and deterministic; performs no I/O.
        """

    def get_bundle(self, base_name: str, locale: Locale | str) -> ResourceBundle | None:
        """Return a bundle for base_name and locale.

        Formats are tried in configured order; the first bundle found wins.

        Args:
            base_name: Base bundle name (e.g., "l10n.Messages")
            locale: Locale to load the bundle for

        Returns:
            A new bundle, or None if no format has one (normal outcome)

        Raises:
            TypeError: If base_name or locale is None
            DecodeError: If a textual bundle exists but cannot be read or decoded
            BundleInvariantError: If bundle construction breaks an invariant
        """
        if base_name is None or locale is None:
            msg = "base_name and locale must not be None"
            raise TypeError(msg)

        scope = self.scope
        bundle_name = self.to_bundle_name(base_name, locale)
        for bundle_format in self._formats:
            try:
                if bundle_format is BundleFormat.COMPILED_TYPE:
                    bundle = load_type_bundle(scope, bundle_name)
                else:
                    bundle = load_textual_bundle(scope, bundle_name, self._decoder)
            except Exception:
                logger.debug("%s %s: %s", bundle_format, bundle_name, LoadStatus.FAILED)
                raise
            if bundle is not None:
                logger.debug("%s %s: %s", bundle_format, bundle_name, LoadStatus.FOUND)
                return bundle
            logger.debug("%s %s: %s", bundle_format, bundle_name, LoadStatus.NOT_FOUND)
        return None

    def __repr__(self) -> str:
        formats = ", ".join(str(f) for f in self._formats)
        return f"{type(self).__name__}(formats=[{formats}])"
