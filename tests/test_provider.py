"""Tests for ResourceBundleProvider format negotiation.

Validates construction-time format validation, format precedence, the
"not found" outcome, and that decode failures short-circuit.
"""

from __future__ import annotations

import logging
import threading

import pytest

from resbundle import (
    DEFAULT_FORMATS,
    BundleFormat,
    DecodeError,
    InvalidFormatError,
    ListResourceBundle,
    PropertyResourceBundle,
    ResourceBundleProvider,
    to_bundle_name,
)
from resbundle.scope import PackageScope, scope_for_type
from tests.helpers.bundles import BundleSetupError, ExplodingBundle, Messages_fr
from tests.helpers.scopes import MemoryScope


class MemoryProvider(ResourceBundleProvider):
    """Provider looking bundles up in an injected MemoryScope."""

    def __init__(self, scope: MemoryScope, *formats: str, **kwargs: object) -> None:
        super().__init__(*formats, **kwargs)  # type: ignore[arg-type]
        self._memory_scope = scope

    @property
    def scope(self) -> MemoryScope:
        return self._memory_scope

    def to_bundle_name(self, base_name: str, locale: object) -> str:
        return to_bundle_name(base_name, str(locale))


class PlainProvider(ResourceBundleProvider):
    def to_bundle_name(self, base_name: str, locale: object) -> str:
        return f"{base_name}_{locale}"


FR_PROPERTIES = b"greeting = Salut\nsource = text\n"


class TestProviderConstruction:
    """Format identifiers are validated once, at construction."""

    def test_default_formats(self) -> None:
        """No arguments selects compiled-type then textual."""
        provider = PlainProvider()
        assert provider.formats == DEFAULT_FORMATS
        assert provider.formats == (BundleFormat.COMPILED_TYPE, BundleFormat.TEXTUAL)

    def test_empty_formats_without_defaults(self, memory_scope: MemoryScope) -> None:
        """use_defaults=False keeps an empty list; nothing is ever looked up."""
        memory_scope.types["l10n.Messages_fr"] = Messages_fr
        memory_scope.resources["l10n/Messages_fr.properties"] = FR_PROPERTIES
        provider = MemoryProvider(memory_scope, *[], use_defaults=False)

        assert provider.formats == ()
        assert provider.get_bundle("l10n.Messages", "fr") is None
        assert memory_scope.calls == []

    def test_explicit_formats_ignore_use_defaults(self) -> None:
        provider = PlainProvider("textual", use_defaults=False)
        assert provider.formats == (BundleFormat.TEXTUAL,)

    def test_string_identifiers_accepted(self) -> None:
        """Plain strings are converted to BundleFormat members."""
        provider = PlainProvider("textual", "compiled-type")
        assert provider.formats == (BundleFormat.TEXTUAL, BundleFormat.COMPILED_TYPE)
        assert all(isinstance(f, BundleFormat) for f in provider.formats)

    def test_duplicates_tolerated(self) -> None:
        """Repeated identifiers are kept as given."""
        provider = PlainProvider("textual", "textual")
        assert provider.formats == (BundleFormat.TEXTUAL, BundleFormat.TEXTUAL)

    @pytest.mark.parametrize("bad", ["compiled", "properties", "", "TEXTUAL", 42, None])
    def test_unknown_identifier_rejected(self, bad: object) -> None:
        """Anything outside the enumeration fails with InvalidFormatError."""
        with pytest.raises(InvalidFormatError) as exc_info:
            PlainProvider("textual", bad)  # type: ignore[arg-type]
        assert exc_info.value.format == bad
        assert isinstance(exc_info.value, ValueError)

    def test_formats_immutable(self) -> None:
        """formats is a tuple exposed through a read-only property."""
        provider = PlainProvider("textual")
        assert isinstance(provider.formats, tuple)
        with pytest.raises(AttributeError):
            provider.formats = ()  # type: ignore[misc]

    def test_default_scope_is_defining_package(self) -> None:
        """Without an override the scope is the package of the subclass."""
        scope = PlainProvider().scope
        assert isinstance(scope, PackageScope)
        assert scope == scope_for_type(PlainProvider)

    def test_repr_lists_formats(self) -> None:
        assert repr(PlainProvider("textual")) == "PlainProvider(formats=[textual])"


class TestProviderLookup:
    """get_bundle() negotiation across formats."""

    def test_compiled_type_found(self, memory_scope: MemoryScope) -> None:
        """A constructible class is instantiated afresh."""
        memory_scope.types["l10n.Messages_fr"] = Messages_fr
        provider = MemoryProvider(memory_scope, "compiled-type")

        bundle = provider.get_bundle("l10n.Messages", "fr")

        assert type(bundle) is Messages_fr
        assert bundle.get_string("greeting") == "Bonjour"

    def test_textual_found(self, memory_scope: MemoryScope) -> None:
        """Textual content matches the decoded key/value pairs."""
        memory_scope.resources["l10n/Messages_fr.properties"] = FR_PROPERTIES
        provider = MemoryProvider(memory_scope, "textual")

        bundle = provider.get_bundle("l10n.Messages", "fr")

        assert isinstance(bundle, PropertyResourceBundle)
        assert bundle.as_dict() == {"greeting": "Salut", "source": "text"}

    @pytest.mark.parametrize(
        ("formats", "expected_source"),
        [
            (("compiled-type", "textual"), "class"),
            (("textual", "compiled-type"), "text"),
        ],
    )
    def test_format_order_decides(
        self,
        memory_scope: MemoryScope,
        formats: tuple[str, ...],
        expected_source: str,
    ) -> None:
        """When both representations exist, the first configured format wins."""
        memory_scope.types["l10n.Messages_fr"] = Messages_fr
        memory_scope.resources["l10n/Messages_fr.properties"] = FR_PROPERTIES
        provider = MemoryProvider(memory_scope, *formats)

        bundle = provider.get_bundle("l10n.Messages", "fr")

        assert bundle is not None
        assert bundle.get_string("source") == expected_source

    def test_first_hit_stops_iteration(self, memory_scope: MemoryScope) -> None:
        """Later formats are not consulted once a bundle is found."""
        memory_scope.types["l10n.Messages_fr"] = Messages_fr
        provider = MemoryProvider(memory_scope, "compiled-type", "textual")

        provider.get_bundle("l10n.Messages", "fr")

        assert memory_scope.calls == [("resolve_type", "l10n.Messages_fr")]

    def test_falls_through_to_next_format(self, memory_scope: MemoryScope) -> None:
        """A miss in the first format moves on to the second."""
        memory_scope.resources["l10n/Messages_fr.properties"] = FR_PROPERTIES
        provider = MemoryProvider(memory_scope, "compiled-type", "textual")

        bundle = provider.get_bundle("l10n.Messages", "fr")

        assert bundle is not None
        assert bundle.get_string("source") == "text"

    def test_textual_only_skips_type_lookup(self, memory_scope: MemoryScope) -> None:
        """A textual-only provider never resolves types."""
        provider = MemoryProvider(memory_scope, "textual")

        provider.get_bundle("l10n.Messages", "fr")

        assert all(method != "resolve_type" for method, _ in memory_scope.calls)

    def test_nothing_found_returns_none(self, memory_scope: MemoryScope) -> None:
        """Exhausting all formats is a normal None outcome."""
        provider = MemoryProvider(memory_scope)
        assert provider.get_bundle("l10n.Messages", "fr") is None

    def test_fresh_instance_per_call(self, memory_scope: MemoryScope) -> None:
        """The provider never hands out the same bundle twice."""
        memory_scope.types["l10n.Messages_fr"] = Messages_fr
        provider = MemoryProvider(memory_scope, "compiled-type")

        first = provider.get_bundle("l10n.Messages", "fr")
        second = provider.get_bundle("l10n.Messages", "fr")

        assert first is not second

    def test_root_locale_uses_base_name(self, memory_scope: MemoryScope) -> None:
        memory_scope.resources["l10n/Messages.properties"] = b"greeting=Hi"
        provider = MemoryProvider(memory_scope, "textual")

        bundle = provider.get_bundle("l10n.Messages", "")

        assert bundle is not None
        assert bundle.get_string("greeting") == "Hi"

    @pytest.mark.parametrize(("base_name", "locale"), [(None, "fr"), ("l10n.Messages", None)])
    def test_none_arguments_rejected(
        self, memory_scope: MemoryScope, base_name: object, locale: object
    ) -> None:
        provider = MemoryProvider(memory_scope)
        with pytest.raises(TypeError):
            provider.get_bundle(base_name, locale)  # type: ignore[arg-type]


class TestProviderFailures:
    """Failures are not mistaken for "not found"."""

    def test_decode_error_short_circuits(self, memory_scope: MemoryScope) -> None:
        """A decode failure propagates and later formats are not tried."""
        memory_scope.resources["l10n/Messages_fr.properties"] = b"bad = \\u12"
        memory_scope.types["l10n.Messages_fr"] = Messages_fr
        provider = MemoryProvider(memory_scope, "textual", "compiled-type")

        with pytest.raises(DecodeError):
            provider.get_bundle("l10n.Messages", "fr")

        assert all(method != "resolve_type" for method, _ in memory_scope.calls)

    def test_open_failure_surfaces_as_decode_error(self, memory_scope: MemoryScope) -> None:
        """An I/O failure opening the primary resource is not "not found"."""
        memory_scope.failing.add("l10n/Messages_fr.properties")
        provider = MemoryProvider(memory_scope, "textual")

        with pytest.raises(DecodeError) as exc_info:
            provider.get_bundle("l10n.Messages", "fr")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.resource_name == "l10n/Messages_fr.properties"

    def test_constructor_error_passes_through(self, memory_scope: MemoryScope) -> None:
        """The bundle's own exception reaches the caller unwrapped."""
        memory_scope.types["l10n.Messages_fr"] = ExplodingBundle
        provider = MemoryProvider(memory_scope, "compiled-type", "textual")

        with pytest.raises(BundleSetupError):
            provider.get_bundle("l10n.Messages", "fr")


class TestProviderLogging:
    """Per-attempt tracing at DEBUG level."""

    def test_attempts_logged(
        self, memory_scope: MemoryScope, caplog: pytest.LogCaptureFixture
    ) -> None:
        memory_scope.resources["l10n/Messages_fr.properties"] = FR_PROPERTIES
        provider = MemoryProvider(memory_scope)

        with caplog.at_level(logging.DEBUG, logger="resbundle.provider"):
            provider.get_bundle("l10n.Messages", "fr")

        messages = [r.getMessage() for r in caplog.records if r.name == "resbundle.provider"]
        assert messages == [
            "compiled-type l10n.Messages_fr: not_found",
            "textual l10n.Messages_fr: found",
        ]


class TestProviderConcurrency:
    """get_bundle() is safe to call from many threads at once."""

    def test_concurrent_calls_return_independent_instances(
        self, memory_scope: MemoryScope
    ) -> None:
        memory_scope.types["l10n.Messages_fr"] = Messages_fr
        memory_scope.resources["l10n/Messages_de.properties"] = b"greeting = Hallo"
        provider = MemoryProvider(memory_scope)
        results: list[object] = []
        errors: list[BaseException] = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker(locale: str) -> None:
            barrier.wait()
            try:
                for _ in range(25):
                    bundle = provider.get_bundle("l10n.Messages", locale)
                    with lock:
                        results.append(bundle)
            except Exception as e:  # noqa: BLE001 - collected for assertion
                with lock:
                    errors.append(e)

        threads = [
            threading.Thread(target=worker, args=("fr" if i % 2 else "de",)) for i in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(results) == 200
        assert len({id(b) for b in results}) == 200
        for bundle in results:
            assert isinstance(bundle, (ListResourceBundle, PropertyResourceBundle))
            expected = "Bonjour" if isinstance(bundle, Messages_fr) else "Hallo"
            assert bundle.get_string("greeting") == expected
