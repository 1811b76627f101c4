"""resbundle - Scoped resource bundle providers.

Locates and instantiates locale-specific resource bundles for one fully
resolved bundle name. Locale fallback chains and caching belong to the
calling framework; a provider only answers "is there a bundle for this
name, in one of my formats, in my scope?".

Public API:
    ResourceBundleProvider - Abstract provider; subclasses supply to_bundle_name()
    BundleFormat - Recognized bundle formats ("compiled-type", "textual")
    ResourceBundle - Abstract bundle base class
    ListResourceBundle - Compiled-type bundle built from key/value pairs
    PropertyResourceBundle - Bundle over decoded ".properties" content
    PropertiesDecoder - Default textual decoder
    PackageScope, DirectoryScope, SearchPathScope, ScriptScope - Scope implementations
    to_bundle_name - Default name-mangling rule

Exceptions:
    ResourceBundleError - Base exception class
    InvalidFormatError - Unrecognized format identifier
    DecodeError - Textual bundle could not be read or decoded
    BundleInvariantError - Bundle construction broke an invariant
    MissingResourceError - Key absent from a bundle

Submodules:
    resbundle.loading - Leaf loaders (load_type_bundle, load_textual_bundle)
    resbundle.access - Scoped construction grants
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .bundle import ListResourceBundle, PropertyResourceBundle, ResourceBundle
from .decoding import PropertiesDecoder, TextualDecoder
from .enums import BundleFormat, LoadStatus
from .errors import (
    BundleInvariantError,
    DecodeError,
    InvalidFormatError,
    MissingResourceError,
    ResourceBundleError,
)
from .locale_utils import to_bundle_name
from .provider import DEFAULT_FORMATS, ResourceBundleProvider
from .scope import (
    DirectoryScope,
    PackageScope,
    Scope,
    ScriptScope,
    SearchPathScope,
    scope_for_type,
)

# Version information - Auto-populated from package metadata
try:
    __version__ = _get_version("resbundle")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DEFAULT_FORMATS",
    "BundleFormat",
    "BundleInvariantError",
    "DecodeError",
    "DirectoryScope",
    "InvalidFormatError",
    "ListResourceBundle",
    "LoadStatus",
    "MissingResourceError",
    "PackageScope",
    "PropertiesDecoder",
    "PropertyResourceBundle",
    "ResourceBundle",
    "ResourceBundleError",
    "ResourceBundleProvider",
    "Scope",
    "ScriptScope",
    "SearchPathScope",
    "TextualDecoder",
    "__version__",
    "scope_for_type",
    "to_bundle_name",
]
