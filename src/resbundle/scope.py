"""Isolated code/resource scopes that bundles are looked up in.

A scope answers two questions: "which class does this dotted name denote"
and "give me a byte stream for this resource path". Every scope also names
a secondary, shared location that textual lookups fall back to for
bundles that have not been moved into a package yet.

Components:
    Scope - Protocol for scopes (structural typing)
    DirectoryScope - Files under a fixed root, with path-traversal prevention
    SearchPathScope - Shared location: the directories of sys.path
    PackageScope - Modules and package data of one importable package
    ScriptScope - Code run as a script: only the shared location is searched
    scope_for_type - PackageScope of the package that defines a class

Python 3.13+.
"""

from __future__ import annotations

import importlib
import logging
import sys
from dataclasses import dataclass, field
from importlib.resources import files
from pathlib import Path
from typing import BinaryIO, Protocol

from resbundle.constants import NAME_SEPARATOR, PATH_SEPARATOR

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "Scope",
    # Concrete scopes
    "DirectoryScope",
    "SearchPathScope",
    "PackageScope",
    "ScriptScope",
    # Helpers
    "scope_for_type",
]

logger = logging.getLogger(__name__)


class Scope(Protocol):
    """Protocol for bundle lookup scopes.

    All three methods report absence by returning None. Only genuine
    failures (I/O errors, broken modules) raise.
    """

    def resolve_type(self, name: str) -> type | None:
        """Resolve a dotted name to a class inside this scope."""

    def open_resource(self, path: str) -> BinaryIO | None:
        """Open a "/"-separated resource path inside this scope for reading."""

    def open_shared_resource(self, path: str) -> BinaryIO | None:
        """Open a resource path in the shared location reachable from this scope."""


def _split_path(path: str) -> list[str] | None:
    """Split a resource path into segments, or None if any segment is unsafe."""
    parts = path.split(PATH_SEPARATOR)
    if any(part in ("", ".", "..") or "\\" in part for part in parts):
        return None
    return parts


@dataclass(frozen=True, slots=True)
class DirectoryScope:
    """Scope over plain files below a root directory.

    Never resolves types and has no shared location.

    Security:
        Resource paths that are absolute, contain ".." or would resolve
        outside root_dir are treated as absent.

    Attributes:
        root_dir: Directory resources are read from
    """

    root_dir: str | Path
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache resolved root directory."""
        object.__setattr__(self, "_resolved_root", Path(self.root_dir).resolve())

    @staticmethod
    def _is_safe_path(base_dir: Path, full_path: Path) -> bool:
        """Check if full_path resolves to a location within base_dir."""
        try:
            full_path.resolve().relative_to(base_dir.resolve())
            return True
        except ValueError:
            return False

    def resolve_type(self, name: str) -> type | None:
        return None

    def open_resource(self, path: str) -> BinaryIO | None:
        """Open root_dir/path in binary mode.

        Returns:
            Open stream, or None if the path is unsafe or not a file

        Raises:
            OSError: If the file exists but cannot be opened
        """
        parts = _split_path(path)
        if parts is None:
            logger.debug("Rejected unsafe resource path: %r", path)
            return None
        full_path = self._resolved_root.joinpath(*parts)
        if not self._is_safe_path(self._resolved_root, full_path):
            logger.debug("Resource path escapes %s: %r", self._resolved_root, path)
            return None
        if not full_path.is_file():
            return None
        return full_path.open("rb")

    def open_shared_resource(self, path: str) -> BinaryIO | None:
        return None


@dataclass(frozen=True, slots=True)
class SearchPathScope:
    """Shared scope searching a list of directories in order.

    With paths=None the interpreter's sys.path is consulted on every call,
    so later sys.path changes are honored. Entries that are not
    directories (zip archives, missing paths) are skipped; "" means the
    current working directory.

    Attributes:
        paths: Directories to search, or None for sys.path
    """

    paths: tuple[str, ...] | None = None

    def resolve_type(self, name: str) -> type | None:
        return None

    def open_resource(self, path: str) -> BinaryIO | None:
        entries = sys.path if self.paths is None else self.paths
        for entry in tuple(entries):
            directory = Path(entry or ".")
            if not directory.is_dir():
                continue
            stream = DirectoryScope(directory).open_resource(path)
            if stream is not None:
                return stream
        return None

    def open_shared_resource(self, path: str) -> BinaryIO | None:
        return None


@dataclass(frozen=True, slots=True)
class PackageScope:
    """Scope over one importable package.

    Names are interpreted relative to the package: resolving
    "l10n.Messages_fr" in scope "myapp" imports "myapp.l10n" and returns
    its Messages_fr class; the resource "l10n/Messages_fr.properties" is
    read from the package data of "myapp".

    Attributes:
        package: Dotted name of the package
        shared: Shared location for migration fallback (default: SearchPathScope())
    """

    package: str
    shared: Scope | None = None

    @property
    def shared_scope(self) -> Scope:
        """The scope open_shared_resource() delegates to."""
        return self.shared if self.shared is not None else SearchPathScope()

    def resolve_type(self, name: str) -> type | None:
        """Import the module part of name and return the named class.

        Returns:
            The class, or None if the module or attribute does not exist or
            the attribute is not a class

        Raises:
            ImportError: If an existing module fails while being imported
        """
        if not name or any(not part for part in name.split(NAME_SEPARATOR)):
            return None
        module_part, _, attr = name.rpartition(NAME_SEPARATOR)
        module_name = f"{self.package}.{module_part}" if module_part else self.package
        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only the looked-up module (or one of its parents) being absent
            # means "not found"; a missing dependency of the module is a failure.
            if e.name is not None and (
                e.name == module_name or module_name.startswith(e.name + NAME_SEPARATOR)
            ):
                return None
            raise
        candidate = getattr(module, attr, None)
        return candidate if isinstance(candidate, type) else None

    def open_resource(self, path: str) -> BinaryIO | None:
        parts = _split_path(path)
        if parts is None:
            return None
        resource = files(self.package).joinpath(*parts)
        if not resource.is_file():
            return None
        return resource.open("rb")

    def open_shared_resource(self, path: str) -> BinaryIO | None:
        return self.shared_scope.open_resource(path)


@dataclass(frozen=True, slots=True)
class ScriptScope:
    """Scope of code that does not belong to an importable package.

    A script run directly has no module spec, so it owns neither types nor
    package data; every lookup goes to the shared location.

    Attributes:
        shared: Shared location (default: SearchPathScope())
    """

    shared: Scope | None = None

    @property
    def shared_scope(self) -> Scope:
        """The scope open_shared_resource() delegates to."""
        return self.shared if self.shared is not None else SearchPathScope()

    def resolve_type(self, name: str) -> type | None:
        return None

    def open_resource(self, path: str) -> BinaryIO | None:
        return None

    def open_shared_resource(self, path: str) -> BinaryIO | None:
        return self.shared_scope.open_resource(path)


def scope_for_type(cls: type) -> PackageScope | ScriptScope:
    """Return the scope of the package that defines cls.

    Classes defined in a top-level module get that module as their scope.
    Classes from a module without a spec (a script run as ``__main__``, or
    code created with exec) get a ScriptScope.
    """
    module = sys.modules.get(cls.__module__)
    if module is None or getattr(module, "__spec__", None) is None:
        logger.debug("No module spec for %s; using the shared location only", cls.__module__)
        return ScriptScope()
    package = getattr(module, "__package__", None) or cls.__module__
    return PackageScope(package)
