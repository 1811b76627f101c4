"""Scoped construction grants for compiled-type bundles.

A provider may instantiate bundle classes that live in a scope it does not
otherwise read from. Instead of ambient, process-wide privilege, each
construction runs inside an explicit ConstructionGrant that is active for
exactly one constructor call.

Architecture:
    - ConstructionGrant: Context manager publishing the grant via contextvars
    - current_grant(): Inspect the grant active in this thread/task

Thread Safety:
    Grants live in a ContextVar, so every thread and async task observes
    only its own grant. Nested grants restore the outer grant on exit.

Python 3.13+.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

from resbundle.errors import BundleInvariantError

if TYPE_CHECKING:
    from resbundle.bundle import ResourceBundle

__all__ = ["ConstructionGrant", "current_grant"]

_active_grant: ContextVar[ConstructionGrant | None] = ContextVar(
    "resbundle_construction_grant", default=None
)


def current_grant() -> ConstructionGrant | None:
    """Return the grant active in the current context, if any."""
    return _active_grant.get()


class ConstructionGrant:
    """Permission to construct one bundle type, scoped to a with-block.

    Usage:
        with ConstructionGrant(bundle_type) as grant:
            bundle = grant.construct()

    Attributes:
        target: The bundle class this grant allows constructing
    """

    __slots__ = ("_token", "target")

    def __init__(self, target: type[ResourceBundle]) -> None:
        """Initialize grant for target."""
        self.target = target
        self._token: Token[ConstructionGrant | None] | None = None

    @property
    def active(self) -> bool:
        """True while this grant is the one published in the current context."""
        return self._token is not None and _active_grant.get() is self

    def __enter__(self) -> ConstructionGrant:
        """Publish this grant for the current context."""
        if self._token is not None:
            msg = f"Construction grant for {self.target.__qualname__} entered twice"
            raise BundleInvariantError(msg)
        self._token = _active_grant.set(self)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Withdraw the grant, restoring the previous one."""
        if self._token is not None:
            _active_grant.reset(self._token)
            self._token = None

    def construct(self) -> ResourceBundle:
        """Call the target's zero-argument constructor under this grant.

        Exceptions raised by the constructor propagate unchanged.

        Raises:
            BundleInvariantError: If the grant is not active, or the call
                did not produce an instance of the target
        """
        if not self.active:
            msg = f"Construction of {self.target.__qualname__} attempted without an active grant"
            raise BundleInvariantError(msg)
        instance = self.target()
        if not isinstance(instance, self.target):
            msg = (
                f"Constructor of {self.target.__qualname__} produced "
                f"{type(instance).__qualname__}, not an instance of the bundle type"
            )
            raise BundleInvariantError(msg)
        return instance
