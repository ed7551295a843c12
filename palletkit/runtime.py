"""Call origins and dispatch errors shared by the pallets."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class DispatchError(Exception):
    """A dispatchable call failed; no state was changed."""


class BadOrigin(DispatchError):
    """The call was made from an origin that is not allowed to make it."""


class _OriginKind(enum.Enum):
    ROOT = "root"
    SIGNED = "signed"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    """Who a call comes from: root, a signed account, or nobody."""

    kind: _OriginKind
    who: Any = None

    @classmethod
    def root(cls) -> Origin:
        return cls(_OriginKind.ROOT)

    @classmethod
    def signed(cls, who: Any) -> Origin:
        return cls(_OriginKind.SIGNED, who)

    @classmethod
    def none(cls) -> Origin:
        return cls(_OriginKind.NONE)

    def ensure_root(self) -> None:
        """Raise ``BadOrigin`` unless this is the root origin."""
        if self.kind is not _OriginKind.ROOT:
            raise BadOrigin("root origin required")

    def ensure_signed(self) -> Any:
        """Return the signing account, or raise ``BadOrigin``."""
        if self.kind is not _OriginKind.SIGNED:
            raise BadOrigin("signed origin required")
        return self.who