"""Outcome of a configuration save, reported to the operator."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from hopecity.site_config.schema import SiteConfiguration


class SaveErrorKind(str, enum.Enum):
    AUTH_REQUIRED = "auth_required"
    TRANSPORT_FAILURE = "transport_failure"
    # Settings row committed, event list not replaced
    PARTIAL_WRITE = "partial_write"
    MISSING_SETTINGS_ROW = "missing_settings_row"
    STORAGE_FAILURE = "storage_failure"


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    kind: SaveErrorKind | None = None
    reason: str | None = None
    config: SiteConfiguration | None = None

    @classmethod
    def success(cls, config: SiteConfiguration | None = None) -> SaveResult:
        return cls(ok=True, config=config)

    @classmethod
    def failure(cls, kind: SaveErrorKind, reason: str) -> SaveResult:
        return cls(ok=False, kind=kind, reason=reason)
