from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence


class SettingsRepository(Protocol):
    """Key/value store behind `system_settings` (process-wide, not per tenant)."""

    def get_values(self, keys: Sequence[str]) -> dict[str, Optional[str]]:
        """Return the stored value for each requested key that exists."""

        raise NotImplementedError

    def upsert_values(self, values: Mapping[str, str]) -> None:
        raise NotImplementedError
