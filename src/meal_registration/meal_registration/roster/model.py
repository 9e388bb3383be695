from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class RosterMember:
    """Nhân viên trong danh sách của tenant (chỉ đọc)."""

    employee_id: str
    tenant_id: str
    full_name: str
    email: str
    role: str
    department: Optional[str] = None
    shift: Optional[str] = None
    group_name: Optional[str] = None
    is_active: bool = True

    @property
    def is_kitchen(self) -> bool:
        return self.role.strip().lower() == Role.KITCHEN.value.lower()
