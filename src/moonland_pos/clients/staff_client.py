from __future__ import annotations

from dataclasses import dataclass

from ..models import StaffMember
from .base import BaseClient


@dataclass
class StaffClient(BaseClient):
    module: str = "staff"

    def list_staff(self) -> list[StaffMember]:
        return [StaffMember.model_validate(row) for row in self._list("/staff", operation="list")]
