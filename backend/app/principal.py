"""Immutable principal passed through the call chain after claims enrichment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.enums import RoleName


@dataclass(frozen=True)
class Principal:
    """
    The authenticated caller.

    Built once per request from the verified token plus one profile lookup.
    ``teacher_id`` is set only for teachers who completed onboarding.
    """

    user_id: str
    email: str
    role: RoleName
    profile_id: str
    teacher_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is RoleName.ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role is RoleName.TEACHER

    @property
    def is_student(self) -> bool:
        return self.role is RoleName.STUDENT
