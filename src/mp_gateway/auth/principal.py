"""Verified caller identity passed explicitly into every service call."""

from dataclasses import dataclass

from src.mp_common.enums import Role


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
