from typing import Optional

from dental_portal.models.base import CamelModel
from dental_portal.models.roles import RoleEnum

class User(CamelModel):
    username: str
    role: RoleEnum
    name: Optional[str] = None
    patient_id: Optional[str] = None
    staff_id: Optional[str] = None

    @property
    def actor_id(self):
        """Identifier the notification inbox is keyed on."""
        return self.patient_id or self.staff_id or self.username

    @property
    def display_name(self):
        return self.name or self.username
