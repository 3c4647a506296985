from datetime import datetime

from dental_portal.models.base import CamelModel

class TempPatientSession(CamelModel):
    """Contact details of a guest who booked without an account."""

    is_temporary_login: bool = True
    first_name: str
    last_name: str
    email: str = ""
    phone: str
    login_time: datetime

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"
