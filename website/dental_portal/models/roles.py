from enum import Enum

class RoleEnum(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"

    @property
    def label(self):
        return self.value.capitalize()
