from pydantic import BaseModel

ADMIN_ROLE = "admin"

class SessionIdentity(BaseModel):
    """Caller as established by the session layer"""
    email: str
    role: str = "student"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE
