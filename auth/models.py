"""Authentication Pydantic models."""
from typing import Optional
from pydantic import BaseModel


class RequesterIdentity(BaseModel):
    id: str
    email: Optional[str] = None

    @property
    def owner_key(self) -> str:
        """Storage folder for this user's assets: email when known, otherwise id."""
        return self.email or self.id
