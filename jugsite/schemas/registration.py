from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegistrationInput(BaseModel):
    """Raw form input, kept as submitted so the form can be shown again"""

    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None


class RegistrationForm(BaseModel):
    """Structurally valid registration data"""

    model_config = ConfigDict(str_strip_whitespace=True)

    firstName: str = Field(min_length=1, max_length=255)
    lastName: str = Field(min_length=1, max_length=255)
    email: EmailStr


class Registration(BaseModel):
    eventId: int
    email: str
    lastName: str
    firstName: str
    confirmed: bool = False
    createdAt: datetime

    @classmethod
    def from_form(cls, event_id: int, form: RegistrationForm) -> "Registration":
        return cls(
            eventId=event_id,
            email=form.email,
            lastName=form.lastName,
            firstName=form.firstName,
            confirmed=False,
            createdAt=datetime.now(timezone.utc),
        )
