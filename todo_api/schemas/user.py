
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr


class UserBase(BaseModel):
    """Base user schema with common fields."""
    email: EmailStr
    name: Optional[str] = None
    avatar: Optional[str] = None


class UserResponse(UserBase):
    """Schema for user response to client."""
    id: int
    google_id: str
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileValue(BaseModel):
    """Single entry of a provider profile's ``emails`` or ``photos`` list."""
    value: str


class ProviderProfile(BaseModel):
    """
    Identity provider profile handed to the authentication flow.

    Mirrors the shape OAuth strategies normalise provider data into:
    a stable subject id, a display name and lists of emails and photos.
    """
    id: str
    display_name: Optional[str] = None
    emails: List[ProfileValue] = []
    photos: List[ProfileValue] = []

    @property
    def primary_email(self) -> Optional[str]:
        return self.emails[0].value if self.emails else None

    @property
    def primary_photo(self) -> Optional[str]:
        return self.photos[0].value if self.photos else None
