from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class RequestCodeIn(BaseModel):
    email: EmailStr = Field(..., description="Where to send the login code", max_length=255)


class LoginIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    code: str = Field(..., description="The one-time code received by email", max_length=64)
    ip_address: str | None = Field(
        None, description="Client-reported originating address", max_length=64
    )


class UserLookupIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)


class UserUpdateIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    display_name: str | None = None
    real_name: str | None = None
    discord_name: str | None = None
    mahjong_soul_name: str | None = None
    club_affiliation: Literal["Charleston", "Charlotte", "Washington D.C."] | None = None
    private_mode: bool | None = None

    def profile_fields(self) -> dict:
        """Only the fields present in the request body."""
        return self.model_dump(exclude_unset=True, exclude={"email"})


class AvatarUpdateIn(BaseModel):
    email: EmailStr = Field(..., max_length=255)
    avatar: str = Field(..., description="Avatar URL or data URI")
