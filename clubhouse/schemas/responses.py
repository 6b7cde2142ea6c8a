from pydantic import BaseModel, Field


class MessageOut(BaseModel):
    message: str


class SessionOut(BaseModel):
    session_id: str = Field(..., description="Value for the Authentication-Session-Id header")


class UserOut(BaseModel):
    email: str
    display_name: str | None = None
    real_name: str | None = None
    discord_name: str | None = None
    mahjong_soul_name: str | None = None
    club_affiliation: str | None = None
    private_mode: bool | None = None
    avatar: str | None = None
