from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from jitsi_bridge.enums import NamingScheme


class UserPreference(BaseModel):
    user_id: str
    embedded: bool
    naming_scheme: NamingScheme

    def to_record(self) -> Dict[str, Any]:
        """Persisted form, one JSON object per user."""
        return {"embedded": self.embedded, "naming_scheme": self.naming_scheme.value}


class MeetingCandidate(BaseModel):
    """A meeting name that has been computed but not started yet."""

    meeting_id: str
    topic: str
    personal: bool = False
    label: str = ""


class MeetingOptions(BaseModel):
    """Candidates offered to a user whose naming scheme is ``ask``."""

    candidates: List[MeetingCandidate]


class MeetingSession(BaseModel):
    meeting_id: str
    topic: str
    long_url: str
    short_url: Optional[str] = None
    token: Optional[str] = None
    token_valid_until: Optional[datetime] = None
    is_personal: bool = False

    @property
    def link(self) -> str:
        return self.short_url or self.long_url


class TokenUser(BaseModel):
    avatar: str = ""
    name: str = ""
    email: str = ""
    id: str = ""


class TokenContext(BaseModel):
    user: TokenUser = Field(default_factory=TokenUser)
    group: str = ""


class TokenClaims(BaseModel):
    """Jitsi JWT payload."""

    iss: str
    aud: List[str]
    sub: str
    exp: int = Field(..., description="Expiry, seconds since the epoch")
    room: str
    context: TokenContext = Field(default_factory=TokenContext)


class MeetingActionContext(BaseModel):
    meeting_id: str
    meeting_topic: str = ""
    personal: bool = False
    secret: str = Field(
        default="", description="Shared action secret echoed back by the button."
    )


class StartMeetingActionRequest(BaseModel):
    """Payload posted back when a user picks one of the offered meeting names."""

    user_id: str
    channel_id: str
    post_id: Optional[str] = Field(
        default=None, description="Ephemeral selection post to remove."
    )
    team_id: str = ""
    context: MeetingActionContext


class StartMeetingActionResponse(BaseModel):
    meeting_id: str
    meeting_link: str


class EnrichMeetingJwtRequest(BaseModel):
    jwt: str
    channel_id: Optional[str] = Field(
        default=None, description="Channel the meeting was posted in; selects the route."
    )


class EnrichMeetingJwtResponse(BaseModel):
    jwt: str


class UserConfigResponse(BaseModel):
    embedded: bool
    naming_scheme: str
