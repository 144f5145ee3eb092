from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from jitsi_bridge.enums import ChannelType


class User(BaseModel):
    """A chat platform user, as returned by the platform's user lookup."""

    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    nickname: str = ""
    email: str = ""
    last_picture_update: int = 0

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def display_name(self) -> str:
        # Nickname, then full name, then username
        return self.nickname or self.full_name or self.username


class Channel(BaseModel):
    id: str
    type: ChannelType
    team_id: str = ""
    name: str = ""
    display_name: str = ""


class Team(BaseModel):
    id: str
    name: str
    display_name: str = ""


class PostActionIntegration(BaseModel):
    url: str
    context: Dict[str, Any] = Field(default_factory=dict)


class PostAction(BaseModel):
    name: str
    integration: PostActionIntegration


class SlackAttachment(BaseModel):
    fallback: str = ""
    title: str = ""
    text: str = ""
    actions: List[PostAction] = Field(default_factory=list)


class Post(BaseModel):
    user_id: str
    channel_id: str
    id: Optional[str] = None
    message: str = ""
    type: str = ""
    props: Dict[str, Any] = Field(default_factory=dict)


class CommandArgs(BaseModel):
    """Slash command invocation forwarded by the platform."""

    command: str = Field(..., description="Full command text, e.g. '/meet settings'")
    user_id: str
    channel_id: str
    team_id: str = ""


class CommandResponse(BaseModel):
    response_type: Optional[str] = None
    channel_id: str = ""
    text: str = ""


class CommandDefinition(BaseModel):
    trigger: str
    auto_complete: bool = True
    auto_complete_desc: str = ""
    auto_complete_hint: str = ""
