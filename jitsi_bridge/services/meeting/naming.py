"""
Meeting name generation.

Pure computation: given the requester's naming scheme and the channel the
command came from, produce a meeting id and topic. Platform lookups (the team
of a channel) are done by the caller.
"""

import hashlib
import random
import re
import uuid
from typing import Optional, Union

from jitsi_bridge.constants import DEFAULT_MEETING_TOPIC
from jitsi_bridge.enums import NamingScheme
from jitsi_bridge.errors import MeetingRequestError
from jitsi_bridge.schemas.meeting import MeetingCandidate, MeetingOptions
from jitsi_bridge.schemas.platform import Channel, Team, User
from jitsi_bridge.services.meeting.words import ADJECTIVES, NOUNS, VERBS

MEETING_ID_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")
_DISALLOWED = re.compile(r"[^a-zA-Z0-9]+")


def encode_meeting_id(meeting: str) -> str:
    """Slug for a free-text topic: "Sprint Review" -> "SprintReview"."""
    return _DISALLOWED.sub("", meeting.replace(" ", "-"))


def is_valid_meeting_id(meeting_id: str) -> bool:
    return bool(MEETING_ID_PATTERN.match(meeting_id))


def generate_english_title_name() -> str:
    return random.choice(ADJECTIVES) + random.choice(NOUNS) + random.choice(VERBS)


def generate_uuid_name() -> str:
    return str(uuid.uuid4())


def generate_personal_meeting_name(username: str, user_id: str) -> str:
    """Stable per user, so the same person always gets the same room."""
    digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()[:20]
    return _join_slug(username, digest)


def generate_team_channel_name(team_name: str, channel_name: str) -> str:
    return _join_slug(team_name, channel_name, uuid.uuid4().hex[:8])


def _join_slug(*parts: str) -> str:
    return "-".join(slug for slug in (encode_meeting_id(p) for p in parts) if slug)


def english_meeting() -> MeetingCandidate:
    return MeetingCandidate(
        meeting_id=generate_english_title_name(),
        topic=DEFAULT_MEETING_TOPIC,
        label="Meeting name with random words",
    )


def uuid_meeting() -> MeetingCandidate:
    return MeetingCandidate(
        meeting_id=generate_uuid_name(),
        topic=DEFAULT_MEETING_TOPIC,
        label="Meeting name with UUID",
    )


def personal_meeting(requester: User) -> MeetingCandidate:
    return MeetingCandidate(
        meeting_id=generate_personal_meeting_name(requester.username, requester.id),
        topic=f"{requester.display_name()}'s Personal Meeting",
        personal=True,
        label="Personal meeting",
    )


def channel_meeting(channel: Channel, team: Team) -> MeetingCandidate:
    return MeetingCandidate(
        meeting_id=generate_team_channel_name(team.name, channel.name),
        topic=f"{channel.display_name} Channel Meeting",
        label="Channel meeting",
    )


def meeting_options(
    requester: User, channel: Channel, team: Optional[Team]
) -> MeetingOptions:
    """Every candidate the requester could pick, computed up front."""
    candidates = [english_meeting(), personal_meeting(requester)]
    if not channel.type.is_personal and team is not None:
        candidates.append(channel_meeting(channel, team))
    candidates.append(uuid_meeting())
    return MeetingOptions(candidates=candidates)


def resolve_meeting_name(
    scheme: NamingScheme,
    requester: User,
    channel: Channel,
    team: Optional[Team] = None,
    explicit_topic: str = "",
) -> Union[MeetingCandidate, MeetingOptions]:
    """
    Work out the meeting id and topic for a request.

    An explicit topic always wins. Otherwise the naming scheme decides; the
    ``ask`` scheme returns ``MeetingOptions`` instead of a single name.

    Raises:
        MeetingRequestError: the topic has no usable characters, or a channel
            meeting was requested without the channel's team
    """
    topic = explicit_topic.strip()
    if topic:
        meeting_id = encode_meeting_id(topic)
        if not meeting_id:
            raise MeetingRequestError(
                "Meeting topic must contain at least one letter or digit",
                {"topic": topic},
            )
        return MeetingCandidate(meeting_id=meeting_id, topic=topic)

    if scheme == NamingScheme.ASK:
        return meeting_options(requester, channel, team)
    if scheme == NamingScheme.UUID:
        return uuid_meeting()
    if scheme == NamingScheme.MATTERMOST:
        if channel.type.is_personal:
            return personal_meeting(requester)
        if team is None:
            raise MeetingRequestError(
                f"Channel {channel.id} meeting needs the channel's team",
                {"channel_id": channel.id, "team_id": channel.team_id},
            )
        return channel_meeting(channel, team)
    return english_meeting()
