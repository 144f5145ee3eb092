import os

# Slash command
COMMAND_TRIGGER = "meet"
DEFAULT_MEETING_TOPIC = "Jitsi Meeting"
JITSI_POST_TYPE = "custom_jitsi"
USER_CONFIG_KEY_PREFIX = "config_"

# Host platform
SITE_URL = os.getenv("SITE_URL", "http://localhost:8065")
PLATFORM_BOT_TOKEN = os.getenv("PLATFORM_BOT_TOKEN")
SHOW_FULL_NAME = os.getenv("SHOW_FULL_NAME", "false").lower() == "true"
SHOW_EMAIL_ADDRESS = os.getenv("SHOW_EMAIL_ADDRESS", "false").lower() == "true"

# This service, as reached by the chat server. Post action buttons call back here.
SERVICE_URL = os.getenv("SERVICE_URL", "http://localhost:8000")
API_PREFIX = "/api/v1"
# Token Mattermost sends with every slash command request
SLASH_COMMAND_TOKEN = os.getenv("SLASH_COMMAND_TOKEN", "")
# Shared secret carried in the context of post action buttons
ACTION_SECRET = os.getenv("ACTION_SECRET", "")

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Primary Jitsi route, used for teams listed in JITSI_TEAM_IDS
JITSI_TEAM_IDS = os.getenv("JITSI_TEAM_IDS", "")
JITSI_URL = os.getenv("JITSI_URL", "https://meet.jit.si")
JITSI_JWT = os.getenv("JITSI_JWT", "false").lower() == "true"
JITSI_APP_ID = os.getenv("JITSI_APP_ID", "")
JITSI_APP_SECRET = os.getenv("JITSI_APP_SECRET", "")
JITSI_LINK_VALID_TIME = int(os.getenv("JITSI_LINK_VALID_TIME", "30"))

# Secondary Jitsi route, used for every other team
JITSI_URL_2 = os.getenv("JITSI_URL_2", "https://meet.jit.si")
JITSI_JWT_2 = os.getenv("JITSI_JWT_2", "false").lower() == "true"
JITSI_APP_ID_2 = os.getenv("JITSI_APP_ID_2", "")
JITSI_APP_SECRET_2 = os.getenv("JITSI_APP_SECRET_2", "")
JITSI_LINK_VALID_TIME_2 = int(os.getenv("JITSI_LINK_VALID_TIME_2", "30"))

JITSI_EMBEDDED = os.getenv("JITSI_EMBEDDED", "false").lower() == "true"
JITSI_NAMING_SCHEME = os.getenv("JITSI_NAMING_SCHEME", "english-titlecase")

# YOURLS-compatible link shortener. Shortening is skipped when the URL is unset.
SHORTENER_API_URL = os.getenv("SHORTENER_API_URL")
SHORTENER_SIGNATURE_SECRET = os.getenv("SHORTENER_SIGNATURE_SECRET", "")
SHORTENER_MAX_ATTEMPTS = int(os.getenv("SHORTENER_MAX_ATTEMPTS", "2"))
SHORTENER_TIMEOUT_SECONDS = float(os.getenv("SHORTENER_TIMEOUT_SECONDS", "3"))

# Deadline applied to every outbound call on the request path
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SERIALIZE_LOG_OUTPUT = os.getenv("SERIALIZE_LOG_OUTPUT", "false").lower() == "true"

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
