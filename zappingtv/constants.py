"""Shared constants for the Zapping upstream API and player."""

USER_AGENT = "Zapping/node-1.0"

DEFAULT_TIMEOUT_SECONDS = 10.0
HEARTBEAT_INTERVAL_SECONDS = 25.0

TOKEN_FILE = "~/.config/zapping-node"
LOG_FILE = "/tmp/zappingtv.log"

ACTIVATION_GET_CODE_URL = "https://meteoro.zappingtv.com/activation/V30/androidtv/getcode"
ACTIVATION_CHECK_LINKED_URL = "https://meteoro.zappingtv.com/activation/V30/androidtv/linked"
PLAY_TOKEN_LOGIN_URL = "https://drhouse.zappingtv.com/login/V30/androidtv/"
HEARTBEAT_URL = "https://drhouse.zappingtv.com/hb/V30/androidtv/"
CHANNEL_LIST_URL = "https://alquinta.zappingtv.com/v31/androidtv/channelswithurl/"
SMART_TV_URL = "https://app.zappingtv.com/smart"

# mpv flags that let catch-up streams start at the oldest segment and seek freely
MPV_DEFAULT_ARGS = [
    "--demuxer-lavf-o=live_start_index=-99999",
    "--force-seekable=yes",
]
