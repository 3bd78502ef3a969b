"""Constants shared across the SDK."""

import platform

DEFAULT_ENDPOINT = "https://api.gh.ink/v3"

VERSION: tuple[int, int, int] = (1, 0, 6)

USER_AGENT = "GhinkOpenAPISDK-Python/{}.{}.{} ({}; {})".format(
    *VERSION,
    platform.system().lower() or "unknown",
    platform.machine().lower() or "unknown",
)

TOKEN_PATH = "/openAPI/token"

# API-level codes carried in the response envelope (not HTTP statuses)
CODE_OK = 200
CODE_TOKEN_EXPIRED = 801
