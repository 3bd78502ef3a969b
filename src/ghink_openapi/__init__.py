"""Ghink Open API SDK - async client with token refresh and retry/backoff.

Every call goes through one pipeline:
- Payload encoding through a pluggable codec
- Bearer token (or key pair) authorization, refreshed on upstream code 801
- Bounded retries with constant or exponential backoff
- ``{code, msg, data}`` envelope unwrapping into a ``Result``

Example:
    ```python
    from ghink_openapi import Client, ClientConfig

    config = ClientConfig(secret_id="my-id", secret_key="my-key", max_retries=5)

    async with Client(config) as client:
        result = await client.send(f"{client.endpoint}/public/shortLink/add", "POST", {"link": url}).with_token()
        if result.ok:
            link_id = result.unmarshal()["linkID"]
    ```
"""

from ghink_openapi.client import Client
from ghink_openapi.codec import Codec, JSONCodec
from ghink_openapi.config import ClientConfig
from ghink_openapi.envelope import Envelope, Result

__version__ = "1.0.6"

__all__ = [
    "Client",
    "ClientConfig",
    "Codec",
    "Envelope",
    "JSONCodec",
    "Result",
    "__version__",
]
