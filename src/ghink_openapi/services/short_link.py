"""Short link creation."""

import datetime

from ghink_openapi.client import Client
from ghink_openapi.errors.exceptions import RequestFailedError
from ghink_openapi.errors.handler import raise_for_result

ENDPOINT = "/public/shortLink"


async def add(client: Client, link: str, validity: datetime.datetime | None = None) -> str:
    """Create a short link and return its ID.

    Args:
        client: Client to send through
        link: Target URL
        validity: Expiry time; naive datetimes are taken as local time.
            None creates a link without expiry.

    Raises:
        RequestFailedError: If the call could not complete or returned no link ID.
        UpstreamError: If the upstream rejected the request.
    """
    payload: dict[str, object] = {"link": link}
    if validity is not None:
        payload["validity"] = int(validity.timestamp())

    result = await client.send(f"{client.endpoint}{ENDPOINT}/add", "POST", payload).with_token()
    raise_for_result(result, action="add short link", log=client.logger)

    data = result.unmarshal()
    link_id = data.get("linkID") if isinstance(data, dict) else None
    if not isinstance(link_id, str):
        message = f"failed to add short link, unexpected response data: {data!r}"
        client.logger.error(message)
        raise RequestFailedError(message, action="add short link")

    return link_id
