"""Real-name verification of Chinese Mainland resident ID numbers."""

import datetime
from dataclasses import dataclass

from ghink_openapi.client import Client
from ghink_openapi.errors.exceptions import RequestFailedError
from ghink_openapi.errors.handler import raise_for_result

ENDPOINT = "/private/realName"

_FACTORS = (7, 9, 10, 5, 8, 4, 2, 1, 6, 3, 7, 9, 10, 5, 8, 4, 2)
_CHECKSUMS = "10X98765432"


@dataclass
class VerifyResult:
    ok: bool = False


def is_valid_date(year: int, month: int, day: int) -> bool:
    try:
        datetime.date(year, month, day)
    except ValueError:
        return False
    return True


def is_valid_id(id_number: str) -> bool:
    """Check length, birth date and the ISO 7064 MOD 11-2 check character."""
    if len(id_number) != 18:
        return False

    body = id_number[:17]
    # isdigit() accepts non-ASCII digits
    if not all("0" <= c <= "9" for c in body):
        return False

    check = id_number[17].upper()
    if check != "X" and not ("0" <= check <= "9"):
        return False

    if not is_valid_date(int(id_number[6:10]), int(id_number[10:12]), int(id_number[12:14])):
        return False

    total = sum(int(c) * factor for c, factor in zip(body, _FACTORS))
    return check == _CHECKSUMS[total % 11]


async def verify_cnid(client: Client, id_number: str, name: str) -> bool:
    """Verify that ``id_number`` belongs to ``name``.

    Malformed ID numbers return False without calling the upstream.

    Raises:
        RequestFailedError: If the call could not complete or returned unexpected data.
        UpstreamError: If the upstream rejected the request.
    """
    if not is_valid_id(id_number):
        return False

    payload = {"id": id_number, "name": name}
    result = await client.send(f"{client.endpoint}{ENDPOINT}/cnid", "POST", payload).with_token()
    raise_for_result(result, action="verify CNID", log=client.logger)

    try:
        verified = result.unmarshal(VerifyResult)
    except (TypeError, ValueError) as e:
        message = f"failed to verify CNID, unmarshal error: {e}"
        client.logger.error(message)
        raise RequestFailedError(message, action="verify CNID") from e

    return verified.ok is True
