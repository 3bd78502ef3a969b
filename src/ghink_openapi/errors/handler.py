"""Turn pipeline results into exceptions at the typed-caller boundary."""

import logging
from typing import TYPE_CHECKING

from ghink_openapi.errors.exceptions import RequestFailedError, UpstreamError

if TYPE_CHECKING:
    from ghink_openapi.config import Logger
    from ghink_openapi.envelope import Result

logger = logging.getLogger(__name__)


def raise_for_result(result: "Result", *, action: str, log: "Logger | None" = None) -> None:
    """Raise if a result is not a successful upstream answer.

    The failure is logged at error level on ``log`` before raising.

    Args:
        result: Result returned by ``Sender.with_token()`` or ``Sender.with_key()``
        action: Human-readable action name used in the message, e.g. "add short link"
        log: Logger receiving the error record (module logger if omitted)

    Raises:
        RequestFailedError: If the pipeline failed (``result.err`` is set),
            chained to the original error.
        UpstreamError: If the upstream answered with a code other than 200.
    """
    log = log or logger

    if result.err is not None:
        message = f"failed to {action}, sender error: {result.err}"
        log.error(message)
        raise RequestFailedError(message, action=action) from result.err

    if not result.ok:
        message = f"failed to {action}, upstream failed: code: {result.code}, msg: {result.msg}"
        log.error(message)
        raise UpstreamError(message, code=result.code, msg=result.msg, action=action)
