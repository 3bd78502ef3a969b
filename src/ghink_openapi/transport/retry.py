"""Retry/backoff policy for the request pipeline.

The policy is independent of the authorization mode. One attempt ends in one of
three verdicts:

| Condition | Verdict | Token mode | Key mode |
|-----------|---------|------------|----------|
| Transport error, HTTP status != 200, bad envelope | `RETRY` | back off, retry | back off, retry |
| Envelope code 801 | `EXPIRED` | back off, refresh token, retry | back off, retry |
| Any other envelope code | `SUCCESS` | return result | return result |

Business rejections (e.g. code 403) are `SUCCESS` at this layer: the upstream
answered, and the caller decides what the code means.

## Backoff

```python
from ghink_openapi.transport.retry import RetryPolicy

policy = RetryPolicy(max_attempts=4, base_delay=1.0, exponential=True)
[policy.delay_for(n) for n in (1, 2, 3)]  # [1.0, 2.0, 4.0]
```
"""

import asyncio
import enum
from dataclasses import dataclass

from ghink_openapi.const import CODE_TOKEN_EXPIRED
from ghink_openapi.envelope import Result


class Verdict(enum.Enum):
    """Classification of a single attempt."""

    SUCCESS = "success"
    RETRY = "retry"
    EXPIRED = "expired"


def classify(status_code: int | None, result: Result | None) -> Verdict:
    """Classify the outcome of one attempt.

    Args:
        status_code: HTTP status, or None if the transport failed
        result: Parsed envelope, or None if nothing was parsed

    Returns:
        Verdict for the attempt
    """
    if status_code != 200 or result is None:
        return Verdict.RETRY

    if result.err is not None:
        return Verdict.RETRY

    if result.code == CODE_TOKEN_EXPIRED:
        return Verdict.EXPIRED

    return Verdict.SUCCESS


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retries with constant or exponential delays.

    Args:
        max_attempts: Total attempts per call, including the first one
        base_delay: Delay in seconds before the first retry
        exponential: Double the delay after every backoff
    """

    max_attempts: int
    base_delay: float
    exponential: bool = False

    def delay_for(self, retry_number: int) -> float:
        """Delay before retry ``retry_number`` (1-indexed).

        Uses ``base_delay * 2 ** (retry_number - 1)`` when exponential,
        ``base_delay`` otherwise.
        """
        if not self.exponential:
            return self.base_delay
        return self.base_delay * (2 ** (retry_number - 1))

    def new_context(self) -> "RetryContext":
        return RetryContext(policy=self)

    async def wait(self, delay: float) -> None:
        await asyncio.sleep(delay)


@dataclass
class RetryContext:
    """Per-call retry state: attempts made and backoffs taken so far."""

    policy: RetryPolicy
    attempt: int = 0
    backoffs: int = 0

    @property
    def delay(self) -> float:
        """Delay the next backoff will sleep."""
        return self.policy.delay_for(self.backoffs + 1)

    @property
    def is_last_attempt(self) -> bool:
        return self.attempt >= self.policy.max_attempts

    async def backoff(self) -> float:
        """Sleep the current delay, then advance to the next one."""
        delay = self.delay
        self.backoffs += 1
        await self.policy.wait(delay)
        return delay
