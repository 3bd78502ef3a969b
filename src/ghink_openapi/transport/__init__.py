"""Request pipeline: prepared requests, authorized dispatch and retry policy.

Modules:
    sender: ``Sender`` with the ``with_token()``/``with_key()`` terminal calls
    retry: ``RetryPolicy``, per-call ``RetryContext`` and attempt classification
"""

from ghink_openapi.transport.retry import RetryContext, RetryPolicy, Verdict, classify
from ghink_openapi.transport.sender import BODY_METHODS, AuthMode, Sender

__all__ = [
    "BODY_METHODS",
    "AuthMode",
    "RetryContext",
    "RetryPolicy",
    "Sender",
    "Verdict",
    "classify",
]
