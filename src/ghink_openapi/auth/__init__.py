"""Authentication components.

- Key pair credentials and multi-source resolution (value → env → .env → default)
- Bearer token store refreshed on upstream code 801

Example:
    ```python
    from ghink_openapi.auth import CredentialResolver

    key_pair = CredentialResolver().resolve_key_pair()
    ```
"""

from ghink_openapi.auth.credentials import CredentialResolver, KeyPair
from ghink_openapi.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    TokenAcquisitionError,
)
from ghink_openapi.auth.token import TokenStore

__all__ = [
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "KeyPair",
    "TokenAcquisitionError",
    "TokenStore",
]
