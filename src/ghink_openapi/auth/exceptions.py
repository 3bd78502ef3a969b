"""Exceptions for credential resolution and token acquisition.

Example:
    ```python
    from ghink_openapi.auth.exceptions import TokenAcquisitionError

    try:
        await client.acquire_token()
    except TokenAcquisitionError as e:
        print(f"Token endpoint rejected us: {e.code} {e.msg}")
    ```
"""

from ghink_openapi.errors.exceptions import OpenAPIError


class CredentialError(OpenAPIError):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass


class TokenAcquisitionError(CredentialError):
    """Raised when the token endpoint does not hand out a bearer token.

    Attributes:
        code: Envelope code returned by the upstream, if it answered.
        msg: Envelope message returned by the upstream, if it answered.
    """

    def __init__(self, message: str, code: int | None = None, msg: str | None = None):
        super().__init__(message)
        self.code = code
        self.msg = msg
