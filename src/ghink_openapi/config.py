"""Client configuration.

``ClientConfig`` is immutable once built. Options are applied over the
defaults either as keyword arguments, through ``with_options`` on an existing
config, or from the environment with ``from_env``.

Example:
    ```python
    from ghink_openapi import ClientConfig

    config = ClientConfig(secret_id="id", secret_key="key", max_retries=5)
    patient = config.with_options(retry_delay=2.0, exponential_backoff=False)

    # GHINK_SECRET_ID, GHINK_SECRET_KEY, GHINK_TIMEOUT, ... (.env supported)
    from_env = ClientConfig.from_env(enable_token=False)
    ```
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Protocol

from ghink_openapi.auth.credentials import CredentialResolver, KeyPair
from ghink_openapi.codec import Codec, JSONCodec
from ghink_openapi.const import DEFAULT_ENDPOINT
from ghink_openapi.errors.exceptions import ConfigurationError

_TRUE_VALUES = frozenset(["1", "true", "yes", "on"])
_FALSE_VALUES = frozenset(["0", "false", "no", "off"])


class Logger(Protocol):
    """Leveled log sink. ``logging.Logger`` and ``logging.LoggerAdapter`` satisfy it."""

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


@dataclass(frozen=True)
class ClientConfig:
    """Construction-time settings for ``Client``.

    Attributes:
        secret_id: Secret identifier of the key pair.
        secret_key: Secret key of the key pair.
        endpoint: Base URL every request path is appended to.
        enable_token: Acquire a bearer token at construction and use token mode.
        timeout: Per-attempt HTTP timeout in seconds.
        max_retries: Maximum number of attempts per call (at least 1).
        retry_delay: Delay in seconds before the first retry.
        exponential_backoff: Double the delay after every retry.
        codec: Payload encoder/decoder.
        logger: Log sink; defaults to the ``ghink_openapi`` logger.
    """

    secret_id: str
    secret_key: str = field(repr=False)
    endpoint: str = DEFAULT_ENDPOINT
    enable_token: bool = True
    timeout: float = 10.0
    max_retries: int = 3
    retry_delay: float = 1.0
    exponential_backoff: bool = True
    codec: Codec = field(default_factory=JSONCodec, compare=False)
    logger: Logger | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ConfigurationError(f"max_retries must be at least 1, got {self.max_retries}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.retry_delay < 0:
            raise ConfigurationError(f"retry_delay must not be negative, got {self.retry_delay}")
        if not self.endpoint:
            raise ConfigurationError("endpoint must not be empty")
        # Paths are appended verbatim
        object.__setattr__(self, "endpoint", self.endpoint.rstrip("/"))

    @property
    def key_pair(self) -> KeyPair:
        return KeyPair(secret_id=self.secret_id, secret_key=self.secret_key)

    def with_options(self, **changes: Any) -> "ClientConfig":
        """Return a copy with ``changes`` applied (validated again)."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, resolver: CredentialResolver | None = None, **overrides: Any) -> "ClientConfig":
        """Build a config from the environment (and a .env file).

        Explicit ``overrides`` win over the environment, which wins over the
        defaults.

        Raises:
            CredentialNotFoundError: If the key pair cannot be resolved.
            ConfigurationError: If a numeric or boolean variable is malformed.
        """
        resolver = resolver or CredentialResolver()
        key_pair = resolver.resolve_key_pair(
            secret_id=overrides.pop("secret_id", None),
            secret_key=overrides.pop("secret_key", None),
        )

        settings: dict[str, Any] = {}
        endpoint = resolver.resolve(env_var_name="GHINK_ENDPOINT", mask_in_logs=False)
        if endpoint is not None:
            settings["endpoint"] = endpoint
        for name, env_var_name, convert in (
            ("timeout", "GHINK_TIMEOUT", float),
            ("max_retries", "GHINK_MAX_RETRIES", int),
            ("retry_delay", "GHINK_RETRY_DELAY", float),
            ("exponential_backoff", "GHINK_EXPONENTIAL_BACKOFF", _parse_bool),
            ("enable_token", "GHINK_ENABLE_TOKEN", _parse_bool),
        ):
            raw = resolver.resolve(env_var_name=env_var_name, mask_in_logs=False)
            if raw is None:
                continue
            try:
                settings[name] = convert(raw.strip())
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {env_var_name}: {raw!r}") from e

        settings.update(overrides)
        return cls(secret_id=key_pair.secret_id, secret_key=key_pair.secret_key, **settings)


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")
