"""Key pair credentials and multi-source credential resolution.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv, loaded into the environment)
4. Default value

Example:
    ```python
    from ghink_openapi.auth import CredentialResolver

    resolver = CredentialResolver()
    key_pair = resolver.resolve_key_pair()  # GHINK_SECRET_ID / GHINK_SECRET_KEY
    ```

Security Considerations:
    - Secret values are never logged (masked with ***)
    - Only source information is logged (env var name, file path, etc.)
    - File-based credentials have whitespace stripped
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from ghink_openapi.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

SECRET_ID_ENV = "GHINK_SECRET_ID"
SECRET_KEY_ENV = "GHINK_SECRET_KEY"
SECRET_KEY_FILE_ENV = "GHINK_SECRET_KEY_FILE"


@dataclass(frozen=True)
class KeyPair:
    """Long-lived secret identifier and secret key."""

    secret_id: str
    secret_key: str = field(repr=False)

    @property
    def authorization(self) -> str:
        """Key mode ``Authorization`` header value.

        The upstream expects the pair colon-joined in plaintext, not base64.
        """
        return f"Basic {self.secret_id}:{self.secret_key}"

    def __repr__(self) -> str:
        return f"KeyPair(secret_id={self.secret_id!r}, secret_key='***')"


class CredentialResolver:
    """Resolve credentials from explicit values, the environment, files and defaults.

    Example:
        ```python
        resolver = CredentialResolver(load_dotenv=False)

        endpoint = resolver.resolve(env_var_name="GHINK_ENDPOINT", default="https://api.gh.ink/v3")
        secret_key = resolver.resolve_from_file(env_var_name="GHINK_SECRET_KEY_FILE")
        ```
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize credential resolver.

        Args:
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories.
            load_dotenv: Whether to load the .env file at all.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            # Mark as attempted either way; a broken .env must not block resolution
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a setting from the first source that has it.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable to check.
            default: Value used when no other source has one.
            required: Raise instead of returning None when nothing is found.
            mask_in_logs: Log "***" instead of the value.

        Returns:
            Resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required and not found in any source.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = "***" if mask_in_logs else result
            logger.debug(f"Resolved credential from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file.

        The path may be given directly or through an environment variable, and
        supports ``~`` and ``$VAR`` expansion. Contents are stripped.

        Raises:
            CredentialFileError: If required and the file cannot be read.
        """
        path_to_use = None
        if file_path is not None:
            path_to_use = str(file_path)
        elif env_var_name:
            path_to_use = self.resolve(env_var_name=env_var_name, mask_in_logs=False)

        if path_to_use is None:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None
        except OSError as e:
            error_msg = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(error_msg) from e
            logger.warning(error_msg)
            return None

        logger.debug(f"Resolved credential from file: {path_obj} (***)")
        return content

    def resolve_key_pair(
        self,
        *,
        secret_id: str | None = None,
        secret_key: str | None = None,
    ) -> KeyPair:
        """Resolve the Open API key pair.

        The secret key comes from, in order: ``secret_key``, ``GHINK_SECRET_KEY``,
        the file named by ``GHINK_SECRET_KEY_FILE``.

        Raises:
            CredentialNotFoundError: If either half of the pair is missing.
            CredentialFileError: If ``GHINK_SECRET_KEY_FILE`` names an unreadable file.
        """
        resolved_id = self.resolve(value=secret_id, env_var_name=SECRET_ID_ENV, required=True)
        resolved_key = self.resolve(value=secret_key, env_var_name=SECRET_KEY_ENV)
        if resolved_key is None and SECRET_KEY_FILE_ENV in os.environ:
            resolved_key = self.resolve_from_file(env_var_name=SECRET_KEY_FILE_ENV, required=True)
        if resolved_key is None:
            raise CredentialNotFoundError(
                f"Required credential not found (checked env vars: {SECRET_KEY_ENV}, {SECRET_KEY_FILE_ENV})",
                env_var_name=SECRET_KEY_ENV,
            )
        return KeyPair(secret_id=resolved_id, secret_key=resolved_key)
