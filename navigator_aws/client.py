"""
AWSClient: bootstrapped AWS session with STS and Secrets Manager clients.

Provides the public API:
- ``bootstrap(options)``: resolve config, assume role, verify identity
- ``get_caller_identity()``: STS GetCallerIdentity
- ``get_json_secret(secret_id, shape)``: fetch and decode a secret
- ``config`` / ``sts`` / ``secrets``: read-only access to the underlying objects

An AWSClient holds no per-call state and can be shared between tasks.
"""
from typing import Any, Optional

from botocore.client import BaseClient

from .config import ClientOptions, SessionConfig, resolve_config
from .credentials import provision_credentials
from .identity import CallerIdentity, verify_identity
from .log import Logger, get_logger
from .secrets import fetch_and_decode
from .utils import Deadline


class AWSClient:
    """Immutable bundle of a resolved session and its service clients.

    Build instances with ``AWSClient.bootstrap``; the sequence either
    completes or raises, a partially configured client is never returned.
    """

    __slots__ = ("_config", "_sts", "_secrets", "_logger")

    def __init__(
        self,
        config: SessionConfig,
        sts_client: BaseClient,
        secrets_client: BaseClient,
        logger: Optional[Logger] = None,
    ):
        self._config = config
        self._sts = sts_client
        self._secrets = secrets_client
        self._logger = get_logger(logger)

    def __repr__(self) -> str:
        return (
            f"<AWSClient region={self._config.region!r} "
            f"credentials={self._config.credential_method!r}>"
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def sts(self) -> BaseClient:
        return self._sts

    @property
    def secrets(self) -> BaseClient:
        return self._secrets

    # ------------------------------------------------------------------
    # Runtime API
    # ------------------------------------------------------------------

    async def get_caller_identity(
        self, timeout: Optional[float] = None,
    ) -> CallerIdentity:
        """Return the identity behind the current credentials.

        Raises:
            IdentityError: If the call fails.
        """
        return await verify_identity(self._sts, logger=self._logger, timeout=timeout)

    async def get_json_secret(
        self,
        secret_id: str,
        shape: Any = dict[str, Any],
        timeout: Optional[float] = None,
    ) -> Any:
        """Fetch the latest value of ``secret_id`` decoded into ``shape``.

        Args:
            secret_id: Secret name or full ARN.
            shape: pydantic model, dataclass, TypedDict or container type.
            timeout: Seconds allowed for the call.

        Raises:
            SecretRetrievalError: If the secret could not be read.
            SecretEmptyError: If the secret has no value.
            SecretDecodeError: If the value does not decode into ``shape``.
        """
        return await fetch_and_decode(
            self._secrets, secret_id, shape,
            logger=self._logger, timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    async def bootstrap(
        cls,
        options: ClientOptions,
        *,
        timeout: Optional[float] = None,
    ) -> "AWSClient":
        """Resolve, provision, verify and build the Secrets Manager client.

        Args:
            options: Client options.
            timeout: Overall deadline in seconds, shared by the credential
                chain lookup and every network call.

        Returns:
            A ready AWSClient.

        Raises:
            ConfigurationError: If the configuration cannot be resolved.
            AssumeRoleError: If the role cannot be assumed.
            IdentityError: If the resulting credentials are unusable.
        """
        logger = get_logger(options.logger)
        deadline = Deadline(timeout)

        config = await resolve_config(
            options.region,
            options.retry_max_attempts,
            options.retry_mode,
            options.transport,
            profile=options.profile,
            logger=logger,
            timeout=deadline.remaining(),
        )
        config, sts_client = await provision_credentials(
            config,
            options.assume_role_arn,
            session_name=options.role_session_name,
            logger=logger,
            timeout=deadline.remaining(),
        )
        await verify_identity(sts_client, logger=logger, timeout=deadline.remaining())
        secrets_client = config.client("secretsmanager")

        logger.debug(
            "AWS client ready",
            region=config.region,
            credentials=config.credential_method,
        )
        return cls(config, sts_client, secrets_client, logger=logger)
