"""
AWS Credentials: role assumption and the cached credential source.

When a role ARN is configured, a single STS AssumeRole exchange runs during
bootstrap. The temporary credentials are held by a ``CredentialCache`` and
served to botocore through ``AssumedRoleProvider``.

Known limitation:
    The exchange is not repeated. Once the temporary credentials expire the
    cache keeps serving them and AWS rejects the calls (ExpiredToken).
    Processes that outlive the role session duration must bootstrap again.

Security Note:
    Never log key material. Only log role ARNs and expiration timestamps.
"""
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, Optional

from botocore.client import BaseClient
from botocore.credentials import (
    CredentialProvider,
    Credentials,
    ReadOnlyCredentials,
)
from pydantic import BaseModel, SecretStr, ValidationError, field_validator

from .config import DEFAULT_ROLE_SESSION_NAME, SessionConfig
from .exceptions import AssumeRoleError
from .log import Logger, get_logger
from .utils import AWS_ERRORS, run_blocking


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CredentialSet(BaseModel):
    """Temporary credentials returned by STS."""

    access_key_id: str
    secret_access_key: SecretStr
    session_token: SecretStr
    expiration: datetime

    model_config = {"frozen": True}

    @field_validator("expiration")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_sts(cls, credentials: dict[str, Any]) -> "CredentialSet":
        """Build from the ``Credentials`` member of an AssumeRole response."""
        return cls(
            access_key_id=credentials["AccessKeyId"],
            secret_access_key=credentials["SecretAccessKey"],
            session_token=credentials["SessionToken"],
            expiration=credentials["Expiration"],
        )

    def expired(self, now: Optional[datetime] = None) -> bool:
        """True once ``now`` has reached the expiration timestamp."""
        return (now or _utcnow()) >= self.expiration


class CredentialCache:
    """Caches the credentials produced by ``source``.

    ``retrieve()`` returns the cached set until it expires, then asks
    ``source`` again. All reads and updates happen under one lock.
    """

    def __init__(
        self,
        source: Callable[[], CredentialSet],
        clock: Callable[[], datetime] = _utcnow,
        logger: Optional[Logger] = None,
    ):
        self._source = source
        self._clock = clock
        self._logger = get_logger(logger)
        self._lock = threading.Lock()
        self._credentials: Optional[CredentialSet] = None

    def retrieve(self) -> CredentialSet:
        with self._lock:
            current = self._credentials
            if current is None or current.expired(self._clock()):
                current = self._source()
                if current.expired(self._clock()):
                    self._logger.debug(
                        "cached credentials are expired",
                        expiration=current.expiration.isoformat(),
                    )
                self._credentials = current
            return current


class CachedCredentials(Credentials):
    """botocore Credentials that read through a ``CredentialCache``.

    botocore calls ``get_frozen_credentials()`` when signing each request,
    so the cache is consulted lazily on every call.
    """

    account_id = None

    def __init__(self, cache: CredentialCache, method: str):
        self._cache = cache
        self.method = method

    @property
    def access_key(self) -> str:
        return self._cache.retrieve().access_key_id

    @property
    def secret_key(self) -> str:
        return self._cache.retrieve().secret_access_key.get_secret_value()

    @property
    def token(self) -> str:
        return self._cache.retrieve().session_token.get_secret_value()

    def get_frozen_credentials(self) -> ReadOnlyCredentials:
        current = self._cache.retrieve()
        return ReadOnlyCredentials(
            current.access_key_id,
            current.secret_access_key.get_secret_value(),
            current.session_token.get_secret_value(),
        )


class AssumedRoleProvider(CredentialProvider):
    """Credential provider serving role credentials from a cache."""

    METHOD = "assume-role-cached"

    def __init__(self, cache: CredentialCache):
        super().__init__()
        self._cache = cache

    def load(self) -> CachedCredentials:
        return CachedCredentials(self._cache, self.METHOD)


async def assume_role(
    sts_client: BaseClient,
    role_arn: str,
    session_name: str = DEFAULT_ROLE_SESSION_NAME,
    timeout: Optional[float] = None,
) -> CredentialSet:
    """Run one STS AssumeRole exchange.

    Raises:
        AssumeRoleError: If STS rejects the request, the call times out,
            or the response carries no usable credentials.
    """
    try:
        response = await run_blocking(
            sts_client.assume_role,
            RoleArn=role_arn,
            RoleSessionName=session_name,
            timeout=timeout,
        )
    except AWS_ERRORS as err:
        raise AssumeRoleError(f"failed to assume role {role_arn}: {err}") from err
    try:
        return CredentialSet.from_sts(response["Credentials"])
    except (KeyError, ValidationError) as err:
        raise AssumeRoleError(
            f"failed to assume role {role_arn}: malformed AssumeRole response"
        ) from err


async def provision_credentials(
    config: SessionConfig,
    assume_role_arn: str = "",
    *,
    session_name: str = DEFAULT_ROLE_SESSION_NAME,
    logger: Optional[Logger] = None,
    timeout: Optional[float] = None,
) -> tuple[SessionConfig, BaseClient]:
    """Return the effective configuration and an STS client bound to it.

    Without ``assume_role_arn`` the default credential chain is used as is.
    Otherwise the role is assumed once and the configuration's credential
    source is replaced by a cached provider holding the temporary credentials.

    Args:
        config: Configuration returned by ``resolve_config``.
        assume_role_arn: Role to assume, empty for none.
        session_name: STS RoleSessionName.
        logger: Diagnostic sink.
        timeout: Seconds allowed for the AssumeRole call.

    Returns:
        Tuple of (final SessionConfig, STS client).

    Raises:
        AssumeRoleError: If the exchange fails.
    """
    log = get_logger(logger)
    sts_client = config.client("sts")
    if not assume_role_arn:
        return config, sts_client

    log.debug("AssumeRoleArn is set; assuming role", roleArn=assume_role_arn)
    credentials = await assume_role(
        sts_client, assume_role_arn, session_name, timeout=timeout,
    )
    cache = CredentialCache(lambda: credentials, logger=log)
    config = config.with_credentials(AssumedRoleProvider(cache))
    log.debug(
        "assume role successful",
        roleArn=assume_role_arn,
        expiration=credentials.expiration.isoformat(),
    )
    return config, config.client("sts")
