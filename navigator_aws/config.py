"""
AWS Configuration: client options and session resolution.

Options can be passed explicitly or read from environment variables:
    NAVIGATOR_AWS_REGION (falls back to AWS_REGION, AWS_DEFAULT_REGION)
    NAVIGATOR_AWS_ASSUME_ROLE_ARN
    NAVIGATOR_AWS_ROLE_SESSION_NAME
    NAVIGATOR_AWS_RETRY_MAX_ATTEMPTS
    NAVIGATOR_AWS_RETRY_MODE
    AWS_PROFILE

Security Note:
    Never log credential values. Only log the region, retry settings and
    the credential method botocore resolved.
"""
import asyncio
import os
from enum import Enum
from typing import Any, Optional

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.credentials import (
    CredentialProvider,
    CredentialResolver,
    Credentials,
)
from botocore.exceptions import BotoCoreError
from botocore.session import Session as BotocoreSession
from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigurationError
from .log import Logger, get_logger
from .utils import run_blocking

DEFAULT_ROLE_SESSION_NAME = "navigator-aws"


class RetryMode(str, Enum):
    """botocore retry modes. ``UNSPECIFIED`` defers to the provider default."""

    UNSPECIFIED = ""
    STANDARD = "standard"
    ADAPTIVE = "adaptive"
    LEGACY = "legacy"


def _parse_retry_mode(value: Any) -> Any:
    if value is None:
        return RetryMode.UNSPECIFIED
    if isinstance(value, str) and not isinstance(value, RetryMode):
        return value.strip().lower()
    return value


class ClientOptions(BaseModel):
    """Options accepted by ``AWSClient.bootstrap``."""

    logger: Any = None
    region: str
    assume_role_arn: str = ""
    role_session_name: str = Field(default=DEFAULT_ROLE_SESSION_NAME, min_length=2)
    retry_max_attempts: int = Field(default=0, ge=0)
    retry_mode: RetryMode = RetryMode.UNSPECIFIED
    transport: Optional[Config] = None
    profile: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("logger", mode="before")
    @classmethod
    def validate_logger(cls, v: Any) -> Logger:
        """Wrap stdlib loggers and reject objects without the leveled methods."""
        try:
            return get_logger(v)
        except TypeError as err:
            raise ValueError(str(err)) from err

    @field_validator("retry_mode", mode="before")
    @classmethod
    def validate_retry_mode(cls, v: Any) -> Any:
        """Accept retry modes case-insensitively ("Standard" -> standard)."""
        return _parse_retry_mode(v)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientOptions":
        """Create ClientOptions from environment variables.

        Args:
            overrides: Explicit values that take precedence over the environment.

        Returns:
            Populated ClientOptions instance.
        """
        values: dict[str, Any] = {
            "region": (
                os.environ.get("NAVIGATOR_AWS_REGION")
                or os.environ.get("AWS_REGION")
                or os.environ.get("AWS_DEFAULT_REGION")
                or ""
            ),
            "assume_role_arn": os.environ.get("NAVIGATOR_AWS_ASSUME_ROLE_ARN", ""),
            "role_session_name": os.environ.get(
                "NAVIGATOR_AWS_ROLE_SESSION_NAME", DEFAULT_ROLE_SESSION_NAME
            ),
            "retry_max_attempts": int(
                os.environ.get("NAVIGATOR_AWS_RETRY_MAX_ATTEMPTS", "0")
            ),
            "retry_mode": os.environ.get("NAVIGATOR_AWS_RETRY_MODE", ""),
            "profile": os.environ.get("AWS_PROFILE") or None,
        }
        values.update(overrides)
        return cls(**values)


class SessionConfig(BaseModel):
    """Resolved, immutable session configuration.

    ``session`` is the boto3 session bound to the credential source; every
    client is created from it with ``client_config()``.
    """

    region: str
    retry_max_attempts: int = 0
    retry_mode: RetryMode = RetryMode.UNSPECIFIED
    transport: Optional[Config] = None
    profile: Optional[str] = None
    credential_method: Optional[str] = None
    session: boto3.session.Session

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @property
    def retries(self) -> Optional[dict[str, Any]]:
        """botocore ``retries`` setting, ``None`` when both are provider defaults."""
        retries: dict[str, Any] = {}
        if self.retry_max_attempts > 0:
            retries["total_max_attempts"] = self.retry_max_attempts
        if self.retry_mode is not RetryMode.UNSPECIFIED:
            retries["mode"] = self.retry_mode.value
        return retries or None

    def client_config(self) -> Config:
        """Build the botocore Config shared by every client of this session.

        The transport supplies connection settings only; ``region_name`` and
        ``retries`` always come from this configuration.
        """
        options = Config(region_name=self.region, retries=self.retries)
        if self.transport is None:
            return options
        return self.transport.merge(options)

    def client(self, service_name: str) -> BaseClient:
        """Create a boto3 client bound to this configuration."""
        return self.session.client(service_name, config=self.client_config())

    def with_credentials(self, provider: CredentialProvider) -> "SessionConfig":
        """Return a copy whose only credential source is ``provider``."""
        botocore_session = BotocoreSession(profile=self.profile)
        botocore_session.register_component(
            "credential_provider", CredentialResolver(providers=[provider]),
        )
        session = boto3.session.Session(
            botocore_session=botocore_session, region_name=self.region,
        )
        return self.model_copy(
            update={"session": session, "credential_method": provider.METHOD}
        )


async def load_default_credentials(
    session: boto3.session.Session,
    timeout: Optional[float] = None,
) -> Credentials:
    """Resolve the default credential chain of ``session`` off the event loop.

    The chain may reach container or instance metadata endpoints, so the
    lookup runs in a worker thread bounded by ``timeout``.

    Raises:
        ConfigurationError: If the chain fails, times out or finds nothing.
    """
    try:
        credentials = await run_blocking(session.get_credentials, timeout=timeout)
    except asyncio.TimeoutError as err:
        raise ConfigurationError(
            "failed to load AWS config: timed out resolving credentials"
        ) from err
    except BotoCoreError as err:
        raise ConfigurationError(f"failed to load AWS config: {err}") from err
    if credentials is None:
        raise ConfigurationError(
            "failed to load AWS config: no credentials found in the default chain"
        )
    return credentials


async def resolve_config(
    region: str,
    retry_max_attempts: int = 0,
    retry_mode: RetryMode = RetryMode.UNSPECIFIED,
    transport: Optional[Config] = None,
    *,
    profile: Optional[str] = None,
    logger: Optional[Logger] = None,
    timeout: Optional[float] = None,
) -> SessionConfig:
    """Resolve caller options into a SessionConfig.

    Loads the default credential chain (environment, shared config files,
    container/instance metadata) for ``profile``.

    Args:
        region: AWS region, passed through verbatim.
        retry_max_attempts: Total attempts per call; ``0`` keeps the provider default.
        retry_mode: botocore retry mode; ``UNSPECIFIED`` keeps the provider default.
        transport: botocore Config for connection settings (timeouts, proxies,
            pool). Its ``region_name`` and ``retries`` are ignored.
        profile: Shared config profile, ``None`` for the default chain.
        logger: Diagnostic sink.
        timeout: Seconds allowed for resolving the credential chain.

    Returns:
        The resolved SessionConfig.

    Raises:
        ConfigurationError: If an option is invalid or no usable credential
            source is found in time.
    """
    log = get_logger(logger)
    if not region:
        raise ConfigurationError("failed to load AWS config: region is required")
    if retry_max_attempts < 0:
        raise ConfigurationError(
            "failed to load AWS config: retry max attempts must not be negative"
        )
    try:
        retry_mode = RetryMode(_parse_retry_mode(retry_mode))
    except ValueError as err:
        raise ConfigurationError(f"failed to load AWS config: {err}") from err

    if retry_max_attempts > 0:
        log.debug("configured retry max attempts", maxAttempts=retry_max_attempts)
    if retry_mode is not RetryMode.UNSPECIFIED:
        log.debug("configured retry mode", mode=retry_mode.value)
    if transport is not None:
        log.debug("using custom transport")

    try:
        session = boto3.session.Session(region_name=region, profile_name=profile)
    except BotoCoreError as err:
        raise ConfigurationError(f"failed to load AWS config: {err}") from err
    credentials = await load_default_credentials(session, timeout=timeout)
    log.debug(
        "loaded AWS config from default credentials chain",
        method=credentials.method,
    )

    return SessionConfig(
        region=region,
        retry_max_attempts=retry_max_attempts,
        retry_mode=retry_mode,
        transport=transport,
        profile=profile,
        credential_method=credentials.method,
        session=session,
    )
