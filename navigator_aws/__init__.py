"""Navigator AWS: AWS session bootstrap and Secrets Manager access.

Security Note (Threat Model):
    Temporary role credentials live in process memory for the lifetime of
    the client and are never persisted or logged. Role assumption runs once
    per bootstrap; a process outliving the role session must bootstrap again.
"""

from .version import __version__
from .client import AWSClient
from .config import ClientOptions, RetryMode, SessionConfig, resolve_config
from .credentials import (
    AssumedRoleProvider,
    CredentialCache,
    CredentialSet,
    provision_credentials,
)
from .identity import CallerIdentity, verify_identity
from .secrets import fetch_and_decode
from .log import Logger, StdLogger, get_logger
from .exceptions import (
    AWSClientError,
    ConfigurationError,
    AssumeRoleError,
    IdentityError,
    SecretError,
    SecretRetrievalError,
    SecretNotFoundError,
    SecretEmptyError,
    SecretDecodeError,
)

__all__ = [
    "__version__",
    "AWSClient",
    "ClientOptions",
    "RetryMode",
    "SessionConfig",
    "resolve_config",
    "AssumedRoleProvider",
    "CredentialCache",
    "CredentialSet",
    "provision_credentials",
    "CallerIdentity",
    "verify_identity",
    "fetch_and_decode",
    "Logger",
    "StdLogger",
    "get_logger",
    "AWSClientError",
    "ConfigurationError",
    "AssumeRoleError",
    "IdentityError",
    "SecretError",
    "SecretRetrievalError",
    "SecretNotFoundError",
    "SecretEmptyError",
    "SecretDecodeError",
]
