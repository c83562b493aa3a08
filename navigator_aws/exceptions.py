"""
Navigator AWS Exceptions.

Every error raised by the bootstrap sequence or the secrets accessor carries
a short stage description and keeps the original cause in ``__cause__``.
"""


class AWSClientError(Exception):
    """Base class for navigator_aws errors."""


class ConfigurationError(AWSClientError):
    """Region missing or the default credential chain could not be loaded."""


class AssumeRoleError(AWSClientError):
    """The STS AssumeRole exchange was rejected."""


class IdentityError(AWSClientError):
    """Credentials resolved but GetCallerIdentity failed."""


class SecretError(AWSClientError):
    """Base class for per-call secret failures."""


class SecretRetrievalError(SecretError):
    """GetSecretValue failed."""


class SecretNotFoundError(SecretRetrievalError):
    """The secret does not exist (ResourceNotFoundException)."""


class SecretEmptyError(SecretError):
    """The secret exists but neither SecretString nor SecretBinary is set."""


class SecretDecodeError(SecretError):
    """The secret payload could not be decoded into the requested shape."""
