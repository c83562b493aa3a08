"""
Secrets Accessor: fetch the latest secret version and decode it.

The payload is taken from ``SecretString`` when present (an empty string
still counts), otherwise from ``SecretBinary``. The bytes are parsed as JSON
and validated into the caller's shape: a pydantic model, a dataclass, a
TypedDict or a builtin container type.

Security Note:
    Never log secret payloads. Only log secret identifiers.
"""
from typing import Any, Optional, TypeVar

from botocore.client import BaseClient
from botocore.exceptions import ClientError
from pydantic import TypeAdapter, ValidationError

from .exceptions import (
    SecretDecodeError,
    SecretEmptyError,
    SecretNotFoundError,
    SecretRetrievalError,
)
from .log import Logger, get_logger
from .utils import AWS_ERRORS, run_blocking

T = TypeVar("T")

_NOT_FOUND_CODE = "ResourceNotFoundException"


def select_payload(response: dict[str, Any]) -> bytes:
    """Pick the secret bytes from a GetSecretValue response.

    Raises:
        SecretEmptyError: If neither SecretString nor SecretBinary is set.
    """
    secret_string = response.get("SecretString")
    if secret_string is not None:
        return secret_string.encode("utf-8")
    secret_binary = response.get("SecretBinary")
    if secret_binary is not None:
        return bytes(secret_binary)
    raise SecretEmptyError("secret found but value is empty")


def decode_payload(payload: bytes, shape: type[T]) -> T:
    """Parse ``payload`` as JSON and validate it into ``shape``.

    Validation is strict: a JSON value must already have the field's type
    (``"1"`` or ``1.0`` are not accepted for an ``int`` field). Strings in
    ISO 8601 form are still accepted for date and time fields.

    Raises:
        SecretDecodeError: If the payload is not JSON or does not fit ``shape``.
    """
    try:
        return TypeAdapter(shape).validate_json(payload, strict=True)
    except ValidationError as err:
        raise SecretDecodeError(f"failed to unmarshal byte value: {err}") from err


async def get_secret_value(
    secrets_client: BaseClient,
    secret_id: str,
    timeout: Optional[float] = None,
) -> dict[str, Any]:
    """Call GetSecretValue for the latest version of ``secret_id``.

    Raises:
        SecretNotFoundError: If the secret does not exist.
        SecretRetrievalError: On any other failure.
    """
    try:
        return await run_blocking(
            secrets_client.get_secret_value, SecretId=secret_id, timeout=timeout,
        )
    except ClientError as err:
        if err.response.get("Error", {}).get("Code") == _NOT_FOUND_CODE:
            raise SecretNotFoundError(
                f"failed to get secret value: {secret_id} not found"
            ) from err
        raise SecretRetrievalError(f"failed to get secret value: {err}") from err
    except AWS_ERRORS as err:
        raise SecretRetrievalError(f"failed to get secret value: {err}") from err


async def fetch_and_decode(
    secrets_client: BaseClient,
    secret_id: str,
    shape: Any = dict[str, Any],
    *,
    logger: Optional[Logger] = None,
    timeout: Optional[float] = None,
) -> Any:
    """Fetch the latest value of ``secret_id`` and decode it into ``shape``.

    Args:
        secrets_client: Secrets Manager client.
        secret_id: Secret name or full ARN.
        shape: Type the JSON document is validated into.
        logger: Diagnostic sink.
        timeout: Seconds allowed for the GetSecretValue call.

    Returns:
        A new instance of ``shape``.

    Raises:
        SecretRetrievalError: If the secret could not be read.
        SecretEmptyError: If the secret has no value.
        SecretDecodeError: If the value does not decode into ``shape``.
    """
    log = get_logger(logger)
    response = await get_secret_value(secrets_client, secret_id, timeout=timeout)
    payload = select_payload(response)
    value = decode_payload(payload, shape)
    log.debug(
        "decoded secret value",
        secretId=secret_id,
        versionId=response.get("VersionId"),
    )
    return value
