"""STS caller identity verification."""
from typing import Any, Optional

from botocore.client import BaseClient
from pydantic import BaseModel, Field, ValidationError

from .exceptions import IdentityError
from .log import Logger, get_logger
from .utils import AWS_ERRORS, run_blocking


class CallerIdentity(BaseModel):
    """Result of STS GetCallerIdentity."""

    account: str = Field(alias="Account")
    arn: str = Field(alias="Arn")
    user_id: str = Field(alias="UserId")

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> "CallerIdentity":
        return cls.model_validate(response)


async def verify_identity(
    sts_client: BaseClient,
    *,
    logger: Optional[Logger] = None,
    timeout: Optional[float] = None,
) -> CallerIdentity:
    """Confirm the credentials behind ``sts_client`` are usable.

    Issues a single GetCallerIdentity call so that unusable credentials fail
    here rather than on the first real request.

    Raises:
        IdentityError: On network, authorization, timeout or malformed
            response failures.
    """
    log = get_logger(logger)
    try:
        response = await run_blocking(sts_client.get_caller_identity, timeout=timeout)
        identity = CallerIdentity.from_response(response)
    except AWS_ERRORS as err:
        raise IdentityError(f"failed to get caller identity: {err}") from err
    except ValidationError as err:
        raise IdentityError(
            "failed to get caller identity: malformed response"
        ) from err
    log.debug(
        "caller identity",
        account=identity.account,
        arn=identity.arn,
        userId=identity.user_id,
    )
    return identity
