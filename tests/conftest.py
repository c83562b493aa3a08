"""Shared fixtures: isolated AWS environment, stubbed clients, recording logger."""
from datetime import datetime, timedelta, timezone

import boto3
import pytest
from botocore.stub import Stubber

REGION = "us-east-1"
ROLE_ARN = "arn:aws:iam::123456789012:role/secrets-reader"

_AWS_ENV_VARS = (
    "AWS_PROFILE",
    "AWS_DEFAULT_PROFILE",
    "AWS_SESSION_TOKEN",
    "AWS_SECURITY_TOKEN",
    "AWS_MAX_ATTEMPTS",
    "AWS_RETRY_MODE",
    "AWS_ROLE_ARN",
    "AWS_WEB_IDENTITY_TOKEN_FILE",
    "AWS_CONTAINER_CREDENTIALS_RELATIVE_URI",
    "AWS_CONTAINER_CREDENTIALS_FULL_URI",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
)


class RecordingLogger:
    """Logger collecting (level, message, attrs) tuples."""

    def __init__(self):
        self.records = []

    def debug(self, msg, **attrs):
        self.records.append(("debug", msg, attrs))

    def info(self, msg, **attrs):
        self.records.append(("info", msg, attrs))

    def warn(self, msg, **attrs):
        self.records.append(("warn", msg, attrs))

    def error(self, msg, **attrs):
        self.records.append(("error", msg, attrs))

    def messages(self, level=None):
        return [msg for lvl, msg, _ in self.records if level in (None, lvl)]


class StubbedClients:
    """Stubbed STS and Secrets Manager clients handed out by Session.client."""

    def __init__(self):
        session = boto3.session.Session(
            region_name=REGION,
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        self.sts = session.client("sts")
        self.secretsmanager = session.client("secretsmanager")
        self.sts_stub = Stubber(self.sts)
        self.secrets_stub = Stubber(self.secretsmanager)
        self.calls = []

    def client(self, session, service_name, **kwargs):
        self.calls.append((service_name, session, kwargs.get("config")))
        return getattr(self, service_name)

    @property
    def services(self):
        return [name for name, _, _ in self.calls]


def sts_credentials(expiration=None):
    return {
        "AccessKeyId": "ASIAROLEACCESSKEY001",
        "SecretAccessKey": "role-secret-access-key",
        "SessionToken": "role-session-token",
        "Expiration": expiration or datetime.now(timezone.utc) + timedelta(hours=1),
    }


def assume_role_response(expiration=None):
    return {
        "Credentials": sts_credentials(expiration),
        "AssumedRoleUser": {
            "AssumedRoleId": "AROAEXAMPLEROLEID:navigator-aws",
            "Arn": "arn:aws:sts::123456789012:assumed-role/secrets-reader/navigator-aws",
        },
    }


def caller_identity_response(arn="arn:aws:iam::123456789012:user/ci"):
    return {
        "UserId": "AIDAEXAMPLEUSERID",
        "Account": "123456789012",
        "Arn": arn,
    }


@pytest.fixture
def aws_env(monkeypatch, tmp_path):
    """Environment-only credentials, no shared files, no metadata service."""
    for name in _AWS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))
    monkeypatch.setenv("BOTO_CONFIG", str(tmp_path / "boto.cfg"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIAAMBIENTACCESS001")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "ambient-secret-access-key")
    return tmp_path


@pytest.fixture
def no_credentials(aws_env, monkeypatch):
    monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
    return aws_env


@pytest.fixture
def clients(aws_env, monkeypatch):
    """Route every boto3 Session.client call to stubbed clients."""
    stubbed = StubbedClients()
    monkeypatch.setattr(
        boto3.session.Session,
        "client",
        lambda self, service_name, **kwargs: stubbed.client(self, service_name, **kwargs),
    )
    with stubbed.sts_stub, stubbed.secrets_stub:
        yield stubbed


@pytest.fixture
def recorder():
    return RecordingLogger()
