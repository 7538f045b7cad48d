"""SigV4 signing through botocore."""

from __future__ import annotations

import threading
from typing import Protocol

import botocore.session
from botocore.auth import S3SigV4Auth, SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.config import Config
from botocore.credentials import Credentials
from botocore.exceptions import BotoCoreError

from aws_lite.domain.envelope import RequestEnvelope
from aws_lite.errors import CredentialsError
from aws_lite.execution.services import DEFAULT_REGION

_UNSIGNED_PAYLOAD_CONFIG = Config(s3={"payload_signing_enabled": False})


class Signer(Protocol):
    def sign(self, envelope: RequestEnvelope) -> None:
        """Add authorization headers to ``envelope.headers`` in place."""


class SigV4Signer:
    """Signs envelopes with AWS Signature Version 4.

    Credentials are taken from the constructor, else resolved once through
    botocore's default provider chain (env, shared config, IMDS, ...).
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        profile: str | None = None,
    ) -> None:
        self._credentials = credentials
        self._profile = profile
        self._lock = threading.Lock()

    def _resolve_credentials(self) -> Credentials:
        if self._credentials is not None:
            return self._credentials
        with self._lock:
            if self._credentials is None:
                try:
                    session = botocore.session.Session(profile=self._profile)
                    resolved = session.get_credentials()
                except BotoCoreError as exc:
                    raise CredentialsError(f"Unable to resolve AWS credentials: {exc}") from exc
                if resolved is None:
                    raise CredentialsError("No AWS credentials found")
                self._credentials = resolved
        return self._credentials

    def sign(self, envelope: RequestEnvelope) -> None:
        credentials = self._resolve_credentials().get_frozen_credentials()
        region = envelope.region or DEFAULT_REGION
        auth_cls = S3SigV4Auth if envelope.signing_name == "s3" else SigV4Auth
        auth = auth_cls(credentials, envelope.signing_name, region)

        request = AWSRequest(
            method=envelope.method,
            url=envelope.url,
            data=envelope.body if envelope.stream is None else None,
            headers=dict(envelope.headers),
        )
        # Stream bodies are signed as UNSIGNED-PAYLOAD
        if envelope.stream is not None:
            request.context["payload_signing_enabled"] = False
            request.context["client_config"] = _UNSIGNED_PAYLOAD_CONFIG
        auth.add_auth(request)

        envelope.headers.clear()
        envelope.headers.update(request.headers.items())
