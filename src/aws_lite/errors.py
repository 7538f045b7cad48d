"""Error taxonomy for the request engine."""

from __future__ import annotations


class AwsLiteError(Exception):
    """Base class for errors raised by the engine itself.

    Transport and signing failures are never wrapped; they propagate as raised.
    """

    kind = "AwsLiteError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class MissingParameter(AwsLiteError):
    kind = "MissingParameter"

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required parameter: {name}")
        self.name = name


class InvalidParameters(AwsLiteError):
    kind = "InvalidParameters"


class InvalidQuery(AwsLiteError):
    kind = "InvalidQuery"


class InvalidProtocol(AwsLiteError):
    kind = "InvalidProtocol"


class PaginationConfigError(AwsLiteError):
    kind = "PaginationConfigError"


class PaginationResponseError(AwsLiteError):
    kind = "PaginationResponseError"


class UnknownOperation(AwsLiteError):
    kind = "UnknownOperation"


class CatalogError(AwsLiteError):
    kind = "CatalogError"


class MarshallError(AwsLiteError):
    kind = "MarshallError"


class MarkupError(AwsLiteError):
    kind = "MarkupError"


class CredentialsError(AwsLiteError):
    kind = "CredentialsError"
