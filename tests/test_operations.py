from __future__ import annotations

import io

import pytest

from aws_lite.domain.envelope import (
    ApiResponse,
    EmptyBody,
    RawBody,
    RequestEnvelope,
    StreamBody,
    StructuredBody,
    classify_body,
)
from aws_lite.domain.operations import (
    OperationRef,
    PaginatorSpec,
    RequestIntent,
    ResponseResult,
)
from aws_lite.errors import InvalidParameters


def test_operation_ref_key() -> None:
    assert OperationRef("DynamoDB", "GetItem").key == "DynamoDB.GetItem"


def test_request_intent_coerce_mapping() -> None:
    headers = {"x": "1"}
    intent = RequestIntent.coerce(
        {
            "headers": headers,
            "payload": {"a": 1},
            "pathPrefix": "/p",
            "paginator": {"cursor": "c", "token": "t", "accumulator": "a", "extra": 1},
        }
    )

    assert intent.path_prefix == "/p"
    assert intent.headers == headers and intent.headers is not headers
    assert intent.paginator == PaginatorSpec(cursor="c", token="t", accumulator="a")


def test_request_intent_coerce_rejects_unknown_fields() -> None:
    with pytest.raises(InvalidParameters, match="Unknown request fields: bogus"):
        RequestIntent.coerce({"bogus": 1})


def test_request_intent_coerce_rejects_non_mapping() -> None:
    with pytest.raises(InvalidParameters):
        RequestIntent.coerce(["payload"])


def test_request_intent_coerce_none() -> None:
    assert RequestIntent.coerce(None) == RequestIntent()


def test_request_intent_content_order() -> None:
    assert RequestIntent(body=b"b", data="d").content == b"b"
    assert RequestIntent(data="d").content == "d"
    assert RequestIntent().content is None


def test_paginator_must_be_mapping() -> None:
    with pytest.raises(InvalidParameters):
        PaginatorSpec.coerce("NextToken")


def test_response_result_coerce() -> None:
    assert ResponseResult.coerce({"response": 1, "awsjson": ["Item"]}) == ResponseResult(
        response=1, awsjson=["Item"]
    )
    with pytest.raises(InvalidParameters, match="'response' key"):
        ResponseResult.coerce({"Item": 1})


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (None, EmptyBody),
        (b"x", RawBody),
        ("x", RawBody),
        (bytearray(b"x"), RawBody),
        (io.BytesIO(b"x"), StreamBody),
        ({"a": 1}, StructuredBody),
        ([1], StructuredBody),
    ],
)
def test_classify_body(value: object, kind: type) -> None:
    assert isinstance(classify_body(value), kind)


def test_envelope_url_and_response_ok() -> None:
    envelope = RequestEnvelope(
        service="S3",
        operation=None,
        method="GET",
        protocol="http",
        host="localhost",
        port=4566,
        path="/b?list-type=2",
        headers={},
    )

    assert envelope.url == "http://localhost:4566/b?list-type=2"
    assert ApiResponse(204).ok
    assert not ApiResponse(302).ok
