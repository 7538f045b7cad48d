from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from aws_lite import config
from aws_lite.catalog import load_catalog
from aws_lite.config import Settings
from aws_lite.logging_utils import ENGINE_LOGGER
from aws_lite.testing import MockTransport, StaticSigner


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in (*config.ENV_KEYS.values(), "AWS_REGION"):
        monkeypatch.delenv(key, raising=False)
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()
    logging.getLogger(ENGINE_LOGGER).setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def catalog():
    return load_catalog()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def signer() -> StaticSigner:
    return StaticSigner()


@pytest.fixture
def client(catalog, transport: MockTransport, signer: StaticSigner):
    from aws_lite.client import AwsLiteClient

    return AwsLiteClient(
        Settings(),
        region="us-west-2",
        catalog=catalog,
        signer=signer,
        transport=transport,
    )
