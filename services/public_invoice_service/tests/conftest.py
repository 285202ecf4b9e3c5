"""Shared fixtures for Public Invoice Service tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from uuid import UUID, uuid4

import pytest
from dishka import make_async_container
from dishka.integrations.fastapi import FastapiProvider
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from services.public_invoice_service.app import create_app
from services.public_invoice_service.config import PublicInvoiceSettings
from services.public_invoice_service.di import RequestContextProvider
from services.public_invoice_service.tests.test_provider import (
    InfrastructureTestProvider,
    make_test_settings,
)


@pytest.fixture
def invoice_id() -> UUID:
    return uuid4()


@pytest.fixture
def test_settings() -> PublicInvoiceSettings:
    return make_test_settings()


@pytest.fixture
async def app(test_settings: PublicInvoiceSettings) -> AsyncIterator[FastAPI]:
    """Create the application with test providers."""
    container = make_async_container(
        InfrastructureTestProvider(test_settings),
        RequestContextProvider(),
        FastapiProvider(),
    )
    application = create_app(config=test_settings, container=container)

    yield application

    await container.close()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
