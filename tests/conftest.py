import pytest_asyncio                          # Async-aware fixtures for pytest
from httpx import AsyncClient                  # Async HTTP client for testing FastAPI endpoints
from httpx import ASGITransport                # ASGI transport to run FastAPI apps in-memory

from smart_health.api.app import app           # Long-running server application
from smart_health.api.serverless import app as serverless_app  # Serverless wrapper application


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)         # Create in-memory transport using FastAPI app

    async with AsyncClient(                    # Initialize async HTTP client
        transport=transport,
        base_url="http://test"
    ) as http_client:
        yield http_client


@pytest_asyncio.fixture
async def serverless_client():
    transport = ASGITransport(app=serverless_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test"
    ) as http_client:
        yield http_client
