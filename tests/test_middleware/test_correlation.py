"""Correlation ID middleware tests."""

from typing import AsyncGenerator
from uuid import UUID, uuid4

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient
from pytest import fixture, mark
from pytest_asyncio import fixture as asyncio_fixture
from structlog.contextvars import get_contextvars

from sitecms.middleware.correlation import CorrelationMiddleware, is_valid_correlation_id


@fixture
def correlation_app() -> FastAPI:
    """Get test application with correlation ID middleware."""
    app = FastAPI()

    @app.get("/test")
    async def test_endpoint(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "correlation_id": request.state.correlation_id,
                "logged_as": get_contextvars().get("correlation_id"),
            }
        )

    app.add_middleware(CorrelationMiddleware)
    return app


@asyncio_fixture
async def correlation_client(
    correlation_app: FastAPI,
) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=correlation_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def test_correlation_id_generation(correlation_client: AsyncClient) -> None:
    response = await correlation_client.get("/test")
    assert response.status_code == status.HTTP_200_OK

    correlation_id = response.headers["X-Request-ID"]
    assert UUID(correlation_id)
    assert response.json()["correlation_id"] == correlation_id
    assert response.json()["logged_as"] == correlation_id


async def test_correlation_id_propagation(correlation_client: AsyncClient) -> None:
    correlation_id = str(uuid4())
    response = await correlation_client.get(
        "/test", headers={"X-Request-ID": correlation_id}
    )
    assert response.headers["X-Request-ID"] == correlation_id
    assert response.json()["correlation_id"] == correlation_id


async def test_invalid_correlation_id_is_replaced(
    correlation_client: AsyncClient,
) -> None:
    response = await correlation_client.get(
        "/test", headers={"X-Request-ID": "<script>"}
    )
    assert response.headers["X-Request-ID"] != "<script>"
    assert UUID(response.headers["X-Request-ID"])


@mark.parametrize(
    "value, expected",
    [("test-abc", True), (str(uuid4()), True), ("", False), (None, False), ("x", False)],
)
def test_is_valid_correlation_id(value, expected) -> None:
    assert is_valid_correlation_id(value) is expected
