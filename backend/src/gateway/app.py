# pyright: reportMissingTypeStubs=false
"""
API gateway: reverse proxy in front of the patient records API.

Requests are matched against the static table in gateway.routes and
forwarded with httpx. Protected routes have their bearer token verified
here, with the same JWT service the backend uses, before forwarding.

Run with: uvicorn gateway.app:app --port 5000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from core.config import BACKEND_URL, GATEWAY_TIMEOUT_SECONDS
from gateway.routes import resolve
from services.jwt_service import jwt_service

logger = logging.getLogger(__name__)

# Headers relayed to the upstream; hop-by-hop headers are dropped
FORWARDED_REQUEST_HEADERS = ("authorization", "content-type", "accept", "accept-language")
RELAYED_RESPONSE_HEADERS = ("content-type", "location", "www-authenticate")


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def create_gateway_app(
    backend_url: str = BACKEND_URL,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout: float = GATEWAY_TIMEOUT_SECONDS,
) -> FastAPI:
    """
    Build the gateway application.

    Args:
        backend_url: Base URL of the upstream API
        transport: Optional httpx transport (tests pass an httpx.MockTransport)
        timeout: Upstream request timeout in seconds
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open one pooled upstream client for the app's lifetime."""
        app.state.http_client = httpx.AsyncClient(base_url=backend_url, transport=transport, timeout=timeout)
        logger.info(f"Gateway forwarding to {backend_url}")
        try:
            yield
        finally:
            await app.state.http_client.aclose()
            logger.info("Gateway upstream client closed")

    gateway = FastAPI(
        title="Patient Records Gateway",
        description="Routes public requests to the Patient Records API",
        version="1.0.0",
        lifespan=lifespan,
    )

    @gateway.get("/health", summary="Health check")
    async def health_check() -> dict[str, str]:
        """Check if the gateway is healthy and responding."""
        return {"status": "healthy"}

    @gateway.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE"])
    async def proxy(path: str, request: Request) -> Response:
        """Forward a request according to the routing table."""
        method = request.method
        resolved = resolve(method, f"/{path}")
        if resolved is None:
            logger.info(f"No gateway route for {method} /{path}")
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not found"})

        route, upstream_path = resolved

        if route.requires_auth:
            token = _bearer_token(request)
            if token is None or jwt_service.verify_token(token) is None:
                logger.warning(f"Rejected unauthenticated {method} /{path}")
                return JSONResponse(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    content={"detail": "Authentication credentials not provided or invalid"},
                    headers={"WWW-Authenticate": "Bearer"},
                )

        headers = {
            name: value for name, value in request.headers.items()
            if name.lower() in FORWARDED_REQUEST_HEADERS
        }
        body = await request.body()

        try:
            upstream = await request.app.state.http_client.request(
                method,
                upstream_path,
                params=list(request.query_params.multi_items()),
                headers=headers,
                content=body or None,
            )
        except httpx.HTTPError as e:
            logger.exception(f"Upstream request failed for {method} {upstream_path}: {e}")
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={"detail": "Upstream service unavailable", "type": "external_service_error"},
            )

        logger.info(f"{method} /{path} -> {upstream_path} [{upstream.status_code}]")
        relayed = {
            name: value for name, value in upstream.headers.items()
            if name.lower() in RELAYED_RESPONSE_HEADERS
        }
        return Response(content=upstream.content, status_code=upstream.status_code, headers=relayed)

    return gateway


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

app = create_gateway_app()
