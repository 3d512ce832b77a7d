"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from c2p_gateway.domain.models import ClientContext
from c2p_gateway.infrastructure.clients.mercantil import MercantilClient
from c2p_gateway.services.verification import web_client_context


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_client_context(request: Request) -> ClientContext:
    """Client identity forwarded to the gateway, taken from proxy headers when present"""
    forwarded = request.headers.get("x-forwarded-for")
    ip_address = (
        forwarded.split(",")[0].strip()
        if forwarded
        else request.headers.get("x-real-ip") or "unknown"
    )
    return web_client_context(ip_address, request.headers.get("user-agent", "unknown"))


def get_mercantil_client() -> MercantilClient:
    """Provide a Mercantil C2P client for the configured environment"""
    return MercantilClient.from_settings()
