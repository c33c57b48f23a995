"""Shared FastAPI dependencies for the admin routes."""
from typing import AsyncGenerator

import httpx
from fastapi import Depends

from bracket_pool.core.config import Settings, get_settings


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """One outbound HTTP client per request, closed when the request ends."""
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT, follow_redirects=True) as client:
        yield client
