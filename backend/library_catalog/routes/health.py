"""
Library Catalog — Health Check Route
=====================================

What:  Liveness endpoint for container health checks and load balancers.
How:   Reports version, uptime and the current catalog size. There are no
       external dependencies to check, so the status is always "healthy"
       while the process can answer.
"""

import time

from fastapi import APIRouter, Depends

from library_catalog import __version__
from library_catalog.dependencies import get_book_service
from library_catalog.schemas.book import HealthResponse
from library_catalog.services.book_service import BookService

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
def health_check(service: BookService = Depends(get_book_service)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        book_count=service.count_books(),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
