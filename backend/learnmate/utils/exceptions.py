"""
HTTP Exception helpers to reduce code duplication in routes.

Usage:
    from learnmate.utils.exceptions import raise_not_found, raise_internal_error

    raise_not_found("Summary", summary_id)
    raise_internal_error("Failed to generate content")

Error bodies are rendered as {"error": detail} by the handler in learnmate.main.
"""

from typing import NoReturn

from fastapi import HTTPException, status


def raise_bad_request(detail: str) -> NoReturn:
    """Raise HTTP 400 Bad Request."""
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=detail,
    )


def raise_not_found(resource: str, id: int | str | None = None) -> NoReturn:
    """Raise HTTP 404 Not Found."""
    if id is not None:
        detail = f"{resource} with id {id} not found"
    else:
        detail = f"{resource} not found"
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


def raise_internal_error(detail: str = "Internal server error") -> NoReturn:
    """Raise HTTP 500 Internal Server Error."""
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )
