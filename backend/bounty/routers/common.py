"""Mapping from action Results to HTTP responses."""

from fastapi import HTTPException

from bounty.actions import Result

STATUS_BY_ERROR = {
    "validation": 400,
    "not_found": 404,
    "state_conflict": 409,
    "concurrency": 409,
    "internal": 500,
}


def unwrap(result: Result):
    """Return the Result's payload or raise the matching HTTPException."""
    if not result.is_success:
        raise HTTPException(status_code=STATUS_BY_ERROR.get(result.error, 400), detail=result.message)
    return result.data
