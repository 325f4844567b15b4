from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class ScoringError(DomainException):
    """Base class for failures of the scoring core.

    Subclasses carry their HTTP mapping as class attributes so the pure
    scoring code only has to supply a message.
    """

    status_code = 400
    title = "Scoring error"
    code = "scoring_error"

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=type(self).status_code,
            title=type(self).title,
            detail=detail,
            code=type(self).code,
        )


class ConfigurationError(ScoringError, ValueError):
    """Malformed or missing match setup."""

    title = "Invalid match configuration"
    code = "invalid_configuration"


class InvalidEventError(ScoringError, ValueError):
    """A point event that names neither side."""

    title = "Invalid point event"
    code = "invalid_event"


class InvalidStateError(ScoringError):
    """Scoring attempted from a state that cannot accept a point."""

    status_code = 409
    title = "Invalid match state"
    code = "invalid_state"


class NoHistoryError(ScoringError):
    """Undo requested for a match without recorded points."""

    status_code = 409
    title = "Nothing to undo"
    code = "no_history"


class PersistenceError(ScoringError):
    """A record store operation failed; the caller must resynchronise."""

    status_code = 503
    title = "Persistence failure"
    code = "persistence_failed"


class GameNotFound(DomainException):
    def __init__(self, game_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Game not found",
            detail=f"game '{game_id}' not found",
            code="game_not_found",
        )


class PointNotFound(DomainException):
    def __init__(self, point_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Point not found",
            detail=f"point '{point_id}' not found",
            code="point_not_found",
        )


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
