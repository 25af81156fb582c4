class PlacementError(Exception):
    """Base error for placement and result operations.

    Each subclass carries the HTTP status the API layer answers with.
    """
    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(PlacementError):
    """Application, test, stage or result does not exist"""
    status_code = 404


class ForbiddenError(PlacementError):
    """Caller does not own the resource and is not an administrator"""
    status_code = 403


class AlreadySubmittedError(PlacementError):
    """Stage already carries a submission timestamp"""
    status_code = 409


class UnknownCompanyOrStageError(PlacementError):
    """Company or stage is missing from the placement policy tables"""
    status_code = 422


class PipelineClosedError(PlacementError):
    """Application already rejected or completed; its decision is final"""
    status_code = 409


class StageOutOfOrderError(PlacementError):
    """Stage is not the application's current stage"""
    status_code = 409


class AICollaboratorError(Exception):
    """Gemini failed, timed out or returned unusable content.

    Raised inside the feedback builder only; it is always converted to the
    deterministic fallback report there.
    """
