"""Domain exceptions shared by the services and the HTTP layer."""


class ProgressTrackingError(Exception):
    """Base exception; carries the HTTP status and a stable error code."""

    status_code = 500
    error_code = "PROGRESS_ERROR"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class AttemptValidationError(ProgressTrackingError):
    """A submitted attempt is malformed or out of range."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class NotFoundError(ProgressTrackingError):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class StoreUnavailableError(ProgressTrackingError):
    """Transient storage failure (connection lost, locked database, ...)."""

    status_code = 503
    error_code = "STORE_UNAVAILABLE"


class ReportGenerationConfigError(ProgressTrackingError):
    """The narrative text generator is unreachable or misconfigured."""

    status_code = 503
    error_code = "REPORT_GENERATOR_UNAVAILABLE"
