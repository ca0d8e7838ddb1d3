# Errors
# Exception hierarchy shared by the clients, agents and orchestrator


class DashboardError(Exception):
    """Base exception for all dashboard errors."""

    pass


class ValidationError(DashboardError):
    """Raised when client input is rejected before any external call is made."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class CaseNotFoundError(DashboardError):
    """Raised at the outer surfaces when a case must exist but does not."""

    def __init__(self, case_id: str):
        self.case_id = case_id
        super().__init__(f"Case not found: {case_id}")


class RecordStoreError(DashboardError):
    """Raised when the record store cannot be reached or rejects a request."""

    def __init__(self, operation: str, detail: str, status_code: int = None):
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Record store {operation} failed: {detail}")


class TrackingProviderError(DashboardError):
    """Base class for tracking provider failures."""

    user_message = "Tracking lookup failed"


class TrackingAuthError(TrackingProviderError):
    """Raised when the tracking provider rejects our credentials."""

    user_message = "Invalid tracking API key"


class TrackingRateLimitedError(TrackingProviderError):
    """Raised when the tracking provider rate-limits us. Callers must not retry silently."""

    user_message = "Rate limit exceeded. Please try again later."


class TransientTrackingError(TrackingProviderError):
    """Raised on network failures or unexpected provider responses."""

    user_message = "Tracking service temporarily unavailable"


class GenerationError(DashboardError):
    """Raised when the text generation service fails for any reason."""

    def __init__(self, message: str, cause: Exception = None):
        self.cause = cause
        super().__init__(message)
