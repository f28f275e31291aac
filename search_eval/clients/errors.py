"""Errors raised by the API clients."""


class ApiError(Exception):
    """Non-2xx response from one of the upstream APIs."""

    api_name = "API"

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{self.api_name} API call failed: {status_code} {reason}".rstrip())


class SearchApiError(ApiError):
    api_name = "WebSearch"


class EvaluationApiError(ApiError):
    api_name = "Evaluation"
