class AIConfigError(RuntimeError):
    """Upstream credential is missing; the generation endpoints cannot work."""

class UpstreamError(RuntimeError):
    """Non-200 answer from the generative-language API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

class EmptyResponseError(RuntimeError):
    pass

class InvalidQuizFormat(ValueError):
    pass
