class MCQError(Exception):
    """Base error carrying the HTTP status the API responds with."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UploadError(MCQError):
    status_code = 400


class ExtractionError(MCQError):
    status_code = 500


class ParseError(MCQError):
    status_code = 500


class GenerationError(MCQError):
    status_code = 500


class ValidationError(MCQError):
    status_code = 400
