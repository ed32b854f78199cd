"""Error taxonomy shared by the extraction, completion and request layers.

Architectural role:
    Every failure the request pipeline can report is a `DocumentQAError`
    subclass. Each class carries the HTTP status and the client-visible message
    it maps to, so translation happens once at the API boundary
    (`askdoc.api.http_api`).

Status mapping:
    - `ValidationError`, `UnsupportedTypeError`, `ExtractionEmptyError` -> 400
    - `ExtractionFailedError`, `ApiError` -> 500

Failure handling model:
    Errors are raised, never returned as values. Nothing in this package
    retries them.
"""

from typing import Optional


GENERIC_ERROR_MESSAGE = "Something went wrong, please try again later."


class DocumentQAError(Exception):
    """Base class for expected pipeline failures.

    Attributes:
        status_code: HTTP status reported by the API adapter.
        public_message: Text safe to return to the client.
    """

    status_code = 500

    def __init__(self, message: str, public_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self._public_message = public_message

    @property
    def public_message(self) -> str:
        if self._public_message is not None:
            return self._public_message
        if self.status_code < 500:
            return self.message
        return GENERIC_ERROR_MESSAGE


class ValidationError(DocumentQAError):
    """Request carried no usable input (or too much of it)."""

    status_code = 400


class UnsupportedTypeError(DocumentQAError):
    """Declared media type has no extractor."""

    status_code = 400

    def __init__(self, media_type: str):
        super().__init__(f"Unsupported file type: {media_type}")
        self.media_type = media_type


class ExtractionEmptyError(DocumentQAError):
    """Decoder ran but produced no text."""

    status_code = 400

    def __init__(self, document_label: str, filename: Optional[str] = None):
        super().__init__(f"Could not extract text from the {document_label}.")
        self.document_label = document_label
        self.filename = filename


class ExtractionFailedError(DocumentQAError):
    """Decoder raised while reading the file. The original error is chained."""

    status_code = 500

    def __init__(self, filename: Optional[str], cause: BaseException):
        super().__init__(f"Failed to extract content from {filename or 'upload'}: {cause}")
        self.filename = filename
        self.cause = cause


class ApiError(DocumentQAError):
    """Completion API call failed.

    Attributes:
        code: Upstream `error.code` (or `error.type`) when the body carried one.
        upstream_message: Upstream `error.message` when available.
        http_status: HTTP status of the upstream response, if any.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.code = code
        self.upstream_message = message
        self.http_status = http_status
