"""Request pipeline for document question answering.

Architectural role:
    Turns the stored uploads and question of one request into the model's
    answer. Used by `askdoc.api.http_api`, which owns parsing, transient-file
    cleanup and the translation of errors into HTTP responses.

Control-flow model:
    1. Validate: at least one file or a non-empty question, at most
       `MAX_FILES` files.
    2. Extract every file in upload order; the first unsupported, empty or
       unreadable file aborts the request.
    3. Assemble prompt messages.
    4. Call the completion client once.

Error handling strategy:
    `DocumentQAError` subclasses propagate to the caller unchanged. Nothing is
    retried, and no API call is made unless every file extracted cleanly.

Side effects:
    Reads the transient upload files. Never deletes them.
"""

import logging
from typing import List, Optional, Sequence

from askdoc.api.multimodal.file_input_manager import extract_file
from askdoc.core.content_types import ExtractedContent, UploadedFile
from askdoc.core.errors import ValidationError
from askdoc.llm.client import CompletionClient
from askdoc.llm.provider_config import MODEL_NAME
from askdoc.prompting.prompt_builder import assemble


logger = logging.getLogger(__name__)

MAX_FILES = 10
NO_INPUT_MESSAGE = "Please upload at least one file or a question."


def validate_request(files: Sequence, question: Optional[str]) -> None:
    """Reject requests with no input or too many files.

    `files` may hold stored `UploadedFile`s or raw multipart parts; only the
    count matters here.
    """
    if not files and not (question or "").strip():
        raise ValidationError(NO_INPUT_MESSAGE)

    if len(files) > MAX_FILES:
        raise ValidationError(f"At most {MAX_FILES} files can be uploaded at once.")


def extract_contents(files: Sequence[UploadedFile]) -> List[ExtractedContent]:
    """Extract each file sequentially, failing fast on the first error."""
    contents = []
    for uploaded in files:
        contents.append(extract_file(uploaded))
    return contents


def answer_question(
    files: Sequence[UploadedFile],
    question: Optional[str],
    client: CompletionClient,
    model: str = MODEL_NAME,
) -> str:
    """Run validate -> extract -> assemble -> call for one request.

    Returns:
        The model's answer text.

    Raises:
        ValidationError, UnsupportedTypeError, ExtractionEmptyError,
        ExtractionFailedError, ApiError.
    """
    validate_request(files, question)

    logger.info("Extracting %d uploaded file(s)", len(files))
    contents = extract_contents(files)

    messages = assemble(contents, question or "")
    logger.debug("Assembled %d prompt message(s)", len(messages))

    return client.complete(model, messages)
