"""
HTTP API adapter for document question answering.

Architectural role:
- Expose the upload-and-ask endpoint.
- Parse multipart or JSON input, store uploads in the scratch directory, and
  delegate the pipeline to `askdoc.core.engine.answer_question`.
- Translate pipeline errors into `{"error": ...}` responses.

Endpoint responsibilities:
- `POST /upload-resume`: accept up to 10 files (`files` and/or `file` fields)
  plus a `question` field, or a JSON body `{"question": ...}`.

API request lifecycle:
1. Received: read the form or JSON body.
2. Validated: reject empty input and more than `MAX_FILES` files.
3. Store each upload under a generated name, tracked for cleanup.
4. Extracting / Assembling / Calling: run the engine in the threadpool.
5. Responding: `200 {"response": ...}`.
6. CleaningUp: remove every stored upload, on every exit path.

Error handling strategy:
- `DocumentQAError` -> its `status_code` and `public_message`.
- Any other exception -> HTTP 500 with a generic message.
- Errors are logged here and nowhere else.

Side effects:
- Creates the scratch upload directory when the app is built.
- Builds the completion client at startup unless one was injected.
- Loads environment variables at import time via `load_dotenv()`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from contextlib import asynccontextmanager
from typing import List, Optional, Tuple

from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.datastructures import UploadFile

from askdoc.api.multimodal.upload_store import (
    UPLOAD_DIR,
    TransientFiles,
    ensure_upload_dir,
    new_upload_path,
    save_upload,
)
from askdoc.core.engine import answer_question, validate_request
from askdoc.core.errors import GENERIC_ERROR_MESSAGE, DocumentQAError, ValidationError
from askdoc.llm.client import CompletionClient
from askdoc.llm.provider_config import MODEL_NAME
from askdoc.llm.service import create_completion_client


logger = logging.getLogger(__name__)

# Verbose request logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"

UPLOAD_ROUTE = "/upload-resume"
FILE_FIELDS = ("files", "file")


# ============================================================
# Request / Response Schemas
# ============================================================

class QuestionRequest(BaseModel):
    """JSON body accepted when no files are uploaded."""
    question: Optional[str] = None


class AnswerResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    error: str


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


# ============================================================
# Input Parsing
# ============================================================

async def read_upload_request(request: Request) -> Tuple[List[UploadFile], Optional[str]]:
    """
    Return the uploaded parts and question carried by `request`.

    Multipart/urlencoded forms contribute every `files`/`file` part; anything
    else is read as JSON. A request without a body yields no input.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        uploads = [
            value
            for field in FILE_FIELDS
            for value in form.getlist(field)
            if isinstance(value, UploadFile)
        ]
        question = form.get("question")
        return uploads, question if isinstance(question, str) else None

    raw = await request.body()
    if not raw.strip():
        return [], None

    try:
        payload = QuestionRequest.model_validate_json(raw)
    except ValueError as err:
        raise ValidationError("Request body must be a JSON object with a 'question' field.") from err

    return [], payload.question


# ============================================================
# Upload + Question Endpoint
# ============================================================

router = APIRouter()


@router.post(UPLOAD_ROUTE)
async def upload_and_ask(request: Request):
    """
    Answer a question about zero or more uploaded files.

    Input validation behavior:
    - HTTP 400 when neither a file nor a question is supplied.
    - HTTP 400 for more than 10 files, unsupported media types, or documents
      with no extractable text.

    Error handling strategy:
    - Decoder and upstream API failures return HTTP 500.
    - Stored uploads are removed before the response is returned, whichever
      branch produced it.
    """
    client: Optional[CompletionClient] = request.app.state.completion_client
    upload_dir: str = request.app.state.upload_dir
    model: str = request.app.state.model

    try:
        with TransientFiles() as transient:
            uploads, question = await read_upload_request(request)

            if DEBUG:
                logger.debug(
                    "Upload request: files=%s question=%r",
                    [(u.filename, u.content_type) for u in uploads],
                    question,
                )

            validate_request(uploads, question)

            if client is None:
                raise RuntimeError("Completion client is not configured")

            stored = []
            for upload in uploads:
                path = transient.track(new_upload_path(upload_dir))
                stored.append(await save_upload(upload, path))

            answer = await run_in_threadpool(answer_question, stored, question, client, model)

    except DocumentQAError as err:
        if err.status_code < 500:
            logger.warning("Rejected upload request: %s", err.message)
        else:
            logger.exception("Upload request failed: %s", err.message)
        return _error_response(err.status_code, err.public_message)

    except Exception:
        logger.exception("Unexpected failure while handling upload request")
        return _error_response(500, GENERIC_ERROR_MESSAGE)

    if DEBUG:
        logger.debug("Answer: %r", answer)

    return AnswerResponse(response=answer)


# ============================================================
# App Factory
# ============================================================

def create_app(
    completion_client: Optional[CompletionClient] = None,
    upload_dir: str = UPLOAD_DIR,
    model: str = MODEL_NAME,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        completion_client: Injected client; built from configuration at
            startup when omitted.
        upload_dir: Scratch directory for uploads (created here).
        model: Model identifier sent with every completion.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.completion_client is None:
            app.state.completion_client = create_completion_client()
        yield

    app = FastAPI(title="askdoc", lifespan=lifespan)
    app.state.completion_client = completion_client
    app.state.upload_dir = ensure_upload_dir(upload_dir)
    app.state.model = model
    app.include_router(router)

    return app


app = create_app()
