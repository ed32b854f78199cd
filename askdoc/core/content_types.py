"""Data contracts passed between the extraction, prompting and session layers.

Architectural role:
    Defines the per-request `UploadedFile`, the tagged `ExtractedContent`
    variant produced by the extractor, and the `ChatTurn` records kept by the
    interactive session. Prompt messages themselves stay plain dictionaries in
    the completion API's wire shape (`PromptMessage`).

Determinism:
    The classes are purely structural. Only `UploadedFile.read_bytes` touches
    the filesystem.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


PromptMessage = Dict[str, Any]

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


class ContentKind(str, Enum):
    """Which variant an `ExtractedContent` carries."""

    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class UploadedFile:
    """One uploaded file stored in the scratch directory.

    Attributes:
        media_type: Declared MIME type from the upload.
        filename: Original client-side filename.
        path: Location of the transient copy.
    """

    media_type: str
    filename: str
    path: str

    def read_bytes(self) -> bytes:
        with open(self.path, "rb") as f:
            return f.read()


@dataclass(frozen=True)
class ExtractedContent:
    """Text or base64 image payload produced from one uploaded file.

    Attributes:
        kind: `ContentKind.TEXT` or `ContentKind.IMAGE`.
        value: Extracted text, or base64 payload for images.
        filename: Source filename, used only for logging.
    """

    kind: ContentKind
    value: str
    filename: Optional[str] = None

    @classmethod
    def text(cls, value: str, filename: Optional[str] = None) -> "ExtractedContent":
        return cls(ContentKind.TEXT, value, filename)

    @classmethod
    def image(cls, payload: str, filename: Optional[str] = None) -> "ExtractedContent":
        return cls(ContentKind.IMAGE, payload, filename)

    @property
    def is_image(self) -> bool:
        return self.kind is ContentKind.IMAGE


@dataclass(frozen=True)
class ChatTurn:
    """One transcript entry of the interactive session."""

    role: str
    text: str

    def to_message(self) -> PromptMessage:
        return {"role": self.role, "content": self.text}
