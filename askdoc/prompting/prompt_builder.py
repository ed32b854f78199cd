"""Prompt assembly for document question answering.

This module only turns already-extracted file content plus the user's question
into chat-completion messages. Extraction, validation and model invocation
happen outside this module.

Design constraints:
    - Deterministic construction for identical inputs.
    - Fixed message ordering: per-file text, then images, then the question.
    - No I/O and no global state mutation.

Prompt safety model:
    - Extracted text and the question are interpolated as raw strings.
    - Upstream layers own context-window limits.
"""

from typing import List, Sequence

from askdoc.core.content_types import USER_ROLE, ExtractedContent, PromptMessage


QUESTION_TEMPLATE = "{text}\n\nQuestion: {question}"
IMAGE_DATA_URL_TEMPLATE = "data:image/jpeg;base64,{payload}"


# =========================================================
# MESSAGE / PART BUILDERS
# =========================================================

def build_text_message(text: str, question: str) -> PromptMessage:
    """Return a user message holding `text` followed by the question line."""
    return {
        "role": USER_ROLE,
        "content": QUESTION_TEMPLATE.format(text=text, question=question),
    }


def build_image_part(payload: str) -> dict:
    """Wrap a base64 image payload as an `image_url` content part."""
    return {
        "type": "image_url",
        "image_url": {"url": IMAGE_DATA_URL_TEMPLATE.format(payload=payload)},
    }


def build_text_part(text: str) -> dict:
    return {"type": "text", "text": text}


# =========================================================
# ASSEMBLY
# =========================================================
# Message order for several files:
#   1) one text message per non-image file, question suffix left empty
#   2) one message whose content lists every image part (possibly empty)
#   3) the bare question
# The model therefore sees all extracted material before the question.

def assemble(contents: Sequence[ExtractedContent], question: str) -> List[PromptMessage]:
    """Build the completion message list for extracted contents and a question.

    Args:
        contents: Extracted file contents in upload order.
        question: User question; may be empty when only files were sent.

    Returns:
        Ordered list of user messages.

    Edge cases:
        - No contents: a single message carrying the question.
        - One image: a single message with the image part then the question
          as a text part.
        - One text file: a single `"<text>\\n\\nQuestion: <question>"` message.
    """
    question = question or ""

    if not contents:
        return [{"role": USER_ROLE, "content": question}]

    if len(contents) == 1:
        content = contents[0]
        if content.is_image:
            return [{
                "role": USER_ROLE,
                "content": [build_image_part(content.value), build_text_part(question)],
            }]
        return [build_text_message(content.value, question)]

    messages: List[PromptMessage] = []
    image_parts = []

    for content in contents:
        if content.is_image:
            image_parts.append(build_image_part(content.value))
        else:
            messages.append(build_text_message(content.value, ""))

    messages.append({"role": USER_ROLE, "content": image_parts})
    messages.append({"role": USER_ROLE, "content": question})

    return messages
