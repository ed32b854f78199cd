"""
Unit tests for prompt assembly.

Covers the single-file, image, multi-file and question-only layouts.
"""

from askdoc.core.content_types import ExtractedContent
from askdoc.prompting.prompt_builder import (
    assemble,
    build_image_part,
    build_text_message,
)


def _image_part(payload):
    return {
        "type": "image_url",
        "image_url": {"url": f"data:image/jpeg;base64,{payload}"},
    }


class TestAssemble:
    """Test cases for `assemble`."""

    def test_single_text_file(self) -> None:
        messages = assemble([ExtractedContent.text("hello", "A.txt")], "summarize")

        assert messages == [{"role": "user", "content": "hello\n\nQuestion: summarize"}]

    def test_single_image(self) -> None:
        messages = assemble([ExtractedContent.image("QUJD")], "what is shown?")

        assert messages == [{
            "role": "user",
            "content": [
                _image_part("QUJD"),
                {"type": "text", "text": "what is shown?"},
            ],
        }]

    def test_multiple_files_without_images(self) -> None:
        contents = [
            ExtractedContent.text("foo", "A.txt"),
            ExtractedContent.text("bar", "B.pdf"),
        ]

        messages = assemble(contents, "what?")

        assert messages == [
            {"role": "user", "content": "foo\n\nQuestion: "},
            {"role": "user", "content": "bar\n\nQuestion: "},
            {"role": "user", "content": []},
            {"role": "user", "content": "what?"},
        ]

    def test_multiple_files_collects_images_after_texts(self) -> None:
        contents = [
            ExtractedContent.image("AAAA"),
            ExtractedContent.text("foo"),
            ExtractedContent.image("BBBB"),
        ]

        messages = assemble(contents, "compare")

        assert messages == [
            {"role": "user", "content": "foo\n\nQuestion: "},
            {"role": "user", "content": [_image_part("AAAA"), _image_part("BBBB")]},
            {"role": "user", "content": "compare"},
        ]

    def test_question_only(self) -> None:
        assert assemble([], "hi there") == [{"role": "user", "content": "hi there"}]

    def test_missing_question_becomes_empty_string(self) -> None:
        messages = assemble([ExtractedContent.text("hello")], None)

        assert messages == [{"role": "user", "content": "hello\n\nQuestion: "}]


class TestBuilders:
    def test_build_text_message(self) -> None:
        assert build_text_message("x", "y") == {"role": "user", "content": "x\n\nQuestion: y"}

    def test_build_image_part_uses_jpeg_data_url(self) -> None:
        assert build_image_part("Zm9v")["image_url"]["url"] == "data:image/jpeg;base64,Zm9v"
