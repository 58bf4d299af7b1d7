# tests/test_content.py
import base64

from gateway.services.content import (
    BinaryPart,
    TextPart,
    build_upload_parts,
    inline_data_part,
    render_parts_as_text,
)


def test_render_empty_is_sentinel():
    assert render_parts_as_text([]) == "(no content)"


def test_render_text_and_binary_blocks():
    # Text is trimmed; binary becomes a placeholder with the raw byte length.
    out = render_parts_as_text([TextPart("  a  "), BinaryPart("image/png", b"x" * 100)])
    blocks = out.split("\n\n")
    assert blocks[0] == "a"
    assert out.endswith("[Attachment: image/png, 100 bytes; content omitted in local text-only mode]")
    assert len(blocks) == 2


def test_render_skips_blank_text():
    assert render_parts_as_text([TextPart("   ")]) == "(no content)"
    assert render_parts_as_text([TextPart(""), TextPart("b")]) == "b"


def test_render_missing_mime_type():
    out = render_parts_as_text([BinaryPart("", b"")])
    assert out == "[Attachment: application/octet-stream, 0 bytes; content omitted in local text-only mode]"


def test_inline_data_part_is_base64():
    part = inline_data_part(BinaryPart("audio/mpeg", b"\x00\x01\x02"))
    assert part["inline_data"]["mime_type"] == "audio/mpeg"
    assert base64.b64decode(part["inline_data"]["data"]) == b"\x00\x01\x02"


def test_build_upload_parts_prompt_first():
    parts = build_upload_parts(b"pdf", "application/pdf", "summarize")
    assert parts == [TextPart("summarize"), BinaryPart("application/pdf", b"pdf")]
    # blank prompt is not a part
    assert build_upload_parts(b"pdf", "application/pdf", "  ") == [BinaryPart("application/pdf", b"pdf")]
