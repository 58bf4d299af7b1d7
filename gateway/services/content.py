# mixed content parts (text fragments + binary attachments)
# text-only backends get placeholders, cloud backends get inline data

import base64
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

NO_CONTENT = "(no content)"


@dataclass(frozen=True)
class TextPart:
    value: str


@dataclass(frozen=True)
class BinaryPart:
    mime_type: str
    data: bytes

    @property
    def byte_length(self) -> int:
        return len(self.data)


ContentPart = Union[TextPart, BinaryPart]


def attachment_placeholder(part: BinaryPart) -> str:
    mime = part.mime_type or "application/octet-stream"
    return f"[Attachment: {mime}, {part.byte_length} bytes; content omitted in local text-only mode]"


def render_parts_as_text(parts: Iterable[ContentPart]) -> str:
    blocks: List[str] = []
    for part in parts:
        if isinstance(part, BinaryPart):
            blocks.append(attachment_placeholder(part))
            continue
        text = (part.value or "").strip()
        if text:
            blocks.append(text)
    return "\n\n".join(blocks) if blocks else NO_CONTENT


def inline_data_part(part: BinaryPart) -> Dict[str, Any]:
    return {
        "inline_data": {
            "mime_type": part.mime_type,
            "data": base64.b64encode(part.data).decode("ascii"),
        }
    }


def build_upload_parts(data: bytes, mime_type: str, prompt: Optional[str] = None) -> List[ContentPart]:
    """Optional prompt text first, then the uploaded file."""
    parts: List[ContentPart] = []
    if prompt and prompt.strip():
        parts.append(TextPart(prompt))
    parts.append(BinaryPart(mime_type=mime_type or "application/octet-stream", data=data))
    return parts
