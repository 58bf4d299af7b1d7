# merges explicit prompt + message history + system instructions into one
# adapter-ready conversation (history turns + the next prompt to send)

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from gateway.core.errors import ValidationError

@dataclass
class ChatMessage:
    role: str
    content: str


@dataclass
class ConversationRequest:
    prompt: Optional[str] = None
    messages: List[Any] = field(default_factory=list)
    model: Optional[str] = None
    system_instruction: Optional[str] = None
    provider: Optional[str] = None


@dataclass(frozen=True)
class Turn:
    role: str  # "user" | "model"
    content: str


@dataclass(frozen=True)
class ReconciledConversation:
    system_instruction: Optional[str]
    history: List[Turn]
    next_prompt: str


def _field(message: Any, name: str) -> str:
    if isinstance(message, Mapping):
        value = message.get(name)
    else:
        value = getattr(message, name, None)
    return value if isinstance(value, str) else ""


def reconcile(
    prompt: Optional[str],
    messages: Optional[Sequence[Any]],
    system_instruction: Optional[str] = None,
) -> ReconciledConversation:
    instructions: List[str] = []
    history: List[Turn] = []

    for message in messages or []:
        content = _field(message, "content").strip()
        if not content:
            continue
        role = _field(message, "role").strip().lower()
        if role == "system":
            instructions.append(content)
        elif role == "assistant":
            history.append(Turn("model", content))
        else:
            history.append(Turn("user", content))

    external = (system_instruction or "").strip()
    if external:
        instructions.insert(0, external)
    combined = "\n\n".join(instructions) or None

    next_prompt = (prompt or "").strip()
    if not next_prompt and history and history[-1].role == "user":
        next_prompt = history.pop().content
    if not next_prompt:
        raise ValidationError("prompt is required")

    return ReconciledConversation(system_instruction=combined, history=history, next_prompt=next_prompt)


def build_transcript(conversation: ReconciledConversation) -> str:
    """
    Single-shot fallback for clients without chat sessions:
    System: ...
    User: ... / Assistant: ...
    User: <next prompt>
    """
    lines: List[str] = []
    if conversation.system_instruction:
        lines.append(f"System: {conversation.system_instruction}")
    for turn in conversation.history:
        label = "Assistant" if turn.role == "model" else "User"
        lines.append(f"{label}: {turn.content}")
    lines.append(f"User: {conversation.next_prompt}")
    return "\n".join(lines)
