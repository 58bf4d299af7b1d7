from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str = ""


class _ProviderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    model: Optional[str] = None
    system_instruction: Optional[str] = Field(default=None, alias="systemInstruction")
    provider: Optional[str] = None


class ChatRequest(_ProviderRequest):
    prompt: Optional[str] = None
    messages: List[ChatMessage] = Field(default_factory=list)


class TextRequest(_ProviderRequest):
    prompt: Optional[str] = None


class GenerateResponse(BaseModel):
    provider: str
    model: str
    text: Optional[str] = None
