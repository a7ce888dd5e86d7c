from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any

from models.deck import PresentationDeck


class ChatMessage(BaseModel):
    """Represents a single message sent to the chat completion endpoint"""
    role: str  # 'system', 'user' or 'assistant'
    content: str


class AIProxyRequest(BaseModel):
    """Body accepted by /api/ai: either a full message list or a bare prompt"""
    messages: Optional[List[ChatMessage]] = None
    prompt: Optional[str] = None

    @model_validator(mode='after')
    def _require_input(self):
        if not self.messages and not self.prompt:
            raise ValueError("Either 'messages' or 'prompt' is required")
        return self

    def to_messages(self) -> List[Dict[str, str]]:
        if self.messages:
            return [m.model_dump() for m in self.messages]
        return [{'role': 'user', 'content': self.prompt}]


class DocumentInput(BaseModel):
    """Raw text of an uploaded document"""
    content: str = Field(..., description="Extracted text of the document")
    type: Optional[str] = Field(None, description="MIME type reported by the browser")
    name: Optional[str] = Field(None, description="Original file name")


class GeneratePresentationRequest(BaseModel):
    prompt: Optional[str] = None
    document: Optional[DocumentInput] = None

    @model_validator(mode='after')
    def _require_input(self):
        has_prompt = bool(self.prompt and self.prompt.strip())
        has_document = bool(self.document and self.document.content.strip())
        if not has_prompt and not has_document:
            raise ValueError("Either 'prompt' or 'document' is required")
        return self


class GeneratePresentationResponse(BaseModel):
    deck: PresentationDeck
    status: str
    progress: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    status: Optional[str] = None


class TrendItem(BaseModel):
    category: str
    title: str
    color: str


class TrendsResponse(BaseModel):
    trends: List[TrendItem]
