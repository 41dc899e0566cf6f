"""Pydantic models matching the frontend TypeScript types."""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional, Union

NEW_TURN = "new_turn"
CONTINUATION = "continuation"

# ── Payload log models ──────────────────────────────────────────────

class PayloadUsage(BaseModel):
    model_config = ConfigDict(extra="allow")

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cache_creation_input_tokens: Optional[int] = None
    cache_read_input_tokens: Optional[int] = None


class SystemPromptSummary(BaseModel):
    chars: int = 0
    estimatedTokens: int = 0
    parts: list[str] = Field(default_factory=list)


class MessagesSummary(BaseModel):
    total: int = 0
    user: int = 0
    assistant: int = 0
    chars: int = 0
    estimatedTokens: int = 0


class ToolsSummary(BaseModel):
    count: int = 0
    names: list[str] = Field(default_factory=list)
    schemaChars: int = 0
    estimatedTokens: int = 0


class PayloadSummary(BaseModel):
    model: Optional[str] = None
    maxTokens: Optional[int] = None
    turnType: str = NEW_TURN  # "new_turn" | "continuation"
    triggeringMessage: Optional[str] = None
    userPreview: Optional[str] = None
    systemPrompt: SystemPromptSummary = Field(default_factory=SystemPromptSummary)
    messages: MessagesSummary = Field(default_factory=MessagesSummary)
    tools: ToolsSummary = Field(default_factory=ToolsSummary)
    totalChars: int = 0
    totalEstimatedTokens: int = 0


class PayloadEntry(BaseModel):
    """One line of the payload log, optionally enriched with a summary.

    Logged fields pass through whatever the writer put there. ``summary`` and
    ``usage`` become typed models when they have the expected shape and stay
    raw otherwise, so every JSON object line is kept.
    """

    model_config = ConfigDict(extra="allow")

    ts: Any = ""
    stage: Any = ""  # "request" | "usage"
    runId: Any = None
    sessionId: Any = None
    sessionKey: Any = None
    provider: Any = None
    modelId: Any = None
    modelApi: Any = None
    payloadDigest: Any = None
    payload: Any = None
    summary: Union[PayloadSummary, Any] = Field(default=None, union_mode="left_to_right")
    usage: Union[PayloadUsage, Any] = Field(default=None, union_mode="left_to_right")
    error: Any = None


class TurnUsage(BaseModel):
    input: int = 0
    output: int = 0
    cacheRead: int = 0
    cacheWrite: int = 0


class UserTurn(BaseModel):
    id: str
    ts: str
    triggeringMessage: str = "(No message)"
    messageCount: int = 0
    requestCount: int = 0
    usage: TurnUsage = Field(default_factory=TurnUsage)
    entries: list[PayloadEntry] = Field(default_factory=list)  # oldest first


class PayloadListResponse(BaseModel):
    enabled: bool
    path: str
    message: Optional[str] = None
    fileSize: Optional[str] = None
    totalEntries: int = 0
    skippedLines: int = 0
    entries: list[PayloadEntry] = Field(default_factory=list)


class TurnListResponse(BaseModel):
    enabled: bool
    path: str
    message: Optional[str] = None
    fileSize: Optional[str] = None
    totalEntries: int = 0
    skippedLines: int = 0
    turns: list[UserTurn] = Field(default_factory=list)


# ── Session transcript models ───────────────────────────────────────

class ContentBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Any = ""  # "text" | "thinking" | "toolCall" | "toolResult" | "image"
    text: Optional[str] = None
    thinking: Optional[str] = None
    thinkingSignature: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: Any = None
    content: Any = None  # str | list of blocks
    isError: Optional[bool] = None


class UsageCost(BaseModel):
    model_config = ConfigDict(extra="allow")

    input: Optional[float] = None
    output: Optional[float] = None
    cacheRead: Optional[float] = None
    cacheWrite: Optional[float] = None
    total: Optional[float] = None


class MessageUsage(BaseModel):
    model_config = ConfigDict(extra="allow")

    input: Optional[int] = None
    output: Optional[int] = None
    cacheRead: Optional[int] = None
    cacheWrite: Optional[int] = None
    totalTokens: Optional[int] = None
    cost: Optional[UsageCost] = None


class Message(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: Any = ""  # "user" | "assistant" | "system" | "toolResult"
    content: list[ContentBlock] = Field(default_factory=list)
    timestamp: Any = None  # epoch millis or ISO string, depending on the writer
    model: Any = None
    usage: Union[MessageUsage, Any] = Field(default=None, union_mode="left_to_right")

    @field_validator("content", mode="before")
    @classmethod
    def _wrap_plain_text(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [{"type": "text", "text": value}]
        return value


class SessionEntry(BaseModel):
    """One transcript line. ``message`` stays raw when it does not fit ``Message``."""

    model_config = ConfigDict(extra="allow")

    type: Any = ""  # "session" | "message" | "model_change" | "thinking_level_change" | "tool_result"
    id: Any = ""
    parentId: Any = None
    timestamp: Any = ""
    message: Union[Message, Any] = Field(default=None, union_mode="left_to_right")
    version: Any = None
    cwd: Any = None
    provider: Any = None
    modelId: Any = None
    thinkingLevel: Any = None


class SessionStats(BaseModel):
    totalMessages: int = 0
    userMessages: int = 0
    assistantMessages: int = 0
    toolCalls: int = 0
    toolResults: int = 0
    totalTokens: int = 0
    totalCost: float = 0.0
    models: dict[str, int] = Field(default_factory=dict)


class SessionFile(BaseModel):
    id: str
    filename: str
    modifiedTime: str
    size: int = 0
    sizeFormatted: str = "0 B"


class SessionData(BaseModel):
    id: str
    entries: list[SessionEntry] = Field(default_factory=list)
    stats: SessionStats = Field(default_factory=SessionStats)
    skippedLines: int = 0


class SessionListResponse(BaseModel):
    sessions: list[SessionFile] = Field(default_factory=list)
    error: Optional[str] = None


# ── System context models ──────────────────────────────────────────

class SystemContextFile(BaseModel):
    name: str
    filename: str
    path: str
    exists: bool = False
    content: Optional[str] = None
    size: int = 0
    sizeFormatted: str = "0 B"


class SystemContextSummary(BaseModel):
    total: int = 0
    existing: int = 0
    totalSize: int = 0
    totalSizeFormatted: str = "0 B"


class SystemContextResponse(BaseModel):
    files: list[SystemContextFile] = Field(default_factory=list)
    summary: SystemContextSummary = Field(default_factory=SystemContextSummary)
