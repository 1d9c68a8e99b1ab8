from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

TEXT_CHUNK_KIND = "text"


@dataclass(frozen=True)
class ContentChunk:
    kind: str
    text: str = ""


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class ChunkedContent:
    chunks: tuple[ContentChunk, ...] = field(default_factory=tuple)


ReplyContent = Union[TextContent, ChunkedContent]


@dataclass(frozen=True)
class CompletionResult:
    content: ReplyContent
    model: str
