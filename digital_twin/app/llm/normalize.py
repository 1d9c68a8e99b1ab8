from __future__ import annotations

from digital_twin.app.llm.contracts import (
    TEXT_CHUNK_KIND,
    ChunkedContent,
    ContentChunk,
    ReplyContent,
    TextContent,
)


def parse_reply_content(raw: object) -> ReplyContent:
    if isinstance(raw, str):
        return TextContent(text=raw)
    if isinstance(raw, list):
        return ChunkedContent(
            chunks=tuple(
                chunk for chunk in (_parse_chunk(item) for item in raw) if chunk
            )
        )
    return ChunkedContent()


def _parse_chunk(item: object) -> ContentChunk | None:
    if isinstance(item, str):
        return ContentChunk(kind=TEXT_CHUNK_KIND, text=item)
    if not isinstance(item, dict):
        return None
    kind = item.get("type")
    if not isinstance(kind, str):
        return None
    text = item.get("text")
    return ContentChunk(kind=kind, text="" if text is None else str(text))


def render_reply_text(content: ReplyContent) -> str:
    if isinstance(content, TextContent):
        return content.text.strip()
    if isinstance(content, ChunkedContent):
        parts = [
            chunk.text
            for chunk in content.chunks
            if chunk.kind == TEXT_CHUNK_KIND and chunk.text
        ]
        return "\n".join(parts).strip()
    raise TypeError(f"unsupported reply content: {type(content).__name__}")


def normalize_reply(raw: object) -> str:
    return render_reply_text(parse_reply_content(raw))
