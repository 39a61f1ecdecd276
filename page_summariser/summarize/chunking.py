"""Split long page text into bounded chunks on sentence, paragraph or word boundaries."""
import logging
import re

from page_summariser.summarize.types import Chunk

logger = logging.getLogger(__name__)

# A break point is the character after which we cut (the terminator itself stays in the chunk).
_SENTENCE_BREAKS = (". ", "! ", "? ", ".\n", "\n\n")
_WHITESPACE = re.compile(r"\s")


def _last_sentence_break(window: str) -> int:
    return max(window.rfind(marker) for marker in _SENTENCE_BREAKS)


def _last_whitespace(window: str) -> int:
    last = -1
    for m in _WHITESPACE.finditer(window):
        last = m.start()
    return last


def _find_cut(window: str, max_chunk_chars: int) -> int:
    """Return the cut position (exclusive end) inside a full-size window. Always >= 1."""
    half = max_chunk_chars * 0.5
    brk = _last_sentence_break(window)
    if brk > half:
        return brk + 1
    space = _last_whitespace(window)
    if space > half:
        return space + 1
    # No usable boundary: hard cut, may split a word but guarantees progress.
    return max_chunk_chars


def split_into_chunks(text: str, max_chunk_chars: int) -> list[Chunk]:
    """Deterministically partition text into trimmed chunks of at most max_chunk_chars.

    Only whitespace at chunk boundaries is dropped; every other character ends up
    in exactly one chunk, in order.
    """
    if max_chunk_chars < 1:
        raise ValueError(f"max_chunk_chars must be >= 1, got {max_chunk_chars}")

    chunks: list[Chunk] = []
    pos = 0
    n = len(text)

    def emit(start: int, end: int) -> None:
        piece = text[start:end]
        stripped = piece.strip()
        if not stripped:
            return
        lead = len(piece) - len(piece.lstrip())
        s = start + lead
        chunks.append(Chunk(index=len(chunks) + 1, text=stripped, start=s, end=s + len(stripped)))

    while pos < n:
        remaining = n - pos
        if remaining <= max_chunk_chars:
            emit(pos, n)
            break
        cut = _find_cut(text[pos:pos + max_chunk_chars], max_chunk_chars)
        emit(pos, pos + cut)
        pos += cut
        # Skip boundary whitespace so the next window starts on content.
        while pos < n and text[pos].isspace():
            pos += 1

    logger.debug("Split %d chars into %d chunks (max %d)", n, len(chunks), max_chunk_chars)
    return chunks
