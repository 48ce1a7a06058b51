"""Recursive character text chunker with overlap."""

import logging

from config.settings import RAGConfig
from src.models.chunk import Chunk

logger = logging.getLogger(__name__)


def _join_splits(splits: list[str], separator: str) -> str | None:
    text = separator.join(splits).strip()
    return text or None


def _merge_splits(
    splits: list[str],
    separator: str,
    chunk_size: int,
    chunk_overlap: int,
) -> list[str]:
    """Greedily merge small splits into chunks of at most chunk_size characters.

    When a chunk is emitted, its trailing splits (up to chunk_overlap
    characters in total) are carried over as the start of the next chunk.
    """
    sep_len = len(separator)
    chunks = []
    current: list[str] = []
    total = 0

    for split in splits:
        split_len = len(split)
        if current and total + sep_len + split_len > chunk_size:
            if total > chunk_size:
                logger.warning(
                    "Created a chunk of size %d, which is longer than the specified %d",
                    total, chunk_size,
                )
            chunk = _join_splits(current, separator)
            if chunk is not None:
                chunks.append(chunk)
            # Drop leading splits until what remains fits the overlap and leaves room
            while current and (
                total > chunk_overlap
                or total + sep_len + split_len > chunk_size
            ):
                total -= len(current[0]) + (sep_len if len(current) > 1 else 0)
                current.pop(0)
        current.append(split)
        total += split_len + (sep_len if len(current) > 1 else 0)

    chunk = _join_splits(current, separator)
    if chunk is not None:
        chunks.append(chunk)
    return chunks


def _split_text_recursive(
    text: str,
    separators: list[str],
    chunk_size: int,
    chunk_overlap: int,
) -> list[str]:
    """Split text on the coarsest separator present, recursing into oversized pieces.

    The empty-string separator splits into single characters and always applies,
    including as the fallback once the configured separators are used up.
    """
    separator = separators[-1]
    finer: list[str] = []
    for i, candidate in enumerate(separators):
        if candidate == "":
            separator = candidate
            break
        if candidate in text:
            separator = candidate
            finer = separators[i + 1:]
            break

    splits = text.split(separator) if separator else list(text)
    splits = [s for s in splits if s]

    chunks = []
    pending: list[str] = []
    for split in splits:
        if len(split) <= chunk_size:
            pending.append(split)
            continue
        if pending:
            chunks.extend(_merge_splits(pending, separator, chunk_size, chunk_overlap))
            pending = []
        if not finer:
            # Separators exhausted: cut at raw character boundaries
            logger.warning(
                "Segment of %d chars has no separator within chunk size %d, splitting by character",
                len(split), chunk_size,
            )
            finer = [""]
        chunks.extend(_split_text_recursive(split, finer, chunk_size, chunk_overlap))

    if pending:
        chunks.extend(_merge_splits(pending, separator, chunk_size, chunk_overlap))
    return chunks


def split_text(text: str, config: RAGConfig) -> list[str]:
    """Split raw text into overlapping segments no longer than config.chunk_size.

    Returns an empty list for empty or whitespace-only text, and exactly one
    segment when the text already fits.
    """
    if not text or not text.strip():
        return []
    if len(text) <= config.chunk_size:
        return [text.strip()]
    return _split_text_recursive(
        text, list(config.separators), config.chunk_size, config.chunk_overlap
    )


def chunk_text(text: str, source_url: str, config: RAGConfig) -> list[Chunk]:
    """Split a page's text into indexed chunks.

    Chunk indices are sequential from 0 and deterministic for a given
    text and configuration.
    """
    return [
        Chunk(source_url=source_url, chunk_index=idx, text=segment)
        for idx, segment in enumerate(split_text(text, config))
    ]
