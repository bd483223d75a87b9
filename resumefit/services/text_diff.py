from __future__ import annotations

import re
from difflib import SequenceMatcher
from typing import Literal, Sequence

from pydantic import BaseModel

ChunkType = Literal["equal", "insert", "delete"]

_TOKEN_RE = re.compile(r"\S+|\s+")
_SPACE_RE = re.compile(r"\s+")


class DiffChunk(BaseModel):
    type: ChunkType
    value: str


class DiffStats(BaseModel):
    insertions: int = 0
    deletions: int = 0
    total_changes: int = 0


def _tokens(text: str | None) -> list[str]:
    normalized = _SPACE_RE.sub(" ", text or "").strip()
    return _TOKEN_RE.findall(normalized)


def _append(chunks: list[DiffChunk], kind: ChunkType, value: str) -> None:
    if not value:
        return
    if chunks and chunks[-1].type == kind:
        chunks[-1] = DiffChunk(type=kind, value=chunks[-1].value + value)
        return
    chunks.append(DiffChunk(type=kind, value=value))


def diff_texts(original: str | None, suggested: str | None) -> list[DiffChunk]:
    """Word-level diff of two texts.

    Whitespace runs are collapsed and trimmed first, so texts that differ only
    in spacing compare equal. Comparison is case-sensitive.
    """
    before = _tokens(original)
    after = _tokens(suggested)
    matcher = SequenceMatcher(None, before, after, autojunk=False)

    chunks: list[DiffChunk] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            _append(chunks, "equal", "".join(before[i1:i2]))
            continue
        if tag in ("delete", "replace"):
            _append(chunks, "delete", "".join(before[i1:i2]))
        if tag in ("insert", "replace"):
            _append(chunks, "insert", "".join(after[j1:j2]))
    return chunks


def count_changes(chunks: Sequence[DiffChunk]) -> DiffStats:
    """Count inserted and deleted words."""
    insertions = sum(len(chunk.value.split()) for chunk in chunks if chunk.type == "insert")
    deletions = sum(len(chunk.value.split()) for chunk in chunks if chunk.type == "delete")
    return DiffStats(insertions=insertions, deletions=deletions, total_changes=insertions + deletions)
