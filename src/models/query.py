"""Retrieval result data models."""

from dataclasses import dataclass, field


@dataclass
class ChunkMatch:
    """A stored chunk returned by a similarity query."""

    id: str
    text: str
    score: float
    metadata: dict = field(default_factory=dict)


@dataclass
class RetrievalResult:
    """Matches for one query, ordered by descending similarity."""

    matches: list[ChunkMatch] = field(default_factory=list)

    def __post_init__(self):
        self.matches = sorted(self.matches, key=lambda m: m.score, reverse=True)

    def __len__(self) -> int:
        return len(self.matches)

    def __iter__(self):
        return iter(self.matches)

    def texts(self) -> list[str]:
        """Return the non-empty chunk texts in rank order."""
        return [m.text for m in self.matches if m.text and m.text.strip()]

    def pairs(self) -> list[tuple[str, float]]:
        return [(m.text, m.score) for m in self.matches]
