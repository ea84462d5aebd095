"""Retrieval engine assembling a bounded keyword-ranked context."""
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple

from models.chunk import Chunk, ScoredChunk
from services.keyword_extractor import extract_keywords
from services.synonym_expander import expand_with_synonyms
from services.stemming import get_stem_variants
from config import BASELINE_CHARS, MAX_CONTEXT_CHARS

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n\n"


@dataclass
class RetrievalResult:
    """Assembled context for one question plus what went into it."""
    context: str
    keywords: List[str] = field(default_factory=list)
    expanded_keywords: List[str] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)

    @property
    def synonyms_added(self) -> List[str]:
        return [word for word in self.expanded_keywords if word not in self.keywords]


class RetrievalEngine:
    """Select the chunks of the current document that best match a question."""

    def __init__(self, baseline_chars: int = BASELINE_CHARS, max_context_chars: int = MAX_CONTEXT_CHARS):
        """
        Initialize the retrieval engine.

        Args:
            baseline_chars: Budget for the leading chunks that are always included
            max_context_chars: Budget for the whole assembled context
        """
        self.baseline_chars = baseline_chars
        self.max_context_chars = max_context_chars

    def find_relevant_chunks(self, chunks: Sequence[Chunk], question: str) -> str:
        """Return only the assembled context string for a question."""
        return self.retrieve(chunks, question).context

    def retrieve(self, chunks: Sequence[Chunk], question: str) -> RetrievalResult:
        """
        Build the context for a question.

        Implements the following strategy:
        1. Take the leading chunks that fit into baseline_chars (TOC, overview)
        2. Without keywords, fill the rest of the budget with the chunks that
           follow the baseline, in order
        3. Otherwise expand keywords with synonyms and stem variants, score
           every chunk by occurrence count and add the best-scoring chunks
           that still fit into max_context_chars
        4. Join baseline and selected chunks in document order

        Args:
            chunks: Chunk sequence of the current document
            question: User question

        Returns:
            RetrievalResult with the context string and the keywords used
        """
        if not chunks:
            logger.warning("No chunks loaded, returning empty context")
            return RetrievalResult(context="")

        keywords = extract_keywords(question)
        baseline, baseline_len = self.select_baseline(chunks)

        if not keywords:
            selected = self._fill_in_order(chunks, len(baseline), baseline_len)
            logger.debug(f"No keywords in question, using {len(selected)} chunks after baseline")
            return self._assemble(baseline + selected, keywords, keywords)

        expanded = expand_with_synonyms(keywords)
        variants = [variant for keyword in expanded for variant in get_stem_variants(keyword)]

        ranked = self.rank(self.score_chunks(chunks, variants))
        baseline_indices = {chunk.index for chunk in baseline}
        selected = self.select(ranked, baseline_indices, baseline_len)

        logger.debug(
            f"Selected {len(selected)} chunks beyond {len(baseline)} baseline chunks "
            f"using {len(variants)} term variants"
        )
        return self._assemble(baseline + selected, keywords, expanded)

    def select_baseline(self, chunks: Sequence[Chunk]) -> Tuple[List[Chunk], int]:
        """
        Collect leading chunks until the next one would exceed baseline_chars.

        The baseline length counts the separator after every chunk.

        Returns:
            Tuple of (baseline chunks, baseline length)
        """
        baseline = []
        baseline_len = 0
        for chunk in chunks:
            if baseline_len + len(chunk.text) > self.baseline_chars:
                break
            baseline.append(chunk)
            baseline_len += len(chunk.text) + len(CHUNK_SEPARATOR)
        return baseline, baseline_len

    @staticmethod
    def score_chunks(chunks: Sequence[Chunk], variants: Sequence[str]) -> List[ScoredChunk]:
        """Score each chunk by non-overlapping occurrences of every variant."""
        scored = []
        for chunk in chunks:
            lower_text = chunk.text.lower()
            score = sum(lower_text.count(variant.lower()) for variant in variants)
            scored.append(ScoredChunk(chunk=chunk, score=score))
        return scored

    @staticmethod
    def rank(scored: Sequence[ScoredChunk]) -> List[ScoredChunk]:
        """Sort by score descending, then by document position."""
        return sorted(scored, key=lambda item: (-item.score, item.index))

    def select(self, ranked: Sequence[ScoredChunk], baseline_indices: Set[int], baseline_len: int) -> List[Chunk]:
        """
        Pick ranked chunks beyond the baseline while they fit the budget.

        Stops at the first zero score. A chunk that would overflow
        max_context_chars is skipped, and scanning continues.
        """
        total_len = baseline_len
        selected = []
        for item in ranked:
            if item.score == 0:
                break
            if item.index in baseline_indices:
                continue
            cost = len(item.chunk.text) + len(CHUNK_SEPARATOR)
            if total_len + cost > self.max_context_chars:
                continue
            selected.append(item.chunk)
            total_len += cost
        return selected

    def _fill_in_order(self, chunks: Sequence[Chunk], start: int, used: int) -> List[Chunk]:
        filled = []
        for chunk in chunks[start:]:
            if used + len(chunk.text) > self.max_context_chars:
                break
            filled.append(chunk)
            used += len(chunk.text) + len(CHUNK_SEPARATOR)
        return filled

    @staticmethod
    def _assemble(chunks: List[Chunk], keywords: List[str], expanded: List[str]) -> RetrievalResult:
        ordered = sorted(chunks, key=lambda chunk: chunk.index)
        return RetrievalResult(
            context=CHUNK_SEPARATOR.join(chunk.text for chunk in ordered),
            keywords=keywords,
            expanded_keywords=expanded,
            indices=[chunk.index for chunk in ordered],
        )
