"""Domain synonym expansion for manual-section vocabulary."""
import logging
from typing import List, Sequence

from services.keyword_extractor import is_significant

logger = logging.getLogger(__name__)

PREFIX_LENGTH = 3

# Each group lists interchangeable phrases for one section of a technical manual.
SYNONYM_GROUPS = (
    ('obsah balení', 'rozsah dodávky', 'součásti balení', 'příslušenství', 'dodávané příslušenství', 'obsah dodávky'),
    ('technické údaje', 'specifikace', 'parametry', 'technická data', 'technické parametry'),
    ('údržba', 'servis', 'ošetřování', 'čištění', 'péče'),
    ('bezpečnost', 'bezpečnostní pokyny', 'varování', 'nebezpečí', 'výstraha'),
    ('uvedení do provozu', 'spuštění', 'zapnutí', 'první použití', 'start'),
    ('vypnutí', 'zastavení', 'odstavení'),
    ('závada', 'porucha', 'chyba', 'problém', 'řešení problémů', 'odstraňování závad', 'troubleshooting'),
    ('návod k obsluze', 'návod k použití', 'uživatelská příručka', 'manuál'),
    ('záruka', 'záruční podmínky', 'reklamace'),
    ('instalace', 'montáž', 'sestavení', 'připojení'),
    ('rozměry', 'hmotnost', 'váha', 'velikost'),
)


def _shares_prefix(keyword: str, word: str) -> bool:
    return keyword.startswith(word[:PREFIX_LENGTH]) or word.startswith(keyword[:PREFIX_LENGTH])


def group_matches(group: Sequence[str], keywords: Sequence[str]) -> bool:
    """Return True if any word of any phrase in the group shares a prefix with a keyword."""
    return any(
        _shares_prefix(keyword, word)
        for phrase in group
        for word in phrase.split(' ')
        for keyword in keywords
    )


def expand_with_synonyms(keywords: Sequence[str], groups: Sequence[Sequence[str]] = SYNONYM_GROUPS) -> List[str]:
    """
    Add the words of every synonym group that a keyword touches.

    The original keywords come first, followed by new synonym words in
    group, phrase and word order. Duplicates are dropped.

    Args:
        keywords: Keywords extracted from the question
        groups: Synonym groups to match against

    Returns:
        De-duplicated list of keywords and synonym words
    """
    # dict keeps insertion order
    expanded = dict.fromkeys(keywords)

    for group in groups:
        if not group_matches(group, keywords):
            continue
        logger.debug(f"Synonym group matched: {group[0]}")
        for phrase in group:
            for word in phrase.split(' '):
                if is_significant(word):
                    expanded.setdefault(word)

    return list(expanded)
