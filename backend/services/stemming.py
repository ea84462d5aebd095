"""Suffix-stripping stem variants for inflected Czech words."""
from typing import List

MIN_STEM_LENGTH = 3
MAX_STRIPPED_CHARS = 3


def get_stem_variants(keyword: str) -> List[str]:
    """
    Return the keyword followed by its prefixes with 1 to 3 trailing characters removed.

    No prefix shorter than 3 characters is produced, e.g. "obsahem" gives
    ["obsahem", "obsahe", "obsah", "obsa"].
    """
    floor = max(MIN_STEM_LENGTH, len(keyword) - MAX_STRIPPED_CHARS)
    variants = [keyword]
    for length in range(len(keyword) - 1, floor - 1, -1):
        variants.append(keyword[:length])
    return variants
