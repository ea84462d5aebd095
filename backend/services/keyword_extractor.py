"""Keyword extraction from Czech questions."""
import re
from typing import List

# Function words, pronouns and the question / instruction words that carry
# no meaning for locating a section of a manual.
CZECH_STOP_WORDS = frozenset({
    'a', 'aby', 'aj', 'ale', 'ani', 'asi', 'az', 'až', 'bez', 'bude', 'budem',
    'budes', 'budete', 'budou', 'by', 'byl', 'byla', 'byli', 'bylo', 'být',
    'co', 'ci', 'což', 'další', 'do', 'ho', 'i', 'ja', 'já', 'jak', 'jako',
    'jaký', 'je', 'jeho', 'jej', 'její', 'jejich', 'jen', 'jenž', 'jest',
    'jeste', 'ještě', 'ji', 'jinak', 'jine', 'jiné', 'jiný', 'jiz', 'již',
    'jsem', 'jses', 'jsi', 'jsme', 'jsou', 'jste', 'k', 'kam', 'kde', 'kdo',
    'kdyz', 'když', 'ke', 'ktera', 'která', 'ktere', 'které', 'kteri', 'kteří',
    'který', 'kvůli', 'ma', 'má', 'mate', 'máte', 'me', 'mě', 'mezi', 'mi',
    'mit', 'mít', 'mne', 'mnou', 'moc', 'moje', 'může', 'muze', 'my',
    'na', 'nad', 'nam', 'nám', 'nas', 'nás', 'náš', 'ne', 'nebo', 'nebyl',
    'necht', 'nechť', 'nejsou', 'neni', 'není', 'nez', 'než', 'nic', 'nich',
    'ním', 'no', 'o', 'od', 'on', 'ona', 'oni', 'ono', 'ony', 'pak', 'po',
    'pod', 'podle', 'pokud', 'potom', 'pouze', 'prave', 'právě', 'pred', 'před',
    'přes', 'přese', 'pri', 'při', 'pro', 'proc', 'proč', 'proto', 'protoze',
    'protože', 're', 's', 'se', 'si', 'sice', 'sve', 'své', 'svůj', 'svym',
    'svým', 'ta', 'tak', 'take', 'také', 'takze', 'takže', 'tam', 'tato', 'te',
    'tě', 'tedy', 'ten', 'tento', 'ti', 'tim', 'tím', 'to', 'toho', 'tohoto',
    'tom', 'tomto', 'tomu', 'tomuto', 'tu', 'tuto', 'ty', 'tyto', 'u', 'uz',
    'už', 'v', 've', 'vam', 'vám', 'vas', 'vás', 'váš', 'vice', 'více',
    'vsak', 'však', 'vy', 'z', 'za', 'ze', 'že',
    # question and instruction words
    'jaké', 'jaká', 'kolik', 'kdy',
    'řekni', 'popiš', 'vysvětli', 'najdi', 'ukaž',
})

_NON_WORD_CHARS = re.compile(r'[^a-záčďéěíňóřšťúůýž0-9\s]')

MIN_KEYWORD_LENGTH = 3


def is_significant(word: str) -> bool:
    """Return True for words long enough and not in the stop list."""
    return len(word) >= MIN_KEYWORD_LENGTH and word not in CZECH_STOP_WORDS


def extract_keywords(question: str) -> List[str]:
    """
    Reduce a question to its significant lowercase terms.

    Punctuation and any character outside the Czech alphabet, digits and
    whitespace is removed before splitting. Order is kept and duplicates
    are not removed.

    Args:
        question: Free-text user question

    Returns:
        List of keywords in question order
    """
    cleaned = _NON_WORD_CHARS.sub('', question.lower())
    return [word for word in cleaned.split() if is_significant(word)]
