"""Text normalisation, tokenisation, and contraction expansion.

WHY: A caption line ("Welcome, everyone!") and a speech recogniser's
transcript ("welcome everyone") differ in case, punctuation, and spacing
even when the words are identical. Informal speech adds another layer:
learners say "gonna" for "going to" and "I'm" for "I am". Both sides must
be reduced to the same canonical token stream before they can be compared.

HOW: normalize() lowercases, removes every character that is not a
letter, digit, whitespace, or apostrophe, collapses whitespace, and trims.
tokenize() splits the normalised string on spaces. expand_contractions()
replaces each token found in the contraction table with its expansion.

RULES:
- normalize() is idempotent: normalize(normalize(s)) == normalize(s)
- Apostrophes survive normalisation so contractions stay recognisable;
  typographic apostrophes (U+2018, U+2019) become ASCII "'"
- Underscore is punctuation here, not a word character
- Empty or all-whitespace input tokenizes to []
- CONTRACTIONS is read-only; callers may pass their own table
- Expansion is single-pass: expanded tokens are not looked up again
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

# Anything that is not a word character, whitespace, or apostrophe; plus
# underscore, which \w would otherwise keep.
_STRIP_RE = re.compile(r"[^\w\s']|_")
_WHITESPACE_RE = re.compile(r"\s+")
# Typographic apostrophes that caption tracks use in place of the ASCII one.
_APOSTROPHES = str.maketrans({"‘": "'", "’": "'"})

ContractionTable = Mapping[str, Tuple[str, ...]]


def _build_table(pairs: Mapping[str, str]) -> ContractionTable:
    return MappingProxyType({key: tuple(value.split()) for key, value in pairs.items()})


# English informalisms and contractions → canonical token sequences.
CONTRACTIONS: ContractionTable = _build_table({
    "gonna": "going to",
    "wanna": "want to",
    "gotta": "got to",
    "kinda": "kind of",
    "sorta": "sort of",
    "dunno": "don't know",
    "lemme": "let me",
    "gimme": "give me",
    "coulda": "could have",
    "shoulda": "should have",
    "woulda": "would have",
    "it's": "it is",
    "that's": "that is",
    "what's": "what is",
    "there's": "there is",
    "here's": "here is",
    "he's": "he is",
    "she's": "she is",
    "i'm": "i am",
    "you're": "you are",
    "we're": "we are",
    "they're": "they are",
    "i've": "i have",
    "you've": "you have",
    "we've": "we have",
    "they've": "they have",
    "i'll": "i will",
    "you'll": "you will",
    "he'll": "he will",
    "she'll": "she will",
    "we'll": "we will",
    "they'll": "they will",
    "i'd": "i would",
    "you'd": "you would",
    "he'd": "he would",
    "she'd": "she would",
    "we'd": "we would",
    "they'd": "they would",
    "isn't": "is not",
    "aren't": "are not",
    "wasn't": "was not",
    "weren't": "were not",
    "don't": "do not",
    "doesn't": "does not",
    "didn't": "did not",
    "can't": "cannot",
    "couldn't": "could not",
    "won't": "will not",
    "wouldn't": "would not",
    "shouldn't": "should not",
    "haven't": "have not",
    "hasn't": "has not",
    "hadn't": "had not",
})


def normalize(text: str) -> str:
    """Reduce text to lowercase words separated by single spaces.

    Example: "  Hello,   World! It's me. " -> "hello world it's me"
    """
    text = _STRIP_RE.sub("", text.lower().translate(_APOSTROPHES))
    return _WHITESPACE_RE.sub(" ", text).strip()


def tokenize(text: str) -> List[str]:
    """Split text into normalised word tokens."""
    normalized = normalize(text)
    return normalized.split(" ") if normalized else []


def expand_contractions(
    tokens: Sequence[str],
    table: Optional[ContractionTable] = None,
) -> List[str]:
    """Replace each token found in the contraction table with its expansion.

    Example: ["i'm", "gonna", "go"] -> ["i", "am", "going", "to", "go"]
    """
    lookup = CONTRACTIONS if table is None else table
    expanded: List[str] = []
    for token in tokens:
        expansion = lookup.get(token)
        if expansion:
            expanded.extend(expansion)
        else:
            expanded.append(token)
    return expanded


def canonical_tokens(text: str, table: Optional[ContractionTable] = None) -> List[str]:
    """Tokenize and expand contractions in one step."""
    return expand_contractions(tokenize(text), table)
