import re
from typing import List

from ats_scanner.helpers.lexicons import STOP_WORDS

_TOKEN_SPLIT = re.compile(r"[\s,;|()\[\]{}<>\"`!?•·▪●◦★♦✓]+")
_LEADING_PUNCT = "#:'*-_/\\~=>"
_TRAILING_PUNCT = ".:'*-_/\\~="
_SINGLE_CHAR_TERMS = frozenset({"c", "r"})


def normalize_text(text: str) -> str:
    """Case-fold and collapse whitespace"""
    return re.sub(r"\s+", " ", text or "").strip().casefold()


def _strip_token(token: str) -> str:
    token = token.lstrip(_LEADING_PUNCT).rstrip(_TRAILING_PUNCT)
    if token.endswith("'s"):
        token = token[:-2]
    return token


def tokenize(text: str) -> List[str]:
    """Split normalized text into tokens, keeping internal punctuation (node.js, c++, ci/cd)"""
    tokens = []
    for raw in _TOKEN_SPLIT.split(normalize_text(text)):
        token = _strip_token(raw)
        if token:
            tokens.append(token)
    return tokens


def normalize_term(term: str) -> str:
    return " ".join(tokenize(term))


def is_keyword_token(token: str) -> bool:
    """Whether a single token is worth keeping as a keyword"""
    if token in STOP_WORDS:
        return False
    if len(token) < 2 and token not in _SINGLE_CHAR_TERMS:
        return False
    if len(token) > 40 or "@" in token:
        return False
    if token.startswith(("http", "www.")):
        return False
    return any(ch.isalpha() for ch in token)


class TokenizedText:
    """Token view of a document with word-boundary phrase lookups"""

    def __init__(self, text: str):
        self.tokens = tokenize(text)
        self._padded = f" {' '.join(self.tokens)} "
        self.token_set = frozenset(self.tokens)

    def __bool__(self):
        return bool(self.tokens)

    def contains(self, term: str) -> bool:
        normalized = normalize_term(term)
        if not normalized:
            return False
        if " " not in normalized:
            return normalized in self.token_set
        return f" {normalized} " in self._padded

