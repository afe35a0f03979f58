from typing import List

from ats_scanner.helpers.text import is_keyword_token, tokenize
from ats_scanner.models.document import DocumentKind, Keyword
from ats_scanner.services.reference_data import ReferenceData
from ats_scanner.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)


class KeywordExtractor:
    """Turns raw document text into an ordered, de-duplicated keyword list"""

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    @log_function_call
    def extract(self, text: str, kind: DocumentKind) -> List[Keyword]:
        """
        Extract keywords from ``text``.

        Known multi-word phrases are matched first (longest match wins);
        remaining tokens become single-word keywords unless they are stop
        words, numbers, e-mail addresses or URLs. The first occurrence of each
        normalized term fixes its position.
        """
        tokens = tokenize(text)
        keywords: List[Keyword] = []
        seen = set()
        i = 0
        while i < len(tokens):
            term, consumed = self._phrase_at(tokens, i)
            if term is None:
                term, consumed = tokens[i], 1
                if not is_keyword_token(term):
                    i += 1
                    continue
            i += consumed

            if term in seen:
                continue
            seen.add(term)
            keywords.append(self._keyword(term, kind))

        logger.debug(f"Extracted {len(keywords)} keywords from {len(tokens)} {kind.value} tokens")
        return keywords

    def _phrase_at(self, tokens: List[str], start: int):
        longest = min(self.reference.max_phrase_tokens, len(tokens) - start)
        for size in range(longest, 1, -1):
            phrase = self.reference.phrase(tuple(tokens[start:start + size]))
            if phrase is not None:
                return phrase, size
        return None, 0

    def _keyword(self, term: str, kind: DocumentKind) -> Keyword:
        entry = self.reference.lexicon_term(term) or self.reference.lexicon_term(self.reference.canonical(term))
        if entry is None:
            return Keyword(term=term, document_kind=kind)
        return Keyword(term=term, document_kind=kind, weight=entry.weight, category=entry.category)


def extract_keywords(text: str, kind: DocumentKind, reference: ReferenceData) -> List[Keyword]:
    return KeywordExtractor(reference).extract(text, kind)
