from __future__ import annotations

from dataclasses import asdict, dataclass

from app.core.config.vocabulary import load_vocabulary
from app.normalize.text import frequency_map, remove_stop_words, tokenize

DEFAULT_MAX_KEYWORDS = 40
ATS_MAX_KEYWORDS = 120
MAX_GRAM = 3

_LONG_TERM_LENGTH = 6
_LONG_TERM_BOOST = 1.1
_PHRASE_BOOSTS = {2: 1.35, 3: 1.6}
_PRIORITY_BONUS = 3.5
_MIN_TERM_LENGTH = 3


@dataclass(slots=True)
class KeywordCandidate:
    term: str
    score: float

    def to_dict(self) -> dict[str, float | str]:
        return asdict(self)


def build_ngrams(tokens: list[str], max_gram: int = MAX_GRAM) -> list[str]:
    """Sliding-window n-grams, all unigrams first, then bigrams, then trigrams."""
    grams: list[str] = []
    for size in range(1, max_gram + 1):
        for start in range(0, len(tokens) - size + 1):
            grams.append(" ".join(tokens[start : start + size]))
    return grams


def _unigram_score(term: str, count: int) -> float:
    boost = _LONG_TERM_BOOST if len(term) > _LONG_TERM_LENGTH else 1.0
    return count * boost


def extract_keywords_from_text(text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> list[KeywordCandidate]:
    raw = str(text or "")
    tokens = remove_stop_words(tokenize(raw))
    if not tokens or max_keywords <= 0:
        return []

    # Insertion order of `scores` is the tie-break order.
    scores: dict[str, float] = {}
    for term, count in frequency_map(tokens).items():
        scores[term] = _unigram_score(term, count)

    # Windows run over the filtered tokens, so a phrase can bridge a removed stop word.
    for term, count in frequency_map(build_ngrams(tokens)).items():
        size = term.count(" ") + 1
        boost = _PHRASE_BOOSTS.get(size)
        if boost is None:
            continue
        scores[term] = scores.get(term, 0.0) + count * boost

    lowered = raw.lower()
    for keyword in load_vocabulary().priority_keywords:
        if keyword in lowered:
            scores[keyword] = scores.get(keyword, 0.0) + _PRIORITY_BONUS

    ranked = sorted(
        (
            (index, term, score)
            for index, (term, score) in enumerate(scores.items())
            if len(term) >= _MIN_TERM_LENGTH
        ),
        key=lambda item: (-item[2], item[0]),
    )
    return [KeywordCandidate(term=term, score=round(score, 4)) for _, term, score in ranked[:max_keywords]]


def extract_keyword_terms(text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> list[str]:
    return [candidate.term for candidate in extract_keywords_from_text(text, max_keywords)]
