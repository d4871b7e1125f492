"""Hebrew-safe title tokenization and set similarity for story clustering."""

import re

# Common Hebrew function words that carry no topic signal.
HE_STOPWORDS = frozenset({
    "של", "את", "אל", "עם", "כי", "על", "זה", "זו", "זאת",
    "הם", "הן", "היה", "היו", "הוא", "היא", "לא", "גם", "אבל",
    "כן", "אם", "כבר", "רק", "עוד", "כל", "כלל", "אחד", "אחת",
    "שני", "שתי", "מה", "מי", "לו", "לה", "להם", "לנו", "לי",
    "כך", "אז", "יש", "אין", "אחרי", "לפני", "בין", "תחת",
    "מתוך", "כנגד", "בגלל", "כדי", "כמו", "אחרת", "או", "שוב",
    "עכשיו", "יותר", "פחות", "הכל", "ממנו", "ממנה", "אלה", "אלו",
    "בה", "בהם", "בנו", "בי", "ומה",
    "ועל", "ואל", "ועם", "ולא", "וגם", "אנחנו", "אתם", "אתן",
})

MIN_TOKEN_LENGTH = 2

# Hebrew letters, Latin letters and digits form tokens; everything else splits.
_SPLIT_RE = re.compile(r"[^א-תa-zA-Z0-9]+")


def tokenize(title: str) -> set[str]:
    """Split a title into a lowercased token set without stopwords or 1-char tokens."""
    tokens = set()
    for raw in _SPLIT_RE.split(title):
        token = raw.lower()
        if len(token) < MIN_TOKEN_LENGTH or token in HE_STOPWORDS:
            continue
        tokens.add(token)
    return tokens


def jaccard_similarity(a: set[str], b: set[str]) -> float:
    """|A ∩ B| / |A ∪ B|; 1.0 when both sets are empty, 0.0 when only one is."""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    intersection = len(a & b)
    return intersection / (len(a) + len(b) - intersection)
