"""Fixed spelling rules for Israeli proper nouns in Russian text."""

import re

# (pattern, replacement); suffix groups keep Russian case endings.
GLOSSARY_RULES = [
    (re.compile(r"цахал", re.IGNORECASE), "ЦАХАЛ"),
    (re.compile(r"шабак", re.IGNORECASE), "ШАБАК"),
    (re.compile(r"кнес+ет([а-яё]*)", re.IGNORECASE), r"Кнессет\1"),
    (re.compile(r"тель[\s-]?авив([а-яё]*)", re.IGNORECASE), r"Тель-Авив\1"),
    (re.compile(r"иерусалим([а-яё]*)", re.IGNORECASE), r"Иерусалим\1"),
    (re.compile(r"хайф([а-яё]+)", re.IGNORECASE), r"Хайф\1"),
]


def apply_glossary(text: str) -> str:
    for pattern, replacement in GLOSSARY_RULES:
        text = pattern.sub(replacement, text)
    return text
