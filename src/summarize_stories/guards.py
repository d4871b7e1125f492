"""Deterministic checks on generated summaries.

Every guard returns a GuardResult; the first failing guard blocks publication.
"""

from __future__ import annotations

import re

from summarize_stories.instructions import ATTRIBUTION_PHRASE
from summarize_stories.models import GuardResult

FORBIDDEN_WORDS = ["ужас", "кошмар", "шок", "сенсация", "скандал века"]

NUMBER_RE = re.compile(r"[0-9]+(?:[.,][0-9]+)?%?")

PASS = GuardResult(ok=True)


def guard_length(body: str, target_min: int, target_max: int) -> GuardResult:
    length = len(body)
    if length < target_min:
        return GuardResult(ok=False, reason=f"too_short:{length}<{target_min}")
    if length > target_max:
        return GuardResult(ok=False, reason=f"too_long:{length}>{target_max}")
    return PASS


def guard_forbidden_words(text: str) -> GuardResult:
    lowered = text.lower()
    for word in FORBIDDEN_WORDS:
        if word in lowered:
            return GuardResult(ok=False, reason=f"forbidden_word:{word}")
    return PASS


def extract_numbers(text: str) -> list[str]:
    return NUMBER_RE.findall(text)


def guard_numbers(text: str, source_titles: list[str]) -> GuardResult:
    """Every number in the source headlines must appear as a number in the text.

    Comparison is token-wise: a source "3" is not satisfied by "30".
    """
    expected: list[str] = []
    for title in source_titles:
        for number in extract_numbers(title):
            if number not in expected:
                expected.append(number)
    generated = set(extract_numbers(text))
    missing = [n for n in expected if n not in generated]
    if missing:
        return GuardResult(ok=False, reason="missing_numbers:" + ",".join(missing))
    return PASS


def guard_high_risk(body: str, risk_level: str) -> GuardResult:
    if risk_level != "high":
        return PASS
    if ATTRIBUTION_PHRASE not in body.lower():
        return GuardResult(ok=False, reason="high_risk_requires_attribution")
    return PASS


def run_guards(
    body: str,
    full_text: str,
    source_titles: list[str],
    risk_level: str,
    target_min: int,
    target_max: int,
    relaxed: bool = False,
) -> GuardResult:
    """Run all guards in order and return the first failure.

    With `relaxed` (last-resort output) the length guard is skipped.
    """
    checks = []
    if not relaxed:
        checks.append(lambda: guard_length(body, target_min, target_max))
    checks.extend([
        lambda: guard_forbidden_words(full_text),
        lambda: guard_numbers(full_text, source_titles),
        lambda: guard_high_risk(body, risk_level),
    ])
    for check in checks:
        result = check()
        if not result.ok:
            return result
    return PASS
