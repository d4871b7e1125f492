"""Tests for summarize_stories.glossary module."""

import pytest

from summarize_stories.glossary import apply_glossary


class TestApplyGlossary:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("цахал сообщил", "ЦАХАЛ сообщил"),
            ("Цахал сообщил", "ЦАХАЛ сообщил"),
            ("сотрудники Шабак", "сотрудники ШАБАК"),
            ("в кнесете", "в Кнессете"),
            ("в Кнессете", "в Кнессете"),
            ("в тель авиве", "в Тель-Авиве"),
            ("в тель-Авиве", "в Тель-Авиве"),
            ("из иерусалима", "из Иерусалима"),
            ("в хайфе", "в Хайфе"),
        ],
    )
    def test_rules(self, raw: str, expected: str) -> None:
        assert apply_glossary(raw) == expected

    def test_leaves_other_text_untouched(self) -> None:
        assert apply_glossary("Правительство утвердило бюджет.") == "Правительство утвердило бюджет."

    def test_replaces_all_occurrences(self) -> None:
        assert apply_glossary("цахал и цахал") == "ЦАХАЛ и ЦАХАЛ"
