"""Tests for summarize_stories.format module."""

from summarize_stories.format import format_body, format_full, parse_sections, render_sections

TEXT = """Заголовок: ЦАХАЛ нанёс удар в Ливане
Что произошло: По данным источников, ЦАХАЛ атаковал цели.
Почему важно: Это может привести к эскалации.
Что дальше: Ожидается обновление.
Источники: ynet, Walla"""


class TestParseSections:
    def test_parses_all_sections(self) -> None:
        parsed = parse_sections(TEXT)
        assert parsed.title == "ЦАХАЛ нанёс удар в Ливане"
        assert parsed.what_happened == "По данным источников, ЦАХАЛ атаковал цели."
        assert parsed.why_important == "Это может привести к эскалации."
        assert parsed.whats_next == "Ожидается обновление."
        assert parsed.sources == "ynet, Walla"

    def test_joins_continuation_lines(self) -> None:
        text = TEXT.replace(
            "ЦАХАЛ атаковал цели.", "ЦАХАЛ атаковал цели.\n  Удары продолжались всю ночь."
        )
        parsed = parse_sections(text)
        assert parsed.what_happened == (
            "По данным источников, ЦАХАЛ атаковал цели. Удары продолжались всю ночь."
        )

    def test_value_on_following_line(self) -> None:
        text = TEXT.replace("Почему важно: Это", "Почему важно:\nЭто")
        assert parse_sections(text).why_important == "Это может привести к эскалации."

    def test_ignores_preamble(self) -> None:
        parsed = parse_sections("Вот пересказ:\n\n" + TEXT)
        assert parsed.title == "ЦАХАЛ нанёс удар в Ливане"

    def test_missing_section_fails(self) -> None:
        text = "\n".join(line for line in TEXT.split("\n") if not line.startswith("Что дальше"))
        assert parse_sections(text) is None

    def test_empty_section_fails(self) -> None:
        assert parse_sections(TEXT.replace("Источники: ynet, Walla", "Источники:")) is None

    def test_render_output_parses(self) -> None:
        text = render_sections("Т", "Что-то произошло.", "Важно.", "Дальше.", "ynet")
        parsed = parse_sections(text)
        assert (parsed.title, parsed.sources) == ("Т", "ynet")


class TestFormat:
    def test_body_excludes_title_and_sources(self) -> None:
        body = format_body(parse_sections(TEXT))
        assert body.split("\n") == [
            "Что произошло: По данным источников, ЦАХАЛ атаковал цели.",
            "Почему важно: Это может привести к эскалации.",
            "Что дальше: Ожидается обновление.",
        ]

    def test_full_text_layout(self) -> None:
        parsed = parse_sections(TEXT)
        lines = format_full(parsed).split("\n")
        assert lines[0] == "ЦАХАЛ нанёс удар в Ливане"
        assert lines[1] == ""
        assert lines[-1] == "Источники: ynet, Walla"
