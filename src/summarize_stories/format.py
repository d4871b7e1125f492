"""Parsing and formatting of the mandatory five-section summary.

Expected generator output:
    Заголовок: <headline>
    Что произошло: <1-2 sentences>
    Почему важно: <1 sentence>
    Что дальше: <1 sentence>
    Источники: <source names>
"""

from __future__ import annotations

from summarize_stories.models import ParsedSummary

SECTIONS = [
    ("Заголовок", "title"),
    ("Что произошло", "what_happened"),
    ("Почему важно", "why_important"),
    ("Что дальше", "whats_next"),
    ("Источники", "sources"),
]


def render_sections(
    title: str, what_happened: str, why_important: str, whats_next: str, sources: str
) -> str:
    """Render section values in the raw labelled layout that parse_sections reads."""
    values = [title, what_happened, why_important, whats_next, sources]
    return "\n".join(f"{label}: {value}" for (label, _), value in zip(SECTIONS, values, strict=True))


def _find_marker(lines: list[str], label: str, start: int = 0) -> int:
    for index in range(start, len(lines)):
        if lines[index].strip().startswith(label + ":"):
            return index
    return -1


def parse_sections(text: str) -> ParsedSummary | None:
    """Parse labelled sections; None if any section is missing or empty.

    A section runs from its marker line up to the next section's marker, so
    continuation lines are joined into the value.
    """
    lines = text.split("\n")
    values: dict[str, str] = {}

    for index, (label, field_name) in enumerate(SECTIONS):
        start = _find_marker(lines, label)
        if start == -1:
            return None

        end = len(lines)
        if index + 1 < len(SECTIONS):
            next_start = _find_marker(lines, SECTIONS[index + 1][0], start + 1)
            if next_start != -1:
                end = next_start

        first_line = lines[start].strip()[len(label) + 1:].strip()
        continuation = " ".join(line.strip() for line in lines[start + 1:end] if line.strip())
        value = f"{first_line} {continuation}".strip() if continuation else first_line
        if not value:
            return None
        values[field_name] = value

    return ParsedSummary(**values)


def format_body(parsed: ParsedSummary) -> str:
    """Narrative body used for the length guard (no headline, no sources line)."""
    return "\n".join([
        f"Что произошло: {parsed.what_happened}",
        f"Почему важно: {parsed.why_important}",
        f"Что дальше: {parsed.whats_next}",
    ])


def format_full(parsed: ParsedSummary) -> str:
    """Display text stored on the story: headline, body and sources."""
    return "\n".join([
        parsed.title,
        "",
        format_body(parsed),
        f"Источники: {parsed.sources}",
    ])
