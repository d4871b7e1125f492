"""Prompt text shared by the LLM-backed providers."""

from store.stories_repo import SummaryItem

ATTRIBUTION_PHRASE = "по данным источников"

GENERATE_SUMMARY_INSTRUCTIONS = """Ты профессиональный редактор русскоязычных новостей, пересказывающий израильские новости с иврита.

Создай пересказ на русском, используя СТРОГО следующую структуру (все 5 разделов обязательны):

Заголовок: <одна фактическая строка>
Что произошло: <1–2 предложения>
Почему важно: <1 предложение>
Что дальше: <1 предложение или "Ожидается обновление.">
Источники: <названия источников через запятую>

Правила:
- Язык: только русский (кроме названий источников)
- Длина тела (без строки "Источники"): {target_min}–{target_max} символов
- Сохраняй все числа, проценты и суммы точно
- Используй точно: ЦАХАЛ, ШАБАК, Кнессет, Тель-Авив, Иерусалим, Хайфа
- Тон: нейтральный и фактологичный, без эмоций
- Запрещённые слова: ужас, кошмар, шок, сенсация, скандал"""

HIGH_RISK_NOTE = '\n- ОБЯЗАТЕЛЬНО: добавь "по данным источников" в раздел "Что произошло".'


def build_system_prompt(risk_level: str, target_min: int = 400, target_max: int = 700) -> str:
    prompt = GENERATE_SUMMARY_INSTRUCTIONS.format(target_min=target_min, target_max=target_max)
    if risk_level == "high":
        prompt += HIGH_RISK_NOTE
    return prompt


def build_user_message(items: list[SummaryItem]) -> str:
    lines = [f"{i}. [{item.source_id}] {item.title}" for i, item in enumerate(items, 1)]
    return "Новостные заголовки на иврите:\n" + "\n".join(lines)
