# src/prompts/templates.py - v1
"""Prompt templates for the three model tasks.

Templates are filled with str.format(); literal JSON braces are doubled.
"""

from __future__ import annotations

# Statute families every analysis is checked against.
STATUTE_CHECKLIST: tuple[str, ...] = (
    "Конституция РФ",
    "Гражданский кодекс РФ (ГК РФ)",
    "Закон РФ «О защите прав потребителей» (ЗПП)",
    "Жилищный кодекс РФ (ЖК РФ)",
    "Семейный кодекс РФ (СК РФ)",
    "Трудовой кодекс РФ (ТК РФ)",
    "КоАП РФ",
    "Федеральный закон № 229-ФЗ «Об исполнительном производстве»",
    "Федеральный закон № 118-ФЗ «Об органах принудительного исполнения»",
    "Федеральный закон № 59-ФЗ «О порядке рассмотрения обращений граждан»",
)

ANALYSIS_TEMPLATE = """Ты - опытный юрист. Проанализируй юридический текст и верни результат строго в формате JSON.

ЗАДАЧИ:
1. Составь краткую суть текста (3-5 предложений).
2. Выдели ровно 3 ключевые цитаты, дословно, без изменения формулировок.
3. Определи дату документа (формат ДД.ММ.ГГГГ) и ведомство-отправителя, если они указаны.
4. Проверь текст на нарушения по следующему перечню нормативных актов:
{checklist}
Для каждого нарушения укажи закон, статью, описание и дословную цитату-доказательство.
{instructions}
ФОРМАТ ОТВЕТА (только JSON, без пояснений):
{{
  "summary": "краткая суть",
  "keyExcerpts": ["цитата 1", "цитата 2", "цитата 3"],
  "violations": [
    {{
      "law": "название закона",
      "article": "статья",
      "description": "описание нарушения",
      "evidenceQuote": "дословная цитата из текста"
    }}
  ],
  "documentDate": "ДД.ММ.ГГГГ или пустая строка",
  "senderAgency": "ведомство или пустая строка"
}}

ТЕКСТ:
{text}"""

COMPLAINT_TEMPLATE = """Ты - профессиональный юрист. Составь официальную жалобу в {agency} от первого лица заявителя.

ИНСТРУКЦИИ:
1. Жалоба оформляется как деловое письмо строго от первого лица ("я", "меня", "мне").
2. Используй официально-деловой стиль, строго и по существу.
3. Укажи конкретные нарушения закона, допущенные {agency}.
4. Сделай прямые ссылки на конкретные статьи нарушенных законов.
5. Сформулируй конкретные требования для устранения нарушений.
6. Не переписывай полный текст документа.
7. Верни результат строго в формате JSON с единственным полем "content".

ДАННЫЕ ДЛЯ ЖАЛОБЫ:
{payload}

СГЕНЕРИРУЙ ЖАЛОБУ В ФОРМАТЕ JSON:
{{
  "content": "текст жалобы строго от первого лица заявителя"
}}"""

ATTACHMENT_TEMPLATE = """Ты - опытный юрист. Определи тип приложенного документа и извлеки его реквизиты.
{instructions}
ФОРМАТ ОТВЕТА (только JSON, без пояснений):
{{
  "documentType": "тип документа (постановление, определение, письмо, акт и т.п.)",
  "sentDate": "дата отправки ДД.ММ.ГГГГ или пустая строка",
  "senderAgency": "ведомство-отправитель или пустая строка",
  "summary": "краткая суть (2-3 предложения)",
  "keyExcerpts": ["дословная цитата 1", "дословная цитата 2"]
}}

ТЕКСТ ДОКУМЕНТА:
{text}"""

INSTRUCTIONS_BLOCK = "\nДОПОЛНИТЕЛЬНЫЕ ИНСТРУКЦИИ:\n{instructions}\n"
