"""Prompts for feed and article generation."""

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from newsfeed.models.schemas import NewsCategory, category_label

logger = logging.getLogger(__name__)

WEEKDAYS = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")
MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

FRONT_PAGE_PROMPT = """
Hoy es {date}, hora {time}.
Eres el editor en jefe de "Punto Pe".
Genera un DASHBOARD completo de noticias de ÚLTIMA HORA (últimas 24 horas).

NECESITO EXPLICITAMENTE:
- 4 noticias de POLITICA
- 4 noticias de ECONOMIA
- 4 noticias de SEGURIDAD NACIONAL
- 4 noticias de SOCIALES
- 4 noticias de ELECCIONES 2026

Usa Google Search para encontrar hechos reales y recientes.

Tu respuesta DEBE ser UNICAMENTE un objeto JSON válido (sin texto introductorio):
{{
  "news_items": [
    {{
      "headline": "Titular",
      "summary": "Resumen breve",
      "source_name": "Medio",
      "source_url": "URL",
      "relevant_category": "Política"
    }}
    ... (total 20 items aprox)
  ],
  "hashtags": ["#Tag1", "#Tag2"]
}}
"""

TOPIC_PROMPT = """
Hoy es {date}, hora {time}.
Eres un editor de noticias de "Punto Pe".
Investiga las ÚLTIMAS noticias (últimas 24 horas) sobre: "{context}".
Usa Google Search para encontrar información real y reciente.

Tu respuesta DEBE ser UNICAMENTE un objeto JSON válido (sin texto introductorio).
Estructura deseada:
{{
  "news_items": [
    {{
      "headline": "Titular corto e impactante",
      "summary": "Resumen de 20-30 palabras",
      "source_name": "Nombre del medio",
      "source_url": "URL de la noticia",
      "relevant_category": "{category}"
    }}
  ],
  "hashtags": ["#Tag1", "#Tag2", "#Tag3"]
}}
Genera una lista exhaustiva de al menos 20 noticias relevantes para esta categoría.
"""

ARTICLE_PROMPT = """
Actúa como un periodista senior de "Punto Pe".
Escribe un artículo completo, detallado y profesional basado en este titular y resumen:

TITULAR: {title}
RESUMEN: {summary}
FUENTE ORIGINAL REFERENCIAL: {source}
CATEGORÍA: {category}

Instrucciones:
1. Redacta el contenido completo de la noticia (mínimo 300 palabras).
2. Usa un tono periodístico, neutral y formal.
3. Estructura: Introducción fuerte, Desarrollo de los hechos, Contexto político, y Conclusión.
4. Usa formato Markdown (h2 para subtítulos, negritas para énfasis).
5. NO inventes hechos falsos, apégate al contexto del resumen y usa conocimiento general de la política peruana actual para dar contexto.
6. NO incluyas enlaces en el cuerpo del texto, solo redacción.
"""


def local_now(timezone: str = "America/Lima") -> datetime:
    """Current time in the newsroom's timezone, UTC if the zone is unknown."""
    try:
        return datetime.now(ZoneInfo(timezone))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {timezone!r}, using UTC")
        return datetime.now(ZoneInfo("UTC"))


def format_date_es(moment: datetime) -> str:
    """e.g. 'lunes, 19 de octubre de 2026'."""
    weekday = WEEKDAYS[moment.weekday()]
    month = MONTHS[moment.month - 1]
    return f"{weekday}, {moment.day} de {month} de {moment.year}"


def format_time_es(moment: datetime) -> str:
    return moment.strftime("%H:%M:%S")


def build_feed_prompt(
    category,
    query: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Build the feed instruction for a category or free-text query.

    The front page without a query asks for 4 items in each of the five
    sub-categories; anything else asks for at least 20 items on one topic.
    """
    now = now or local_now()
    date, time = format_date_es(now), format_time_es(now)
    label = category_label(category)

    if label == NewsCategory.PORTADA.value and not query:
        return FRONT_PAGE_PROMPT.format(date=date, time=time)

    return TOPIC_PROMPT.format(
        date=date,
        time=time,
        context=query or label,
        category=label,
    )


def build_article_prompt(article) -> str:
    return ARTICLE_PROMPT.format(
        title=article.title,
        summary=article.summary,
        source=article.source,
        category=article.category,
    )
