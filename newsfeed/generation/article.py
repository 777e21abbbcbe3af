"""Full-article body generation with templated fallbacks."""

import logging

from newsfeed.errors import MissingCredentialError, is_quota_error
from newsfeed.generation.prompts import build_article_prompt
from newsfeed.models.schemas import Article

logger = logging.getLogger(__name__)

MISSING_KEY_TEXT = "API Key no disponible para generar el artículo completo."
EMPTY_RESPONSE_TEXT = "No se pudo generar el artículo."

HIGH_DEMAND_TEMPLATE = """
## Alta Demanda de Servicios

Lo sentimos, nuestros servidores de redacción con IA están experimentando una carga inusual en este momento.

**Resumen Original:**
{summary}

El sistema reintentará conectar en breve para ofrecerle el análisis completo.
"""

GENERIC_ERROR_TEMPLATE = """
## Error de Generación

Lo sentimos, no pudimos redactar el artículo completo en este momento.

**Resumen Original:**
{summary}

Inténtelo de nuevo en unos minutos.
"""


class ArticleBodyGenerator:
    """Writes a full Markdown article for a feed item. Never raises."""

    def __init__(self, client):
        self.client = client

    async def generate_body(self, article: Article) -> str:
        """
        Generate the article body.

        Args:
            article: The feed item to expand.

        Returns:
            Generated Markdown, or a templated explanation when generation is
            unavailable or fails.
        """
        if not self.client.is_configured:
            return MISSING_KEY_TEXT

        try:
            text = await self.client.generate(build_article_prompt(article), use_search=False)
            return text or EMPTY_RESPONSE_TEXT
        except MissingCredentialError:
            return MISSING_KEY_TEXT
        except Exception as e:
            logger.error(f"Error generating full article: {e}")
            if is_quota_error(str(e)):
                return HIGH_DEMAND_TEMPLATE.format(summary=article.summary)
            return GENERIC_ERROR_TEMPLATE.format(summary=article.summary)
