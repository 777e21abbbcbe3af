"""Placeholder feeds for when neither live nor cached data is available."""

import re
import time
from typing import Callable, List

from newsfeed.enrichment.images import image_for
from newsfeed.models.schemas import (
    SUBCATEGORIES,
    Article,
    Feed,
    NewsCategory,
    category_label,
)

ITEMS_PER_CATEGORY = 6
MOCK_SOURCE = "Punto Pe Alerta"
MOCK_PUBLISHED = "En desarrollo"
MOCK_HASHTAGS = ["#AltaDemanda", "#Actualizando", "#PuntoPeEnVivo", "#AlertaInformativa"]


class MockSynthesizer:
    """Builds clearly-labelled degraded-service feeds. Never fails."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock

    def _batch(self, label: str, stamp: int) -> List[Article]:
        slug = re.sub(r"\s", "", label)
        return [
            Article(
                id=f"mock-{slug}-{i}-{stamp}",
                title=f"Cobertura en desarrollo: {label} en el Perú",
                summary=(
                    "Estamos experimentando una alta demanda en nuestros servidores de IA. "
                    f"Mostrando contenido preliminar sobre {label}. "
                    "La información detallada se actualizará automáticamente en breve."
                ),
                source=MOCK_SOURCE,
                url="#",
                image_url=image_for(label, label),
                category=label,
                published_time=MOCK_PUBLISHED,
            )
            for i in range(1, ITEMS_PER_CATEGORY + 1)
        ]

    def synthesize(self, category) -> Feed:
        """Mock feed for one sub-category, or all five for the front page."""
        label = category_label(category)
        stamp = int(self._clock() * 1000)
        articles: List[Article] = []
        for sub in SUBCATEGORIES:
            if label != NewsCategory.PORTADA.value and label != sub.value:
                continue
            articles.extend(self._batch(sub.value, stamp))
        return Feed(articles=articles, hashtags=list(MOCK_HASHTAGS))
