"""Deterministic image assignment for generated news items.

The generation endpoint returns text only, so every article gets a stock
photo picked from a topical pool. The pool is chosen by keyword routing on
the title and category; the photo inside the pool is chosen by a 32-bit
string hash of the title, so the same title and category always map to the
same image without storing anything.
"""

from typing import Dict, List, Optional, Sequence, Tuple

_UNSPLASH = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&q=80&w={}"


def _photos(width: int, *ids: str) -> List[str]:
    return [_UNSPLASH.format(photo_id, width) for photo_id in ids]


IMAGE_POOLS: Dict[str, List[str]] = {
    "congreso": _photos(
        800,
        "1555848962-6e79363ec58f",  # government building
        "1577962917302-cd874c4e31d2",  # formal hall
        "1541872703-74c5963631df",  # classical building
    ),
    "palacio": _photos(
        800,
        "1529108190281-9a4f620bc2d8",  # Lima architecture
        "1569937756447-e2845e6f9d95",  # flag
        "1590942109862-95d13e6252d5",  # cityscape
    ),
    "justicia": _photos(
        800,
        "1589829085413-56de8ae18c73",  # gavel
        "1505664194779-8beaceb93744",  # columns
        "1589994965851-a08a09c96962",  # scales
    ),
    "economia": _photos(
        800,
        "1611974765270-ca1258634369",  # graph
        "1526304640581-d334cdbbf45e",  # money
        "1518186285589-2f7649de83e0",  # coins
        "1554224155-6726b3ff858f",  # accounting
    ),
    "policia": _photos(
        800,
        "1473186505569-9c61870c11f9",  # siren
        "1551882547-ff40c63fe5fa",  # emergency lights
        "1606332025129-5b6f3d22c57e",  # security tape
    ),
    "protesta": _photos(
        800,
        "1642080342386-423f540a97b5",  # crowd
        "1531324916406-07d15d999016",  # people walking
    ),
    "elecciones": _photos(
        800,
        "1540910419868-474947cebacb",  # hand voting
        "1573496359142-b8d87734a5a2",  # discussion
        "1609252553023-244b2108d01c",  # checkbox
    ),
    "sociales": _photos(
        800,
        "1491438590914-bc09fcaaf77a",  # people
        "1517486808906-6ca8b3f04846",  # group
        "1576091160399-112ba8d25d1d",  # health
    ),
    "general": _photos(
        1200,
        "1504711434969-e33886168f5c",  # newspaper
        "1495020686659-d24098c20cc8",  # newspaper stack
        "1585829365295-ab7cd400c167",  # broadcast
    ),
}

# (pool, category keywords, title keywords), checked in order.
KEYWORD_ROUTES: Sequence[Tuple[str, Tuple[str, ...], Tuple[str, ...]]] = (
    ("elecciones", ("elecciones",), ("voto", "onpe", "jne")),
    ("policia", ("seguridad",), ("policia", "crimen", "estado de emergencia")),
    ("sociales", ("sociales",), ("salud", "educacion")),
    ("congreso", (), ("congreso", "legislativo", "parlamento")),
    ("palacio", (), ("dina", "boluarte", "ejecutivo", "gobierno")),
    ("justicia", (), ("fiscal", "juez", "justicia", "policia")),
    ("economia", (), ("sol", "bcr", "economia", "dolar", "mineria")),
    ("protesta", (), ("marcha", "protesta")),
    # Category-only fallbacks
    ("congreso", ("congreso", "política"), ()),
    ("economia", ("economia",), ()),
    ("justicia", ("justicia",), ()),
)

_INT32 = 1 << 32


def _to_int32(value: int) -> int:
    value %= _INT32
    return value - _INT32 if value >= (1 << 31) else value


def _utf16_code_units(text: str) -> List[int]:
    data = text.encode("utf-16-le")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]


def title_hash(text: str) -> int:
    """Polynomial string hash matching `charCode + ((hash << 5) - hash)` in JS.

    The shift operates on the 32-bit wrapped value while the subtraction and
    addition do not wrap, so the result can leave the int32 range by up to
    one extra bit. Iterates UTF-16 code units like charCodeAt.
    """
    value = 0
    for unit in _utf16_code_units(text):
        shifted = _to_int32(_to_int32(value) << 5)
        value = unit + (shifted - value)
    return value


def index_for_title(title: Optional[str], size: int) -> int:
    """Map a title to a stable index in [0, size)."""
    return abs(title_hash(title or "default")) % size


def pool_for(title: Optional[str], category: Optional[str]) -> str:
    """Name of the image pool selected by keyword routing."""
    t = (title or "").lower()
    c = (category or "").lower()
    for pool, category_words, title_words in KEYWORD_ROUTES:
        if any(w in c for w in category_words) or any(w in t for w in title_words):
            return pool
    return "general"


def image_for(title: Optional[str], category: Optional[str]) -> str:
    """Pick a stock image URL for an article. Pure and total."""
    pool = IMAGE_POOLS[pool_for(title, category)]
    return pool[index_for_title((title or "").lower(), len(pool))]
