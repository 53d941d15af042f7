"""Normalization of upstream citation shapes.

Upstream chunks report sources in more than one shape:

    legacy:  {"groundingAttribution": {"web": {"uri": ..., "title": ...}}}
    newer:   {"url": ..., "title": ..., "citationNumber": ...}

Either shape, an already-normalized ``{url, title, index}`` mapping, or an
attribute-style object (such as agno's ``UrlCitation``) is accepted. Items
are resolved one by one by the fields they carry and converted to
:class:`~aether.models.schemas.Citation` immediately, so no other module
ever sees the raw shapes.
"""

import logging
from collections.abc import Iterable
from typing import Any

from aether.models.schemas import Citation

logger = logging.getLogger(__name__)


def _field(item: Any, name: str) -> Any:
    """Read a field from a mapping or an object, None when absent."""
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_index(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def normalize_citation(item: Any, position: int) -> Citation:
    """Normalize a single citation.

    Args:
        item: One upstream citation in any supported shape.
        position: 1-based position of the item in its list.

    Returns:
        The canonical citation. Missing fields become empty strings and a
        missing number falls back to ``position``.
    """
    attribution = _field(item, "groundingAttribution")
    if attribution is not None:
        web = _field(attribution, "web")
        return Citation(
            url=_as_text(_field(web, "uri")),
            title=_as_text(_field(web, "title")),
            index=position,
        )

    number = _field(item, "citationNumber")
    if number is None:
        number = _field(item, "index")
    return Citation(
        url=_as_text(_field(item, "url")),
        title=_as_text(_field(item, "title")),
        index=_as_index(number, position),
    )


def normalize_citations(raw: Iterable[Any] | None) -> list[Citation]:
    """Normalize a list of upstream citations.

    Args:
        raw: Upstream citations, or None.

    Returns:
        Canonical citations in input order. Never raises for odd items;
        they degrade to the fallback shape.
    """
    if not raw:
        return []
    return [normalize_citation(item, position) for position, item in enumerate(raw, start=1)]
