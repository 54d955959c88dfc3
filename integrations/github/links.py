"""Parsing of RFC 5988 ``Link`` headers used by GitHub for pagination."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from .models import Link, LinkSet

# Entries are separated by commas that precede the next "<url>"
_ENTRY_SEPARATOR = re.compile(r",(?=\s*<)")
_ENTRY = re.compile(r"^\s*<([^<>]*)>(.*)$", re.DOTALL)
_REL_PARAM = re.compile(r';\s*rel\s*=\s*(?:"([^"]*)"|([^\s;,"]+))', re.IGNORECASE)


def _page_number(url: str) -> int | None:
    """Return the ``page`` query parameter of *url* as an int, if any."""
    values = parse_qs(urlparse(url).query).get("page")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


def parse_link_header(value: str | None) -> LinkSet:
    """Decode a ``Link`` header into a mapping of relation name to :class:`Link`.

    Args:
        value: Raw header value, e.g.
            ``<https://api.github.com/x?page=2>; rel="next", <...?page=5>; rel="last"``

    Returns:
        Mapping keyed by relation name. Empty when the header is missing,
        which callers treat as a single page result. Entries without a
        ``<url>`` or a ``rel`` parameter are skipped and never change the
        entries around them.
    """
    if not value:
        return {}

    links: LinkSet = {}
    for entry in _ENTRY_SEPARATOR.split(value):
        match = _ENTRY.match(entry)
        if not match:
            continue
        url = match.group(1).strip()
        rel = _REL_PARAM.search(match.group(2))
        if not url or not rel:
            continue
        # A single entry may carry several space separated relations
        for name in (rel.group(1) or rel.group(2) or "").split():
            links[name] = Link(rel=name, url=url, page=_page_number(url))
    return links
