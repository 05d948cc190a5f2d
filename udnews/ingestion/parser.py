"""Tolerant RSS item scanner.

Feeds in the wild are frequently not well-formed XML (stray ampersands,
unclosed tags, HTML pasted into descriptions), so items are located by
their start/end markers rather than by a validating XML parser. Anything
that cannot be made sense of is skipped; malformed input yields fewer
items, never an exception.
"""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Iterator, List, Optional

import pendulum

from .models import ParsedItem

HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&#x27;": "'",
    "&#x2F;": "/",
}

DATE_TAGS = ("pubDate", "dc:date", "published", "updated")

_ENTITY_RE = re.compile(r"&[#\w]+;")
_ATTR_RE = re.compile(r"""([\w:.-]+)\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_CDATA_START = "<![CDATA["
_CDATA_END = "]]>"
_CDATA_BLOCK = re.compile(r"<!\[CDATA\[.*?\]\]>", re.DOTALL)


def _start_tag(name: str) -> "re.Pattern[str]":
    # Matches <name>, <name attr="..."> and <name/>, but not <names>
    return re.compile(r"<" + re.escape(name) + r"(?=[\s>/])[^>]*>", re.IGNORECASE)


def _end_tag(name: str) -> "re.Pattern[str]":
    return re.compile(r"</" + re.escape(name) + r"\s*>", re.IGNORECASE)


_ITEM_START = _start_tag("item")
_ITEM_END = _end_tag("item")
_ENCLOSURE = _start_tag("enclosure")
_THUMBNAIL = _start_tag("media:thumbnail")
_TAG_CACHE: Dict[str, tuple] = {}


def _tag_patterns(name: str) -> tuple:
    patterns = _TAG_CACHE.get(name)
    if patterns is None:
        patterns = (_start_tag(name), _end_tag(name))
        _TAG_CACHE[name] = patterns
    return patterns


def decode_entities(text: str) -> str:
    """Decode the fixed entity table; unknown entities are left as-is."""
    return _ENTITY_RE.sub(lambda m: HTML_ENTITIES.get(m.group(0), m.group(0)), text)


def unwrap_cdata(text: str) -> str:
    """Replace character-data blocks with their literal contents."""
    parts: List[str] = []
    pos = 0
    while True:
        start = text.find(_CDATA_START, pos)
        if start < 0:
            parts.append(text[pos:])
            break
        parts.append(text[pos:start])
        content_start = start + len(_CDATA_START)
        end = text.find(_CDATA_END, content_start)
        if end < 0:
            # Unterminated block: keep whatever follows the opener
            parts.append(text[content_start:])
            break
        parts.append(text[content_start:end])
        pos = end + len(_CDATA_END)
    return "".join(parts)


def _mask_cdata(text: str) -> str:
    # Same length as the input, so offsets found in the mask index the original
    return _CDATA_BLOCK.sub(lambda m: " " * len(m.group(0)), text)


def iter_item_blocks(text: str) -> Iterator[str]:
    """
    Yield the inner text of each item block in document order.

    A block whose end marker is preceded by another item start is
    treated as unterminated and skipped; scanning resumes at the inner
    start. A start marker with no end marker ends the scan. Markers
    inside character-data blocks are ignored.
    """
    masked = _mask_cdata(text)
    pos = 0
    while True:
        start = _ITEM_START.search(masked, pos)
        if start is None:
            return
        if start.group(0).endswith("/>"):
            pos = start.end()
            continue

        end = _ITEM_END.search(masked, start.end())
        if end is None:
            return

        nested = _ITEM_START.search(masked, start.end(), end.start())
        if nested is not None:
            pos = nested.start()
            continue

        yield text[start.end():end.start()]
        pos = end.end()


def element_text(block: str, name: str) -> Optional[str]:
    """
    Return the trimmed text of the first <name> element in a block.

    CDATA-wrapped and literal text resolve to the same string. Returns
    None when the element is missing or never closed. Tags inside
    character-data blocks do not count.
    """
    start_re, end_re = _tag_patterns(name)
    masked = _mask_cdata(block)
    start = start_re.search(masked)
    if start is None:
        return None
    if start.group(0).endswith("/>"):
        return ""

    end = end_re.search(masked, start.end())
    if end is None:
        return None

    return unwrap_cdata(block[start.end():end.start()]).strip()


def tag_attributes(tag: str) -> Dict[str, str]:
    """Parse attributes of a start tag into a lower-cased name map."""
    attrs = {}
    for match in _ATTR_RE.finditer(tag):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attrs[match.group(1).lower()] = value
    return attrs


def extract_image_url(block: str) -> Optional[str]:
    """Find an image enclosure, falling back to a media thumbnail."""
    block = _mask_cdata(block)
    for match in _ENCLOSURE.finditer(block):
        attrs = tag_attributes(match.group(0))
        url = (attrs.get("url") or "").strip()
        if url and attrs.get("type", "").lower().startswith("image"):
            return url

    for match in _THUMBNAIL.finditer(block):
        url = (tag_attributes(match.group(0)).get("url") or "").strip()
        if url:
            return url

    return None


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an RFC 2822 or ISO 8601 style date.

    Returns:
        An aware datetime (naive values are taken as UTC), or None
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    parsed: Optional[datetime]
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        try:
            parsed = pendulum.parse(value, strict=False)
        except (ValueError, TypeError, OverflowError):
            return None
        if not isinstance(parsed, datetime):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_item(block: str, fallback_time: datetime) -> Optional[ParsedItem]:
    """Build a ParsedItem from one item block, or None if unusable."""
    title = element_text(block, "title")
    link = element_text(block, "link")
    if title is None or not link:
        return None

    description = element_text(block, "description") or ""

    published_at = None
    for tag in DATE_TAGS:
        published_at = parse_date(element_text(block, tag))
        if published_at is not None:
            break

    return ParsedItem(
        title=decode_entities(title),
        description=decode_entities(description),
        link=link,
        image_url=extract_image_url(block),
        published_at=published_at or fallback_time,
    )


def parse_feed(text: Optional[str], now: Optional[datetime] = None) -> Iterator[ParsedItem]:
    """
    Lazily parse feed text into items, in document order.

    Each call starts a fresh scan, so the result can be recomputed at
    will. Items without a parsable date get ``now`` (default: the time
    iteration starts).
    """
    if not text:
        return
    fallback_time = now or datetime.now(timezone.utc)

    for block in iter_item_blocks(text):
        item = parse_item(block, fallback_time)
        if item is not None:
            yield item
