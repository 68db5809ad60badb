from __future__ import annotations

from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Any, List, Mapping, Optional

from baseline_timeline.models.timeline import FeatureEntry
from baseline_timeline.services.feed_extractors import extract_content, extract_link, strip_html

# Atom <content>, Atom <summary>, RSS <description>
SUMMARY_FIELDS = ("content", "summary", "description")


def _first_present(entry: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = entry.get(key)
        if value:
            return value
    return None


def _text_field(entry: Mapping[str, Any], *keys: str) -> str:
    value = _first_present(entry, *keys)
    if value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return extract_content(value)


def _rfc822_to_iso(value: str) -> str:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return value
    if parsed is None:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _extract_updated(entry: Mapping[str, Any]) -> str:
    updated = _text_field(entry, "updated", "published")
    if updated:
        return updated
    pub_date = _text_field(entry, "pubDate")
    if pub_date:
        return _rfc822_to_iso(pub_date)
    return ""


def normalize_entry(entry: Any) -> Optional[FeatureEntry]:
    """
    Build a FeatureEntry from one parsed entry node.
    Returns None when the node is not a mapping or lacks id, title or link.
    """
    if not isinstance(entry, Mapping):
        return None

    link = extract_link(entry.get("link"))
    summary_html = extract_content(_first_present(entry, *SUMMARY_FIELDS))
    summary_text = strip_html(summary_html)

    entry_id = _text_field(entry, "id", "guid")
    title = _text_field(entry, "title")

    if not entry_id or not title or not link:
        return None

    return FeatureEntry(
        id=entry_id,
        title=title,
        link=link,
        updated=_extract_updated(entry),
        summary_html=summary_html,
        summary_text=summary_text,
    )


def normalize_entries(raw_entries: Any) -> List[FeatureEntry]:
    """
    Normalize a feed's entry node(s) into FeatureEntry records.

    Accepts None, a single entry mapping or a list of entries. Invalid entries
    are filtered out silently; the order of the remaining ones is preserved.
    """
    if not raw_entries:
        return []

    entries = raw_entries if isinstance(raw_entries, list) else [raw_entries]

    items: List[FeatureEntry] = []
    for entry in entries:
        item = normalize_entry(entry)
        if item is not None:
            items.append(item)
    return items
