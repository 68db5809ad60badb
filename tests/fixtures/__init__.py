# tests/fixtures/__init__.py
"""
Test fixtures for the timeline pipeline.

Factory functions for creating test data:
- make_feature_entry()
- make_atom_entry()
- make_atom_feed()
- make_rss_feed()
"""

from typing import Iterable, Optional

from baseline_timeline.models.timeline import FeatureEntry

WIDELY_URL = "https://feeds.example/widely-available.xml"
NEWLY_URL = "https://feeds.example/newly-available.xml"


def make_feature_entry(
    entry_id: str = "grid",
    title: str = "Grid",
    link: str = "https://feeds.example/features/grid",
    updated: str = "2024-01-01T00:00:00Z",
    summary_html: str = "",
    summary_text: str = "",
) -> FeatureEntry:
    """Factory function to create a canonical FeatureEntry."""
    return FeatureEntry(
        id=entry_id,
        title=title,
        link=link,
        updated=updated,
        summary_html=summary_html,
        summary_text=summary_text,
    )


def make_atom_entry(
    entry_id: str = "grid",
    title: str = "Grid",
    href: str = "https://feeds.example/features/grid",
    updated: Optional[str] = "2024-01-01T00:00:00Z",
    content: str = "&lt;p&gt;Grid layout&lt;/p&gt;",
) -> str:
    """Factory function to create one Atom <entry> element."""
    updated_xml = f"<updated>{updated}</updated>" if updated is not None else ""
    return f"""
      <entry>
        <id>{entry_id}</id>
        <title>{title}</title>
        <link rel="alternate" href="{href}" />
        {updated_xml}
        <content type="html">{content}</content>
      </entry>
    """


def make_atom_feed(entries: Iterable[str] = ()) -> str:
    """Factory function to create an Atom document around entry snippets."""
    body = "".join(entries)
    return f"""<?xml version="1.0" encoding="utf-8"?>
    <feed xmlns="http://www.w3.org/2005/Atom">
      <title>Baseline</title>
      <link rel="self" href="https://feeds.example/feed.xml" />
      {body}
    </feed>
    """


def make_rss_feed(items: Iterable[str] = ()) -> str:
    """Factory function to create an RSS 2.0 document around <item> snippets."""
    body = "".join(items)
    return f"""<?xml version="1.0" encoding="utf-8"?>
    <rss version="2.0">
      <channel>
        <title>Baseline</title>
        {body}
      </channel>
    </rss>
    """
