"""Block types documented by the public API.

Internal records use many more types (``page``, ``text``, ``header``,
``collection_view_page``, ...).  Comparing a page's block types against
this list shows which ones the public API would not expose as-is.
"""

from __future__ import annotations

PUBLIC_API_BLOCK_TYPES: tuple[str, ...] = (
    "audio",
    "bookmark",
    "breadcrumb",
    "bulleted_list_item",
    "callout",
    "child_database",
    "child_page",
    "code",
    "column",
    "column_list",
    "divider",
    "embed",
    "equation",
    "file",
    "heading_1",
    "heading_2",
    "heading_3",
    "image",
    "link_preview",
    "link_to_page",
    "numbered_list_item",
    "paragraph",
    "pdf",
    "quote",
    "synced_block",
    "table",
    "table_of_contents",
    "table_row",
    "template",
    "to_do",
    "toggle",
    "unsupported",
    "video",
)

_PUBLIC_API_BLOCK_TYPE_SET: frozenset[str] = frozenset(PUBLIC_API_BLOCK_TYPES)


def is_public_api_block_type(block_type: str) -> bool:
    """True if *block_type* (already lowercased) is documented by the public API."""
    return block_type in _PUBLIC_API_BLOCK_TYPE_SET
