"""Turn raw Notion pages into pending items.

Name resolution falls back in three tiers: the class text column, then
the title column, then a synthesized label, so a name is never empty.
"""

from typing import Any, Dict, Optional

from .models import PendingItem


def _property(record: Any, field: Optional[str]) -> Dict[str, Any]:
    if not field or not isinstance(record, dict):
        return {}
    properties = record.get('properties')
    if not isinstance(properties, dict):
        return {}
    prop = properties.get(field)
    return prop if isinstance(prop, dict) else {}


def plain_text(record: Any, field: Optional[str], kind: str = 'rich_text') -> str:
    """Concatenate plain_text fragments of a rich_text or title property."""
    fragments = _property(record, field).get(kind) or []
    if not isinstance(fragments, list):
        return ""
    return "".join(
        str(fragment.get('plain_text') or '') for fragment in fragments if isinstance(fragment, dict)
    ).strip()


def extract_due_date(record: Any, field: Optional[str]) -> Optional[str]:
    """Return the YYYY-MM-DD start of a date property, or None.

    Only properties typed 'date' with a non-null start are accepted.
    """
    prop = _property(record, field)
    if prop.get('type') != 'date':
        return None
    date_value = prop.get('date')
    if not isinstance(date_value, dict):
        return None
    start = date_value.get('start')
    if not start or not isinstance(start, str):
        return None
    return start[:10]


def resolve_item(record: Any, text_field: str, title_field: Optional[str] = None,
                 due_field: Optional[str] = None) -> PendingItem:
    """Resolve one page into a PendingItem. Never raises, never returns an empty name.

    Args:
        record: Raw page object from a database query
        text_field: Class text column (also the class name)
        title_field: Title column used when the class text is empty
        due_field: Date column

    Returns:
        PendingItem
    """
    due_date = extract_due_date(record, due_field)

    name = plain_text(record, text_field, 'rich_text')
    if not name:
        name = plain_text(record, title_field, 'title')
    if not name:
        label = (text_field or '').strip() or 'Untitled'
        name = f"{label} assignment ({due_date})" if due_date else f"{label} assignment"

    return PendingItem(name=name, due_date=due_date, class_name=text_field)
