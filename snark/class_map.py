"""Parse the NOTION_CLASS_MAP setting.

Format: comma-separated `checkbox:text` pairs, for example
`S-A:NYP_1,E-A:Evidence,SC-A:State_and_Local_Tax`. Underscores become
spaces so values are easy to type into an environment variable.
"""

from typing import Dict, List

from .models import ClassMapping


def _split_pair(entry: str):
    checkbox, _, text = entry.partition(':')
    return checkbox.strip(), text.strip()


def _resolve(value: str) -> str:
    return value.replace('_', ' ').strip()


def parse_class_map(raw: str) -> List[ClassMapping]:
    """Parse a class map string into ordered mappings.

    Malformed entries (missing either side) and empty entries are skipped.
    Duplicates are kept in input order. Never raises.

    Args:
        raw: The configured string (may be empty or None)

    Returns:
        List of ClassMapping
    """
    if not raw:
        return []

    mappings = []
    for entry in raw.split(','):
        entry = entry.strip()
        if not entry:
            continue
        checkbox, text = _split_pair(entry)
        checkbox, text = _resolve(checkbox), _resolve(text)
        if not checkbox or not text:
            continue
        mappings.append(ClassMapping(checkbox_field=checkbox, text_field=text))
    return mappings


def describe_class_map(raw: str) -> List[Dict[str, str]]:
    """Show raw and resolved names for every non-empty entry, for debug output."""
    described = []
    for entry in (raw or '').split(','):
        entry = entry.strip()
        if not entry:
            continue
        checkbox, text = _split_pair(entry)
        described.append({
            'checkbox_raw': checkbox,
            'text_raw': text,
            'checkbox_resolved': _resolve(checkbox),
            'text_resolved': _resolve(text),
            'valid': bool(_resolve(checkbox) and _resolve(text)),
        })
    return described
