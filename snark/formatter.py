"""Render an aggregated context as a compact prompt line."""

from .models import AggregatedContext, PendingItem

ITEMS_PER_CLASS = 2
MAX_NAME_CHARS = 60
MAX_CONTEXT_CHARS = 500
EMPTY_CONTEXT = "No pending items found or mapping empty."


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 3].rstrip() + "..."


def render_item(item: PendingItem) -> str:
    name = _clip(item.name, MAX_NAME_CHARS)
    if not item.due_date:
        return name
    return f"{name} (due {item.due_date[:10]})"


def render_context(context: AggregatedContext) -> str:
    """Render per-class pending items on one line.

    Shows at most two items per class and never exceeds MAX_CONTEXT_CHARS.
    An empty context renders as EMPTY_CONTEXT.
    """
    parts = []
    for summary in context.per_class:
        if not summary.items:
            continue
        short_list = "; ".join(render_item(item) for item in summary.items[:ITEMS_PER_CLASS])
        parts.append(f"{summary.class_name}: {short_list}")

    if not parts:
        return EMPTY_CONTEXT

    text = f"Done approx: {context.done_approx}. Pending by class → {' | '.join(parts)}"
    return _clip(text, MAX_CONTEXT_CHARS)
