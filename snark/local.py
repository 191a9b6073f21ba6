"""Deterministic template-based remark generator.

The same date, salt and context always give the same line, so the
widget shows one quip per day without storing anything.
"""

import hashlib
import logging
import random
from datetime import date
from typing import List, Optional, Tuple

from .generators import RemarkGenerator
from .models import AggregatedContext, GeneratedRemark, PendingItem
from .origin import RemarkOrigin
from .templates import POOLS

logger = logging.getLogger(__name__)

OVERDUE = 'overdue'
DUE_SOON = 'due_soon'
PENDING = 'pending'
EMPTY_DAY = 'empty_day'
EMPTY_WORLD = 'empty_world'


def seed_for(date_seed: str, salt: str = "") -> int:
    """Stable integer seed from a date string and optional salt."""
    digest = hashlib.sha256(f"{date_seed}{salt or ''}".encode('utf-8')).hexdigest()
    return int(digest[:16], 16)


def day_offset(item: PendingItem, today: date) -> Optional[int]:
    """Days from today to the item's due date (negative when overdue)."""
    if not item.due_date:
        return None
    try:
        due = date.fromisoformat(item.due_date[:10])
    except ValueError:
        return None
    return (due - today).days


def pick_focus(items: List[PendingItem], today: date,
               rng: random.Random) -> Tuple[Optional[PendingItem], Optional[int]]:
    """Nearest upcoming item, else a random item, else nothing.

    Ties on the nearest offset go to the first item in aggregation order.
    """
    upcoming = []
    for index, item in enumerate(items):
        offset = day_offset(item, today)
        if offset is not None and offset >= 0:
            upcoming.append((offset, index, item))
    if upcoming:
        offset, _, item = min(upcoming, key=lambda entry: (entry[0], entry[1]))
        return item, offset
    if items:
        item = rng.choice(items)
        return item, day_offset(item, today)
    return None, None


def classify(focus: Optional[PendingItem], offset: Optional[int], rng: random.Random) -> str:
    if focus is not None and offset is not None and offset < 0:
        return OVERDUE
    if focus is not None and offset in (0, 1):
        return DUE_SOON
    if focus is not None:
        return PENDING
    return EMPTY_DAY if rng.random() < 0.5 else EMPTY_WORLD


def _plural_days(days: int) -> str:
    return "1 day" if days == 1 else f"{days} days"


def _plural_assignments(count: int) -> str:
    return "1 assignment" if count == 1 else f"{count} assignments"


class LocalGenerator(RemarkGenerator):
    """Picks a remark from template pools, seeded by the calendar date."""

    name = "local"

    def __init__(self, salt: str = ""):
        self.salt = salt

    def generate(self, context: AggregatedContext, context_text: str, today: date) -> GeneratedRemark:
        return self.compose(context, today.isoformat(), self.salt)

    def compose(self, context: AggregatedContext, date_seed: str, salt: str = "") -> GeneratedRemark:
        """Build the day's remark.

        Args:
            context: Aggregated task context
            date_seed: Calendar date as YYYY-MM-DD
            salt: Optional string mixed into the seed

        Returns:
            GeneratedRemark with origin LOCAL_TEMPLATE
        """
        rng = random.Random(seed_for(date_seed, salt))
        today = date.fromisoformat(date_seed[:10])
        items = context.all_items()

        focus, offset = pick_focus(items, today, rng)
        bucket = classify(focus, offset, rng)
        template = rng.choice(POOLS[bucket])

        values = {'pending': _plural_assignments(len(items)), 'name': '', 'klass': '', 'when': '', 'late': ''}
        if focus is not None:
            values['name'] = focus.name
            values['klass'] = focus.class_name or 'The syllabus'
            if offset is not None:
                values['when'] = {0: 'today', 1: 'tomorrow'}.get(offset, f"in {_plural_days(abs(offset))}")
                values['late'] = _plural_days(abs(offset))
        text = template.format(**values)

        logger.debug(f"Local remark bucket={bucket} for {date_seed}")
        return GeneratedRemark(text=text, origin=RemarkOrigin.LOCAL_TEMPLATE, error=None, attempts=0)
