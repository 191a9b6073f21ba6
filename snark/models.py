"""Request-scoped data carried through the snark pipeline.

Nothing here outlives a single request.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .origin import RemarkOrigin
from .reason import ContextReason

DONE_SAMPLE_CAP = 100


@dataclass(frozen=True)
class ClassMapping:
    """One checkbox column paired with the text column describing its class."""
    checkbox_field: str
    text_field: str


@dataclass(frozen=True)
class PendingItem:
    """A resolved, not-yet-checked record.

    `due_date` is an ISO date (YYYY-MM-DD) or None.
    """
    name: str
    due_date: Optional[str] = None
    class_name: str = ""


@dataclass(frozen=True)
class ClassSummary:
    class_name: str
    items: Tuple[PendingItem, ...] = ()


@dataclass(frozen=True)
class AggregatedContext:
    """Pending items grouped by class plus an approximate done count.

    `done_approx` is the size of a capped sample, never an exact total.
    `failures` lists which queries degraded, for debug output only.
    """
    per_class: Tuple[ClassSummary, ...] = ()
    done_approx: int = 0
    reason: ContextReason = ContextReason.NOTION_EMPTY_OR_MISMATCH
    failures: Tuple[str, ...] = ()

    @classmethod
    def missing_config(cls) -> 'AggregatedContext':
        return cls(per_class=(), done_approx=0, reason=ContextReason.MISSING_CONFIG)

    def all_items(self) -> List[PendingItem]:
        """Flatten pending items in class order, then store order."""
        return [item for summary in self.per_class for item in summary.items]


@dataclass(frozen=True)
class GeneratedRemark:
    """Output of a remark generator.

    Only `text` is shown to non-debug callers. A remote failure leaves
    `text` as None and fills `error`.
    """
    text: Optional[str]
    origin: RemarkOrigin
    error: Optional[str] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return bool(self.text)
