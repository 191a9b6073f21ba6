"""Aggregate pending and done state across mapped classes."""

import logging
from typing import List, Optional, Sequence

from .config import SnarkConfig
from .models import AggregatedContext, ClassMapping, ClassSummary
from .notion_store import NotionTaskStore
from .reason import ContextReason
from .resolver import resolve_item

logger = logging.getLogger(__name__)


class ContextAggregator:
    """Builds an AggregatedContext from the Notion database.

    Classes are queried one after another in mapping order. A failing
    class is recorded and skipped; it never stops the others.
    """

    def __init__(self, config: SnarkConfig, store: Optional[NotionTaskStore] = None):
        self.config = config
        self._store = store

    def _new_store(self) -> NotionTaskStore:
        return NotionTaskStore(
            token=self.config.notion_token,
            database_id=self.config.notion_db_id,
            timeout=self.config.notion_timeout,
        )

    def aggregate(self, mappings: Sequence[ClassMapping]) -> AggregatedContext:
        """Collect per-class pending items and the done estimate.

        Missing credentials short-circuit to an empty MISSING_CONFIG
        context without touching the network. Never raises.

        Args:
            mappings: Parsed class mappings, in display order

        Returns:
            AggregatedContext
        """
        if not self.config.has_notion:
            logger.info("Notion token or database id missing, skipping task store")
            return AggregatedContext.missing_config()

        # A store built here is private to this call and closed afterwards
        store = self._store or self._new_store()
        try:
            return self._aggregate(store, mappings)
        finally:
            if store is not self._store:
                store.close()

    def _aggregate(self, store: NotionTaskStore, mappings: Sequence[ClassMapping]) -> AggregatedContext:
        failures: List[str] = []
        try:
            done = store.count_any_checked(mappings, sample_cap=self.config.done_sample)
        except Exception as e:
            logger.exception(f"Done sample crashed: {e}")
            done = None
            failures.append(f"done: {e}")
        else:
            if not done.ok:
                failures.append(f"done: {done.error}")
        done_approx = min(done.count, self.config.done_sample) if done is not None else 0

        per_class: List[ClassSummary] = []
        for mapping in mappings:
            summary = self._summarize(store, mapping, failures)
            if summary is not None:
                per_class.append(summary)

        reason = ContextReason.OK if per_class else ContextReason.NOTION_EMPTY_OR_MISMATCH
        logger.info(f"Aggregated {len(per_class)}/{len(mappings)} classes, done approx {done_approx}")
        return AggregatedContext(
            per_class=tuple(per_class),
            done_approx=done_approx,
            reason=reason,
            failures=tuple(failures),
        )

    def _summarize(self, store: NotionTaskStore, mapping: ClassMapping,
                   failures: List[str]) -> Optional[ClassSummary]:
        """Query and resolve one class; None when it yields nothing."""
        config = self.config
        try:
            outcome = store.query_pending(
                mapping.checkbox_field,
                mapping.text_field,
                due_field=config.due_prop or None,
                sample_cap=config.page_size,
                require_text=config.require_class_text,
            )
            if not outcome.ok:
                failures.append(f"{mapping.text_field}: {outcome.error}")
                return None
            items = tuple(
                resolve_item(record, mapping.text_field, config.title_prop, config.due_prop or None)
                for record in outcome.records[:config.page_size]
            )
        except Exception as e:
            logger.exception(f"Pending query for {mapping.text_field} crashed: {e}")
            failures.append(f"{mapping.text_field}: {e}")
            return None

        if not items:
            return None
        if config.due_prop:
            # Stable, so same-day items keep the store's order; undated last
            items = tuple(sorted(items, key=lambda item: (item.due_date is None, item.due_date or '')))
        return ClassSummary(class_name=mapping.text_field, items=items)
