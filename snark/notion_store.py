"""Notion database query wrapper.

Read-only queries against one database: an "any checkbox ticked" sample
for the done estimate and a per-class "checkbox not ticked" sample for
pending items. Every call is bounded by one overall deadline covering
connect and body download, and never raises to the caller; failures
come back inside a QueryOutcome.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from .errors import UpstreamError, UpstreamTimeout, truncate_body
from .models import DONE_SAMPLE_CAP, ClassMapping
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
DEFAULT_TIMEOUT = 6.0
READ_CHUNK_BYTES = 8192


@dataclass(frozen=True)
class QueryOutcome:
    """Records returned by one query, or the reason there are none."""
    records: tuple = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def count(self) -> int:
        return len(self.records)


def checkbox_filter(field: str, checked: bool) -> Dict[str, Any]:
    return {'property': field, 'checkbox': {'equals': checked}}


def any_checked_filter(mappings: Sequence[ClassMapping]) -> Dict[str, Any]:
    """Filter matching rows where any mapped checkbox is ticked."""
    if len(mappings) == 1:
        return checkbox_filter(mappings[0].checkbox_field, True)
    return {'or': [checkbox_filter(m.checkbox_field, True) for m in mappings]}


def pending_filter(checkbox_field: str, text_field: str, require_text: bool = False) -> Dict[str, Any]:
    """Filter matching rows whose checkbox is not ticked.

    With `require_text`, the class text column must also be non-empty.
    """
    unchecked = checkbox_filter(checkbox_field, False)
    if not require_text:
        return unchecked
    return {'and': [unchecked, {'property': text_field, 'rich_text': {'is_not_empty': True}}]}


class NotionTaskStore:
    """Query client for one Notion database."""

    def __init__(self, token: str, database_id: str, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None, attempts: int = 1,
                 clock: Callable[[], float] = time.monotonic):
        """Initialize the store client.

        Args:
            token: Notion integration token
            database_id: Database to query
            timeout: Overall deadline per call in seconds
            session: HTTP session (injectable for tests)
            attempts: Calls per query before giving up
            clock: Monotonic time source for the deadline
        """
        self.token = token
        self.database_id = database_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.attempts = attempts
        self.clock = clock

    def close(self):
        self.session.close()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {self.token}",
            'Notion-Version': NOTION_VERSION,
            'Content-Type': 'application/json',
        }

    def count_any_checked(self, mappings: Sequence[ClassMapping],
                          sample_cap: int = DONE_SAMPLE_CAP) -> QueryOutcome:
        """Sample rows where any mapped checkbox is ticked.

        The count of the returned sample is an estimate capped at
        `sample_cap`, not a true total. No query is made for an empty
        mapping list.
        """
        if not mappings:
            return QueryOutcome()
        body = {
            'filter': any_checked_filter(mappings),
            'page_size': max(1, min(sample_cap, DONE_SAMPLE_CAP)),
        }
        return self._run('done sample', body)

    def query_pending(self, checkbox_field: str, text_field: str, due_field: Optional[str] = None,
                      sample_cap: int = 5, require_text: bool = False) -> QueryOutcome:
        """Sample unticked rows for one class, earliest due date first."""
        body = {
            'filter': pending_filter(checkbox_field, text_field, require_text),
            'page_size': sample_cap,
        }
        if due_field:
            body['sorts'] = [{'property': due_field, 'direction': 'ascending'}]
        return self._run(f"pending '{checkbox_field}'", body)

    def _run(self, label: str, body: Dict[str, Any]) -> QueryOutcome:
        outcome = retry_with_backoff(lambda attempt: self._query(body), attempts=self.attempts,
                                     label=f"Notion {label}")
        if not outcome.ok:
            logger.warning(f"Notion {label} degraded to empty: {outcome.error}")
            return QueryOutcome(records=(), error=outcome.error)
        return QueryOutcome(records=tuple(outcome.value))

    def _query(self, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        """POST a database query and return its result list.

        The requests timeout only bounds each connect or socket read, so
        the body is streamed and the elapsed time checked per chunk.

        Raises:
            UpstreamTimeout: The call exceeded the deadline
            UpstreamError: Transport failure, non-2xx status or error payload
        """
        url = f"{NOTION_API_URL}/databases/{self.database_id}/query"
        started = self.clock()
        try:
            response = self.session.post(url, headers=self.headers, json=body, timeout=self.timeout,
                                         stream=True)
            text = self._read_text(response, started)
        except requests.Timeout as e:
            raise UpstreamTimeout('Notion', self.timeout) from e
        except requests.RequestException as e:
            raise UpstreamError('Notion', f"request failed: {e.__class__.__name__}") from e

        if response.status_code >= 300:
            raise UpstreamError('Notion', 'query rejected', status_code=response.status_code, body=text)
        try:
            payload = json.loads(text)
        except ValueError as e:
            raise UpstreamError('Notion', 'returned invalid JSON', body=text) from e

        if not isinstance(payload, dict):
            raise UpstreamError('Notion', 'returned an unexpected payload')
        if payload.get('object') == 'error':
            raise UpstreamError('Notion', payload.get('code', 'error'),
                                status_code=payload.get('status'),
                                body=truncate_body(payload.get('message')))
        results = payload.get('results') or []
        logger.debug(f"Notion query returned {len(results)} rows")
        return results

    def _read_text(self, response: requests.Response, started: float) -> str:
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=READ_CHUNK_BYTES):
                if self.clock() - started > self.timeout:
                    raise UpstreamTimeout('Notion', self.timeout)
                chunks.append(chunk)
        finally:
            response.close()
        if self.clock() - started > self.timeout:
            raise UpstreamTimeout('Notion', self.timeout)
        return b''.join(chunks).decode(response.encoding or 'utf-8', errors='replace')
