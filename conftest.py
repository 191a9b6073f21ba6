"""Shared test fixtures for the snark endpoint."""

import json
from typing import Callable, List, Optional

import pytest

from snark.config import SnarkConfig


class FakeResponse:
    """Streamed response; the body is the JSON of `payload` unless `text` is given."""

    encoding = 'utf-8'

    def __init__(self, payload=None, status_code: int = 200, text: Optional[str] = None):
        self.payload = payload
        self.status_code = status_code
        if text is None:
            text = str(payload) if isinstance(payload, Exception) else json.dumps(payload)
        self.text = text
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        data = self.text.encode(self.encoding)
        for start in range(0, len(data), chunk_size):
            yield data[start:start + chunk_size]

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; `responder(body)` returns a FakeResponse or raises."""

    def __init__(self, responder: Callable):
        self.responder = responder
        self.calls: List[dict] = []
        self.closed = False

    def post(self, url, headers=None, json=None, timeout=None, stream=False):
        self.calls.append({'url': url, 'headers': headers, 'json': json, 'timeout': timeout,
                           'stream': stream})
        return self.responder(json)

    def close(self):
        self.closed = True


def make_page(text_field: str = 'Evidence', text: str = '', title_field: str = 'Name',
              title: str = '', due_field: str = 'Date', due: Optional[str] = None) -> dict:
    """Build a Notion page object the way database queries return it."""
    properties = {
        text_field: {'type': 'rich_text', 'rich_text': [{'plain_text': text}] if text else []},
        title_field: {'type': 'title', 'title': [{'plain_text': title}] if title else []},
        due_field: {'type': 'date', 'date': {'start': due} if due else None},
    }
    return {'object': 'page', 'id': f"page-{text or title or 'blank'}", 'properties': properties}


@pytest.fixture
def page():
    return make_page


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def notion_config() -> SnarkConfig:
    return SnarkConfig(
        notion_token='secret-token',
        notion_db_id='db123',
        class_map='E-A:Evidence,S-A:NYP_1',
        strategy='local',
    )
