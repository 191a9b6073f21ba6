"""End-to-end tests for request orchestration and the Flask endpoint."""

from dataclasses import replace
from datetime import datetime, timezone

from snark import templates
from snark.aggregator import ContextAggregator
from snark.config import SnarkConfig
from snark.formatter import EMPTY_CONTEXT
from snark.generators import RemarkGenerator
from snark.local import LocalGenerator
from snark.models import GeneratedRemark
from snark.notion_store import NotionTaskStore
from snark.origin import RemarkOrigin
from snark.remote import RemoteGenerator
from snark.service import SAFE_REMARK, SnarkService
from snark_api import create_app


def _clock():
    return datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


class FailingCompletions:
    def __init__(self):
        self.calls = 0

    def create(self, **kwargs):
        self.calls += 1
        raise RuntimeError('service unavailable')


class FailingClient:
    def __init__(self):
        self.chat = type('Chat', (), {})()
        self.chat.completions = FailingCompletions()


def _failing_remote():
    return RemoteGenerator(client=FailingClient(), model='test-model', sleep=lambda s: None)


def _evidence_store(fake_session, fake_response, page, rows):
    def responder(body):
        flt = body['filter']
        if 'or' in flt or flt.get('checkbox', {}).get('equals') is True:
            return fake_response({'results': [{}]})
        if flt['property'] == 'E-A':
            return fake_response({'results': rows})
        return fake_response({'results': []})

    return NotionTaskStore(token='secret-token', database_id='db123', session=fake_session(responder))


def _empty_lines():
    lines = set()
    for pool in (templates.EMPTY_DAY, templates.EMPTY_WORLD):
        lines.update(template.format(pending='', name='', klass='', when='', late='') for template in pool)
    return lines


def test_remote_failure_falls_back_to_due_soon_line(notion_config, fake_session, fake_response, page):
    config = replace(notion_config, strategy='remote')
    store = _evidence_store(fake_session, fake_response, page, [page(text='Brief 3', due='2026-10-20')])
    service = SnarkService(config, aggregator=ContextAggregator(config, store=store),
                           generator=_failing_remote(), clock=_clock)

    result = service.handle(debug=True)

    assert result.status == 200
    assert result.body['origin'] == 'fallback'
    assert result.body['attempts'] == 3
    assert 'service unavailable' in result.body['error']
    assert 'Brief 3' in result.body['snark'] or 'Evidence' in result.body['snark']
    assert result.body['snark'] not in _empty_lines()
    assert result.headers['Cache-Control'].startswith('no-store')


def test_missing_credentials_still_produce_a_line():
    config = SnarkConfig(class_map='E-A:Evidence', strategy='local')
    service = SnarkService(config, clock=_clock)

    result = service.handle(debug=True)

    assert result.status == 200
    assert result.body['reason'] == 'missing_config'
    assert result.body['context'] == EMPTY_CONTEXT
    assert result.body['snark'].strip()
    assert result.body['origin'] == 'local_template'


def test_no_items_selects_empty_pool(notion_config, fake_session, fake_response, page):
    store = _evidence_store(fake_session, fake_response, page, [])
    service = SnarkService(notion_config, aggregator=ContextAggregator(notion_config, store=store),
                           clock=_clock)

    result = service.handle(debug=True)

    assert result.body['reason'] == 'notion_empty_or_mismatch'
    assert result.body['snark'] in _empty_lines()


def test_strict_mode_surfaces_remote_error(notion_config):
    config = replace(notion_config, notion_token=None, strategy='remote', strict=True)
    service = SnarkService(config, generator=_failing_remote(), clock=_clock)

    result = service.handle()

    assert result.status == 500
    assert 'service unavailable' in result.body['error']
    assert 'snark' not in result.body


def test_internal_error_collapses_to_safe_remark(notion_config):
    class BrokenGenerator(RemarkGenerator):
        name = 'broken'

        def generate(self, context, context_text, today):
            raise ValueError('template exploded')

    service = SnarkService(replace(notion_config, notion_token=None), generator=BrokenGenerator(),
                           clock=_clock)
    result = service.handle()

    assert result.status == 200
    assert result.body == {'snark': SAFE_REMARK}
    assert result.headers['Cache-Control'].startswith('no-store')


def test_local_output_is_cacheable_and_stable():
    config = SnarkConfig(strategy='local', cache_seconds=600)
    service = SnarkService(config, clock=_clock)

    first, second = service.handle(), service.handle()

    assert first.body == second.body
    assert set(first.body) == {'snark'}
    assert first.headers == {'Cache-Control': 'public, max-age=600'}


def test_remote_success_is_never_cached():
    class CannedRemote(RemarkGenerator):
        name = 'remote'

        def generate(self, context, context_text, today):
            return GeneratedRemark(text='Fresh every time.', origin=RemarkOrigin.REMOTE, attempts=1)

    result = SnarkService(SnarkConfig(), generator=CannedRemote(), clock=_clock).handle()

    assert result.body == {'snark': 'Fresh every time.'}
    assert result.headers['Cache-Control'] == 'no-store, no-cache, must-revalidate'
    assert result.headers['Pragma'] == 'no-cache'


def test_timezone_decides_the_calendar_day():
    late_evening = lambda: datetime(2026, 10, 20, 2, 0, tzinfo=timezone.utc)
    service = SnarkService(SnarkConfig(timezone='America/New_York'), clock=late_evening)
    assert service.today().isoformat() == '2026-10-19'

    fallback = SnarkService(SnarkConfig(timezone='Not/AZone'), clock=late_evening)
    assert fallback.today().isoformat() == '2026-10-20'


def test_flask_endpoint_returns_snark_and_headers():
    service = SnarkService(SnarkConfig(strategy='local'), generator=LocalGenerator(), clock=_clock)
    client = create_app(config=service.config, service=service).test_client()

    response = client.get('/api/snark')

    assert response.status_code == 200
    assert set(response.get_json()) == {'snark'}
    assert response.headers['Cache-Control'].startswith('public, max-age=')


def test_flask_debug_mode_via_query_and_body():
    config = SnarkConfig(strategy='local', class_map='E_A:Evidence', openai_api_key='sk-secret')
    service = SnarkService(config, generator=LocalGenerator(), clock=_clock)
    client = create_app(config=config, service=service).test_client()

    via_query = client.get('/api/snark?debug=1').get_json()
    via_body = client.post('/api/snark', json={'debug': True}).get_json()

    for payload in (via_query, via_body):
        assert payload['strategy'] == 'local'
        assert payload['reason'] == 'missing_config'
        assert payload['mapping'][0]['checkbox_resolved'] == 'E A'
        assert 'sk-secret' not in str(payload)

    assert set(client.get('/api/snark?debug=0').get_json()) == {'snark'}


def test_health():
    client = create_app(config=SnarkConfig(strategy='local')).test_client()
    assert client.get('/health').get_json() == {'status': 'ok'}
