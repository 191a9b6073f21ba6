"""Request orchestration for the snark endpoint.

Runs aggregation, rendering and generation for one request and always
produces a response the widget can render. Transport wiring lives in
snark_api.py; this module has no Flask dependency.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .aggregator import ContextAggregator
from .class_map import describe_class_map, parse_class_map
from .config import SnarkConfig
from .formatter import render_context
from .generators import RemarkGenerator, build_generator
from .local import LocalGenerator
from .models import AggregatedContext, GeneratedRemark
from .origin import RemarkOrigin

logger = logging.getLogger(__name__)

SAFE_REMARK = "APIs moody. Consider this a mercy recess."
NO_STORE_HEADERS = {
    'Cache-Control': 'no-store, no-cache, must-revalidate',
    'Pragma': 'no-cache',
}


@dataclass
class SnarkResponse:
    body: Dict[str, Any]
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)


def cache_headers(origin: RemarkOrigin, max_age: int) -> Dict[str, str]:
    """Deterministic template output may be cached; everything else is always fresh."""
    if origin.is_cacheable():
        return {'Cache-Control': f"public, max-age={max_age}"}
    return dict(NO_STORE_HEADERS)


class SnarkService:
    """Builds the snark response for one request."""

    def __init__(self, config: SnarkConfig, aggregator: Optional[ContextAggregator] = None,
                 generator: Optional[RemarkGenerator] = None,
                 fallback: Optional[RemarkGenerator] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """Initialize the service.

        Args:
            config: Process configuration
            aggregator: Context aggregator (built from config when None)
            generator: Primary remark strategy (chosen from config when None)
            fallback: Generator used after a remote failure in resilient mode
            clock: Returns the current aware datetime (injectable for tests)
        """
        self.config = config
        self.aggregator = aggregator or ContextAggregator(config)
        self.generator = generator or build_generator(config)
        self.fallback = fallback or LocalGenerator(salt=config.salt)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def strategy(self) -> str:
        return self.generator.name

    def today(self) -> date:
        """Current calendar date in the configured timezone."""
        try:
            tz = ZoneInfo(self.config.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown SNARK_TIMEZONE {self.config.timezone!r}, using UTC")
            tz = timezone.utc
        return self.clock().astimezone(tz).date()

    def handle(self, debug: bool = False) -> SnarkResponse:
        """Produce the response for one request. Never raises."""
        try:
            return self._handle(debug)
        except Exception as e:
            logger.exception(f"Snark pipeline failed: {e}")
            body = {'snark': SAFE_REMARK}
            if debug:
                body.update({'origin': str(RemarkOrigin.FALLBACK), 'error': f"internal: {e}",
                             'strategy': self.strategy})
            return SnarkResponse(body=body, status=200, headers=dict(NO_STORE_HEADERS))

    def _handle(self, debug: bool) -> SnarkResponse:
        mappings = parse_class_map(self.config.class_map)
        context = self.aggregator.aggregate(mappings)
        context_text = render_context(context)
        today = self.today()

        remark = self.generator.generate(context, context_text, today)
        status = 200
        if not remark.ok:
            if self.config.strict:
                logger.error(f"Remote generation failed in strict mode: {remark.error}")
                status = 500
            else:
                logger.warning(f"Remote generation failed, using local fallback: {remark.error}")
                local = self.fallback.generate(context, context_text, today)
                remark = GeneratedRemark(text=local.text, origin=RemarkOrigin.FALLBACK,
                                         error=remark.error, attempts=remark.attempts)

        if status == 500:
            headers = dict(NO_STORE_HEADERS)
            body = {'error': remark.error or 'remote generation failed'}
        else:
            headers = cache_headers(remark.origin, self.config.cache_seconds)
            body = {'snark': remark.text}

        if debug:
            body = self._debug_record(remark, context, context_text)
        return SnarkResponse(body=body, status=status, headers=headers)

    def _debug_record(self, remark: GeneratedRemark, context: AggregatedContext,
                      context_text: str) -> Dict[str, Any]:
        return {
            'snark': remark.text,
            'origin': str(remark.origin),
            'reason': str(context.reason),
            'error': remark.error,
            'attempts': remark.attempts,
            'context': context_text,
            'done_approx': context.done_approx,
            'failures': list(context.failures),
            'mapping': describe_class_map(self.config.class_map),
            'strategy': self.strategy,
            'model': self.config.openai_model if self.strategy == 'remote' else None,
        }
