"""Chat-completion remark generator.

Calls the OpenAI chat completions API (or any compatible endpoint) with
a bounded number of retries. Never invents text: on exhaustion it
returns a remark with `text=None` and the last error.
"""

import logging
import time
from datetime import date
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

import openai
from openai import OpenAI

from .config import SnarkConfig
from .errors import GenerationEmpty, UpstreamError, UpstreamTimeout
from .generators import RemarkGenerator
from .instructions import SYSTEM_PROMPT, build_user_prompt
from .models import AggregatedContext, GeneratedRemark
from .origin import RemarkOrigin
from .retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_SAMPLING = {
    'temperature': 0.9,
    'top_p': 1.0,
    'presence_penalty': 0.3,
    'frequency_penalty': 0.3,
    'max_tokens': 40,
}


def _completion_text(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return ""
    if not content:
        return ""
    return content.strip().strip('"').strip()


class RemoteGenerator(RemarkGenerator):
    """Generates remarks through a chat-completion model."""

    name = "remote"

    def __init__(self, client: Optional[OpenAI] = None, model: str = DEFAULT_MODEL,
                 timeout: float = 8.0, attempts: int = 3, base_delay: float = 0.25,
                 sampling: Optional[Dict[str, Any]] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """Initialize the generator.

        Args:
            client: OpenAI client (None leaves the generator unconfigured)
            model: Model identifier
            timeout: Per-attempt deadline in seconds
            attempts: Total calls before giving up
            base_delay: Linear backoff step in seconds
            sampling: Overrides for DEFAULT_SAMPLING
            sleep: Sleep function (injectable for tests)
        """
        self.client = client
        self.model = model
        self.timeout = timeout
        self.attempts = attempts
        self.base_delay = base_delay
        self.sampling = dict(DEFAULT_SAMPLING, **(sampling or {}))
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: SnarkConfig) -> 'RemoteGenerator':
        client = None
        if config.openai_api_key:
            client = OpenAI(
                api_key=config.openai_api_key,
                base_url=config.openai_base_url,
                timeout=config.openai_timeout,
                max_retries=0,
                default_headers=config.attribution_headers() or None,
            )
        return cls(client=client, model=config.openai_model, timeout=config.openai_timeout)

    def generate(self, context: AggregatedContext, context_text: str, today: date) -> GeneratedRemark:
        return self.complete(SYSTEM_PROMPT, context_text)

    def complete(self, system_prompt: str, context_text: str) -> GeneratedRemark:
        """Request one remark for the given context.

        Args:
            system_prompt: Persona and style instructions
            context_text: Rendered task context

        Returns:
            GeneratedRemark with text on success, error after the last attempt
        """
        if self.client is None:
            logger.warning("Remote generation requested without OPENAI_API_KEY")
            return GeneratedRemark(text=None, origin=RemarkOrigin.REMOTE,
                                   error="OPENAI_API_KEY not configured", attempts=0)

        def attempt_completion(attempt: int) -> str:
            messages = [
                {'role': 'system', 'content': system_prompt},
                {'role': 'user', 'content': build_user_prompt(context_text, uuid4().hex[:8])},
            ]
            return self._request(messages)

        outcome = retry_with_backoff(attempt_completion, attempts=self.attempts,
                                     base_delay=self.base_delay, label=f"{self.model} completion",
                                     sleep=self.sleep)
        if not outcome.ok:
            return GeneratedRemark(text=None, origin=RemarkOrigin.REMOTE,
                                   error=outcome.error, attempts=outcome.attempts)

        logger.info(f"Remote remark generated in {outcome.attempts} attempt(s)")
        return GeneratedRemark(text=outcome.value, origin=RemarkOrigin.REMOTE,
                               error=None, attempts=outcome.attempts)

    def _request(self, messages) -> str:
        """One completion call.

        Raises:
            UpstreamTimeout: Deadline exceeded
            UpstreamError: Transport failure or non-2xx status
            GenerationEmpty: No usable text in the completion
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                timeout=self.timeout,
                **self.sampling,
            )
        except openai.APITimeoutError as e:
            raise UpstreamTimeout('OpenAI', self.timeout) from e
        except openai.APIStatusError as e:
            body = e.response.text if e.response is not None else e.message
            raise UpstreamError('OpenAI', 'completion rejected', status_code=e.status_code, body=body) from e
        except openai.APIConnectionError as e:
            raise UpstreamError('OpenAI', 'connection failed') from e

        text = _completion_text(response)
        if not text:
            raise GenerationEmpty(self.model)
        return text
