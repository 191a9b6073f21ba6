"""Process configuration for the snark endpoint.

Built once at startup from the environment (and an optional .env file),
then passed explicitly into every component.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TRUE_VALUES = {'1', 'true', 'yes', 'on'}
STRATEGIES = {'auto', 'remote', 'local'}


def _get_bool(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip().lower() in TRUE_VALUES


def _get_number(env: Mapping[str, str], key: str, default, low=None, high=None, cast=int):
    """Read a numeric setting, falling back to the default and clamping to [low, high]."""
    raw = env.get(key)
    value = default
    if raw is not None and raw.strip() != '':
        try:
            value = cast(raw.strip())
        except ValueError:
            logger.warning(f"Invalid value for {key}: {raw!r}, using {default}")
            value = default
    if low is not None and value < low:
        value = low
    if high is not None and value > high:
        value = high
    return value


def _get_str(env: Mapping[str, str], key: str, default: Optional[str] = None) -> Optional[str]:
    raw = env.get(key)
    if raw is None:
        return default
    raw = raw.strip()
    return raw if raw else default


@dataclass(frozen=True)
class SnarkConfig:
    """All settings the pipeline needs. Never mutated after construction."""
    notion_token: Optional[str] = None
    notion_db_id: Optional[str] = None
    class_map: str = ""
    due_prop: str = "Date"
    title_prop: str = "Name"
    page_size: int = 5
    done_sample: int = 100
    require_class_text: bool = False
    notion_timeout: float = 6.0

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None
    openai_referer: Optional[str] = None
    openai_app_title: Optional[str] = None
    openai_timeout: float = 8.0

    strategy: str = "auto"
    strict: bool = False
    salt: str = ""
    timezone: str = "UTC"
    cache_seconds: int = 900

    @property
    def has_notion(self) -> bool:
        return bool(self.notion_token and self.notion_db_id)

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)

    def resolved_strategy(self) -> str:
        """Pick 'remote' or 'local'; 'auto' uses remote only when a key is configured."""
        if self.strategy == 'remote':
            return 'remote'
        if self.strategy == 'local':
            return 'local'
        return 'remote' if self.has_openai else 'local'

    def attribution_headers(self) -> dict:
        headers = {}
        if self.openai_referer:
            headers['HTTP-Referer'] = self.openai_referer
        if self.openai_app_title:
            headers['X-Title'] = self.openai_app_title
        return headers

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> 'SnarkConfig':
        """Build a config from a mapping (defaults to os.environ).

        Args:
            environ: Explicit mapping, mainly for tests
            dotenv: Whether to load a .env file into os.environ first

        Returns:
            SnarkConfig instance
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        strategy = (_get_str(environ, 'SNARK_STRATEGY', 'auto') or 'auto').lower()
        if strategy not in STRATEGIES:
            logger.warning(f"Unknown SNARK_STRATEGY {strategy!r}, using 'auto'")
            strategy = 'auto'

        # An explicitly empty NOTION_DUE_PROP disables due-date sorting
        due_prop = environ.get('NOTION_DUE_PROP')
        due_prop = 'Date' if due_prop is None else due_prop.strip()

        return cls(
            notion_token=_get_str(environ, 'NOTION_TOKEN'),
            notion_db_id=_get_str(environ, 'NOTION_DB_ID'),
            class_map=environ.get('NOTION_CLASS_MAP', '') or '',
            due_prop=due_prop,
            title_prop=_get_str(environ, 'NOTION_TITLE_PROP', 'Name'),
            page_size=_get_number(environ, 'NOTION_PAGE_SIZE', 5, low=3, high=10),
            done_sample=_get_number(environ, 'NOTION_DONE_SAMPLE', 100, low=1, high=100),
            require_class_text=_get_bool(environ, 'NOTION_REQUIRE_CLASS_TEXT'),
            notion_timeout=_get_number(environ, 'NOTION_TIMEOUT', 6.0, low=5.0, high=9.0, cast=float),
            openai_api_key=_get_str(environ, 'OPENAI_API_KEY'),
            openai_model=_get_str(environ, 'OPENAI_MODEL', 'gpt-4o-mini'),
            openai_base_url=_get_str(environ, 'OPENAI_BASE_URL'),
            openai_referer=_get_str(environ, 'OPENAI_REFERER'),
            openai_app_title=_get_str(environ, 'OPENAI_APP_TITLE'),
            openai_timeout=_get_number(environ, 'OPENAI_TIMEOUT', 8.0, low=5.0, high=9.0, cast=float),
            strategy=strategy,
            strict=_get_bool(environ, 'SNARK_STRICT'),
            salt=environ.get('SNARK_SALT', '') or '',
            timezone=_get_str(environ, 'SNARK_TIMEZONE', 'UTC'),
            cache_seconds=_get_number(environ, 'SNARK_CACHE_SECONDS', 900, low=1, high=86400),
        )
