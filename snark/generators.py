"""Remark generator interface and strategy selection."""

from abc import ABC, abstractmethod
from datetime import date

from .config import SnarkConfig
from .models import AggregatedContext, GeneratedRemark


class RemarkGenerator(ABC):
    """Turns an aggregated context into a one-line remark."""

    name = "generator"

    @abstractmethod
    def generate(self, context: AggregatedContext, context_text: str, today: date) -> GeneratedRemark:
        raise NotImplementedError


def build_generator(config: SnarkConfig) -> RemarkGenerator:
    """Pick the configured strategy: remote completion or local templates."""
    from .local import LocalGenerator
    from .remote import RemoteGenerator

    if config.resolved_strategy() == 'remote':
        return RemoteGenerator.from_config(config)
    return LocalGenerator(salt=config.salt)
