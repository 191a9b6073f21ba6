"""Core modules for the snark status-line endpoint.

This package provides clean abstractions for:
- Reason codes and remark origins (reason.py, origin.py)
- Class mapping parsing (class_map.py)
- Notion task store queries (notion_store.py)
- Pending item resolution and context aggregation (resolver.py, aggregator.py)
- Prompt context rendering (formatter.py)
- Remote and local remark generation (remote.py, local.py)
- Request orchestration (service.py)
"""

from .reason import ContextReason
from .origin import RemarkOrigin

__all__ = ['ContextReason', 'RemarkOrigin']
