"""Remark origin tags.

Records which strategy produced the line that reached the widget.
"""

from enum import Enum


class RemarkOrigin(str, Enum):
    """Which strategy produced a remark.

    - REMOTE: chat-completion service
    - LOCAL_TEMPLATE: deterministic daily template
    - FALLBACK: substituted after a remote failure or an internal error
    """
    REMOTE = "remote"
    LOCAL_TEMPLATE = "local_template"
    FALLBACK = "fallback"

    def is_cacheable(self) -> bool:
        """Only deterministic template output is stable enough to cache."""
        return self == RemarkOrigin.LOCAL_TEMPLATE

    def __str__(self):
        return self.value
