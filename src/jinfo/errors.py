"""Exception types raised by the memo stores and config layer."""

from __future__ import annotations


class JinfoError(Exception):
    """Base class for all jinfo errors."""


class ValidationError(JinfoError):
    """Input was rejected before anything was persisted."""


class NotFoundError(JinfoError):
    """A referenced memo id or project does not exist."""
