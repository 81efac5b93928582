# -*- coding: utf-8 -*-
"""
Exceptions raised by richdiff.

Every error is fatal for the diff being computed: nothing is logged and
skipped, and no partial tree is ever returned.

- RichDiffError (base)
  - TypeMismatchError (root or aligned pair types differ)
  - MalformedNodeError (node breaks the text-leaf invariants)
  - DepthExceededError (nesting deeper than ``DiffConfig.max_depth``)
  - ConfigError (bad option name or value)
"""


class RichDiffError(Exception):
    """Base class for all richdiff errors."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class TypeMismatchError(RichDiffError, TypeError):
    """Two nodes that must share a type do not."""

    def __init__(self, old_type, new_type):
        super().__init__(
            'node type not equal: %r != %r' % (old_type, new_type))
        self.old_type = old_type
        self.new_type = new_type


class MalformedNodeError(RichDiffError, ValueError):
    """A node violates the document model."""

    def __init__(self, message, node=None):
        super().__init__(message)
        self.node = node


class DepthExceededError(RichDiffError, RecursionError):
    """The document is nested deeper than the configured limit."""

    def __init__(self, depth, limit):
        super().__init__(
            'document nesting depth %d exceeds the limit of %d' % (depth, limit))
        self.depth = depth
        self.limit = limit


class ConfigError(RichDiffError, ValueError):
    """Invalid diff configuration."""
