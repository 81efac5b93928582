# -*- coding: utf-8 -*-
"""
Configuration and constants for richdiff.
"""
import re

from .exceptions import ConfigError

# Tokenizer: word characters, whitespace, anything else. Classes never mix.
_token_re = re.compile(r'\w+|\s+|[^\w\s]+', re.U)

# The distinguished leaf type
TEXT = 'text'

# Closed node type alphabet understood by the differ and the HTML adapter
NODE_TYPES = frozenset([
    'doc', 'paragraph', 'heading', 'blockquote', 'code_block',
    'horizontal_rule', 'hard_break', 'image',
    'bullet_list', 'ordered_list', 'list_item',
    'table', 'table_row', 'table_cell', 'table_header',
    TEXT,
])

# Containers that hold inline content; inline content anywhere else gets an
# implicit paragraph
TEXTBLOCK_TYPES = frozenset(['paragraph', 'heading', 'code_block'])

GRANULARITY_WORD = 'word'
GRANULARITY_CHAR = 'char'
GRANULARITIES = (GRANULARITY_CHAR, GRANULARITY_WORD)

KIND_INSERTED = 'inserted'
KIND_DELETED = 'deleted'


class DiffConfig(object):
    """
    Runtime configuration for diffing and rendering.

    Class attributes are the defaults. Instances can override them either by
    keyword (``DiffConfig(granularity='word')``) or by plain assignment.
    """

    # Text diff resolution used by the text run patcher: 'char' or 'word'
    granularity = GRANULARITY_CHAR

    # Maximum container nesting accepted before giving up
    max_depth = 200

    # diff-match-patch deadline in seconds. 0 disables it, which also disables
    # the half-match shortcut, so scripts stay minimal and reproducible.
    diff_timeout = 0

    # Reserved mark type used to tag inserted/deleted text
    diff_mark_type = 'diff_mark'

    node_types = NODE_TYPES

    # --- HTML rendering ---
    # Make leading/trailing/repeated whitespace inside <ins>/<del> visible
    preserve_whitespace_in_diff = True
    # Merge adjacent <ins>...</ins><ins>...</ins> (and same for <del>)
    merge_adjacent_change_tags = True
    # CSS class per granularity on the change tags
    change_classes = {
        GRANULARITY_WORD: 'diff-word',
        GRANULARITY_CHAR: 'diff-char',
    }

    def __init__(self, **options):
        # per instance, so mutating it never touches the class default
        self.change_classes = dict(self.change_classes)
        for name, value in options.items():
            if name.startswith('_') or not hasattr(type(self), name):
                raise ConfigError('unknown diff option: %r' % name)
            setattr(self, name, value)
        check_granularity(self.granularity)


def check_granularity(granularity):
    if granularity not in GRANULARITIES:
        raise ConfigError('granularity must be one of %s, got %r'
                          % (', '.join(GRANULARITIES), granularity))
    return granularity
