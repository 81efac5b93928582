# -*- coding: utf-8 -*-
"""
Text diffing: character edit scripts, tokenizing and word-aware diffs.

The edit script primitive is diff-match-patch's Myers bisect. Everything on
top of it works on plain strings and knows nothing about document trees.
"""
import logging
from collections import namedtuple

from diff_match_patch import diff_match_patch

from .config import DiffConfig, GRANULARITY_CHAR, GRANULARITY_WORD, _token_re

logger = logging.getLogger(__name__)


class DiffType(object):
    """Segment kinds. Values match diff-match-patch's operation codes."""
    UNCHANGED = 0
    DELETED = -1
    INSERTED = 1


Segment = namedtuple('Segment', ['kind', 'text', 'granularity'])
Token = namedtuple('Token', ['text', 'start', 'end'])


def _matcher(config):
    dmp = diff_match_patch()
    dmp.Diff_Timeout = getattr(config, 'diff_timeout', 0)
    return dmp


def diff_chars(old_text, new_text, config=None):
    """
    Minimal edit script between two strings.

    Joining the DELETED and UNCHANGED segments gives back `old_text`, joining
    UNCHANGED and INSERTED gives `new_text`.
    """
    config = config or DiffConfig()
    diffs = _matcher(config).diff_main(old_text, new_text, False)
    return [Segment(op, data, GRANULARITY_CHAR) for op, data in diffs if data]


def tokenize(text):
    """
    Split `text` into maximal runs of word characters, whitespace or
    punctuation. The tokens cover the string exactly.
    """
    return [Token(m.group(), m.start(), m.end()) for m in _token_re.finditer(text)]


def _symbol(index):
    # One code point per distinct token, stepping over the surrogate block
    code = index + 1
    if code >= 0xD800:
        code += 0x800
    return chr(code)


def _encode_tokens(old_tokens, new_tokens):
    """
    Map each distinct token text to one symbol, in first-seen order, and
    encode both token lists as symbol strings.
    """
    symbols = {}
    tokens_by_symbol = {}

    def encode(tokens):
        chars = []
        for token in tokens:
            sym = symbols.get(token.text)
            if sym is None:
                sym = _symbol(len(symbols))
                symbols[token.text] = sym
                tokens_by_symbol[sym] = token.text
            chars.append(sym)
        return ''.join(chars)

    return encode(old_tokens), encode(new_tokens), tokens_by_symbol


def merge_segments(segments):
    """Join adjacent segments that share kind and granularity."""
    rv = []
    for seg in segments:
        if rv and rv[-1].kind == seg.kind and rv[-1].granularity == seg.granularity:
            rv[-1] = rv[-1]._replace(text=rv[-1].text + seg.text)
        else:
            rv.append(seg)
    return rv


def diff_words(old_text, new_text, config=None):
    """
    Word-aware edit script.

    Tokens are diffed first. A deleted token run directly followed by an
    inserted one is refined character by character (granularity ``char``);
    unmatched insertions or deletions stay whole (granularity ``word``).
    """
    config = config or DiffConfig()
    old_tokens = tokenize(old_text)
    new_tokens = tokenize(new_text)
    if not old_tokens and not new_tokens:
        return []
    if not old_tokens:
        return [Segment(DiffType.INSERTED, new_text, GRANULARITY_WORD)]
    if not new_tokens:
        return [Segment(DiffType.DELETED, old_text, GRANULARITY_WORD)]

    old_encoded, new_encoded, tokens_by_symbol = _encode_tokens(old_tokens, new_tokens)
    token_diffs = _matcher(config).diff_main(old_encoded, new_encoded, False)

    def decode(symbols):
        return ''.join(tokens_by_symbol[s] for s in symbols)

    rv = []
    k = 0
    while k < len(token_diffs):
        op, symbols = token_diffs[k]
        if op == DiffType.UNCHANGED:
            for s in symbols:
                rv.append(Segment(DiffType.UNCHANGED, tokens_by_symbol[s], GRANULARITY_WORD))
        elif (op == DiffType.DELETED and k + 1 < len(token_diffs)
              and token_diffs[k + 1][0] == DiffType.INSERTED):
            old_part = decode(symbols)
            new_part = decode(token_diffs[k + 1][1])
            rv.extend(diff_chars(old_part, new_part, config))
            k += 2
            continue
        else:
            rv.append(Segment(op, decode(symbols), GRANULARITY_WORD))
        k += 1
    rv = merge_segments(rv)
    logger.debug('word diff: %d -> %d tokens, %d segments',
                 len(old_tokens), len(new_tokens), len(rv))
    return rv
