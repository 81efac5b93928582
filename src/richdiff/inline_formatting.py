# -*- coding: utf-8 -*-
"""
inline_formatting.py

Diff a run of adjacent text leaves while keeping their formatting.

Approach:
1. Concatenate the text of the old and the new run
2. Diff the pure text (character or word engine)
3. Walk the edit script, tracking offsets in both concatenations
4. Cut every segment at the leaves it overlaps and re-attach each leaf's
   marks and attrs to its piece
"""
import logging

from .config import (
    DiffConfig, KIND_DELETED, KIND_INSERTED, GRANULARITY_WORD, check_granularity,
)
from .nodes import Node, text
from .text_differ import DiffType, diff_chars, diff_words
from .utils import create_diff_mark

logger = logging.getLogger(__name__)

_kind_names = {
    DiffType.DELETED: KIND_DELETED,
    DiffType.INSERTED: KIND_INSERTED,
}


def text_spans(run):
    """
    Offsets of every leaf of a text run inside the concatenated run text.

    Returns list of dicts with:
    - node: the text leaf
    - start_char: starting character index in concatenated text
    - end_char: ending character index
    """
    spans = []
    char_pos = 0
    for leaf in run:
        length = len(leaf.text)
        spans.append({
            'node': leaf,
            'start_char': char_pos,
            'end_char': char_pos + length,
        })
        char_pos += length
    return spans


def _is_styled(leaf):
    return bool(leaf.marks or leaf.attrs)


def project_formatting(content, base, spans, extra_marks=()):
    """
    Build text leaves for `content`, which sits at offset `base` of the
    concatenated run described by `spans`.

    Every styled leaf overlapping the range yields its own piece carrying
    the leaf's marks and attrs. Stretches covered by plain leaves only are
    emitted as one plain piece. `extra_marks` go after the leaf's own marks.
    """
    end = base + len(content)
    pieces = []
    for span in spans:
        lo = max(span['start_char'], base)
        hi = min(span['end_char'], end)
        if lo >= hi:
            continue
        leaf = span['node']
        if not _is_styled(leaf) and pieces and pieces[-1][2] is None:
            pieces[-1][1] = hi
            continue
        pieces.append([lo, hi, leaf if _is_styled(leaf) else None])

    if not pieces:
        # Nothing to project (empty run side); keep the text plain
        return [text(content, *extra_marks)]

    rv = []
    for lo, hi, leaf in pieces:
        piece = content[lo - base:hi - base]
        if leaf is None:
            rv.append(text(piece, *extra_marks))
        else:
            marks = tuple(leaf.marks) + tuple(extra_marks)
            rv.append(Node(leaf.type, leaf.attrs, None, marks, piece))
    return rv


def patch_text_run(old_run, new_run, granularity=None, config=None):
    """
    Diff two runs of text leaves into one list of leaves.

    Unchanged and deleted text keeps the formatting it had in `old_run`,
    inserted text the formatting it has in `new_run`. Changed text gets a
    diff mark with the segment's granularity.
    """
    config = config or DiffConfig()
    granularity = check_granularity(granularity or config.granularity)
    old_text = ''.join(leaf.text for leaf in old_run)
    new_text = ''.join(leaf.text for leaf in new_run)
    if granularity == GRANULARITY_WORD:
        segments = diff_words(old_text, new_text, config)
    else:
        segments = diff_chars(old_text, new_text, config)
    logger.debug('text run diff (%s): %d -> %d chars, %d segments',
                 granularity, len(old_text), len(new_text), len(segments))

    old_spans = text_spans(old_run)
    new_spans = text_spans(new_run)
    old_pos = 0
    new_pos = 0
    rv = []
    for seg in segments:
        if seg.kind == DiffType.UNCHANGED:
            rv.extend(project_formatting(seg.text, old_pos, old_spans))
            old_pos += len(seg.text)
            new_pos += len(seg.text)
        elif seg.kind == DiffType.DELETED:
            tag = create_diff_mark(_kind_names[seg.kind], seg.granularity, config)
            rv.extend(project_formatting(seg.text, old_pos, old_spans, (tag,)))
            old_pos += len(seg.text)
        else:
            tag = create_diff_mark(_kind_names[seg.kind], seg.granularity, config)
            rv.extend(project_formatting(seg.text, new_pos, new_spans, (tag,)))
            new_pos += len(seg.text)
    return rv
