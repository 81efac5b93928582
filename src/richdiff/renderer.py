# -*- coding: utf-8 -*-
"""
Render document trees, diff marks included, as HTML through Genshi.

Diff marks become ``<ins>``/``<del>`` wrapped around the text and its other
formatting, with a class telling word-level changes from character-level
ones so stylesheets can make the former stand out more.
"""
import re

from genshi.core import Stream, QName, Attrs, START, END, TEXT

from .config import DiffConfig, KIND_INSERTED, GRANULARITY_WORD
from .utils import qname_localname, is_diff_mark

_pos = (None, -1, -1)

_node_tags = {
    'paragraph': 'p',
    'blockquote': 'blockquote',
    'code_block': 'pre',
    'horizontal_rule': 'hr',
    'hard_break': 'br',
    'image': 'img',
    'bullet_list': 'ul',
    'ordered_list': 'ol',
    'list_item': 'li',
    'table': 'table',
    'table_row': 'tr',
    'table_cell': 'td',
    'table_header': 'th',
}
_node_attrs = {
    'image': ('src', 'alt', 'title'),
    'ordered_list': ('start',),
}

_mark_tags = {
    'bold': 'strong',
    'italic': 'em',
    'underline': 'u',
    'strike': 's',
    'code': 'code',
    'link': 'a',
    'subscript': 'sub',
    'superscript': 'sup',
}
_mark_attrs = {
    'link': ('href', 'title'),
}


def _make_attrs(items):
    return Attrs([(QName(k), str(v)) for k, v in items if v is not None])


def _make_ws_visible(s):
    # Convert whitespace that would otherwise be collapsed by HTML into NBSPs,
    # but keep single mid-string spaces intact for readability.
    if not s:
        return s
    s = re.sub(r'^\s+', lambda m: '\u00a0' * len(m.group(0)), s, flags=re.U)
    s = re.sub(r'\s+$', lambda m: '\u00a0' * len(m.group(0)), s, flags=re.U)
    s = re.sub(r' {2,}', lambda m: '\u00a0' * len(m.group(0)), s)
    return s


class HtmlRenderer(object):
    """Turns a document tree into a flat list of Genshi events."""

    def __init__(self, config=None):
        self.config = config or DiffConfig()
        self._result = []

    def append(self, type, data):
        self._result.append((type, data, _pos))

    def enter(self, tag, attrs=None):
        self.append(START, (QName(tag), attrs if attrs is not None else Attrs()))

    def leave(self, tag):
        self.append(END, QName(tag))

    def render(self, node):
        if node.is_text:
            self.render_text(node)
            return
        tag = self._node_tag(node)
        if tag is None:
            # the document itself has no element of its own
            for child in node.children:
                self.render(child)
            return
        names = _node_attrs.get(node.type, ())
        if node.type == 'ordered_list' and node.attrs.get('start') == 1:
            names = ()
        self.enter(tag, _make_attrs((name, node.attrs.get(name)) for name in names))
        for child in node.children:
            self.render(child)
        self.leave(tag)

    def _node_tag(self, node):
        if node.type == 'heading':
            level = node.attrs.get('level') or 1
            return 'h%d' % min(max(int(level), 1), 6)
        return _node_tags.get(node.type)

    def render_text(self, node):
        change = None
        marks = []
        for m in node.marks:
            if is_diff_mark(m, self.config):
                change = change or m
            else:
                marks.append(m)

        content = node.text
        if change is not None:
            change_tag = 'ins' if change.attrs.get('kind') == KIND_INSERTED else 'del'
            granularity = change.attrs.get('granularity') or GRANULARITY_WORD
            cls = self.config.change_classes.get(granularity)
            self.enter(change_tag, _make_attrs([('class', cls)]))
            if getattr(self.config, 'preserve_whitespace_in_diff', True):
                content = _make_ws_visible(content)

        for m in marks:
            self.enter(*self._mark_element(m))
        self.append(TEXT, content)
        for m in reversed(marks):
            self.leave(self._mark_element(m)[0])

        if change is not None:
            self.leave(change_tag)

    def _mark_element(self, m):
        tag = _mark_tags.get(m.type)
        if tag is None:
            return 'span', _make_attrs([('class', 'mark-%s' % m.type)])
        names = _mark_attrs.get(m.type, ())
        return tag, _make_attrs((name, m.attrs.get(name)) for name in names)

    def get_events(self):
        return self._result


def merge_adjacent_change_tags(events, merge_tags=('ins', 'del')):
    """
    Merge adjacent change tags in a flat Genshi event stream:
      ... END ins, START ins ...  -> ... (merge into one ins) ...

    This turns:
      <ins>en</ins><ins> </ins><ins>negrita</ins>
    into:
      <ins>en negrita</ins>

    Only tags with the same attributes (same granularity class) are merged.
    """
    def _find_matching_start_index(out_events, lname):
        # Find the START that matches the last END for this lname in out_events.
        depth = 0
        for idx in range(len(out_events) - 1, -1, -1):
            et, d, _p = out_events[idx]
            if et == END and qname_localname(d) == lname:
                depth += 1
            elif et == START:
                t, _a = d
                if qname_localname(t) == lname:
                    depth -= 1
                    if depth == 0:
                        return idx
        return None

    out = []
    for etype, data, pos in events:
        if etype == START:
            tag, attrs = data
            lname = qname_localname(tag)
            if lname in merge_tags and out and out[-1][0] == END and qname_localname(out[-1][1]) == lname:
                start_idx = _find_matching_start_index(out, lname)
                if start_idx is not None and list(out[start_idx][1][1]) == list(attrs):
                    # Keep the first START; drop the END and this START.
                    out.pop()
                    continue
        out.append((etype, data, pos))
    return out


def render_diff_stream(node, config=None, wrapper_element='div', wrapper_class='diff'):
    """Render a (diff) document tree to a Genshi stream."""
    config = config or DiffConfig()
    renderer = HtmlRenderer(config)
    if wrapper_element:
        renderer.enter(wrapper_element, _make_attrs([('class', wrapper_class)]))
    renderer.render(node)
    if wrapper_element:
        renderer.leave(wrapper_element)
    events = renderer.get_events()
    if getattr(config, 'merge_adjacent_change_tags', True):
        events = merge_adjacent_change_tags(events)
    return Stream(events)


def render_html(node, config=None, wrapper_element='div', wrapper_class='diff'):
    """Render a (diff) document tree to an HTML string."""
    stream = render_diff_stream(node, config, wrapper_element, wrapper_class)
    return stream.render('html', encoding=None)
