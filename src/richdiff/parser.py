# -*- coding: utf-8 -*-
"""
HTML parsing for richdiff.

Fragments are parsed with html5lib, turned into a Genshi event stream and
folded into a document tree.
"""
from genshi.core import START, END, TEXT
from genshi.input import ET
import html5lib

from .config import TEXTBLOCK_TYPES
from .nodes import Node, Mark, text
from .utils import qname_localname, validate_tree

_block_tags = {
    'p': 'paragraph',
    'blockquote': 'blockquote',
    'pre': 'code_block',
    'ul': 'bullet_list',
    'ol': 'ordered_list',
    'li': 'list_item',
    'table': 'table',
    'tr': 'table_row',
    'td': 'table_cell',
    'th': 'table_header',
}
_heading_tags = frozenset(['h1', 'h2', 'h3', 'h4', 'h5', 'h6'])

_mark_tags = {
    'strong': 'bold',
    'b': 'bold',
    'em': 'italic',
    'i': 'italic',
    'u': 'underline',
    's': 'strike',
    'strike': 'strike',
    'code': 'code',
    'a': 'link',
    'sub': 'subscript',
    'sup': 'superscript',
}


def _pick_attrs(attrs, names):
    rv = {}
    for name in names:
        value = attrs.get(name)
        if value is not None:
            rv[name] = str(value)
    return rv


def _block_attrs(lname, attrs):
    if lname == 'ol':
        start = attrs.get('start')
        if start is not None and start.strip().isdigit() and int(start) != 1:
            return {'start': int(start)}
    return {}


class DocumentBuilder(object):
    """
    Folds START/END/TEXT events into a document tree.

    Inline content that shows up directly in a block container (the
    document, a list item, a cell, a quote) is collected into an implicit
    paragraph. Elements with no meaning in the model (div, span, tbody, ...)
    are transparent.
    """

    def __init__(self):
        # entries: [type, attrs, children, implicit]
        self._stack = [['doc', {}, [], False]]
        # what each START did, so its END can undo it: 'block', 'mark', 'skip'
        self._open = []
        self._marks = []

    def feed(self, stream):
        for kind, data, _pos in stream:
            if kind == START:
                tag, attrs = data
                self.start(qname_localname(tag).lower(), attrs)
            elif kind == END:
                self.end()
            elif kind == TEXT:
                self.text(data)
        return self

    def _in_code(self):
        return any(entry[0] == 'code_block' for entry in self._stack)

    def start(self, lname, attrs):
        if lname in _mark_tags:
            if self._in_code():
                self._open.append('skip')
                return
            mark_type = _mark_tags[lname]
            mark_attrs = {}
            if mark_type == 'link':
                mark_attrs = _pick_attrs(attrs, ('href', 'title'))
            self._marks.append(Mark(mark_type, mark_attrs))
            self._open.append('mark')
            return
        if lname == 'br':
            self._append_inline(Node('hard_break'))
            self._open.append('skip')
            return
        if lname == 'img':
            self._append_inline(Node('image', _pick_attrs(attrs, ('src', 'alt', 'title'))))
            self._open.append('skip')
            return
        if lname == 'hr':
            self._close_implicit()
            self._stack[-1][2].append(Node('horizontal_rule'))
            self._open.append('skip')
            return
        if lname in _heading_tags:
            node_type, node_attrs = 'heading', {'level': int(lname[1])}
        elif lname in _block_tags:
            node_type, node_attrs = _block_tags[lname], _block_attrs(lname, attrs)
        else:
            self._open.append('skip')
            return
        self._close_implicit()
        self._stack.append([node_type, node_attrs, [], False])
        self._open.append('block')

    def end(self):
        what = self._open.pop()
        if what == 'mark':
            self._marks.pop()
        elif what == 'block':
            self._close_implicit()
            self._pop()

    def text(self, data):
        if not data:
            return
        top = self._stack[-1]
        if not data.strip() and top[0] not in TEXTBLOCK_TYPES:
            # indentation between blocks
            return
        self._append_inline(text(data, *self._marks))

    def _pop(self):
        node_type, attrs, children, _implicit = self._stack.pop()
        self._stack[-1][2].append(Node(node_type, attrs, children))

    def _close_implicit(self):
        if self._stack[-1][3]:
            self._pop()

    def _append_inline(self, item):
        top = self._stack[-1]
        if top[0] not in TEXTBLOCK_TYPES:
            self._stack.append(['paragraph', {}, [], True])
            top = self._stack[-1]
        children = top[2]
        if (item.is_text and children and children[-1].is_text
                and children[-1].marks == item.marks):
            children[-1] = text(children[-1].text + item.text, *item.marks)
        else:
            children.append(item)

    def get_document(self):
        while len(self._stack) > 1:
            self._pop()
        node_type, attrs, children, _implicit = self._stack[0]
        return Node(node_type, attrs, children)


def _drop_comments(root):
    """
    Remove comments and processing instructions from an etree, keeping the
    text that follows them. Their `tag` is a factory function, not a name.
    """
    stack = [root]
    while stack:
        parent = stack.pop()
        prev = None
        for child in list(parent):
            if isinstance(child.tag, str):
                stack.append(child)
                prev = child
                continue
            tail = child.tail or ''
            if prev is None:
                parent.text = (parent.text or '') + tail
            else:
                prev.tail = (prev.tail or '') + tail
            parent.remove(child)


def parse_html(html, config=None):
    """Parse an HTML fragment into a document tree."""
    builder = html5lib.getTreeBuilder('etree')
    parser = html5lib.HTMLParser(tree=builder)
    tree = parser.parseFragment(html)
    tree.tag = 'div'
    _drop_comments(tree)
    doc = DocumentBuilder().feed(ET(tree)).get_document()
    validate_tree(doc, config)
    return doc
