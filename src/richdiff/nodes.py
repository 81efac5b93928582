# -*- coding: utf-8 -*-
"""
Document tree model.

Nodes and marks are immutable values. The differ never modifies them, so an
unchanged subtree can be handed from an input tree to the diff output by
reference instead of being cloned.
"""
from .config import TEXT
from .exceptions import DepthExceededError


class Mark(object):
    """A named, attributed annotation on a text leaf (bold, link, ...)."""

    __slots__ = ('type', 'attrs')

    def __init__(self, type, attrs=None):
        self.type = type
        self.attrs = dict(attrs or {})

    def __eq__(self, other):
        if not isinstance(other, Mark):
            return NotImplemented
        return self.type == other.type and self.attrs == other.attrs

    def __ne__(self, other):
        rv = self.__eq__(other)
        if rv is NotImplemented:
            return rv
        return not rv

    __hash__ = None

    def __repr__(self):
        if self.attrs:
            return 'Mark(%r, %r)' % (self.type, self.attrs)
        return 'Mark(%r)' % (self.type,)

    def to_json(self):
        rv = {'type': self.type}
        if self.attrs:
            rv['attrs'] = dict(self.attrs)
        return rv

    @classmethod
    def from_json(cls, data):
        return cls(data['type'], data.get('attrs'))


class Node(object):
    """
    A typed element of a document tree.

    Containers carry ``children``; leaves of type ``text`` carry ``text``.
    The constructor does not enforce that split so foreign trees can be
    loaded as-is; :func:`richdiff.utils.validate_node` does.
    """

    __slots__ = ('type', 'attrs', 'marks', 'children', 'text')

    def __init__(self, type, attrs=None, children=None, marks=None, text=None):
        self.type = type
        self.attrs = dict(attrs or {})
        self.marks = tuple(marks or ())
        self.children = tuple(children or ())
        self.text = text

    @property
    def is_text(self):
        return self.type == TEXT

    @property
    def text_content(self):
        if self.is_text:
            return self.text or ''
        return ''.join(child.text_content for child in self.children)

    def copy(self, children):
        """Same type, attrs and marks, different children."""
        return Node(self.type, self.attrs, children, self.marks)

    def mark(self, marks):
        """Same node with a different mark set."""
        return Node(self.type, self.attrs, self.children, marks, self.text)

    def iter_nodes(self):
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children:
            for node in child.iter_nodes():
                yield node

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        if self is other:
            return True
        return (self.type == other.type
                and self.text == other.text
                and self.attrs == other.attrs
                and self.marks == other.marks
                and self.children == other.children)

    def __ne__(self, other):
        rv = self.__eq__(other)
        if rv is NotImplemented:
            return rv
        return not rv

    __hash__ = None

    def __repr__(self):
        if self.is_text:
            if self.marks:
                return 'text(%r, %s)' % (self.text, ', '.join(map(repr, self.marks)))
            return 'text(%r)' % (self.text,)
        parts = [repr(self.type)]
        parts.extend(repr(c) for c in self.children)
        parts.extend('%s=%r' % item for item in sorted(self.attrs.items()))
        return 'node(%s)' % ', '.join(parts)

    def to_json(self):
        rv = {'type': self.type}
        if self.attrs:
            rv['attrs'] = dict(self.attrs)
        if self.marks:
            rv['marks'] = [m.to_json() for m in self.marks]
        if self.text is not None:
            rv['text'] = self.text
        if self.children:
            rv['content'] = [c.to_json() for c in self.children]
        return rv

    @classmethod
    def from_json(cls, data, max_depth=None):
        """
        Load a node from ProseMirror-style JSON.

        The tree is built without recursion. With `max_depth` set, a
        document nested deeper than that raises DepthExceededError.
        """
        order = []
        stack = [(data, 0)]
        while stack:
            item, depth = stack.pop()
            if (max_depth is not None and item.get('type') != TEXT
                    and depth > max_depth):
                raise DepthExceededError(depth, max_depth)
            order.append(item)
            for child in item.get('content') or ():
                stack.append((child, depth + 1))

        # children always come after their parent in `order`
        built = {}
        for item in reversed(order):
            built[id(item)] = cls(
                item['type'],
                attrs=item.get('attrs'),
                children=[built[id(c)] for c in item.get('content') or ()],
                marks=[Mark.from_json(m) for m in item.get('marks') or ()],
                text=item.get('text'),
            )
        return built[id(data)]


def node(type, *children, **attrs):
    """Build a container node: ``node('paragraph', text('Hi'))``."""
    return Node(type, attrs, children)


def text(s, *marks):
    """Build a text leaf: ``text('bold', mark('bold'))``."""
    return Node(TEXT, marks=marks, text=s)


def mark(type, **attrs):
    return Mark(type, attrs)
