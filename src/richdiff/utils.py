# -*- coding: utf-8 -*-
"""
Helpers shared by the differ, the text run patcher and the HTML adapter.
"""
from .config import TEXT, DiffConfig
from .exceptions import MalformedNodeError, DepthExceededError, TypeMismatchError
from .nodes import Mark


def qname_localname(qname):
    """
    QName in genshi renders like 'tag' or 'ns}tag'. Normalize to localname.
    html5lib's etree builder puts every element in the XHTML namespace.
    """
    s = str(qname)
    if '}' in s:
        left, right = s.split('}', 1)
        if left.startswith('{') or '://' in left or left.startswith('http'):
            return right
    return s


def is_text_run(item):
    """Text runs are tuples of adjacent text leaves (see normalize_children)."""
    return isinstance(item, tuple)


def normalize_children(node):
    """
    Group consecutive text children of `node` into tuples so that a run of
    differently styled text is aligned as a single unit.
    """
    rv = []
    run = []
    for child in node.children:
        if child.type == TEXT:
            run.append(child)
            continue
        if run:
            rv.append(tuple(run))
            run = []
        rv.append(child)
    if run:
        rv.append(tuple(run))
    return rv


def flatten(items):
    """Expand text runs back into their leaves."""
    rv = []
    for item in items:
        if is_text_run(item):
            rv.extend(item)
        else:
            rv.append(item)
    return rv


def is_node_equal(a, b):
    """Deep equality of two nodes or two text runs."""
    if is_text_run(a) != is_text_run(b):
        return False
    return a == b


def match_node_type(a, b):
    """True for two text runs or two nodes of the same type."""
    if is_text_run(a) or is_text_run(b):
        return is_text_run(a) and is_text_run(b)
    return a.type == b.type


def assert_node_type_equal(old, new):
    if old.type != new.type:
        raise TypeMismatchError(old.type, new.type)


def longest_common_prefix_len(a, b):
    """Length of the common prefix of two child sequences."""
    n = min(len(a), len(b))
    i = 0
    while i < n and is_node_equal(a[i], b[i]):
        i += 1
    return i


def longest_common_suffix_len(a, b, max_prefix=0):
    """
    Length of the common suffix. At least one child of the shorter sequence
    is always left between prefix and suffix for block matching.
    """
    max_len = min(len(a), len(b)) - max_prefix - 1
    i = 0
    while i < max_len and is_node_equal(a[-1 - i], b[-1 - i]):
        i += 1
    return i


def create_diff_mark(kind, granularity, config=None):
    config = config or DiffConfig()
    return Mark(config.diff_mark_type, {'kind': kind, 'granularity': granularity})


def is_diff_mark(mark, config=None):
    config = config or DiffConfig()
    return mark.type == config.diff_mark_type


def iter_diff_marks(root, config=None):
    """Yield (text node, diff mark) for every tagged leaf under `root`."""
    for n in root.iter_nodes():
        for m in n.marks:
            if is_diff_mark(m, config):
                yield n, m


def validate_node(node, config=None):
    """Check one node (not its descendants) against the document model."""
    config = config or DiffConfig()
    if node.type not in config.node_types:
        raise MalformedNodeError('unknown node type %r' % (node.type,), node)
    if node.type == TEXT:
        if node.children:
            raise MalformedNodeError('text node with children', node)
        if not isinstance(node.text, str):
            raise MalformedNodeError('text node without text content', node)
        for m in node.marks:
            if is_diff_mark(m, config):
                raise MalformedNodeError('input text carries a diff mark', node)
    elif node.text is not None:
        raise MalformedNodeError('%s node with text content' % node.type, node)


def validate_tree(root, config=None):
    """
    Validate a whole tree, failing on the first bad node. Depth counts
    nested nodes; text leaves do not add a level.
    """
    config = config or DiffConfig()
    stack = [(root, 0)]
    while stack:
        n, depth = stack.pop()
        if not n.is_text and depth > config.max_depth:
            raise DepthExceededError(depth, config.max_depth)
        validate_node(n, config)
        for child in reversed(n.children):
            stack.append((child, depth + 1))
