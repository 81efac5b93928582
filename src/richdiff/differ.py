# -*- coding: utf-8 -*-
"""
Main classes to diff two document trees into one annotated tree.
"""
import copy
import logging

from .config import (
    DiffConfig, KIND_DELETED, KIND_INSERTED, GRANULARITY_WORD, check_granularity,
)
from .exceptions import DepthExceededError
from .inline_formatting import patch_text_run
from .nodes import Node
from .utils import (
    normalize_children, flatten, is_text_run, is_node_equal, match_node_type,
    assert_node_type_equal, longest_common_prefix_len, longest_common_suffix_len,
    create_diff_mark, validate_node, validate_tree,
)

logger = logging.getLogger(__name__)


def diff_tree(old, new, config=None):
    """Diff two validated document trees."""
    differ = TreeDiffer(old, new, config=config)
    return differ.get_diff_tree()


def diff(old_tree, new_tree, config=None, granularity=None):
    """
    Merge two versions of a document into one tree in which every changed
    text is tagged as inserted or deleted.

    Both trees are checked in full before anything is built, so a bad input
    raises without producing a partial result.
    """
    config = config or DiffConfig()
    if granularity is not None:
        config = _with_granularity(config, granularity)
    assert_node_type_equal(old_tree, new_tree)
    validate_tree(old_tree, config)
    validate_tree(new_tree, config)
    return diff_tree(old_tree, new_tree, config)


def diff_json(old_json, new_json, config=None, granularity=None):
    """Like :func:`diff` for ProseMirror-style JSON documents."""
    config = config or DiffConfig()
    rv = diff(Node.from_json(old_json, config.max_depth),
              Node.from_json(new_json, config.max_depth),
              config=config, granularity=granularity)
    return rv.to_json()


def render_html_diff(old, new, wrapper_element='div', wrapper_class='diff', config=None):
    """Renders the diff between two HTML fragments."""
    from .parser import parse_html
    from .renderer import render_html
    config = config or DiffConfig()
    rv = diff(parse_html(old, config), parse_html(new, config), config=config)
    return render_html(rv, config, wrapper_element, wrapper_class)


def _with_granularity(config, granularity):
    rv = copy.copy(config)
    rv.granularity = check_granularity(granularity)
    return rv


class TreeDiffer(object):
    """
    Aligns the children of two same-typed containers, level by level.

    Unchanged children are reused as they are, runs of text are handed to
    the text run patcher, and whatever cannot be aligned is copied whole as
    deleted or inserted content.
    """

    def __init__(self, old, new, config=None):
        self.config = config or DiffConfig()
        self._old = old
        self._new = new
        self._result = None

    def get_diff_tree(self):
        if self._result is None:
            self._result = self.patch(self._old, self._new)
        return self._result

    def _check_depth(self, depth):
        if depth > self.config.max_depth:
            raise DepthExceededError(depth, self.config.max_depth)

    def patch(self, old, new, depth=0):
        """Patch two nodes of the same type into one."""
        self._check_depth(depth)
        assert_node_type_equal(old, new)
        validate_node(old, self.config)
        validate_node(new, self.config)

        old_children = normalize_children(old)
        new_children = normalize_children(new)
        left = longest_common_prefix_len(old_children, new_children)
        right = longest_common_suffix_len(old_children, new_children, left)
        logger.debug('%s: eq left:%d, right:%d', old.type, left, right)

        final_left = flatten(old_children[:left])
        final_right = flatten(old_children[len(old_children) - right:])
        old_middle = old_children[left:len(old_children) - right]
        new_middle = new_children[left:len(new_children) - right]

        best = None
        if old_middle and new_middle:
            best = self._best_match(old_middle, new_middle)
        if best is not None:
            old_start, new_start, old_end, new_end = best
            logger.debug('%s: best match old[%d:%d] new[%d:%d]',
                         old.type, old_start, old_end, new_start, new_end)
            final_left.extend(self._patch_remaining(
                old_middle[:old_start], new_middle[:new_start], depth))
            final_left.extend(flatten(old_middle[old_start:old_end]))
            final_right = self._patch_remaining(
                old_middle[old_end:], new_middle[new_end:], depth) + final_right
        else:
            final_left.extend(self._patch_remaining(old_middle, new_middle, depth))
        return old.copy(final_left + final_right)

    def _match_nodes(self, old_children, new_children):
        """
        Candidate aligned blocks: for every old child, the first equal new
        child, extended forward while the following children stay equal.
        """
        matches = []
        for old_start, old_child in enumerate(old_children):
            new_start = self._find_match_node(new_children, old_child)
            if new_start == -1:
                continue
            old_end = old_start + 1
            new_end = new_start + 1
            while (old_end < len(old_children) and new_end < len(new_children)
                   and is_node_equal(old_children[old_end], new_children[new_end])):
                old_end += 1
                new_end += 1
            matches.append((old_start, new_start, old_end, new_end))
        return matches

    def _find_match_node(self, children, item, start=0):
        for i in range(start, len(children)):
            if is_node_equal(children[i], item):
                return i
        return -1

    def _best_match(self, old_children, new_children):
        """Longest candidate block; the first one found wins ties."""
        best = None
        for match in self._match_nodes(old_children, new_children):
            if best is None or match[3] - match[1] > best[3] - best[1]:
                best = match
        return best

    def _patch_pair(self, old, new, depth):
        if is_text_run(old):
            return patch_text_run(old, new, config=self.config)
        return [self.patch(old, new, depth + 1)]

    def _patch_remaining(self, old_children, new_children, depth):
        """
        Patch unaligned children pairwise from both ends. Pairs that can be
        patched recursively are; the rest is deleted and inserted whole.
        """
        final_left = []
        final_right = []
        old_len = len(old_children)
        new_len = len(new_children)
        left = 0
        right = 0
        while old_len - left - right > 0 and new_len - left - right > 0:
            left_old = old_children[left]
            left_new = new_children[left]
            right_old = old_children[old_len - right - 1]
            right_new = new_children[new_len - right - 1]

            if is_text_run(left_old) and is_text_run(left_new):
                final_left.extend(patch_text_run(left_old, left_new, config=self.config))
                left += 1
                continue

            update_left = match_node_type(left_old, left_new)
            update_right = match_node_type(right_old, right_new)
            if update_left and update_right:
                # Left always wins; the right pair is reconsidered next round
                update_right = False

            if update_left:
                final_left.extend(self._patch_pair(left_old, left_new, depth))
                left += 1
            elif update_right:
                final_right[:0] = self._patch_pair(right_old, right_new, depth)
                right += 1
            else:
                logger.debug('replacing %s with %s', _describe(left_old), _describe(left_new))
                final_left.extend(self.create_diff_nodes(left_old, KIND_DELETED, depth))
                final_left.extend(self.create_diff_nodes(left_new, KIND_INSERTED, depth))
                left += 1

        for item in old_children[left:old_len - right]:
            final_left.extend(self.create_diff_nodes(item, KIND_DELETED, depth))
        inserted = []
        for item in new_children[left:new_len - right]:
            inserted.extend(self.create_diff_nodes(item, KIND_INSERTED, depth))
        return final_left + inserted + final_right

    def create_diff_nodes(self, item, kind, depth=0):
        """Copy a node or a text run, tagging every text leaf with `kind`."""
        tag = create_diff_mark(kind, GRANULARITY_WORD, self.config)
        if is_text_run(item):
            return [leaf.mark(leaf.marks + (tag,)) for leaf in item]
        return [self._map_diff_node(item, tag, depth + 1)]

    def _map_diff_node(self, node, tag, depth):
        if node.is_text:
            return node.mark(node.marks + (tag,))
        self._check_depth(depth)
        return node.copy([self._map_diff_node(c, tag, depth + 1) for c in node.children])


def _describe(item):
    if is_text_run(item):
        return 'text run'
    return item.type
