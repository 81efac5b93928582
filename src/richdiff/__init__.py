# -*- coding: utf-8 -*-
"""
    richdiff
    ~~~~~~~~

    Diffs rich-text document trees.  Both versions end up in one tree in
    which changed text is tagged as inserted or deleted, so showing a diff
    is just rendering that tree.  Examples:

    >>> from richdiff import diff_words, render_html_diff, DiffConfig

    >>> diff_words('JSON5', 'JSON6')
    [Segment(kind=0, text='JSON', granularity='char'), Segment(kind=-1, text='5', granularity='char'), Segment(kind=1, text='6', granularity='char')]

    >>> diff_words('hello', 'hello world')
    [Segment(kind=0, text='hello', granularity='word'), Segment(kind=1, text=' world', granularity='word')]

    >>> print(render_html_diff('<p>Foo bar</p>', '<p>Foo baz</p>'))
    <div class="diff"><p>Foo ba<del class="diff-char">r</del><ins class="diff-char">z</ins></p></div>

    >>> print(render_html_diff('<p>One</p>', '<p>One</p><p>Two</p>'))
    <div class="diff"><p>One</p><p><ins class="diff-word">Two</ins></p></div>

    :license: BSD, see LICENSE for more details.
"""
import logging

from .config import DiffConfig
from .differ import TreeDiffer, diff, diff_json, diff_tree, render_html_diff
from .exceptions import (
    RichDiffError, TypeMismatchError, MalformedNodeError, DepthExceededError, ConfigError,
)
from .inline_formatting import patch_text_run
from .nodes import Node, Mark, node, text, mark
from .parser import parse_html
from .renderer import render_html, render_diff_stream
from .text_differ import DiffType, Segment, Token, diff_chars, diff_words, tokenize
from .utils import validate_tree

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'diff',
    'diff_json',
    'diff_tree',
    'TreeDiffer',
    'diff_chars',
    'diff_words',
    'tokenize',
    'patch_text_run',
    'parse_html',
    'render_html',
    'render_diff_stream',
    'render_html_diff',
    'DiffConfig',
    'DiffType',
    'Segment',
    'Token',
    'Node',
    'Mark',
    'node',
    'text',
    'mark',
    'validate_tree',
    'RichDiffError',
    'TypeMismatchError',
    'MalformedNodeError',
    'DepthExceededError',
    'ConfigError',
]
