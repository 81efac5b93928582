from __future__ import annotations

import re

from richdiff import DiffType, Segment, Token, diff_chars, diff_words, tokenize

_PAIRS = [
    ("", ""),
    ("", "hello"),
    ("hello", ""),
    ("hello world", "hello world"),
    ("JSON5", "JSON6"),
    ("JSONB", "JOHN"),
    ("the quick fox", "the slow dog"),
    ("a b", "a  b"),
    ("hello, world!", "hello; brave new world?"),
    ("Résumé naïve café", "Resume naive cafe"),
    ("foo@bar.com", "foo@baz.org"),
    ("line one\nline two\n", "line one\nline 2\nline three\n"),
    ("The JSON5 format", "The JSON6 format"),
]


def _old_side(segments):
    return "".join(s.text for s in segments if s.kind != DiffType.INSERTED)


def _new_side(segments):
    return "".join(s.text for s in segments if s.kind != DiffType.DELETED)


def _texts(segments, kind):
    return "".join(s.text for s in segments if s.kind == kind)


# --- tokenizer ---


def test_tokenize_simple_words():
    assert tokenize("hello world") == [
        Token("hello", 0, 5),
        Token(" ", 5, 6),
        Token("world", 6, 11),
    ]


def test_tokenize_punctuation():
    assert tokenize("hello, world!") == [
        Token("hello", 0, 5),
        Token(",", 5, 6),
        Token(" ", 6, 7),
        Token("world", 7, 12),
        Token("!", 12, 13),
    ]


def test_tokenize_multiple_spaces_and_special_chars():
    assert [t.text for t in tokenize("hello  world")] == ["hello", "  ", "world"]
    assert [t.text for t in tokenize("foo@bar.com")] == ["foo", "@", "bar", ".", "com"]
    assert [t.text for t in tokenize("a?!-b")] == ["a", "?!-", "b"]


def test_tokenize_empty_and_whitespace_only():
    assert tokenize("") == []
    assert tokenize("   ") == [Token("   ", 0, 3)]


def test_tokenize_underscore_and_digits_are_word_characters():
    assert [t.text for t in tokenize("snake_case42 x")] == ["snake_case42", " ", "x"]


def test_tokenize_is_total_and_never_mixes_classes():
    classes = [re.compile(r"^\w+$"), re.compile(r"^\s+$"), re.compile(r"^[^\w\s]+$")]
    for old, new in _PAIRS:
        for s in (old, new):
            tokens = tokenize(s)
            assert "".join(t.text for t in tokens) == s
            pos = 0
            for t in tokens:
                assert t.start == pos and t.end == pos + len(t.text)
                assert s[t.start:t.end] == t.text
                assert sum(1 for rx in classes if rx.match(t.text)) == 1
                pos = t.end


# --- character engine ---


def test_diff_chars_reconstructs_both_sides():
    for old, new in _PAIRS:
        segments = diff_chars(old, new)
        assert _old_side(segments) == old
        assert _new_side(segments) == new
        assert all(s.text for s in segments)


def test_diff_chars_equal_and_empty():
    assert diff_chars("", "") == []
    assert diff_chars("same", "same") == [Segment(DiffType.UNCHANGED, "same", "char")]
    assert diff_chars("", "new") == [Segment(DiffType.INSERTED, "new", "char")]


def test_diff_chars_is_minimal_for_single_substitution():
    segments = diff_chars("Foo bar", "Foo baz")
    assert segments == [
        Segment(DiffType.UNCHANGED, "Foo ba", "char"),
        Segment(DiffType.DELETED, "r", "char"),
        Segment(DiffType.INSERTED, "z", "char"),
    ]


def test_diff_chars_is_deterministic():
    old = "The quick brown fox jumps over the lazy dog. " * 20
    new = old.replace("fox", "cat").replace("lazy", "sleepy")
    assert diff_chars(old, new) == diff_chars(old, new)


# --- word engine ---


def test_diff_words_reconstructs_both_sides():
    for old, new in _PAIRS:
        segments = diff_words(old, new)
        assert _old_side(segments) == old
        assert _new_side(segments) == new


def test_diff_words_identical_texts_merge_into_one_segment():
    assert diff_words("hello world", "hello world") == [
        Segment(DiffType.UNCHANGED, "hello world", "word"),
    ]


def test_diff_words_single_word_change_gets_character_detail():
    segments = diff_words("JSON5", "JSON6")
    assert _texts(segments, DiffType.UNCHANGED) == "JSON"
    assert _texts(segments, DiffType.DELETED) == "5"
    assert _texts(segments, DiffType.INSERTED) == "6"
    assert all(s.granularity == "char" for s in segments)


def test_diff_words_replacement_with_character_detail():
    segments = diff_words("JSONB", "JOHN")
    assert _texts(segments, DiffType.UNCHANGED) == "JON"
    assert _texts(segments, DiffType.DELETED) == "SB"
    assert _texts(segments, DiffType.INSERTED) == "H"


def test_diff_words_orphan_insertion_is_word_level():
    segments = diff_words("hello", "hello world")
    assert segments == [
        Segment(DiffType.UNCHANGED, "hello", "word"),
        Segment(DiffType.INSERTED, " world", "word"),
    ]


def test_diff_words_orphan_deletion_is_word_level():
    segments = diff_words("hello world", "hello")
    assert _texts(segments, DiffType.UNCHANGED) == "hello"
    assert _texts(segments, DiffType.DELETED) == " world"
    assert all(s.granularity == "word" for s in segments if s.kind == DiffType.DELETED)


def test_diff_words_empty_sides():
    assert diff_words("", "") == []
    assert diff_words("", "hello") == [Segment(DiffType.INSERTED, "hello", "word")]
    assert diff_words("hello", "") == [Segment(DiffType.DELETED, "hello", "word")]


def test_diff_words_punctuation_change():
    segments = diff_words("hello,", "hello.")
    assert _texts(segments, DiffType.DELETED) == ","
    assert _texts(segments, DiffType.INSERTED) == "."


def test_diff_words_sentence_with_similar_words():
    segments = diff_words("The JSON5 format", "The JSON6 format")
    unchanged = _texts(segments, DiffType.UNCHANGED)
    assert "The " in unchanged and "JSON" in unchanged and " format" in unchanged
    changed = [s for s in segments if s.kind != DiffType.UNCHANGED]
    assert [(s.kind, s.text, s.granularity) for s in changed] == [
        (DiffType.DELETED, "5", "char"),
        (DiffType.INSERTED, "6", "char"),
    ]


def test_diff_words_multiple_word_changes():
    segments = diff_words("the quick fox", "the slow dog")
    assert segments[0] == Segment(DiffType.UNCHANGED, "the ", "word")
    assert _texts(segments, DiffType.DELETED)
    assert _texts(segments, DiffType.INSERTED)
    assert all(s.granularity in ("word", "char") for s in segments)


def test_diff_words_never_leaves_adjacent_mergeable_segments():
    for old, new in _PAIRS:
        segments = diff_words(old, new)
        for a, b in zip(segments, segments[1:]):
            assert (a.kind, a.granularity) != (b.kind, b.granularity)


def test_diff_words_granularity_rule():
    # Pure insertions and deletions of whole words stay at word level.
    for old, new in [("a b", "a b c"), ("x y z", "x z"), ("keep", "keep, more")]:
        for s in diff_words(old, new):
            if s.kind != DiffType.UNCHANGED:
                assert s.granularity == "word"
    # A deleted run followed by an inserted run is refined per character.
    for s in diff_words("colour", "color"):
        assert s.granularity == "char"
