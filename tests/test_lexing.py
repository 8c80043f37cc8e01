"""Tests for codepaint.lexing — Pygments tokens to scope trees."""

import pytest
from pygments.lexers import PythonLexer, get_all_lexers, get_lexer_by_name
from pygments.token import Token

from codepaint.lexing import (
    PLAIN_TEXT,
    build_scope_tree,
    fallback_lexer,
    find_language,
    scope_name,
)
from codepaint.scopes import Scope, validate


def child_summary(root):
    return [(c.start, c.length, c.class_name) for c in root.children]


class TestScopeName:
    @pytest.mark.parametrize("ttype,expected", [
        (Token.Keyword, "Keyword"),
        (Token.Keyword.Constant, "Keyword"),
        (Token.Keyword.Type, "Type"),
        (Token.Name.Builtin.Pseudo, "Builtin Function"),
        (Token.Literal.String.Double, "String"),
        (Token.Literal.String.Escape, "String Escape"),
        (Token.Literal.Number.Integer, "Number"),
        (Token.Comment.Single, "Comment"),
        (Token.Comment.Preproc, "Preprocessor Keyword"),
        (Token.Operator.Word, "Keyword"),
    ])
    def test_mapped(self, ttype, expected):
        assert scope_name(ttype) == expected

    @pytest.mark.parametrize("ttype", [Token, Token.Name, Token.Punctuation, Token.Text])
    def test_unmapped_is_plain_text(self, ttype):
        assert scope_name(ttype) == PLAIN_TEXT


class TestFindLanguage:
    def test_known_alias(self):
        assert find_language("python").name == "Python"

    def test_case_and_whitespace_insensitive(self):
        assert find_language("  Python ").name == "Python"

    def test_unknown(self):
        assert find_language("no-such-language") is None

    @pytest.mark.parametrize("tag", [None, "", "   "])
    def test_empty(self, tag):
        assert find_language(tag) is None

    def test_fallback_for_unknown(self):
        assert fallback_lexer("no-such-language").name == "Python"

    def test_fallback_language_configurable(self):
        assert fallback_lexer(None, "javascript").name == "JavaScript"

    def test_fallback_keeps_known(self):
        assert fallback_lexer("bash").name == "Bash"


class TestBuildScopeTree:
    def test_root_covers_text(self):
        text = "def f():\n    return 1\n"
        root = build_scope_tree(text, PythonLexer())
        assert (root.start, root.length, root.class_name) == (0, len(text), PLAIN_TEXT)
        validate(root, len(text))

    def test_children(self):
        text = "def f():\n    return 1\n"
        root = build_scope_tree(text, PythonLexer())
        assert child_summary(root) == [
            (0, 3, "Keyword"),
            (4, 1, "Function"),
            (13, 6, "Keyword"),
            (20, 1, "Number"),
        ]

    def test_adjacent_string_tokens_merge(self):
        text = 'x = "abc"\n'
        root = build_scope_tree(text, PythonLexer())
        strings = [c for c in root.children if c.class_name == "String"]
        assert [(s.start, s.length) for s in strings] == [(4, 5)]

    def test_escape_nests_in_string(self):
        text = 'x = "a\\nb"\n'
        root = build_scope_tree(text, PythonLexer())
        (string,) = [c for c in root.children if c.class_name == "String"]
        assert (string.start, string.length) == (4, 6)
        assert string.children == (Scope(6, 2, "String Escape"),)
        validate(root, len(text))

    def test_empty_text(self):
        assert build_scope_tree("", PythonLexer()) == Scope(0, 0, PLAIN_TEXT)

    @pytest.mark.parametrize("tag,text", [
        ("python", "@dataclass\nclass A:\n    '''doc'''\n    x = f'{1!r:>3}'\n"),
        ("c", '#include <stdio.h>\nint main(void) { printf("%d\\n", 1); }\n'),
        ("html", '<a href="x">t&amp;</a>\n'),
        ("markdown", "# Title\n\n*em* and **strong**\n"),
        ("makefile", "all:\n\techo hi\n"),
    ])
    def test_valid_trees_across_languages(self, tag, text):
        root = build_scope_tree(text, find_language(tag))
        validate(root, len(text))


class TestLineOrientedLexers:
    def test_repl_offsets_follow_text(self):
        text = "> var x = 1;\n> if (x) {}\n"
        root = build_scope_tree(text, find_language("nodejsrepl"))
        validate(root, len(text))
        keywords = [text[c.start:c.end] for c in root.children if c.class_name == "Keyword"]
        assert keywords == ["var", "if"]

    def test_fixed_form_fortran(self):
        text = "      PROGRAM HELLO\n      PRINT *, 'HI'\n      END\n"
        root = build_scope_tree(text, find_language("fortranfixed"))
        validate(root, len(text))


_SAMPLE = (
    "# heading\n"
    "> prompt line\n"
    "def f(x):\n"
    "    return \"a\\tb\" + 'c' * 0x1F  // comment\n"
    "\tif (x) { y = [1, 2.5]; } /* block */\n"
    "<tag attr=\"v\">text</tag>\n"
)


def _all_lexer_aliases():
    return sorted(aliases[0] for _, aliases, _, _ in get_all_lexers() if aliases)


@pytest.mark.parametrize("alias", _all_lexer_aliases())
def test_every_pygments_lexer_builds_valid_tree(alias):
    root = build_scope_tree(_SAMPLE, get_lexer_by_name(alias))
    validate(root, len(_SAMPLE))
