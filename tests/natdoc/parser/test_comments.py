"""Tests for doc comment parsing and merging."""

import pytest

from natdoc.core.exceptions import MalformedTagError
from natdoc.parser.comments import (
    Comment,
    CommentTag,
    CommentTagKind,
    Comments,
    parse_doc_comment,
)


class TestParseDocComment:
    """Tests for parse_doc_comment."""

    def test_untagged_text_is_notice(self) -> None:
        """Test that text before the first tag becomes a notice."""
        comments = parse_doc_comment("/// Counts things.")

        assert len(comments) == 1
        assert comments[0].kind is CommentTagKind.NOTICE
        assert comments[0].value == "Counts things."

    def test_continuation_lines_join_open_tag(self) -> None:
        """Test that continuation lines merge into the open tag with newlines."""
        raw = "/// @dev First line.\n///      Second line.\n///      Third line."

        comments = parse_doc_comment(raw)

        assert len(comments) == 1
        assert comments.first(CommentTagKind.DEV) == "First line.\nSecond line.\nThird line."

    def test_block_comment_markers_are_stripped(self) -> None:
        """Test a /** */ block with leading asterisks."""
        raw = "/**\n * @notice Hello\n * world\n * @param a The a\n */"

        comments = parse_doc_comment(raw)

        assert comments.first(CommentTagKind.NOTICE) == "Hello\nworld"
        param = comments.find_param("a")
        assert param is not None
        assert param.value == "The a"

    def test_all_tag_kinds(self) -> None:
        """Test that every standard tag is recognised in source order."""
        raw = "\n".join(
            [
                "/// @title Vault",
                "/// @author Alice",
                "/// @notice Holds funds.",
                "/// @dev Uses checks-effects-interactions.",
                "/// @param amount Amount to deposit",
                "/// @return shares Minted shares",
                "/// @inheritdoc IVault",
                "/// @custom:security-contact team@example.org",
            ]
        )

        comments = parse_doc_comment(raw)

        assert [c.kind for c in comments] == [
            CommentTagKind.TITLE,
            CommentTagKind.AUTHOR,
            CommentTagKind.NOTICE,
            CommentTagKind.DEV,
            CommentTagKind.PARAM,
            CommentTagKind.RETURN,
            CommentTagKind.INHERITDOC,
            CommentTagKind.CUSTOM,
        ]
        assert comments.inheritdoc() == "IVault"
        assert comments.custom()[0].name == "security-contact"
        assert comments.custom()[0].value == "team@example.org"

    def test_return_is_unbound_until_bound(self) -> None:
        """Test that @return keeps its first word in the text."""
        comments = parse_doc_comment("/// @return shares Minted shares")

        assert comments.returns()[0].name is None
        assert comments.returns()[0].value == "shares Minted shares"

    def test_unknown_tag_is_custom_when_lenient(self) -> None:
        """Test that an unknown tag is kept as a custom tag."""
        comments = parse_doc_comment("/// @foo bar baz")

        assert comments[0].tag == CommentTag(CommentTagKind.CUSTOM, "foo")
        assert comments[0].value == "bar baz"

    def test_param_without_name_is_custom_when_lenient(self) -> None:
        """Test that a nameless @param does not become a param tag."""
        comments = parse_doc_comment("/// @param")

        assert comments[0].kind is CommentTagKind.CUSTOM
        assert comments[0].name == "param"

    def test_unknown_tag_raises_when_strict(self) -> None:
        """Test that strict mode rejects unknown tags with a location."""
        with pytest.raises(MalformedTagError) as exc_info:
            parse_doc_comment(
                "/// @notice ok\n/// @foo bar", strict=True, source_file="src/A.sol", line=10
            )

        assert exc_info.value.tag == "foo"
        assert exc_info.value.source_file == "src/A.sol"
        assert exc_info.value.line == 11

    def test_empty_block(self) -> None:
        """Test that an empty comment block yields no comments."""
        assert not parse_doc_comment("///")


class TestComments:
    """Tests for the Comments collection."""

    def test_lookup_helpers(self) -> None:
        """Test first, all and find."""
        comments = parse_doc_comment(
            "/// @notice One\n/// @param a A\n/// @param b B\n/// @notice Two"
        )

        assert comments.first(CommentTagKind.NOTICE) == "One"
        assert comments.all(CommentTagKind.NOTICE) == ["One", "Two"]
        assert comments.find(CommentTagKind.PARAM, "b") == Comment(
            CommentTag(CommentTagKind.PARAM, "b"), "B"
        )
        assert comments.first(CommentTagKind.DEV) is None
        assert comments.inheritdoc() is None

    def test_include_and_exclude_filter_by_kind(self) -> None:
        """Test that include keeps and exclude drops the given kinds in order."""
        comments = parse_doc_comment(
            "/// @notice One\n/// @dev Detail\n/// @param a A\n/// @notice Two"
        )

        kept = comments.include(CommentTagKind.NOTICE, CommentTagKind.PARAM)
        dropped = comments.exclude(CommentTagKind.NOTICE, CommentTagKind.PARAM)

        assert [c.value for c in kept] == ["One", "A", "Two"]
        assert [c.value for c in dropped] == ["Detail"]
        assert not comments.include(CommentTagKind.AUTHOR)

    def test_bind_returns_matches_first_word(self) -> None:
        """Test that @return binds to a named return slot."""
        comments = parse_doc_comment("/// @return total The sum\n/// @return Something else")

        bound = comments.bind_returns(["total", None])

        assert bound.returns()[0].name == "total"
        assert bound.returns()[0].value == "The sum"
        assert bound.returns()[1].name is None
        assert bound.returns()[1].value == "Something else"

    def test_bind_returns_without_names_is_identity(self) -> None:
        """Test that unnamed return slots leave comments untouched."""
        comments = parse_doc_comment("/// @return total The sum")

        assert comments.bind_returns([None]) is comments

    def test_merge_inherited_per_name(self) -> None:
        """Test that local tags win and missing ones are inherited."""
        local = parse_doc_comment(
            "/// @notice Local notice\n/// @param a Local a\n/// @inheritdoc Base"
        )
        base = parse_doc_comment(
            "/// @notice Base notice\n/// @dev Base dev\n"
            "/// @param a Base a\n/// @param b Base b"
        )

        merged = local.merge_inherited(base)

        assert merged.first(CommentTagKind.NOTICE) == "Local notice"
        assert merged.all(CommentTagKind.NOTICE) == ["Local notice"]
        assert merged.first(CommentTagKind.DEV) == "Base dev"
        assert [(c.name, c.value) for c in merged.params()] == [("b", "Base b"), ("a", "Local a")]
        assert merged.inheritdoc() is None

    def test_merge_inherited_replace(self) -> None:
        """Test that one local @param hides every inherited one under replace."""
        local = parse_doc_comment("/// @param a Local a\n/// @inheritdoc Base")
        base = parse_doc_comment("/// @param a Base a\n/// @param b Base b")

        merged = local.merge_inherited(base, policy="replace")

        assert [(c.name, c.value) for c in merged.params()] == [("a", "Local a")]

    def test_with_values(self) -> None:
        """Test that with_values rewrites text and keeps tags."""
        comments = parse_doc_comment("/// @notice hello\n/// @dev world")

        upper = comments.with_values(lambda c: c.value.upper())

        assert upper.all(CommentTagKind.NOTICE) == ["HELLO"]
        assert upper.all(CommentTagKind.DEV) == ["WORLD"]
        assert comments.first(CommentTagKind.NOTICE) == "hello"

    def test_equality(self) -> None:
        """Test value equality between collections."""
        assert parse_doc_comment("/// @notice x") == parse_doc_comment("/**\n * @notice x\n */")
        assert Comments() != parse_doc_comment("/// @notice x")
