"""Tests for markdown primitives and the page buffer."""

from natdoc.writer import BufWriter, Markdown


class TestMarkdown:
    """Tests for Markdown helpers."""

    def test_heading_level_is_clamped(self) -> None:
        """Test that heading levels stay within 1..6."""
        assert Markdown.heading("Title", 0) == "# Title"
        assert Markdown.heading("Deep", 9) == "###### Deep"

    def test_inline_code_grows_fence_for_backticks(self) -> None:
        """Test inline code fences."""
        assert Markdown.code("uint256") == "`uint256`"
        assert Markdown.code("a`b") == "``a`b``"

    def test_code_block_strips_trailing_whitespace(self) -> None:
        """Test fenced blocks with the default language."""
        block = Markdown.code_block("function f()   \n    external  \n")

        assert block == "```solidity\nfunction f()\n    external\n```"

    def test_table_escapes_cells(self) -> None:
        """Test that cells collapse whitespace and escape pipes."""
        table = Markdown.table(
            ("Name", "Type", "Description"), [("`a`", "`uint256`", "one | two\nthree")]
        )

        assert table == (
            "|Name|Type|Description|\n"
            "|----|----|-----------|\n"
            "|`a`|`uint256`|one \\| two three|"
        )

    def test_bullet_list_indent(self) -> None:
        """Test nested bullet lists."""
        assert Markdown.bullet_list(["a", "b"], indent=1) == "  - a\n  - b"


class TestBufWriter:
    """Tests for BufWriter."""

    def test_blocks_are_separated_by_blank_lines(self) -> None:
        """Test the page layout and trailing newline."""
        writer = BufWriter()
        writer.heading("Counter")
        writer.write("Counts things.  ")
        writer.write("\n\n")

        assert writer.finish() == "# Counter\n\nCounts things.\n"

    def test_nested_headings(self) -> None:
        """Test that nesting moves headings one level down and back."""
        writer = BufWriter()
        writer.heading("Counter")
        with writer.nested():
            writer.heading("Functions")
            with writer.nested():
                writer.heading("increment")
        writer.heading("Next")

        assert writer.finish() == "# Counter\n\n## Functions\n\n### increment\n\n# Next\n"
        assert writer.level == 1

    def test_empty_writer(self) -> None:
        """Test that an empty writer renders nothing."""
        writer = BufWriter()

        assert writer.is_empty()
        assert writer.finish() == ""
