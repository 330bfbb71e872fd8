"""Tests for the declaration parser."""

import pytest

from natdoc.core.diagnostics import WarningCode
from natdoc.core.exceptions import MalformedTagError, ParseError, UnbalancedDelimitersError
from natdoc.parser import parse
from natdoc.parser.comments import CommentTagKind
from natdoc.parser.items import (
    ContractKind,
    ContractSource,
    EnumSource,
    ErrorSource,
    EventSource,
    FunctionKind,
    FunctionSource,
    ItemKind,
    ModifierSource,
    Param,
    StructSource,
    TypeSource,
    VariableSource,
    Visibility,
)

SHAPES_SOL = """\
/// @notice Geometry helpers.
contract Shapes {
    /// @notice A point.
    struct Point { uint256 x; uint256 y; }

    enum Color { Red, Green }

    /// @notice Emitted on a move.
    event Moved(address indexed who, uint256 amount);

    error TooFar(uint256 distance);

    type Price is uint128;

    modifier onlyOwner() {
        _;
    }

    mapping(address => uint256) private balances;
    uint256 public constant LIMIT = 10;

    constructor() {}

    receive() external payable {}
}
"""


class TestParse:
    """Tests for parse on whole files."""

    def test_items_in_source_order_with_parents(self, counter_sources: dict[str, str]) -> None:
        """Test that a contract precedes its members and members carry the parent."""
        items, warnings = parse(counter_sources["src/ICounter.sol"], "src/ICounter.sol")

        assert [(i.kind, i.qualified_name) for i in items] == [
            (ItemKind.CONTRACT, "ICounter"),
            (ItemKind.FUNCTION, "ICounter.count"),
            (ItemKind.FUNCTION, "ICounter.increment"),
        ]
        assert items[0].parent is None
        assert all(i.parent == "ICounter" for i in items[1:])
        assert all(i.source_file == "src/ICounter.sol" for i in items)
        assert warnings == []

    def test_comments_attach_to_following_declaration(
        self, counter_sources: dict[str, str]
    ) -> None:
        """Test doc comment attachment for a contract and its members."""
        items, _ = parse(counter_sources["src/ICounter.sol"], "src/ICounter.sol")
        contract, count, increment = items

        assert contract.comments.first(CommentTagKind.TITLE) == "Counter interface"
        assert contract.comments.first(CommentTagKind.NOTICE) == "Something that counts."
        assert count.comments.first(CommentTagKind.NOTICE) == "Current value."
        assert increment.comments.first(CommentTagKind.DEV) == "Reverts on overflow."
        assert increment.comments.find_param("step") is not None

    def test_declaration_without_comment(self) -> None:
        """Test that an undocumented declaration has empty comments."""
        items, warnings = parse("contract Plain {\n    function run() external {}\n}\n", "A.sol")

        assert all(not item.comments for item in items)
        assert warnings == []

    def test_signature_is_literal_source_text(self) -> None:
        """Test that signatures keep the original spacing and line breaks."""
        source = (
            "contract A {\n"
            "    function   foo( uint256 a )\n"
            "        external\n"
            "        pure\n"
            "        returns (uint256) {\n"
            "        return a;\n"
            "    }\n"
            "}\n"
        )

        items, _ = parse(source, "A.sol")
        function = items[1]

        assert function.source.signature == (
            "function   foo( uint256 a )\n"
            "        external\n"
            "        pure\n"
            "        returns (uint256)"
        )
        assert source[function.span[0] : function.span[1]].endswith("}")

    def test_contract_signature_and_bases(self) -> None:
        """Test contract kinds and the inheritance list."""
        source = (
            "abstract contract Token is ERC20(\"T\", \"T\"), Ownable {\n}\n"
            "library Math {}\n"
            "interface IThing {}\n"
        )

        items, _ = parse(source, "A.sol")

        token, math, thing = (item.source for item in items)
        assert isinstance(token, ContractSource)
        assert token.contract_kind is ContractKind.ABSTRACT
        assert token.bases == ["ERC20", "Ownable"]
        assert token.signature == 'abstract contract Token is ERC20("T", "T"), Ownable'
        assert math.contract_kind is ContractKind.LIBRARY
        assert thing.contract_kind is ContractKind.INTERFACE

    def test_function_qualifiers(self) -> None:
        """Test visibility, mutability, modifiers, overrides and returns."""
        source = (
            "contract A is B {\n"
            "    function f(uint256 a, address payable to) external view virtual\n"
            "        override(B) onlyOwner whenNot(1) returns (uint256 total, bool) {}\n"
            "}\n"
        )

        items, _ = parse(source, "A.sol")
        function = items[1].source

        assert isinstance(function, FunctionSource)
        assert function.visibility is Visibility.EXTERNAL
        assert function.mutability == "view"
        assert function.is_virtual
        assert function.overrides == ["B"]
        assert function.modifiers == ["onlyOwner", "whenNot(1)"]
        assert function.params == [
            Param(name="a", type="uint256"),
            Param(name="to", type="address payable"),
        ]
        assert function.returns == [Param(name="total", type="uint256"), Param(None, "bool")]

    def test_default_function_visibility(self) -> None:
        """Test defaults for free functions, interfaces and contracts."""
        source = (
            "function free() {}\n"
            "interface I {\n    function g();\n}\n"
            "contract C {\n    function h() {}\n    fallback() {}\n}\n"
        )

        items, _ = parse(source, "A.sol")
        by_name = {item.qualified_name: item for item in items}

        assert by_name["free"].visibility is Visibility.INTERNAL
        assert by_name["I.g"].visibility is Visibility.EXTERNAL
        assert by_name["C.h"].visibility is Visibility.PUBLIC
        assert by_name["C.fallback"].visibility is Visibility.EXTERNAL
        assert by_name["C.fallback"].source.function_kind is FunctionKind.FALLBACK

    def test_function_type_variable_is_a_variable(self) -> None:
        """Test that a state variable of function type is not read as a fallback."""
        source = (
            "contract C {\n"
            "    /// @notice the callback\n"
            "    function (uint256) external returns (uint256) callback;\n"
            "    /// @notice real fallback\n"
            "    fallback() external {}\n"
            "}\n"
        )

        items, warnings = parse(source, "C.sol")
        callback, fallback = items[1:]

        assert warnings == []
        assert [(i.kind, i.name) for i in items] == [
            (ItemKind.CONTRACT, "C"),
            (ItemKind.VARIABLE, "callback"),
            (ItemKind.FUNCTION, "fallback"),
        ]
        assert callback.source.type == "function(uint256) external returns(uint256)"
        assert callback.visibility is Visibility.INTERNAL
        assert callback.comments.first(CommentTagKind.NOTICE) == "the callback"
        assert fallback.comments.first(CommentTagKind.NOTICE) == "real fallback"

    def test_function_type_variable_with_visibility(self) -> None:
        """Test that qualifiers after the function type apply to the variable."""
        source = "contract C {\n    function (address) internal view public hook = check;\n}\n"

        items, _ = parse(source, "C.sol")

        assert items[1].kind is ItemKind.VARIABLE
        assert items[1].name == "hook"
        assert items[1].visibility is Visibility.PUBLIC
        assert items[1].source.type == "function(address) internal view"

    def test_legacy_unnamed_function_is_fallback(self) -> None:
        """Test that an unnamed function with a body is the fallback function."""
        items, _ = parse("contract C {\n    function () external {}\n}\n", "C.sol")

        assert items[1].kind is ItemKind.FUNCTION
        assert items[1].source.function_kind is FunctionKind.FALLBACK

    def test_return_tags_bind_to_named_returns(self) -> None:
        """Test that @return is bound to the named return slot at parse time."""
        source = (
            "/// @return total The sum\n"
            "function sum(uint256 a, uint256 b) pure returns (uint256 total) {}\n"
        )

        items, _ = parse(source, "A.sol")
        returns = items[0].comments.returns()

        assert returns[0].name == "total"
        assert returns[0].value == "The sum"

    def test_every_declaration_kind(self) -> None:
        """Test structs, enums, events, errors, types, modifiers and variables."""
        items, warnings = parse(SHAPES_SOL, "src/Shapes.sol")
        by_name = {item.name: item for item in items}

        assert warnings == []
        assert [item.kind for item in items] == [
            ItemKind.CONTRACT,
            ItemKind.STRUCT,
            ItemKind.ENUM,
            ItemKind.EVENT,
            ItemKind.ERROR,
            ItemKind.TYPE,
            ItemKind.MODIFIER,
            ItemKind.VARIABLE,
            ItemKind.VARIABLE,
            ItemKind.FUNCTION,
            ItemKind.FUNCTION,
        ]

        point = by_name["Point"].source
        assert isinstance(point, StructSource)
        assert point.fields == [Param("x", "uint256"), Param("y", "uint256")]
        assert by_name["Point"].comments.first(CommentTagKind.NOTICE) == "A point."

        color = by_name["Color"].source
        assert isinstance(color, EnumSource)
        assert color.values == ["Red", "Green"]

        moved = by_name["Moved"].source
        assert isinstance(moved, EventSource)
        assert moved.signature == "event Moved(address indexed who, uint256 amount);"
        assert moved.params == [
            Param("who", "address", indexed=True),
            Param("amount", "uint256"),
        ]

        too_far = by_name["TooFar"].source
        assert isinstance(too_far, ErrorSource)
        assert too_far.params == [Param("distance", "uint256")]

        price = by_name["Price"].source
        assert isinstance(price, TypeSource)
        assert price.underlying == "uint128"

        assert isinstance(by_name["onlyOwner"].source, ModifierSource)
        assert by_name["onlyOwner"].source.signature == "modifier onlyOwner()"

        balances = by_name["balances"].source
        assert isinstance(balances, VariableSource)
        assert balances.type == "mapping(address => uint256)"
        assert balances.visibility is Visibility.PRIVATE

        limit = by_name["LIMIT"].source
        assert limit.mutability == "constant"
        assert limit.signature == "uint256 public constant LIMIT = 10;"

        assert by_name["constructor"].source.function_kind is FunctionKind.CONSTRUCTOR
        assert by_name["receive"].source.function_kind is FunctionKind.RECEIVE


class TestDocAttachment:
    """Tests for attaching and discarding doc comments."""

    def test_blank_line_detaches_comment(self) -> None:
        """Test that a blank line between comment and declaration drops the comment."""
        source = "/// @notice Lost\n\ncontract A {}\n"

        items, warnings = parse(source, "A.sol")

        assert not items[0].comments
        assert [w.code for w in warnings] == [WarningCode.DANGLING_COMMENT]
        assert warnings[0].line == 1
        assert warnings[0].source_file == "A.sol"

    def test_plain_comment_does_not_break_attachment(self) -> None:
        """Test that an ordinary comment between doc and declaration is ignored."""
        source = "/// @notice Kept\n// plain note\ncontract A {}\n"

        items, warnings = parse(source, "A.sol")

        assert items[0].comments.first(CommentTagKind.NOTICE) == "Kept"
        assert warnings == []

    def test_comment_before_pragma_is_dangling(self) -> None:
        """Test that doc comments before pragma or import are discarded."""
        source = "/// @notice File header\npragma solidity ^0.8.0;\ncontract A {}\n"

        items, warnings = parse(source, "A.sol")

        assert not items[0].comments
        assert [w.code for w in warnings] == [WarningCode.DANGLING_COMMENT]

    def test_comment_at_end_of_contract_is_dangling(self) -> None:
        """Test that a doc comment with no following declaration is reported."""
        source = "contract A {\n    /// @notice Orphaned\n}\n"

        items, warnings = parse(source, "A.sol")

        assert len(items) == 1
        assert [w.code for w in warnings] == [WarningCode.DANGLING_COMMENT]
        assert warnings[0].line == 2

    def test_comments_inside_bodies_are_reported(self) -> None:
        """Test that doc comments in struct and function bodies produce warnings."""
        source = (
            "contract A {\n"
            "    struct S {\n"
            "        /// @dev the amount\n"
            "        uint256 amount;\n"
            "    }\n"
            "    function f() external {\n"
            "        /// @dev inside\n"
            "        /// @dev still inside\n"
            "        return;\n"
            "    }\n"
            "}\n"
        )

        items, warnings = parse(source, "A.sol")

        assert [i.name for i in items] == ["A", "S", "f"]
        assert [w.code for w in warnings] == [WarningCode.DANGLING_COMMENT] * 2
        assert [w.line for w in warnings] == [3, 7]

    def test_separated_blocks_keep_only_the_last(self) -> None:
        """Test that two doc blocks split by a blank line attach only the second."""
        source = "/// @notice First\n\n/// @notice Second\ncontract A {}\n"

        items, warnings = parse(source, "A.sol")

        assert items[0].comments.all(CommentTagKind.NOTICE) == ["Second"]
        assert len(warnings) == 1


class TestParseErrors:
    """Tests for parse failures."""

    def test_unclosed_brace_raises(self) -> None:
        """Test that a missing closing brace is a parse error."""
        with pytest.raises(UnbalancedDelimitersError) as exc_info:
            parse("contract A {\n    function f() {}\n", "src/A.sol")

        assert exc_info.value.source_file == "src/A.sol"
        assert exc_info.value.delimiter == "{"

    def test_mismatched_closer_raises(self) -> None:
        """Test that a closer of the wrong kind is a parse error."""
        with pytest.raises(UnbalancedDelimitersError) as exc_info:
            parse("contract A {\n    )\n}\n", "A.sol")

        assert exc_info.value.line == 2

    @pytest.mark.parametrize(
        "source",
        ["contract A {}\nabstract contract", "contract A {}\nfunction", "abstract contract {}"],
    )
    def test_truncated_declaration_raises(self, source: str) -> None:
        """Test that a declaration cut off after its keyword is a parse error."""
        with pytest.raises(ParseError) as exc_info:
            parse(source, "src/Trunc.sol")

        assert exc_info.value.source_file == "src/Trunc.sol"

    def test_unknown_tag_raises_when_strict(self) -> None:
        """Test that strict mode propagates malformed tags."""
        source = "/// @bogus text\ncontract A {}\n"

        with pytest.raises(MalformedTagError):
            parse(source, "A.sol", strict=True)

    def test_unknown_tag_kept_when_lenient(self) -> None:
        """Test that lenient mode keeps unknown tags as custom tags."""
        items, _ = parse("/// @bogus text\ncontract A {}\n", "A.sol")

        assert items[0].comments.custom()[0].name == "bogus"
