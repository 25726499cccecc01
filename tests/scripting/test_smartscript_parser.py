"""
Tests for the SmartScript parser.
"""

import pytest

from smartscript.scripting import (
    DocumentNode,
    EchoNode,
    ElementConstantDouble,
    ElementConstantInteger,
    ElementFunction,
    ElementOperator,
    ElementString,
    ElementVariable,
    ForLoopNode,
    ParserError,
    SmartScriptParser,
    TextNode,
    parse_document,
)


class TestSmartScriptParser:

    def test_empty_document(self):
        document = parse_document("")
        assert isinstance(document, DocumentNode)
        assert document.children == []

    def test_text_only(self):
        document = parse_document("just text")
        assert document.children == [TextNode("just text")]

    def test_echo_with_text(self):
        document = parse_document("Text {$= 1 2 + $} more")
        assert document.children == [
            TextNode("Text "),
            EchoNode((ElementConstantInteger(1), ElementConstantInteger(2), ElementOperator("+"))),
            TextNode(" more"),
        ]

    def test_echo_element_kinds(self):
        document = parse_document('{$= x 1.5 "s" @sin * $}')
        echo = document.children[0]
        assert echo.elements == (
            ElementVariable("x"),
            ElementConstantDouble(1.5),
            ElementString("s"),
            ElementFunction("@sin"),
            ElementOperator("*"),
        )

    def test_for_loop_structure(self):
        document = parse_document("{$FOR i 0 3 1$}{$=i$}{$END$}")
        assert len(document.children) == 1
        loop = document.children[0]
        assert isinstance(loop, ForLoopNode)
        assert loop.variable == ElementVariable("i")
        assert loop.start == ElementConstantInteger(0)
        assert loop.end == ElementConstantInteger(3)
        assert loop.step == ElementConstantInteger(1)
        assert loop.children == [EchoNode((ElementVariable("i"),))]

    def test_for_loop_without_step(self):
        loop = parse_document('{$ FOR i "1" 2.5 $}{$ END $}').children[0]
        assert loop.start == ElementString("1")
        assert loop.end == ElementConstantDouble(2.5)
        assert loop.step is None
        assert loop.expressions() == (ElementString("1"), ElementConstantDouble(2.5))

    def test_nested_loops(self):
        document = parse_document(
            "{$ FOR i 1 2 $}a{$ FOR j 1 2 $}b{$ END $}c{$ END $}d"
        )
        outer = document.children[0]
        assert isinstance(outer, ForLoopNode)
        assert isinstance(document.children[1], TextNode)
        inner = outer.children[1]
        assert isinstance(inner, ForLoopNode)
        assert inner.variable.name == "j"
        assert inner.children == [TextNode("b")]
        assert outer.children[2] == TextNode("c")

    def test_document_node_attribute(self):
        parser = SmartScriptParser("x")
        assert parser.document_node.children == [TextNode("x")]


class TestParserErrors:

    @pytest.mark.parametrize("source", [
        "{$FOR i 1 $}{$END$}",            # too few elements
        "{$FOR i 1 2 3 4$}{$END$}",       # too many elements
        "{$FOR 1 1 2$}{$END$}",           # first element not a variable
        "{$FOR i a 2$}{$END$}",           # bound is a variable
        "{$FOR i 1 @sin$}{$END$}",        # bound is a function
        "{$FOR i 1 +$}{$END$}",           # bound is an operator
    ])
    def test_invalid_for_headers(self, source):
        with pytest.raises(ParserError):
            parse_document(source)

    def test_unclosed_for(self):
        with pytest.raises(ParserError, match="unclosed"):
            parse_document("{$FOR i 1 2$}text")

    def test_end_without_for(self):
        with pytest.raises(ParserError):
            parse_document("{$END$}")

    def test_end_with_elements(self):
        with pytest.raises(ParserError):
            parse_document("{$FOR i 1 2$}{$END x$}")

    def test_empty_echo(self):
        with pytest.raises(ParserError):
            parse_document("{$= $}")

    def test_unknown_tag_name(self):
        """Тег должен начинаться с FOR, END или ="""
        with pytest.raises(ParserError):
            parse_document("{$ x $}")

    def test_unterminated_tag(self):
        with pytest.raises(ParserError):
            parse_document("{$= 1 2")

    def test_lexer_errors_are_wrapped(self):
        with pytest.raises(ParserError, match="Lexer error") as exc_info:
            parse_document(r"bad \q escape")
        assert exc_info.value.__cause__ is not None

    def test_none_body(self):
        with pytest.raises(ParserError):
            SmartScriptParser(None)
