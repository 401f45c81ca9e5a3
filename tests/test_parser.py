"""Tests for the tree-sitter syntax provider."""
import pytest

from flowtrace.analyzer.parser import LanguageParser, ParseError


class TestLanguageSelection:
    @pytest.mark.parametrize("name,language", [
        ("app.js", "javascript"),
        ("App.jsx", "javascript"),
        ("api.ts", "typescript"),
        ("View.tsx", "tsx"),
        ("UPPER.JS", "javascript"),
    ])
    def test_from_file_extension(self, name, language):
        parser = LanguageParser.from_file_extension(name)
        assert parser is not None
        assert parser.language == language

    @pytest.mark.parametrize("name", ["main.py", "styles.css", "README"])
    def test_unsupported_extension(self, name):
        assert LanguageParser.from_file_extension(name) is None

    def test_unknown_language_raises(self):
        with pytest.raises(ValueError):
            LanguageParser("cobol")


class TestParsing:
    def test_jsx_module(self):
        tree = LanguageParser("javascript").parse_source(
            b"import React from 'react';\nexport const App = () => <div>{name}</div>;"
        )
        assert tree.root_node.type == "program"

    def test_tsx_module(self):
        tree = LanguageParser("tsx").parse_source(
            b"export const App = (props: { name: string }) => <span>{props.name}</span>;"
        )
        assert not tree.root_node.has_error

    def test_syntax_error_raises_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            LanguageParser("javascript").parse_source(b"const = ;", "broken.js")
        assert exc_info.value.file_path == "broken.js"
        assert exc_info.value.line == 1
        assert "broken.js" in str(exc_info.value)

    def test_parse_file_returns_source(self, tmp_path):
        file_path = tmp_path / "a.js"
        file_path.write_text("const a = 1;", encoding="utf-8")
        tree, source = LanguageParser("javascript").parse_file(file_path)
        assert source == b"const a = 1;"
        assert tree.root_node.type == "program"

    def test_parse_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            LanguageParser("javascript").parse_file(tmp_path / "missing.js")
