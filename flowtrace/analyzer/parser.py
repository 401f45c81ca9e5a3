"""Tree-sitter parser for JavaScript and TypeScript sources."""
from pathlib import Path
from typing import Optional, Tuple
from tree_sitter import Language, Node, Parser, Tree
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript


class ParseError(Exception):
    """Raised when source text is not valid syntax for the file's grammar."""

    def __init__(self, file_path: str, line: int, column: int):
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(f"Syntax error in {file_path} at line {line}, column {column}")


class LanguageParser:
    """Module-grammar parser using tree-sitter v0.22+ API.

    The javascript grammar accepts JSX, so it serves both .js and .jsx.
    """

    SUPPORTED_LANGUAGES = {
        '.js': 'javascript',
        '.jsx': 'javascript',
        '.ts': 'typescript',
        '.tsx': 'tsx',
    }

    def __init__(self, language: str):
        """Initialize parser for given language (javascript, typescript, tsx).

        Args:
            language: One of 'javascript', 'typescript', 'tsx'

        Raises:
            ValueError: If language is not supported
        """
        self.language = language
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Factory method using the Parser(Language(capsule)) API.

        Returns:
            Configured Parser instance

        Raises:
            ValueError: If language is not supported
        """
        if self.language == 'javascript':
            lang = Language(tsjavascript.language())
        elif self.language == 'typescript':
            lang = Language(tstypescript.language_typescript())
        elif self.language == 'tsx':
            lang = Language(tstypescript.language_tsx())
        else:
            raise ValueError(f"Unsupported language: {self.language}")

        return Parser(lang)

    def parse_source(self, source_code: bytes, file_path: str = "<source>") -> Tree:
        """Parse source bytes, rejecting trees that contain syntax errors.

        tree-sitter recovers from errors instead of failing, so a tree with
        ERROR or MISSING nodes is reported as a ParseError here.

        Raises:
            ParseError: If the tree contains an error node
        """
        tree = self.parser.parse(source_code)
        if tree.root_node.has_error:
            line, column = _first_error_position(tree.root_node)
            raise ParseError(file_path, line, column)
        return tree

    def parse_file(self, file_path: str | Path) -> Tuple[Tree, bytes]:
        """Read and parse a file.

        Args:
            file_path: Path to source file to parse

        Returns:
            (tree, source bytes) pair

        Raises:
            OSError: If the file cannot be read
            ParseError: If the file is not valid syntax
        """
        file_path = Path(file_path)
        with open(file_path, 'rb') as f:
            source_code = f.read()
        return self.parse_source(source_code, str(file_path)), source_code

    @classmethod
    def from_file_extension(cls, file_path: str | Path) -> Optional['LanguageParser']:
        """Create parser based on file extension.

        Args:
            file_path: Path to determine language from

        Returns:
            LanguageParser instance, or None if extension not supported
        """
        extension = Path(file_path).suffix.lower()

        language = cls.SUPPORTED_LANGUAGES.get(extension)
        if language:
            return cls(language)
        return None


def _first_error_position(root: Node) -> Tuple[int, int]:
    """1-based (line, column) of the first ERROR or MISSING node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == 'ERROR' or node.is_missing:
            return node.start_point[0] + 1, node.start_point[1] + 1
        # Only descend into subtrees that contain the error
        stack.extend(reversed([child for child in node.children if child.has_error]))
    return root.start_point[0] + 1, root.start_point[1] + 1
