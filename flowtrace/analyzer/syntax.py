"""Tagged view over tree-sitter nodes.

Every tree-sitter node type maps to exactly one NodeKind, so consumers can
dispatch on the kind instead of probing raw node type strings.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional
from tree_sitter import Node, Tree


class NodeKind(Enum):
    VARIABLE_DECLARATOR = "variable_declarator"
    ASSIGNMENT = "assignment"
    FUNCTION_DECLARATION = "function_declaration"
    IMPORT_DECLARATION = "import_declaration"
    LOOP_DECLARATION = "loop_declaration"
    IDENTIFIER = "identifier"
    OTHER = "other"


NODE_KINDS: Dict[str, NodeKind] = {
    'variable_declarator': NodeKind.VARIABLE_DECLARATOR,
    'assignment_expression': NodeKind.ASSIGNMENT,
    'augmented_assignment_expression': NodeKind.ASSIGNMENT,
    'function_declaration': NodeKind.FUNCTION_DECLARATION,
    'generator_function_declaration': NodeKind.FUNCTION_DECLARATION,
    'import_statement': NodeKind.IMPORT_DECLARATION,
    'for_in_statement': NodeKind.LOOP_DECLARATION,
    'identifier': NodeKind.IDENTIFIER,
    'shorthand_property_identifier': NodeKind.IDENTIFIER,
}

# Blocks whose source text is collected for a declaration match
FUNCTION_TYPES = frozenset({
    'function_declaration',
    'generator_function_declaration',
    'function_expression',
    'function',
    'generator_function',
    'arrow_function',
    'method_definition',
})
VARIABLE_DECLARATION_TYPES = frozenset({'lexical_declaration', 'variable_declaration'})


@dataclass(frozen=True)
class SyntaxNode:
    """A tree-sitter node paired with the source bytes it was parsed from."""
    node: Node
    source: bytes

    @property
    def kind(self) -> NodeKind:
        return NODE_KINDS.get(self.node.type, NodeKind.OTHER)

    @property
    def type(self) -> str:
        return self.node.type

    @property
    def text(self) -> str:
        return self.source[self.start_byte:self.end_byte].decode('utf-8', errors='replace')

    @property
    def start_byte(self) -> int:
        return self.node.start_byte

    @property
    def end_byte(self) -> int:
        return self.node.end_byte

    @property
    def line(self) -> int:
        return self.node.start_point[0] + 1

    @property
    def parent(self) -> Optional['SyntaxNode']:
        parent = self.node.parent
        return SyntaxNode(parent, self.source) if parent is not None else None

    def field(self, name: str) -> Optional['SyntaxNode']:
        child = self.node.child_by_field_name(name)
        return SyntaxNode(child, self.source) if child is not None else None

    def ancestors(self) -> Iterator['SyntaxNode']:
        """Yield parent, grandparent, ... up to the program root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def is_same(self, other: Optional['SyntaxNode']) -> bool:
        return (
            other is not None
            and other.node.type == self.node.type
            and other.start_byte == self.start_byte
            and other.end_byte == self.end_byte
        )


def walk(tree: Tree, source: bytes) -> Iterator[SyntaxNode]:
    """Yield every named node in document order (pre-order)."""
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        yield SyntaxNode(node, source)
        stack.extend(reversed(node.named_children))


def enclosing_code_block(node: SyntaxNode) -> SyntaxNode:
    """Find the function or variable declaration that owns a declaration match.

    Function declarations are their own block. Declarators and assignments
    search from their parent upwards; a top-level assignment outside any
    function falls back to its enclosing statement.
    """
    if node.kind is NodeKind.FUNCTION_DECLARATION:
        return node

    statement = None
    for ancestor in node.ancestors():
        if ancestor.type in FUNCTION_TYPES or ancestor.type in VARIABLE_DECLARATION_TYPES:
            return ancestor
        if statement is None and ancestor.type.endswith('_statement'):
            statement = ancestor
    return statement if statement is not None else node


def code_block_text(node: SyntaxNode) -> str:
    """Source text collected for a declaration match.

    A loop binding such as `for (const x of xs)` has no declaration node of
    its own, so its block is the `const x` slice of the loop header.
    """
    if node.kind is NodeKind.LOOP_DECLARATION:
        keyword, binding = node.field('kind'), node.field('left')
        return node.source[keyword.start_byte:binding.end_byte].decode('utf-8', errors='replace')
    return enclosing_code_block(node).text
