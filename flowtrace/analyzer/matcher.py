"""Decide whether a syntax node is a use of the traced symbol.

Matching is purely by name: no rule considers lexical scope, so a shadowing
local in an unrelated function is indistinguishable from the traced symbol.
"""
from enum import Enum
from typing import Callable, Dict, Optional
from .syntax import NodeKind, SyntaxNode


class MatchKind(Enum):
    IMPORT = "import"
    DECLARATION = "declaration"
    REFERENCE = "reference"


# (parent type, field) pairs where an identifier introduces a binding rather
# than reading one. A field of None means any child position.
DECLARING_POSITIONS = frozenset({
    ('variable_declarator', 'name'),
    ('function_declaration', 'name'),
    ('generator_function_declaration', 'name'),
    ('function_expression', 'name'),
    ('function', 'name'),
    ('generator_function', 'name'),
    ('function_signature', 'name'),
    ('class_declaration', 'name'),
    ('class', 'name'),
    ('enum_declaration', 'name'),
    ('assignment_expression', 'left'),
    ('augmented_assignment_expression', 'left'),
    ('assignment_pattern', 'left'),
    ('arrow_function', 'parameter'),
    ('catch_clause', 'parameter'),
    ('required_parameter', 'pattern'),
    ('optional_parameter', 'pattern'),
    ('pair_pattern', 'value'),
    ('export_specifier', 'alias'),
    ('formal_parameters', None),
    ('array_pattern', None),
    ('rest_pattern', None),
})

JSX_NAME_PARENTS = frozenset({'jsx_opening_element', 'jsx_closing_element', 'jsx_self_closing_element'})


def strip_quotes(text: str) -> str:
    return text.strip('"\'`')


class SymbolMatcher:
    """Classify syntax nodes as uses of one target symbol."""

    def __init__(self, target: str):
        """Initialize matcher.

        Args:
            target: Identifier or import source string to trace
        """
        self.target = target
        self._rules: Dict[NodeKind, Callable[[SyntaxNode], Optional[MatchKind]]] = {
            NodeKind.VARIABLE_DECLARATOR: self._match_declarator,
            NodeKind.ASSIGNMENT: self._match_assignment,
            NodeKind.FUNCTION_DECLARATION: self._match_function,
            NodeKind.IMPORT_DECLARATION: self._match_import,
            NodeKind.LOOP_DECLARATION: self._match_loop_binding,
            NodeKind.IDENTIFIER: self._match_reference,
            NodeKind.OTHER: lambda node: None,
        }
        missing = set(NodeKind) - set(self._rules)
        if missing:
            raise TypeError(f"No match rule for node kinds: {sorted(k.name for k in missing)}")

    def classify(self, node: SyntaxNode) -> Optional[MatchKind]:
        """Return the kind of use this node represents, or None."""
        return self._rules[node.kind](node)

    def matches(self, node: SyntaxNode) -> bool:
        return self.classify(node) is not None

    def _is_target_identifier(self, node: Optional[SyntaxNode]) -> bool:
        return node is not None and node.type == 'identifier' and node.text == self.target

    def _match_declarator(self, node: SyntaxNode) -> Optional[MatchKind]:
        if self._is_target_identifier(node.field('name')):
            return MatchKind.DECLARATION
        return None

    def _match_assignment(self, node: SyntaxNode) -> Optional[MatchKind]:
        if self._is_target_identifier(node.field('left')):
            return MatchKind.DECLARATION
        return None

    def _match_function(self, node: SyntaxNode) -> Optional[MatchKind]:
        if self._is_target_identifier(node.field('name')):
            return MatchKind.DECLARATION
        return None

    def _match_loop_binding(self, node: SyntaxNode) -> Optional[MatchKind]:
        # for (const x of xs) declares x; for (x of xs) only assigns it
        if node.field('kind') is not None and self._is_target_identifier(node.field('left')):
            return MatchKind.DECLARATION
        return None

    def _match_import(self, node: SyntaxNode) -> Optional[MatchKind]:
        # Compares the module path, not the locally bound names
        source = node.field('source')
        if source is not None and strip_quotes(source.text) == self.target:
            return MatchKind.IMPORT
        return None

    def _match_reference(self, node: SyntaxNode) -> Optional[MatchKind]:
        if node.text != self.target or not is_referenced(node):
            return None
        for ancestor in node.ancestors():
            if ancestor.kind is NodeKind.IMPORT_DECLARATION:
                return None
            # export { x } from './mod' names a binding of another module
            if ancestor.type == 'export_statement' and ancestor.field('source') is not None:
                return None
        return MatchKind.REFERENCE


def is_referenced(node: SyntaxNode) -> bool:
    """True when an identifier is read rather than bound."""
    parent = node.parent
    if parent is None:
        return True

    if (parent.type, None) in DECLARING_POSITIONS:
        return False
    for parent_type, field in DECLARING_POSITIONS:
        if parent_type == parent.type and field is not None and node.is_same(parent.field(field)):
            return False

    loop_binding = parent.type == 'for_in_statement' and parent.field('kind') is not None
    if loop_binding and node.is_same(parent.field('left')):
        return False

    # <div> is an intrinsic element, <Widget> refers to a binding
    if parent.type in JSX_NAME_PARENTS and node.text[:1].islower():
        return False
    return True
