from dataclasses import dataclass
from typing import List, Optional
from .syntax import NodeKind, SyntaxNode


@dataclass
class ImportInfo:
    local_name: str
    source_module: str
    original_name: Optional[str] = None
    is_namespace: bool = False

    @property
    def imported_name(self) -> str:
        """Name on the exporting side: 'default', '*' or the named export."""
        if self.is_namespace:
            return '*'
        return self.original_name or self.local_name


class JSImportTracker:
    def analyze_import(self, node: SyntaxNode) -> List[ImportInfo]:
        """
        Lists the bindings introduced by one ESM import statement, in source order.
        Side-effect imports (import './polyfill') introduce none.
        """
        if node.kind is not NodeKind.IMPORT_DECLARATION:
            return []

        source_node = node.field('source')
        if source_node is None:
            return []
        module_name = source_node.text.strip('"\'`')

        import_clause = next(
            (child for child in node.node.named_children if child.type == 'import_clause'),
            None
        )
        if import_clause is None:
            return []

        imports: List[ImportInfo] = []
        for child in import_clause.named_children:
            child = SyntaxNode(child, node.source)

            # import x from 'mod'
            if child.type == 'identifier':
                imports.append(ImportInfo(
                    local_name=child.text,
                    source_module=module_name,
                    original_name='default'
                ))

            # import * as ns from 'mod'
            elif child.type == 'namespace_import':
                for ns_child in child.node.named_children:
                    if ns_child.type == 'identifier':
                        imports.append(ImportInfo(
                            local_name=SyntaxNode(ns_child, node.source).text,
                            source_module=module_name,
                            is_namespace=True
                        ))

            # import { x, y as z } from 'mod'
            elif child.type == 'named_imports':
                for specifier in child.node.named_children:
                    if specifier.type != 'import_specifier':
                        continue
                    specifier = SyntaxNode(specifier, node.source)
                    name_node = specifier.field('name')
                    alias_node = specifier.field('alias')
                    if name_node is None:
                        continue
                    original = name_node.text.strip('"\'')
                    imports.append(ImportInfo(
                        local_name=alias_node.text if alias_node else original,
                        source_module=module_name,
                        original_name=original
                    ))

        return imports

    def imported_names(self, node: SyntaxNode) -> List[str]:
        return [info.imported_name for info in self.analyze_import(node)]
