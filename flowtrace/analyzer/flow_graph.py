"""File-level flow graph using NetworkX.

Edge (A, B) means "file A imports file B through an import statement that
matched the traced symbol". Parallel edges are kept; readers collapse them.
"""
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple
import networkx as nx


CODE_SEPARATOR = "\n\n"


@dataclass
class FileNode:
    """One source file and the code fragments matched inside it."""
    id: str  # Path relative to the analysis root, POSIX separators
    absolute_path: Path
    fragments: List[str] = field(default_factory=list)

    def append_code(self, code: str):
        self.fragments.append(code)

    @property
    def accumulated_code(self) -> str:
        return CODE_SEPARATOR.join(self.fragments)


class FlowGraph:
    """Append-only graph of FileNodes for one analysis run."""

    def __init__(self, root: str | Path):
        """Initialize empty graph.

        Args:
            root: Analysis root that node ids are relative to
        """
        self.root = Path(root).resolve()
        self.graph = nx.MultiDiGraph()
        self._matched: Dict[str, None] = {}
        self._lock = threading.Lock()

    def node_id(self, file_path: str | Path) -> str:
        """Path relative to the root. Targets outside the root keep '..' segments."""
        relative = os.path.relpath(Path(file_path).resolve(), self.root)
        return Path(relative).as_posix()

    def ensure_node(self, file_path: str | Path) -> FileNode:
        """Return the FileNode for a file, creating it on first use."""
        file_path = Path(file_path).resolve()
        node_id = self.node_id(file_path)
        with self._lock:
            if not self.graph.has_node(node_id):
                self.graph.add_node(node_id, node=FileNode(node_id, file_path))
            return self.graph.nodes[node_id]['node']

    def mark_matched(self, node_id: str):
        """Record that a file contained at least one match (first-match order)."""
        self._matched.setdefault(node_id, None)

    def add_edge(self, source_id: str, target_id: str, imports: Optional[List[str]] = None):
        if not (self.graph.has_node(source_id) and self.graph.has_node(target_id)):
            raise KeyError(f"Edge endpoints must exist: {source_id} -> {target_id}")
        self.graph.add_edge(source_id, target_id, imports=list(imports or []))

    def has_node(self, node_id: str) -> bool:
        return self.graph.has_node(node_id)

    def get_node(self, node_id: str) -> FileNode:
        return self.graph.nodes[node_id]['node']

    def nodes(self) -> List[FileNode]:
        return [data['node'] for _, data in self.graph.nodes(data=True)]

    def edges(self) -> List[Tuple[str, str]]:
        """All edges including parallel ones, in insertion order."""
        return [(u, v) for u, v in self.graph.edges()]

    def successors(self, node_id: str) -> List[str]:
        """Distinct import targets of a node, in first-insertion order."""
        if not self.graph.has_node(node_id):
            return []
        return list(self.graph.successors(node_id))

    def edge_imports(self, source_id: str, target_id: str) -> List[str]:
        """Imported names from the first edge between two nodes."""
        edges = self.graph.get_edge_data(source_id, target_id)
        if not edges:
            return []
        first_key = next(iter(edges))
        return list(edges[first_key].get('imports', []))

    @property
    def matched_ids(self) -> List[str]:
        return list(self._matched)

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __iter__(self) -> Iterator[str]:
        return iter(self.graph.nodes())

    def snapshot(self) -> Dict[str, Any]:
        """Plain structure describing nodes, code and edges."""
        return {
            'nodes': {
                node.id: {'file': str(node.absolute_path), 'code': node.accumulated_code}
                for node in self.nodes()
            },
            'edges': [
                {'source': u, 'target': v, 'imports': list(data.get('imports', []))}
                for u, v, data in self.graph.edges(data=True)
            ],
        }
