"""Walk the flow graph from seed files and assemble the flow report."""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional
from .flow_graph import FlowGraph

logger = logging.getLogger(__name__)


class TraversalPolicy(Enum):
    """Which nodes contribute records during traversal.

    LEAVES_ONLY: every successor of a visited node, plus each leaf itself,
                 recorded as {code, file}.
    ALL_REACHABLE: every successor reachable from a seed, recorded as
                   {code, imports}; a node's own code is recorded only when
                   it is some visited node's successor.
    """
    LEAVES_ONLY = "leaves"
    ALL_REACHABLE = "all"


class SeedPolicy(Enum):
    """Which files traversal starts from."""
    ALL_MATCHED = "all"
    FIRST_MATCHED = "first"


@dataclass
class FlowRecord:
    code: str
    file: Optional[str] = None
    imports: List[str] = field(default_factory=list)


class FlowReport:
    """Ordered mapping of node id to FlowRecord for one extraction."""

    def __init__(self, policy: TraversalPolicy):
        self.policy = policy
        self.records: Dict[str, FlowRecord] = {}

    def __setitem__(self, node_id: str, record: FlowRecord):
        self.records[node_id] = record

    def __getitem__(self, node_id: str) -> FlowRecord:
        return self.records[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.records

    def __iter__(self) -> Iterator[str]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        if self.policy is TraversalPolicy.LEAVES_ONLY:
            return {
                node_id: {'code': record.code, 'file': record.file}
                for node_id, record in self.records.items()
            }
        return {
            node_id: {'code': record.code, 'imports': list(record.imports)}
            for node_id, record in self.records.items()
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def seeds_for(graph: FlowGraph, policy: SeedPolicy) -> List[str]:
    """Pick traversal start nodes from the files that matched."""
    matched = graph.matched_ids
    if policy is SeedPolicy.FIRST_MATCHED:
        return matched[:1]
    return matched


class FlowExtractor:
    """Read-only depth-first traversal over a FlowGraph."""

    def __init__(self, root: str | Path):
        """
        Args:
            root: Analysis root; must be the root the graph was built with
        """
        self.root = Path(root).resolve()

    def extract(self, graph: FlowGraph, seeds: Iterable[str], policy: TraversalPolicy) -> FlowReport:
        """Traverse from every seed and collect the report.

        One visited set is shared by all seeds, so each node is expanded at
        most once per call even when the import graph has cycles.

        Args:
            graph: Graph produced by FlowGraphBuilder
            seeds: Node ids to start from; unknown ids are ignored
            policy: Which visited nodes are recorded

        Returns:
            FlowReport
        """
        if graph.root != self.root:
            raise ValueError(f"Graph was built for {graph.root}, extractor is rooted at {self.root}")

        report = FlowReport(policy)
        visited = set()

        for seed in seeds:
            if not graph.has_node(seed):
                logger.debug("Seed %s is not in the graph, skipping", seed)
                continue
            self._visit(graph, seed, policy, visited, report)

        return report

    def _visit(self, graph: FlowGraph, seed: str, policy: TraversalPolicy, visited: set, report: FlowReport):
        # Explicit stack of successor iterators keeps recursive DFS order without recursion limits
        if seed in visited:
            return
        visited.add(seed)
        stack = [(seed, self._expand(graph, seed, policy, report))]

        while stack:
            current, pending = stack[-1]
            successor = next(pending, None)
            if successor is None:
                stack.pop()
                continue
            self._record_successor(graph, current, successor, policy, report)
            if successor not in visited:
                visited.add(successor)
                stack.append((successor, self._expand(graph, successor, policy, report)))

    def _expand(self, graph: FlowGraph, node_id: str, policy: TraversalPolicy, report: FlowReport) -> Iterator[str]:
        successors = graph.successors(node_id)
        if not successors and policy is TraversalPolicy.LEAVES_ONLY:
            node = graph.get_node(node_id)
            report[node_id] = FlowRecord(code=node.accumulated_code, file=str(node.absolute_path))
        return iter(successors)

    def _record_successor(self, graph: FlowGraph, current: str, successor: str,
                          policy: TraversalPolicy, report: FlowReport):
        node = graph.get_node(successor)
        if policy is TraversalPolicy.LEAVES_ONLY:
            report[successor] = FlowRecord(code=node.accumulated_code, file=str(node.absolute_path))
        else:
            report[successor] = FlowRecord(code=node.accumulated_code,
                                           imports=graph.edge_imports(current, successor))
