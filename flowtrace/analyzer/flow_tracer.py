"""Single-call entry point: trace one symbol across a source tree."""
from pathlib import Path
from typing import List, Optional, Tuple
from .file_discovery import SourceEnumerator
from .flow_extractor import FlowExtractor, FlowReport, SeedPolicy, TraversalPolicy, seeds_for
from .flow_graph import FlowGraph
from .graph_builder import FileFailure, FlowGraphBuilder


def trace_symbol_flow(symbol: str, root: str | Path, policy: TraversalPolicy,
                      seeding: SeedPolicy = SeedPolicy.ALL_MATCHED, workers: int = 1,
                      enumerator: Optional[SourceEnumerator] = None) -> FlowReport:
    """Find where symbol is declared, imported and used, and how those files link.

    The traversal policy has no default: callers must choose between
    TraversalPolicy.LEAVES_ONLY and TraversalPolicy.ALL_REACHABLE.

    Raises:
        SourceRootError: If root cannot be enumerated
        ValueError: If symbol is empty
    """
    report, _, _ = trace_symbol_flow_detailed(symbol, root, policy, seeding, workers, enumerator)
    return report


def trace_symbol_flow_detailed(symbol: str, root: str | Path, policy: TraversalPolicy,
                               seeding: SeedPolicy = SeedPolicy.ALL_MATCHED, workers: int = 1,
                               enumerator: Optional[SourceEnumerator] = None
                               ) -> Tuple[FlowReport, FlowGraph, List[FileFailure]]:
    """Like trace_symbol_flow, also returning the graph and per-file failures."""
    if not symbol:
        raise ValueError("symbol must be a non-empty string")

    root = Path(root).resolve()
    builder = FlowGraphBuilder(root, enumerator=enumerator, workers=workers)
    graph = builder.build(symbol)

    extractor = FlowExtractor(root)
    report = extractor.extract(graph, seeds_for(graph, seeding), policy)
    return report, graph, list(builder.failures)
