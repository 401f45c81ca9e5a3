"""Flow graph builder: enumerate, parse, match and link source files."""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional
from tree_sitter import Tree
from .file_discovery import SourceEnumerator
from .flow_graph import FlowGraph
from .js_import_tracker import JSImportTracker
from .matcher import MatchKind, SymbolMatcher, strip_quotes
from .parser import LanguageParser, ParseError
from .resolver import PathResolver
from .syntax import SyntaxNode, code_block_text, walk

logger = logging.getLogger(__name__)


@dataclass
class FileFailure:
    """A file skipped because it could not be read or parsed."""
    path: Path
    error: Exception

    def __str__(self) -> str:
        return f"{self.path}: {self.error}"


@dataclass
class ParsedFile:
    path: Path
    tree: Optional[Tree] = None
    source: bytes = b""
    error: Optional[Exception] = None


class FlowGraphBuilder:
    """Build the flow graph of one symbol across a source tree."""

    def __init__(self, root: str | Path, enumerator: Optional[SourceEnumerator] = None,
                 resolver: Optional[PathResolver] = None, workers: int = 1):
        """Initialize graph builder.

        Args:
            root: Analysis root; node ids are relative to it
            enumerator: Source file discovery (default: SourceEnumerator())
            resolver: Import resolution (default: PathResolver())
            workers: Threads used to read and parse files
        """
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.root = Path(root).resolve()
        self.enumerator = enumerator or SourceEnumerator()
        self.resolver = resolver or PathResolver()
        self.import_tracker = JSImportTracker()
        self.workers = workers
        self.failures: List[FileFailure] = []

    def build(self, target: str, files: Optional[Iterable[str | Path]] = None) -> FlowGraph:
        """Build the flow graph for target.

        Args:
            target: Symbol name or import source string to trace
            files: Files to analyze. If None, enumerates the root.

        Returns:
            Populated FlowGraph

        Raises:
            SourceRootError: If files is None and the root cannot be enumerated
        """
        if not target:
            raise ValueError("target symbol must be a non-empty string")

        if files is None:
            files = self.enumerator.list_files(self.root)
        files = [Path(f).resolve() for f in files]

        self.failures = []
        graph = FlowGraph(self.root)
        matcher = SymbolMatcher(target)

        # Parsing may run in parallel; mutation always follows enumeration order
        for parsed in self._parse_all(files):
            if parsed.error is not None:
                self.failures.append(FileFailure(parsed.path, parsed.error))
                logger.warning("Skipping %s: %s", parsed.path, parsed.error)
                continue
            if parsed.tree is None:
                continue
            self._process_file(parsed, matcher, graph)

        logger.info(
            "Traced '%s' through %d files: %d nodes, %d edges, %d failures",
            target, len(files), len(graph), len(graph.edges()), len(self.failures)
        )
        return graph

    def _parse_all(self, files: List[Path]) -> Iterable[ParsedFile]:
        if self.workers == 1 or len(files) <= 1:
            return map(self._parse_file, files)
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(self._parse_file, files))

    def _parse_file(self, file_path: Path) -> ParsedFile:
        # One parser per file: tree-sitter parsers are not shared across threads
        parser = LanguageParser.from_file_extension(file_path)
        if not parser:
            logger.debug("No grammar for %s, skipping", file_path)
            return ParsedFile(file_path)
        try:
            tree, source_code = parser.parse_file(file_path)
        except (OSError, ParseError) as e:
            return ParsedFile(file_path, error=e)
        return ParsedFile(file_path, tree=tree, source=source_code)

    def _process_file(self, parsed: ParsedFile, matcher: SymbolMatcher, graph: FlowGraph):
        """Walk one tree and apply every match to the graph."""
        for node in walk(parsed.tree, parsed.source):
            match = matcher.classify(node)
            if match is None:
                continue

            current = graph.ensure_node(parsed.path)
            graph.mark_matched(current.id)

            if match is MatchKind.IMPORT:
                self._link_import(node, parsed.path, current.id, graph)
            elif match is MatchKind.DECLARATION:
                current.append_code(code_block_text(node))
            # References only register the file

    def _link_import(self, node: SyntaxNode, file_path: Path, current_id: str, graph: FlowGraph):
        specifier = strip_quotes(node.field('source').text)
        target_path = self.resolver.resolve(file_path, specifier)
        if target_path is None:
            logger.debug("Unresolved import '%s' in %s", specifier, file_path)
            return
        target = graph.ensure_node(target_path)
        graph.add_edge(current_id, target.id, imports=self.import_tracker.imported_names(node))
