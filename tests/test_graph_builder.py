"""Integration tests for flow graph construction over real source trees."""
import logging

import pytest

from flowtrace.analyzer.file_discovery import SourceRootError
from flowtrace.analyzer.graph_builder import FlowGraphBuilder
from flowtrace.analyzer.parser import ParseError


class TestGraphContents:
    def test_declarations_in_two_files(self, make_tree):
        root = make_tree({
            "a.js": 'import "b";\nconst target = 1;\n',
            "b.js": "export const target = 2;\n",
        })
        graph = FlowGraphBuilder(root).build("target")

        assert sorted(node.id for node in graph.nodes()) == ["a.js", "b.js"]
        assert "const target = 1;" in graph.get_node("a.js").accumulated_code
        assert graph.get_node("b.js").accumulated_code == "const target = 2;"
        assert graph.edges() == []

    def test_zero_occurrences_gives_empty_graph(self, make_tree):
        root = make_tree({"a.js": "const other = 1;\n", "b.js": "export default 2;\n"})
        graph = FlowGraphBuilder(root).build("target")
        assert len(graph) == 0
        assert graph.matched_ids == []

    def test_import_specifier_creates_edge(self, make_tree):
        root = make_tree({
            "a.js": 'import { helper, other as alias } from "./b";\nhelper();\n',
            "b.js": "export function helper() {}\nexport const other = 1;\n",
        })
        graph = FlowGraphBuilder(root).build("./b")

        assert graph.edges() == [("a.js", "b.js")]
        assert graph.edge_imports("a.js", "b.js") == ["helper", "other"]
        # The target exists as a node but did not itself match
        assert graph.matched_ids == ["a.js"]
        assert graph.get_node("b.js").accumulated_code == ""

    def test_package_import_matches_without_edge(self, make_tree):
        root = make_tree({"App.jsx": 'import React from "react";\nexport default () => <div />;\n'})
        graph = FlowGraphBuilder(root).build("react")
        assert graph.matched_ids == ["App.jsx"]
        assert graph.edges() == []

    def test_parallel_edges_are_kept(self, make_tree):
        root = make_tree({
            "a.js": 'import x from "./b";\nimport { y } from "./b";\n',
            "b.js": "export default 1;\nexport const y = 2;\n",
        })
        graph = FlowGraphBuilder(root).build("./b")
        assert graph.edges() == [("a.js", "b.js"), ("a.js", "b.js")]
        assert graph.successors("a.js") == ["b.js"]

    def test_fragments_are_separated_by_blank_line(self, make_tree):
        root = make_tree({
            "a.js": "let target = 1;\nfunction reset() {\n  target = 0;\n}\n",
        })
        graph = FlowGraphBuilder(root).build("target")
        assert graph.get_node("a.js").accumulated_code == (
            "let target = 1;\n\nfunction reset() {\n  target = 0;\n}"
        )

    def test_loop_binding_collects_header(self, make_tree):
        root = make_tree({"loop.js": "for (const target of items) {\n  use(target);\n}\n"})
        graph = FlowGraphBuilder(root).build("target")
        assert graph.get_node("loop.js").accumulated_code == "const target"

    def test_reference_only_file_has_no_code(self, make_tree):
        root = make_tree({"use.js": "console.log(target);\n"})
        graph = FlowGraphBuilder(root).build("target")
        assert graph.matched_ids == ["use.js"]
        assert graph.get_node("use.js").accumulated_code == ""

    def test_nested_ids_are_relative_posix_paths(self, make_tree):
        root = make_tree({
            "src/components/App.jsx": 'import { api } from "../lib/api";\n',
            "src/lib/api.ts": "export const api = {};\n",
        })
        graph = FlowGraphBuilder(root).build("../lib/api")
        assert graph.edges() == [("src/components/App.jsx", "src/lib/api.ts")]
        assert graph.get_node("src/lib/api.ts").absolute_path == (root / "src/lib/api.ts").resolve()

    def test_explicit_file_list(self, make_tree):
        root = make_tree({"a.js": "const target = 1;\n", "b.js": "const target = 2;\n"})
        graph = FlowGraphBuilder(root).build("target", files=[root / "b.js"])
        assert [node.id for node in graph.nodes()] == ["b.js"]

    def test_empty_target_rejected(self, make_tree):
        root = make_tree({"a.js": ""})
        with pytest.raises(ValueError):
            FlowGraphBuilder(root).build("")


class TestFailureIsolation:
    def test_parse_failure_is_skipped_and_logged(self, make_tree, caplog):
        root = make_tree({
            "bad.js": "const target = ;\n",
            "good.js": "const target = 1;\n",
        })
        builder = FlowGraphBuilder(root)
        with caplog.at_level(logging.WARNING, logger="flowtrace.analyzer.graph_builder"):
            graph = builder.build("target")

        assert [node.id for node in graph.nodes()] == ["good.js"]
        assert len(builder.failures) == 1
        assert builder.failures[0].path.name == "bad.js"
        assert isinstance(builder.failures[0].error, ParseError)
        assert any("bad.js" in record.getMessage() for record in caplog.records)

    def test_unreadable_file_is_skipped(self, make_tree):
        root = make_tree({"good.js": "const target = 1;\n"})
        builder = FlowGraphBuilder(root)
        graph = builder.build("target", files=[root / "gone.js", root / "good.js"])
        assert [node.id for node in graph.nodes()] == ["good.js"]
        assert isinstance(builder.failures[0].error, OSError)

    def test_unsupported_files_are_ignored(self, make_tree):
        root = make_tree({"notes.txt": "target", "a.js": "const target = 1;"})
        builder = FlowGraphBuilder(root)
        graph = builder.build("target", files=[root / "notes.txt", root / "a.js"])
        assert [node.id for node in graph.nodes()] == ["a.js"]
        assert builder.failures == []

    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(SourceRootError):
            FlowGraphBuilder(tmp_path / "missing").build("target")


class TestDeterminism:
    FILES = {
        "a.js": 'import { b } from "./b";\nconst target = b;\n',
        "b.js": 'import { a } from "./a";\nexport function target() { return a; }\n',
        "c.ts": "export let target: number = 3;\ntarget = 4;\n",
    }

    def test_rebuild_is_identical(self, make_tree):
        root = make_tree(self.FILES)
        first = FlowGraphBuilder(root).build("target").snapshot()
        second = FlowGraphBuilder(root).build("target").snapshot()
        assert first == second

    def test_workers_do_not_change_result(self, make_tree):
        root = make_tree(self.FILES)
        serial = FlowGraphBuilder(root).build("target").snapshot()
        threaded = FlowGraphBuilder(root, workers=4).build("target").snapshot()
        assert serial == threaded

    def test_invalid_worker_count(self, make_tree):
        with pytest.raises(ValueError):
            FlowGraphBuilder(make_tree({}), workers=0)
