#!/usr/bin/env python3
"""
Tests for concurrent collection: inclusion, completeness and walk failures
"""

import os
import threading
import time
from pathlib import Path
import sys
import unittest

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from codecollector.collector_core import pipeline as pipeline_module
from codecollector.collector_core.collector import CodeCollector
from codecollector.collector_core.config import CollectorConfig
from codecollector.collector_core.errors import FileReadError, WalkError
from codecollector.collector_core.ignore import IgnoreRuleSet
from codecollector.collector_core.inclusion import InclusionPolicy
from codecollector.collector_core.parallel_config import ParallelConfig
from codecollector.collector_core.pipeline import CollectionPipeline, PipelineState
from codecollector.collector_core.walker import DirectoryWalker


def make_tree(root: Path, files):
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


class FailingWalker(DirectoryWalker):
    """Walker whose listing of one directory always fails"""

    def __init__(self, rule_set, broken_name):
        super().__init__(rule_set)
        self.broken_name = broken_name

    def list_directory(self, directory):
        if Path(directory).name == self.broken_name:
            raise PermissionError(13, "Permission denied", directory)
        return super().list_directory(directory)


def collector_for(include_extensions=(), ignore_patterns=(), workers=4):
    config = CollectorConfig(
        include_extensions=list(include_extensions),
        ignore_patterns=list(ignore_patterns),
    )
    return CodeCollector(config, parallel_config=ParallelConfig(max_workers=workers))


def test_root_gitignore_excludes_file(tmp_path):
    """Only a.go survives a root .gitignore listing b.txt"""
    make_tree(tmp_path, {"a.go": "package a\n", "b.txt": "notes\n", ".gitignore": "b.txt\n"})

    result = collector_for().collect(tmp_path)

    assert result.paths() == ["a.go"]
    assert result.files[0].content == b"package a\n"


def test_extension_filter(tmp_path):
    make_tree(tmp_path, {"x.go": "package x\n", "x.py": "print()\n", ".gitignore": "nothing-here\n"})

    result = collector_for(include_extensions=[".go"]).collect(tmp_path)

    assert result.paths() == ["x.go"]


def test_trailing_slash_rule_keeps_files_out(tmp_path):
    make_tree(tmp_path / "proj", {"main.go": "package main\n", "vendor/lib/util.go": "package lib\n"})

    result = collector_for(ignore_patterns=["vendor/"]).collect(tmp_path / "proj")

    assert result.paths() == ["main.go"]
    assert "vendor/\n" in result.tree
    assert "util.go" not in result.tree


def test_nested_files_use_forward_slash_relative_paths(tmp_path):
    make_tree(tmp_path, {
        "cmd/app/main.go": "package main\n",
        "pkg/a.go": "package pkg\n",
        "pkg/b.go": "package pkg\n",
        "docs/readme.md": "# docs\n",
    })

    result = collector_for(include_extensions=[".go"]).collect(tmp_path)

    assert sorted(result.paths()) == ["cmd/app/main.go", "pkg/a.go", "pkg/b.go"]
    assert "readme.md\n" in result.tree


def test_ignored_file_never_collected_even_with_matching_extension(tmp_path):
    make_tree(tmp_path, {"gen/x.go": "", "y.go": "", "gen/.gitignore": "gen/x.go\n"})

    result = collector_for(include_extensions=[".go"]).collect(tmp_path)

    assert sorted(result.paths()) == ["y.go"]


def test_walk_error_keeps_already_dispatched_records(tmp_path):
    """Reads dispatched before a directory fails to list still end up in the result"""
    make_tree(tmp_path, {"a.go": "a\n", "b.go": "b\n", "broken/c.go": "c\n", "z.go": "z\n"})
    rules = IgnoreRuleSet.from_patterns([])
    pipeline = CollectionPipeline(
        rules,
        config=ParallelConfig(max_workers=2),
        walker=FailingWalker(rules, "broken"),
    )

    with pytest.raises(WalkError) as excinfo:
        pipeline.collect(tmp_path)

    error = excinfo.value
    assert error.path.endswith("broken")
    assert error.partial_result is not None
    assert sorted(error.partial_result.paths()) == ["a.go", "b.go"]
    assert error.partial_result.tree.startswith("Error generating tree: ")
    assert pipeline.state == PipelineState.DONE
    assert pipeline.stats.is_complete


def test_missing_root_is_walk_error(tmp_path):
    pipeline = CollectionPipeline(IgnoreRuleSet.from_patterns([]), config=ParallelConfig(max_workers=1))

    with pytest.raises(WalkError) as excinfo:
        pipeline.collect(tmp_path / "missing")

    assert excinfo.value.partial_result.files == []


def test_single_file_root(tmp_path):
    target = make_tree(tmp_path, {"solo.go": "package solo\n"}) / "solo.go"

    result = collector_for().collect(target)

    assert result.paths() == ["solo.go"]


def test_read_failure_is_counted_not_fatal(tmp_path, monkeypatch):
    make_tree(tmp_path, {"good.go": "ok\n", "bad.go": "never read\n"})
    real_read = pipeline_module.read_file_record

    def flaky_read(path, relative_path):
        if relative_path == "bad.go":
            raise FileReadError(relative_path, OSError(5, "Input/output error"))
        return real_read(path, relative_path)

    monkeypatch.setattr(pipeline_module, "read_file_record", flaky_read)
    collector = collector_for()

    result = collector.collect(tmp_path)

    assert result.paths() == ["good.go"]
    stats = collector.stats
    assert (stats.included, stats.collected, stats.failed) == (2, 1, 1)
    assert stats.is_complete
    assert stats.failures[0].path == "bad.go"


def test_read_file_record_wraps_os_errors(tmp_path):
    with pytest.raises(FileReadError) as excinfo:
        pipeline_module.read_file_record(str(tmp_path / "gone.go"), "gone.go")
    assert excinfo.value.path == "gone.go"
    assert isinstance(excinfo.value.cause, OSError)


def test_concurrent_reads_are_bounded(tmp_path, monkeypatch):
    make_tree(tmp_path, {f"f{i:02d}.go": str(i) for i in range(12)})
    real_read = pipeline_module.read_file_record
    lock = threading.Lock()
    active = [0]
    peak = [0]

    def slow_read(path, relative_path):
        with lock:
            active[0] += 1
            peak[0] = max(peak[0], active[0])
        try:
            time.sleep(0.02)
            return real_read(path, relative_path)
        finally:
            with lock:
                active[0] -= 1

    monkeypatch.setattr(pipeline_module, "read_file_record", slow_read)

    result = collector_for(workers=3).collect(tmp_path)

    assert len(result.files) == 12
    assert peak[0] <= 3


running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes not supported")
def test_named_pipe_is_not_read(tmp_path):
    """Special files are listed in the tree but never opened"""
    make_tree(tmp_path, {"a.go": "package a\n"})
    os.mkfifo(tmp_path / "pipe")

    collector = collector_for()
    result = collector.collect(tmp_path)

    assert result.paths() == ["a.go"]
    assert "pipe\n" in result.tree
    assert collector.stats.included == 1


@pytest.mark.skipif(running_as_root, reason="root bypasses directory permissions")
def test_unsearchable_directory_does_not_escape_walk(tmp_path):
    make_tree(tmp_path, {"a.go": "package a\n", "locked/x.go": "package x\n"})
    locked = tmp_path / "locked"
    locked.chmod(0o444)
    try:
        collector = collector_for()
        result = collector.collect(tmp_path)
    finally:
        locked.chmod(0o755)

    assert "a.go" in result.paths()
    assert "locked/x.go" not in result.paths()
    assert "locked/\n" in result.tree
    assert collector.stats.is_complete
    assert collector.pipeline.state == PipelineState.DONE


class TestPipelineState(unittest.TestCase):
    """Pipeline state transitions and reuse across runs"""

    def setUp(self):
        import tempfile
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        make_tree(self.root, {"a.go": "a", "b.py": "b"})

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_initial_and_final_state(self):
        rules = IgnoreRuleSet.from_patterns([])
        pipeline = CollectionPipeline(rules, InclusionPolicy(rules, [".go"]),
                                      config=ParallelConfig(max_workers=2))
        self.assertEqual(pipeline.state, PipelineState.IDLE)

        result = pipeline.collect(self.root)

        self.assertEqual(pipeline.state, PipelineState.DONE)
        self.assertEqual(result.paths(), ["a.go"])

    def test_collector_can_run_twice(self):
        collector = collector_for()
        first = collector.collect(self.root)
        (self.root / "c.go").write_text("c")
        second = collector.collect(self.root)

        self.assertEqual(sorted(first.paths()), ["a.go", "b.py"])
        self.assertEqual(sorted(second.paths()), ["a.go", "b.py", "c.go"])
        self.assertEqual(first.tree.count("\n") + 1, second.tree.count("\n"))


if __name__ == '__main__':
    unittest.main()
