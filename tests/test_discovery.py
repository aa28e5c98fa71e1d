"""Tests for source file discovery."""

from __future__ import annotations

import logging
import os

from strex.discovery import SKIP_DIRS, iter_source_files


class TestDiscovery:
    def test_finds_cs_files_only(self, make_repo):
        repo = make_repo({"a.cs": "", "b.txt": "", "c.py": ""})
        assert list(iter_source_files(repo)) == ["a.cs"]

    def test_extension_case_insensitive(self, make_repo):
        repo = make_repo({"Upper.CS": "", "lower.cs": ""})
        assert sorted(iter_source_files(repo)) == ["Upper.CS", "lower.cs"]

    def test_nested_paths_use_platform_separator(self, make_repo):
        repo = make_repo({"Root.cs": "", "Nested": {"Deeper": {"Leaf.cs": ""}}})
        paths = list(iter_source_files(repo))
        assert paths == ["Root.cs", os.path.join("Nested", "Deeper", "Leaf.cs")]

    def test_deterministic_order(self, make_repo):
        repo = make_repo({
            "z.cs": "",
            "a.cs": "",
            "b": {"x.cs": ""},
            "a": {"y.cs": ""},
        })
        assert list(iter_source_files(repo)) == [
            "a.cs",
            "z.cs",
            os.path.join("a", "y.cs"),
            os.path.join("b", "x.cs"),
        ]

    def test_skip_dirs_pruned(self, make_repo):
        repo = make_repo({
            "src": {"App.cs": ""},
            "bin": {"Gen.cs": ""},
            "obj": {"Debug": {"AssemblyInfo.cs": ""}},
        })
        paths = list(iter_source_files(repo, skip_dirs={"bin", "obj"}))
        assert paths == [os.path.join("src", "App.cs")]

    def test_build_folders_scanned_by_default(self, make_repo):
        repo = make_repo({
            "Models": {"packages": {"Foo.cs": ""}},
            "bin": {"X.cs": ""},
            ".git": {"hooks.cs": ""},
        })
        assert ".git" in SKIP_DIRS
        assert list(iter_source_files(repo)) == [
            os.path.join("Models", "packages", "Foo.cs"),
            os.path.join("bin", "X.cs"),
        ]

    def test_unlistable_directory_logged(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="strex.discovery"):
            assert list(iter_source_files(tmp_path / "missing")) == []
        assert "Cannot list" in caplog.text

    def test_empty_skip_dirs_disables_pruning(self, make_repo):
        repo = make_repo({"bin": {"Gen.cs": ""}})
        assert list(iter_source_files(repo, skip_dirs=[])) == [os.path.join("bin", "Gen.cs")]

    def test_custom_extensions(self, make_repo):
        repo = make_repo({"a.cs": "", "b.csx": ""})
        assert list(iter_source_files(repo, extensions={".csx"})) == ["b.csx"]

    def test_empty_directory(self, make_repo):
        repo = make_repo({})
        assert list(iter_source_files(repo)) == []
