"""Tests for per-unit reading and extraction."""

from __future__ import annotations

import pytest

from strex.errors import UnitReadError
from strex.extractor import extract_source, extract_unit, read_source_unit
from strex.models import SourceUnit


class TestReadSourceUnit:
    def test_reads_text(self, make_repo):
        repo = make_repo({"a.cs": 'var s = "x";'})
        unit = read_source_unit(repo, "a.cs")
        assert unit.path == "a.cs"
        assert unit.text == 'var s = "x";'

    def test_strips_bom(self, make_repo):
        repo = make_repo({"a.cs": b'\xef\xbb\xbfvar s = "x";'})
        assert read_source_unit(repo, "a.cs").text == 'var s = "x";'

    def test_missing_file(self, make_repo):
        repo = make_repo({})
        with pytest.raises(UnitReadError) as excinfo:
            read_source_unit(repo, "missing.cs")
        assert excinfo.value.path == "missing.cs"

    def test_invalid_encoding(self, make_repo):
        repo = make_repo({"bad.cs": b'var s = "\xff\xfe";'})
        with pytest.raises(UnitReadError):
            read_source_unit(repo, "bad.cs")

    def test_alternate_encoding(self, make_repo):
        repo = make_repo({"latin.cs": 'var s = "caf\xe9";'.encode("latin-1")})
        assert read_source_unit(repo, "latin.cs", encoding="latin-1").text.endswith('"café";')

    def test_unit_is_immutable(self):
        unit = SourceUnit(path="a.cs", text="")
        with pytest.raises(Exception):
            unit.text = "changed"


class TestExtractUnit:
    def test_literals_in_order(self, make_repo):
        repo = make_repo({"a.cs": 'f("one"); g(@"two"); h($"three{x}");'})
        result = extract_unit(repo, "a.cs")
        assert result.error is None
        assert result.literals == ["one", "two", "three{x}"]

    def test_read_failure_becomes_error(self, make_repo):
        repo = make_repo({"bad.cs": b"\xff\xff"})
        result = extract_unit(repo, "bad.cs")
        assert result.error is not None
        assert result.literals == []

    def test_anomalies_counted(self):
        result = extract_source(SourceUnit(path="a.cs", text='var s = "open\n'))
        assert result.literals == ["open"]
        assert result.anomalies == 1

    def test_hole_literals_flag(self):
        unit = SourceUnit(path="a.cs", text='$"{"in"}"')
        assert extract_source(unit).literals == ['{"in"}']
        assert extract_source(unit, hole_literals=True).literals == ['{"in"}', "in"]
