"""Tests for directory construction and root selection."""

import pytest

from fakes import FakeProvider
from proctree.directory import build_directory, find_roots, load_directory, target_executable_name
from proctree.models import RawProcessEntry
from proctree.provider import EnumerationFailure


def entries(*rows: tuple[int, int, str]) -> list[RawProcessEntry]:
    """Build raw entries from (pid, ppid, name) rows."""
    return [RawProcessEntry(pid, ppid, name) for pid, ppid, name in rows]


class TestBuildDirectory:
    """Tests for build_directory."""

    def test_every_pid_is_indexed_once(self):
        """Test each enumerated pid becomes exactly one directory key."""
        directory = build_directory(entries((1, 0, "a"), (2, 1, "b"), (3, 1, "c")))

        assert sorted(directory.records) == [1, 2, 3]
        assert directory.get(2).name == "b"
        assert directory.get(2).ppid == 1

    def test_children_keep_enumeration_order(self):
        """Test child lists follow enumeration order, not pid order."""
        directory = build_directory(entries((1, 0, "a"), (9, 1, "z"), (3, 1, "c"), (5, 1, "b")))

        assert directory.children_of(1) == [9, 3, 5]
        assert directory.children_of(0) == [1]

    def test_dangling_parent_is_tolerated(self):
        """Test a parent that isn't in the snapshot still gets a child bucket."""
        directory = build_directory(entries((7, 4242, "orphan")))

        assert 4242 not in directory
        assert directory.children_of(4242) == [7]

    def test_repeated_pid_last_wins(self):
        """Test a repeated pid overwrites the earlier record."""
        directory = build_directory(entries((1, 0, "old"), (1, 0, "new")))

        assert len(directory) == 1
        assert directory.get(1).name == "new"

    def test_consumes_iterator_once(self):
        """Test a one-shot iterator is enough to build the directory."""
        directory = build_directory(iter(entries((1, 0, "a"), (2, 1, "b"))))

        assert len(directory) == 2

    def test_empty_enumeration(self):
        """Test an empty enumeration yields empty structures."""
        directory = build_directory([])

        assert len(directory) == 0
        assert directory.children == {}


class TestLoadDirectory:
    """Tests for load_directory."""

    def test_loads_from_provider(self):
        """Test the provider is enumerated exactly once."""
        provider = FakeProvider([(1, 0, "a"), (2, 1, "b")])

        directory = load_directory(provider)

        assert len(directory) == 2
        assert provider.calls["enumerate"] == 1

    def test_enumeration_failure_propagates(self):
        """Test a failed snapshot is re-raised to the caller."""
        provider = FakeProvider(fail_enumeration=True)

        with pytest.raises(EnumerationFailure):
            load_directory(provider)


class TestFindRoots:
    """Tests for find_roots."""

    def test_match_ignores_case(self):
        """Test 'app' matches a process named 'App.exe'."""
        directory = build_directory(entries((10, 1, "App.exe")))

        assert find_roots(directory, "app.exe") == [10]
        assert find_roots(directory, target_executable_name("app", ".exe")) == [10]

    def test_match_lowercases_non_ascii(self):
        """Test non-ASCII names are compared after str.lower() on both sides."""
        directory = build_directory(entries((10, 1, "ÄPP.exe")))

        assert find_roots(directory, "äpp.EXE") == [10]

    def test_every_match_is_a_root(self):
        """Test nested matches are roots too, not only top-level ancestors."""
        directory = build_directory(
            entries((1, 0, "x.exe"), (2, 1, "x.exe"), (3, 1, "y.exe"), (4, 2, "x.exe"))
        )

        assert find_roots(directory, "x.exe") == [1, 2, 4]

    def test_no_match(self):
        """Test an unknown name yields no roots."""
        directory = build_directory(entries((1, 0, "x.exe")))

        assert find_roots(directory, "nope.exe") == []

    def test_partial_name_does_not_match(self):
        """Test only whole names match."""
        directory = build_directory(entries((1, 0, "chrome.exe")))

        assert find_roots(directory, "chrom") == []


class TestTargetExecutableName:
    """Tests for target_executable_name."""

    def test_appends_suffix(self):
        """Test the suffix is appended to a bare name."""
        assert target_executable_name("notepad", ".exe") == "notepad.exe"

    def test_keeps_existing_suffix(self):
        """Test a name already carrying the suffix is left alone."""
        assert target_executable_name("Notepad.EXE", ".exe") == "Notepad.EXE"

    def test_no_suffix_platform(self):
        """Test nothing is appended where executables have no suffix."""
        assert target_executable_name("bash", "") == "bash"
