"""Tests for change set resolution."""

import logging
from pathlib import Path
from typing import Dict, List

import pytest

from permadeploy.core.change_resolver import ChangeSetResolver
from permadeploy.utils.hash_utils import calculate_content_hash


def make_files(base: Path, files: Dict[str, str]) -> List[Path]:
    paths = []
    for rel_path, content in files.items():
        path = base / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        paths.append(path)
    return paths


def blob(content: str) -> str:
    return calculate_content_hash(content.encode())


class TestResolve:
    def test_only_unknown_file_changed(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"A": "a", "B": "b", "C": "c"})
        stored = {"A": blob("a"), "B": blob("b")}

        change_set = ChangeSetResolver().resolve(files, stored, tmp_path)

        assert change_set.changed_paths == {"C"}
        assert change_set.deleted_paths == set()
        assert change_set.new_paths == {"C"}

    def test_deleted_paths(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"A": "a", "B": "b"})
        stored = {"A": blob("a"), "B": blob("b"), "D": blob("d")}

        change_set = ChangeSetResolver().resolve(files, stored, tmp_path)

        assert change_set.changed_paths == set()
        assert change_set.deleted_paths == {"D"}
        assert change_set.has_changes

    def test_modified_file(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"A": "a2", "B": "b"})
        stored = {"A": blob("a"), "B": blob("b")}

        change_set = ChangeSetResolver().resolve(files, stored, tmp_path)

        assert change_set.changed_paths == {"A"}
        assert change_set.modified_paths == {"A"}
        assert change_set.new_paths == set()

    def test_nothing_changed(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"A": "a"})
        change_set = ChangeSetResolver().resolve(files, {"A": blob("a")}, tmp_path)
        assert not change_set.has_changes

    def test_rename_is_delete_plus_add(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"new-name.html": "same"})
        stored = {"old-name.html": blob("same")}

        change_set = ChangeSetResolver().resolve(files, stored, tmp_path)

        assert change_set.changed_paths == {"new-name.html"}
        assert change_set.deleted_paths == {"old-name.html"}

    def test_keys_use_forward_slashes(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"js/app.js": "x", "css/site.css": "y"})
        stored = {"js\\app.js": blob("x")}

        change_set = ChangeSetResolver().resolve(files, stored, tmp_path)

        assert change_set.changed_paths == {"css/site.css"}
        assert change_set.deleted_paths == set()
        assert set(change_set.current_hashes) == {"js/app.js", "css/site.css"}

    def test_current_hashes_cover_every_tracked_file(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"A": "a", "B": "b"})
        change_set = ChangeSetResolver().resolve(files, {"A": blob("a")}, tmp_path)

        assert change_set.current_hashes == {"A": blob("a"), "B": blob("b")}
        assert change_set.current_tracked_paths == ["A", "B"]
        assert change_set.files["B"] == files[1]

    def test_logs_classification(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        files = make_files(tmp_path, {"A": "a2", "C": "c"})
        stored = {"A": blob("a"), "D": blob("d")}

        with caplog.at_level(logging.INFO, logger="permadeploy.core.change_resolver"):
            ChangeSetResolver().resolve(files, stored, tmp_path)

        assert "New: C" in caplog.text
        assert "Modified: A" in caplog.text
        assert "Deleted: D" in caplog.text

    def test_mark_changed_requires_tracked_path(self, tmp_path: Path) -> None:
        files = make_files(tmp_path, {"A": "a"})
        change_set = ChangeSetResolver().resolve(files, {"A": blob("a")}, tmp_path)

        change_set.mark_changed("A")
        assert change_set.changed_paths == {"A"}
        with pytest.raises(KeyError):
            change_set.mark_changed("missing")
