import sqlite3

import pytest

from locohost.models import WorkspaceRecord
from locohost.tracker import TrackerStore


@pytest.fixture
def conductor_db(tmp_path):
    path = tmp_path / "Application Support" / "conductor.db"
    path.parent.mkdir()
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE workspaces (id TEXT, directory_name TEXT, state TEXT, branch TEXT)")
    conn.executemany(
        "INSERT INTO workspaces VALUES (?, ?, ?, ?)",
        [
            ("a1", "myapp", "active", "alice/feature-x"),
            ("b2", "api", "initializing", "main"),
            ("c3", "old", "archived", "main"),
        ],
    )
    conn.commit()
    conn.close()
    return path


def test_missing_database_is_unavailable(tmp_path):
    assert TrackerStore(tmp_path / "nope.db").snapshot() is None


def test_snapshot_excludes_archived(conductor_db):
    snapshot = TrackerStore(conductor_db).snapshot()

    assert dict(snapshot) == {
        "myapp": WorkspaceRecord(id="a1", directory_name="myapp", state="active"),
        "api": WorkspaceRecord(id="b2", directory_name="api", state="initializing"),
    }


def test_snapshot_is_read_only(conductor_db):
    snapshot = TrackerStore(conductor_db).snapshot()
    with pytest.raises(TypeError):
        snapshot["new"] = WorkspaceRecord(id="x", directory_name="new", state="active")


def test_unexpected_schema_is_unavailable(tmp_path):
    path = tmp_path / "conductor.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE something_else (id TEXT)")
    conn.commit()
    conn.close()

    assert TrackerStore(path).snapshot() is None


def test_corrupt_file_is_unavailable(tmp_path):
    path = tmp_path / "conductor.db"
    path.write_bytes(b"this is not a sqlite database at all" * 20)

    assert TrackerStore(path).snapshot() is None
