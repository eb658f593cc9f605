"""Shared fakes for the external tools the pipeline talks to."""

from typing import Dict, List

import pytest

from locohost.models import RawSocket, WorkspaceMetadata


class FakeRunner:
    """CommandRunner stand-in answering from a table keyed by argv prefix."""

    def __init__(self, responses: Dict[tuple, str] = None):
        self.responses = responses or {}
        self.calls: List[List[str]] = []

    def run(self, args):
        self.calls.append(list(args))
        for prefix, output in self.responses.items():
            if tuple(args[:len(prefix)]) == prefix:
                return output
        return ''


class FakeSocketLister:
    def __init__(self, sockets=None, error: Exception = None):
        self.sockets = sockets or []
        self.error = error

    def list_listening(self):
        if self.error:
            raise self.error
        return list(self.sockets)


class FakeResolver:
    def __init__(self, by_pid: Dict[int, WorkspaceMetadata] = None, failing=()):
        self.by_pid = by_pid or {}
        self.failing = set(failing)
        self.calls: List[int] = []

    def resolve(self, pid):
        self.calls.append(pid)
        if pid in self.failing:
            raise RuntimeError(f"boom for {pid}")
        return self.by_pid.get(pid, WorkspaceMetadata())


class FakeTracker:
    def __init__(self, lookup=None, error: Exception = None):
        self.lookup = lookup
        self.error = error
        self.calls = 0

    def snapshot(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.lookup


@pytest.fixture
def raw_sockets():
    return [
        RawSocket(pid=300, port=8080, command_name="python3"),
        RawSocket(pid=100, port=3000, command_name="node"),
        RawSocket(pid=100, port=3000, command_name="node"),
        RawSocket(pid=200, port=5173, command_name="node"),
    ]
