"""
Turn raw listening sockets into annotated dev-server entries
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Mapping, Optional

from .commands import CommandRunner
from .models import (
    COMMAND_DISPLAY_LENGTH,
    NO_BRANCH,
    NO_WORKSPACE,
    UNKNOWN_PROJECT,
    ProcessEntry,
    RawSocket,
    WorkspaceRecord,
)
from .socket_enumerator import default_socket_lister
from .tracker import TrackerStore
from .workspace_resolver import WorkspaceResolver

logger = logging.getLogger(__name__)


class ProcessIdentifier:
    """Discover processes listening on localhost and describe what they are

    Every call runs a fresh cycle: one tracker snapshot, one socket listing,
    then one metadata lookup per (pid, port). Nothing is cached between calls.
    """

    def __init__(self, socket_lister=None, resolver: Optional[WorkspaceResolver] = None,
                 tracker: Optional[TrackerStore] = None, max_workers: int = 8,
                 runner: Optional[CommandRunner] = None):
        runner = runner or CommandRunner()
        self.socket_lister = socket_lister or default_socket_lister(runner)
        self.resolver = resolver or WorkspaceResolver(runner=runner)
        self.tracker = tracker or TrackerStore()
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_settings(cls, settings) -> 'ProcessIdentifier':
        runner = CommandRunner(timeout=settings.command_timeout)
        return cls(
            resolver=WorkspaceResolver(runner=runner, namespace=settings.workspace_namespace),
            max_workers=settings.max_workers,
            runner=runner,
        )

    def _tracker_snapshot(self) -> Optional[Mapping[str, WorkspaceRecord]]:
        try:
            return self.tracker.snapshot()
        except Exception as e:
            logger.debug("Tracker snapshot failed: %s", e)
            return None

    @staticmethod
    def _unique_sockets(sockets: List[RawSocket]) -> List[RawSocket]:
        """Keep the first socket seen for each (pid, port)"""
        seen = set()
        unique = []
        for sock in sockets:
            key = (sock.pid, sock.port)
            if key in seen:
                continue
            seen.add(key)
            unique.append(sock)
        return unique

    def _build_entry(self, sock: RawSocket,
                     workspaces: Optional[Mapping[str, WorkspaceRecord]]) -> ProcessEntry:
        entry = ProcessEntry(
            pid=sock.pid,
            port=sock.port,
            command=sock.command_name[:COMMAND_DISPLAY_LENGTH],
        )

        try:
            metadata = self.resolver.resolve(sock.pid)
        except Exception as e:
            # Keep the process in the list with default labels
            logger.warning("Could not resolve metadata for pid %d: %s", sock.pid, e)
            return entry

        entry.working_directory = metadata.working_directory
        entry.project = metadata.project_name or UNKNOWN_PROJECT
        entry.workspace = metadata.workspace_name or NO_WORKSPACE
        entry.branch = metadata.branch or NO_BRANCH

        if metadata.workspace_name and workspaces:
            record = workspaces.get(metadata.project_name)
            if record is not None:
                entry.tracker_id = record.id
                entry.tracker_state = record.state

        return entry

    def get_localhost_processes(self) -> List[ProcessEntry]:
        """Run one enumeration cycle; returns entries sorted by port, never raises"""
        try:
            workspaces = self._tracker_snapshot()
            sockets = self._unique_sockets(self.socket_lister.list_listening())
            if not sockets:
                return []

            workers = min(self.max_workers, len(sockets))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                entries = list(executor.map(lambda s: self._build_entry(s, workspaces), sockets))

            # sort() is stable, so discovery order survives for equal ports
            entries.sort(key=lambda e: e.port)
            return entries
        except Exception:
            logger.exception("Error getting processes")
            return []
