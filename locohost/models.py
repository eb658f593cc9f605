"""
Data types shared by the discovery pipeline and the HTTP API
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Longest command name shown in the dashboard
COMMAND_DISPLAY_LENGTH = 20

UNKNOWN_PROJECT = 'Unknown'
NO_WORKSPACE = '-'
NO_BRANCH = '-'


@dataclass(frozen=True)
class RawSocket:
    """One listening socket as reported by the OS"""
    pid: int
    port: int
    command_name: str


@dataclass
class WorkspaceMetadata:
    """What could be learned about a process from its working directory"""
    working_directory: str = ''
    project_name: str = ''
    workspace_name: str = ''
    branch: str = ''


@dataclass(frozen=True)
class WorkspaceRecord:
    id: str
    directory_name: str
    state: str


@dataclass
class ProcessEntry:
    """A deduplicated, annotated dev-server entry served by /api/processes"""
    pid: int
    port: int
    command: str
    working_directory: str = ''
    project: str = UNKNOWN_PROJECT
    workspace: str = NO_WORKSPACE
    branch: str = NO_BRANCH
    tracker_id: Optional[str] = None
    tracker_state: Optional[str] = None

    @property
    def running(self) -> str:
        return f"localhost:{self.port}"

    @property
    def is_dev_server(self) -> bool:
        # Grouping follows the workspace name, not tracker presence
        return self.workspace != NO_WORKSPACE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pid': self.pid,
            'port': self.port,
            'command': self.command,
            'workingDirectory': self.working_directory,
            'project': self.project,
            'workspace': self.workspace,
            'branch': self.branch,
            'running': self.running,
            'trackerId': self.tracker_id,
            'trackerState': self.tracker_state,
            'isDevServer': self.is_dev_server,
        }
