"""
Derive project, workspace and branch names from a process's working directory
"""
import logging
import os
import re
from typing import List, Optional, Tuple

import psutil

from .commands import CommandRunner
from .models import WorkspaceMetadata

logger = logging.getLogger(__name__)


class LsofCwdQuery:
    """Ask lsof for the cwd file descriptor of a process"""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    def query(self, pid: int) -> str:
        output = self.runner.run(['lsof', '-a', '-p', str(pid), '-d', 'cwd', '-Fn'])
        for line in output.splitlines():
            # -F output: "p<pid>", "f<fd>", "n<path>"
            if line.startswith('n/'):
                return line[1:].strip()
        return ''


class PsutilCwdQuery:
    def query(self, pid: int) -> str:
        try:
            return psutil.Process(pid).cwd() or ''
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            return ''
        except OSError as e:
            logger.debug("cwd lookup for %d failed: %s", pid, e)
            return ''


class GitBranchQuery:
    """Current branch of the repository containing a directory"""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    def query(self, directory: str) -> str:
        return self.runner.run(['git', '-C', directory, 'rev-parse', '--abbrev-ref', 'HEAD']).strip()


def workspace_pattern(namespace: str = '') -> 're.Pattern[str]':
    """Matches .../<namespace>/workspaces/<workspace>/<project>"""
    segment = re.escape(namespace) if namespace else r'[^/]+'
    return re.compile(r'/' + segment + r'/workspaces/([^/]+)/([^/]+)')


def parse_workspace_path(cwd: str, namespace: str = '') -> Tuple[str, str]:
    """Return (workspace_name, project_name) for a working directory

    Directories outside a workspace get an empty workspace name and their
    last path component as the project name.
    """
    match = workspace_pattern(namespace).search(cwd)
    if match:
        return match.group(1), match.group(2)
    return '', os.path.basename(cwd.rstrip('/'))


def strip_branch_prefix(branch: str) -> str:
    """Drop a leading "<username>/" segment: alice/feature-x -> feature-x"""
    if '/' in branch:
        return branch.split('/', 1)[1]
    return branch


class WorkspaceResolver:
    """Resolve working directory, project, workspace and branch for a pid

    Each step is best-effort: a failing cwd strategy falls through to the
    next one, and a failing branch lookup leaves the branch blank.
    """

    def __init__(self, cwd_queries: Optional[List] = None, branch_query=None,
                 runner: Optional[CommandRunner] = None, namespace: str = ''):
        runner = runner or CommandRunner()
        if cwd_queries is None:
            cwd_queries = [LsofCwdQuery(runner), PsutilCwdQuery()]
        self.cwd_queries = cwd_queries
        self.branch_query = branch_query or GitBranchQuery(runner)
        self.namespace = namespace

    def _working_directory(self, pid: int) -> str:
        for cwd_query in self.cwd_queries:
            try:
                cwd = cwd_query.query(pid)
            except Exception as e:
                logger.debug("%s failed for pid %d: %s", type(cwd_query).__name__, pid, e)
                continue
            if cwd:
                return cwd
        return ''

    def _branch(self, cwd: str) -> str:
        try:
            branch = self.branch_query.query(cwd)
        except Exception as e:
            logger.debug("Branch lookup failed for %s: %s", cwd, e)
            return ''
        return strip_branch_prefix(branch) if branch else ''

    def resolve(self, pid: int) -> WorkspaceMetadata:
        metadata = WorkspaceMetadata()

        cwd = self._working_directory(pid)
        if not cwd:
            return metadata

        metadata.working_directory = cwd
        metadata.workspace_name, metadata.project_name = parse_workspace_path(cwd, self.namespace)
        metadata.branch = self._branch(cwd)
        return metadata
