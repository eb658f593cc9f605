"""
Kill processes on request from the dashboard
"""
from typing import Any, Dict, Union

import psutil


class ProcessTerminator:
    """Force-kill a process by PID

    There is no check that the pid still belongs to the process that was
    listed earlier; the dashboard may be showing stale data.
    """

    def terminate(self, pid: Union[int, str]) -> Dict[str, Any]:
        """Send SIGKILL (or TerminateProcess on Windows) to a process"""
        try:
            pid = int(pid)
        except (TypeError, ValueError):
            return {'success': False, 'error': f'Invalid pid: {pid}'}
        if pid <= 0:
            return {'success': False, 'error': f'Invalid pid: {pid}'}

        try:
            psutil.Process(pid).kill()
            return {'success': True}
        except psutil.NoSuchProcess:
            return {'success': False, 'error': f'Process {pid} not found'}
        except psutil.AccessDenied:
            return {'success': False, 'error': f'Access denied to kill process {pid}'}
        except Exception as e:
            return {'success': False, 'error': str(e) or type(e).__name__}
