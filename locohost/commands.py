"""
Thin wrapper around the external tools (lsof, git) the pipeline shells out to
"""
import logging
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run an external command and hand back its stdout, never raising"""

    def __init__(self, timeout: Optional[float] = 5.0):
        # None means wait forever, like the shell pipeline this replaces
        self.timeout = timeout

    def run(self, args: List[str]) -> str:
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout,
            )
        except FileNotFoundError:
            logger.debug("Command not found: %s", args[0])
            return ''
        except subprocess.TimeoutExpired:
            logger.debug("Command timed out after %ss: %s", self.timeout, ' '.join(args))
            return ''
        except OSError as e:
            logger.debug("Command failed: %s (%s)", ' '.join(args), e)
            return ''

        # lsof exits 1 when it finds nothing; stdout is still meaningful
        if result.returncode != 0 and result.stderr:
            logger.debug("%s exited %d: %s", args[0], result.returncode, result.stderr.strip())
        return result.stdout or ''
