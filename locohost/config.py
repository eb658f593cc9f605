"""
Runtime settings read from the environment
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_PORT = 3847


def _number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class Settings:
    host: str = '127.0.0.1'
    port: int = DEFAULT_PORT
    command_timeout: Optional[float] = 5.0
    max_workers: int = 8
    workspace_namespace: str = ''
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        if environ is None:
            environ = os.environ

        # CONDUCTOR_PORT wins over PORT
        port_var = 'CONDUCTOR_PORT' if environ.get('CONDUCTOR_PORT') else 'PORT'
        port = _number(environ, port_var, DEFAULT_PORT, int)

        timeout = _number(environ, 'LOCOHOST_COMMAND_TIMEOUT', 5.0, float)

        return cls(
            host=environ.get('LOCOHOST_HOST') or '127.0.0.1',
            port=port,
            command_timeout=timeout if timeout > 0 else None,
            max_workers=_number(environ, 'LOCOHOST_MAX_WORKERS', 8, int),
            workspace_namespace=environ.get('LOCOHOST_WORKSPACE_NAMESPACE', '').strip('/'),
            log_level=(environ.get('LOCOHOST_LOG_LEVEL') or 'INFO').upper(),
        )
