"""Process termination guarded against core OS processes."""

from __future__ import annotations

import logging

import psutil

from portlens.core.suggestions import is_system_process
from portlens.errors import ProcessActionError, ProcessNotFoundError, ProtectedProcessError

logger = logging.getLogger("portlens.actions")


def terminate_process(pid: int, timeout: float = 3.0) -> bool:
    """Send SIGTERM (TerminateProcess on Windows) and wait briefly.

    Returns True if the process exited within ``timeout`` seconds.
    """
    try:
        proc = psutil.Process(pid)
        name = proc.name()
    except psutil.NoSuchProcess as exc:
        raise ProcessNotFoundError(pid, f"Process {pid} does not exist") from exc
    except psutil.AccessDenied as exc:
        raise ProcessActionError(pid, f"Access denied reading process {pid}") from exc

    if is_system_process(name):
        raise ProtectedProcessError(
            pid, f"{name} is a core system process; terminating it may destabilise the system"
        )

    try:
        proc.terminate()
        proc.wait(timeout=timeout)
    except psutil.NoSuchProcess:
        pass
    except psutil.TimeoutExpired:
        logger.warning("Process %d (%s) still running after %.1fs", pid, name, timeout)
        return False
    except psutil.AccessDenied as exc:
        raise ProcessActionError(pid, f"Access denied terminating {name} ({pid})") from exc

    logger.info("Terminated process %d (%s)", pid, name)
    return True
