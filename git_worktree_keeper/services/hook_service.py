"""Run setup and teardown hook commands"""
import os
import signal
import subprocess
import threading
from typing import List, Optional

from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.display_service import DisplayService

logger = get_logger(__name__)


class HookService:
    """Runs shell commands from .worktree.yml inside a worktree.

    Every command runs even when an earlier one failed; the caller decides
    whether failures are fatal.
    """

    def __init__(self, display: DisplayService, dry_run: bool = False, timeout: Optional[float] = None):
        self.display = display
        self.dry_run = dry_run
        self.timeout = timeout

    def run(self, commands: List[str], cwd: str) -> List[str]:
        """Run each command with `sh -c` in `cwd`.

        Returns:
            The commands that failed, in order
        """
        failed = []
        for command in commands:
            if self.dry_run:
                self.display.dry_run(f"run hook: {command}")
                continue

            self.display.step(command)
            if not self._run_one(command, cwd):
                self.display.warning(f"hook failed: {command}")
                failed.append(command)
        return failed

    def _run_one(self, command: str, cwd: str) -> bool:
        try:
            proc = subprocess.Popen(
                ["sh", "-c", command],
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                # Own process group so a timeout kills the whole pipeline
                start_new_session=True,
            )
        except OSError as e:
            logger.error(f"Could not start hook '{command}': {e}")
            return False

        timed_out = threading.Event()

        def kill():
            timed_out.set()
            self._kill(proc)

        watchdog = threading.Timer(self.timeout, kill) if self.timeout else None
        if watchdog:
            watchdog.start()

        try:
            with proc.stdout:
                for line in proc.stdout:
                    self.display.stream(line.rstrip("\n"))
            returncode = proc.wait()
        except KeyboardInterrupt:
            self._kill(proc)
            proc.wait()
            raise
        finally:
            if watchdog:
                watchdog.cancel()

        if timed_out.is_set():
            logger.warning(f"Hook timed out after {self.timeout}s: {command}")
            return False

        logger.debug(f"Hook '{command}' exited {returncode}")
        return returncode == 0

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
