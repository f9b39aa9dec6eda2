"""
Process operations module for bashfs.

Changing the working directory and running external commands.
"""

import os
from typing import Optional, Sequence

from ..core.logger import OperationLogger
from ..core.outcome import OperationResult, OutcomeStatus
from ..core.providers import ProcessProvider, SubprocessRunner
from .file_ops import PathArg


class ProcessOperator:
    """Process-level operations: ``cd`` and ``run_command``."""

    def __init__(
        self,
        runner: Optional[ProcessProvider] = None,
        logger: Optional[OperationLogger] = None
    ):
        self.runner = runner or SubprocessRunner()
        self.logger = logger or OperationLogger()

    def cd(self, path: PathArg) -> OperationResult:
        """Change the current working directory of this process."""
        path = os.fspath(path)
        try:
            self.runner.chdir(path)
        except OSError as e:
            result = OperationResult.from_error("cd", path, e)
            return self.logger.log_result(result, f"Cannot change directory to {path}: {e}")

        result = OperationResult(operation="cd", path=path, status=OutcomeStatus.DONE)
        return self.logger.log_result(result, f"Changed directory to {path}")

    def run_command(self, program: str, args: Sequence[str] = ()) -> OperationResult:
        """
        Run ``program`` with ``args`` and wait for it to exit.

        ``data`` is the exit code when the child exited on its own. It stays
        None when the program could not be spawned or was killed by a signal
        (subprocess reports that as a negative return code).

        Returns:
            DONE with the exit code, FAILED otherwise
        """
        program = os.fspath(program)
        argv = [program, *[os.fspath(a) for a in args]]

        try:
            returncode = self.runner.run(argv)
        except OSError as e:
            result = OperationResult.from_error("run_command", program, e)
            return self.logger.log_result(result, f"Failed to execute {program}: {e}")

        if returncode < 0:
            result = OperationResult(
                operation="run_command",
                path=program,
                status=OutcomeStatus.FAILED,
                message=f"terminated by signal {-returncode}"
            )
            return self.logger.log_result(result, f"{program} was terminated by signal {-returncode}")

        result = OperationResult(operation="run_command", path=program, status=OutcomeStatus.DONE, data=returncode)
        return self.logger.log_result(result, f"{program} exited with code {returncode}")
