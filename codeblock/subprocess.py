"""
Provide a subprocess API.
"""

import logging
import os
import subprocess
from collections.abc import Sequence
from subprocess import PIPE


class SubprocessError(Exception):
    """
    Raised when a subprocess failed.
    """

    pass


class CalledSubprocessError(subprocess.CalledProcessError, SubprocessError):
    """
    Raised when a subprocess was successfully invoked, but subsequently failed during its own execution.
    """

    pass


class FileNotFound(FileNotFoundError, SubprocessError):
    """
    Raised when a command could not be found.
    """

    pass


def run_process(
    runnee: Sequence[str],
    *,
    stdin: bytes | None = None,
) -> bytes:
    """
    Run a command in a subprocess, and return its stdout.

    :raise codeblock.subprocess.SubprocessError:
    """
    command = " ".join(runnee)
    logger = logging.getLogger(__name__)
    logger.debug(f"Running subprocess `{command}`...")

    try:
        process = subprocess.run(
            runnee, input=stdin, stderr=PIPE, stdout=PIPE, check=False
        )
    except FileNotFoundError as error:
        logger.debug(str(error))
        raise FileNotFound(str(error)) from None

    if process.returncode == 0:
        return process.stdout

    stdout_str = "\n".join(process.stdout.decode(errors="replace").split(os.linesep))
    stderr_str = "\n".join(process.stderr.decode(errors="replace").split(os.linesep))

    if stdout_str:
        logger.debug(f"Subprocess `{command}` stdout:\n{stdout_str}")
    if stderr_str:
        logger.debug(f"Subprocess `{command}` stderr:\n{stderr_str}")

    raise CalledSubprocessError(
        process.returncode,
        command,
        stdout_str,
        stderr_str,
    )
