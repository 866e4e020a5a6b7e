"""GitHub Actions host plumbing: step outputs and the failure signal.

Outputs are appended to the file named by ``GITHUB_OUTPUT`` using the
multi-line delimiter syntax. Outside of a runner (no ``GITHUB_OUTPUT``) the
legacy ``::set-output`` command is printed instead so local runs still show
the value.
"""

import os
import sys
import uuid
from typing import TextIO

import structlog

logger = structlog.get_logger()


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def set_output(name: str, value: str, stream: TextIO = None) -> None:
    """Expose ``value`` as the step output ``name``."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(output_file, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        logger.debug("output_set", name=name, size=len(value))
        return

    stream = stream or sys.stdout
    print(f"::set-output name={escape_property(name)}::{escape_data(value)}", file=stream)


def set_failed(message: str, stream: TextIO = None) -> None:
    """Report a failed step. The caller is responsible for the exit status."""
    stream = stream or sys.stdout
    print(f"::error::{escape_data(message)}", file=stream)
