"""
Description:
    Writer callbacks: line sinks for messages, sampler state and reports.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.2

A writer is any callable taking one line of text; writer("") emits a blank line.
Writers never raise on the caller, failures stay inside the writer.
"""
import logging
import sys
from typing import List, TextIO, Union

logger = logging.getLogger(__name__)

class StreamWriter:
    """Writes prefixed lines to a text stream (stdout by default)"""
    def __init__(self, stream: TextIO = None, prefix: str = ""):
        self.stream = stream if stream is not None else sys.stdout
        self.prefix = prefix

    def __call__(self, message: str = "") -> None:
        try:
            self.stream.write(f"{self.prefix}{message}\n")
        except (OSError, ValueError) as e:
            # ValueError: write to a closed file
            logger.warning("StreamWriter dropped a line: %s", e)

class LoggerWriter:
    """Routes lines into a logger at a fixed level"""
    def __init__(self, target: Union[str, logging.Logger] = "hmc_core", level: int = logging.INFO):
        self.logger = target if isinstance(target, logging.Logger) else logging.getLogger(target)
        self.level = level

    def __call__(self, message: str = "") -> None:
        self.logger.log(self.level, message)

class BufferWriter:
    """Keeps lines in memory until flushed"""
    def __init__(self):
        self.lines: List[str] = []

    def __call__(self, message: str = "") -> None:
        self.lines.append(message)

    def getvalue(self) -> str:
        return "".join(line + "\n" for line in self.lines)

    def flush(self) -> str:
        """Return the buffered text and clear the buffer"""
        text = self.getvalue()
        self.lines.clear()
        return text
