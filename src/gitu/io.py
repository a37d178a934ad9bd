"""Console I/O helpers for user-facing messages."""

from __future__ import annotations

import sys
import threading

# Guards every terminal write, including log lines from ``gitu.log``.
OUTPUT_LOCK = threading.Lock()


def say(message: str) -> None:
    """Print a normal message to stdout.

    Args:
        message: Text to print.

    Returns:
        None.

    Example:
        >>> say("Hello")
        Hello
    """
    with OUTPUT_LOCK:
        print(message)


def say_block(title: str, body: str) -> None:
    """Print a titled block of output in one write.

    Args:
        title: Label shown in the banner line.
        body: Text printed below the banner.

    Returns:
        None.
    """
    block = f"{'-' * 44} [ {title} ] {'-' * 44}"
    body = body.rstrip("\n")
    if body:
        block = f"{block}\n{body}"
    with OUTPUT_LOCK:
        print(block, flush=True)


def die(message: str, code: int = 1) -> None:
    """Print an error message and exit.

    Args:
        message: Error message to display.
        code: Exit code to use.

    Returns:
        None. Exits the process via ``sys.exit``.
    """
    with OUTPUT_LOCK:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(code)
