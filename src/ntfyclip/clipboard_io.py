#!/usr/bin/env python3
"""Clipboard writes through external commands.

Each delivery spawns the platform clipboard command (see
clipboard.resolve_command), writes the payload to its stdin, closes
stdin and waits for the process to exit. Only stdin is a pipe: xclip and
wl-copy leave a child behind to serve the selection, and that child must
not hold a pipe the delivery waits on. The command's stderr goes to ours.
Deliveries share no state, so any number may run at once.
"""

from __future__ import annotations

import asyncio
import logging

from ntfyclip.clipboard import ClipboardCommand, DeliveryError, resolve_command

logger = logging.getLogger(__name__)


async def deliver(payload: bytes, command: ClipboardCommand | None = None) -> None:
    """Write payload to the system clipboard.

    Args:
        payload: Bytes to place on the clipboard.
        command: Command to run; resolved for the current platform if
            omitted.

    Raises:
        DeliveryError: If no command applies, the command cannot be
            started, stdin cannot be written, or it exits non-zero.
    """
    if command is None:
        command = resolve_command()
    logger.debug(
        "Running under %s, using copy command %s",
        command.environment,
        command.program,
    )

    try:
        process = await asyncio.create_subprocess_exec(
            *command.argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        raise DeliveryError(f"Failed to start {command.program}: {e}") from e

    try:
        await process.communicate(payload)
    except OSError as e:
        raise DeliveryError(f"Failed to write to {command.program}: {e}") from e

    if process.returncode != 0:
        raise DeliveryError(
            f"{command.program} exited with status {process.returncode}"
        )


async def safe_deliver(payload: bytes, command: ClipboardCommand | None = None) -> bool:
    """Deliver payload, logging instead of raising on failure.

    Returns:
        True if the clipboard was written, False otherwise.
    """
    try:
        await deliver(payload, command)
    except DeliveryError as e:
        logger.error("Failed to set clipboard: %s", e)
        return False
    logger.info("Clipboard set (%d bytes)", len(payload))
    return True
