#!/usr/bin/env python3
"""Clipboard command selection.

This module decides which external program writes the system clipboard
on the current platform. The decision is a pure function of the OS name
and the environment so it can be tested without spawning processes;
running the command lives in clipboard_io. Commands are bare program
names looked up on PATH, except the Windows clip.exe reached from WSL.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

WSL_CLIP: str = "/mnt/c/Windows/System32/clip.exe"


class DeliveryError(Exception):
    """Raised when the clipboard could not be written."""


class UnsupportedEnvironment(DeliveryError):
    """Raised when no clipboard command is known for this platform."""


@dataclass(frozen=True)
class ClipboardCommand:
    """A clipboard command and the environment it was chosen for.

    Attributes:
        argv: Program and arguments; the payload goes to its stdin.
        environment: Human-readable platform label for logging.
    """

    argv: tuple[str, ...]
    environment: str

    @property
    def program(self) -> str:
        return self.argv[0]


def resolve_command(
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ClipboardCommand:
    """Choose the clipboard command for a platform.

    Checked in order: macOS, Windows, then on Linux WSL, Wayland and X11.

    Args:
        platform: A sys.platform value; defaults to the running platform.
        environ: Environment mapping; defaults to os.environ.

    Returns:
        The ClipboardCommand to run.

    Raises:
        UnsupportedEnvironment: If no command applies.
    """
    if platform is None:
        platform = sys.platform
    if environ is None:
        environ = os.environ

    if platform == "darwin":
        return ClipboardCommand(("pbcopy",), "macOS")
    if platform in ("win32", "cygwin"):
        return ClipboardCommand(("clip.exe",), "Windows")
    if platform.startswith("linux"):
        if environ.get("WSL_DISTRO_NAME"):
            return ClipboardCommand((WSL_CLIP,), "WSL")
        if environ.get("WAYLAND_DISPLAY"):
            return ClipboardCommand(("wl-copy",), "Wayland")
        if environ.get("DISPLAY"):
            return ClipboardCommand(
                ("xclip", "-sel", "clip", "-r", "-in"), "Xorg"
            )
        raise UnsupportedEnvironment(
            "Unsupported Linux environment (no WAYLAND_DISPLAY or DISPLAY)"
        )
    raise UnsupportedEnvironment(f"Unsupported operating system: {platform}")
