# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Copy text to the system clipboard with a widget-based fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pyperclip

from plugin_diagnostics.core.errors import ClipboardError

if TYPE_CHECKING:
    from collections.abc import Callable

    TextWriter = Callable[[str], None]
    FallbackCopier = Callable[[str], bool]

__all__ = ["ClipboardWriter", "widget_copy"]

_LOGGER = logging.getLogger(__name__)
_UNSUPPORTED = "Clipboard is not available on this system"


def widget_copy(value: str) -> bool:
    """Copy through an off-screen Tk entry and the toolkit's copy command.

    The entry is focused, its whole content selected and ``<<Copy>>`` fired.
    Success means the clipboard reads back the copied text.

    On X11 the clipboard is owned by the Tk window, so the text only outlives
    the call if a clipboard manager picks it up before the window is destroyed.
    Short-lived processes such as the CLI should install a pyperclip backend
    (xclip, xsel or wl-clipboard) instead of relying on this path.
    """
    try:
        import tkinter as tk  # noqa: PLC0415
    except ImportError:
        return False
    try:
        root = tk.Tk()
    except tk.TclError:
        return False
    try:
        root.withdraw()
        entry = tk.Entry(root)
        entry.place(x=-10_000, y=-10_000)
        entry.insert(0, value)
        entry.focus_force()
        entry.select_range(0, tk.END)
        entry.event_generate("<<Copy>>")
        root.update()
        return root.clipboard_get() == value
    except tk.TclError:
        return False
    finally:
        root.destroy()


class ClipboardWriter:
    """Write text with a preferred strategy and a fallback.

    The fallback runs when no preferred writer is available or the preferred
    one fails. :class:`ClipboardError` is raised only after both are exhausted.
    """

    def __init__(
        self,
        preferred: TextWriter | None = None,
        fallback: FallbackCopier | None = widget_copy,
    ) -> None:
        """Create a writer from explicit strategies."""
        self._preferred = preferred
        self._fallback = fallback

    @classmethod
    def from_platform(cls) -> ClipboardWriter:
        """Build a writer that copies through pyperclip first."""
        return cls(preferred=pyperclip.copy, fallback=widget_copy)

    def write_text(self, value: str) -> None:
        """Copy ``value`` or raise :class:`ClipboardError`."""
        if self._preferred is not None:
            try:
                self._preferred(value)
            except (pyperclip.PyperclipException, OSError) as exc:
                _LOGGER.warning("System clipboard copy failed; trying fallback: %s", exc)
            else:
                return
        if self._fallback is None or not self._fallback(value):
            _LOGGER.warning("Clipboard fallback failed")
            raise ClipboardError(_UNSUPPORTED)
