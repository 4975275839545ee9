"""Rich console factory used by the renderers.

Every render goes to a fresh in-memory console so that renderers return
plain strings; ``AppContext.emit`` decides where the text is written.
Rich drops colour codes on its own when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RENDER_WIDTH = 120

# Style names referenced by renderer markup, e.g. ``[fg.id]3[/fg.id]``.
FG_THEME = Theme(
    {
        "fg.ok": "bold green",
        "fg.error": "bold red",
        "fg.warning": "bold yellow",
        "fg.op": "bold cyan",
        "fg.key": "dim",
        "fg.id": "bold blue",
        "fg.name": "bold",
        "fg.path": "dim underline",
        "fg.score": "magenta",
    }
)


def create_console(*, width: int = RENDER_WIDTH, no_color: bool = False) -> Console:
    """Return a themed console writing into a private ``StringIO``."""
    return Console(
        file=StringIO(),
        width=width,
        theme=FG_THEME,
        highlight=False,
        no_color=no_color,
    )


def get_output(console: Console) -> str:
    """Return everything printed to a console made by :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console was not created by create_console()")
    return buffer.getvalue()
