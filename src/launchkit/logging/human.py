"""
Human Log — Formatter y helper para los avisos dirigidos al usuario.

Los comandos escriben su resultado (informe, snippets) en stdout. Los avisos
que la persona debe ver pero que no forman parte del resultado van por el
nivel HUMAN a stderr, con un texto fijo por evento:

    Could not read snippets file. A new library will be created.
    Could not copy the snippet to the clipboard.
"""

import logging
import sys

from .levels import HUMAN


class HumanFormatter:
    """Convierte eventos estructurados a texto legible.

    Cada tipo de evento tiene su formato propio. Eventos sin formato
    definido no se muestran.
    """

    def format_event(self, event: str, **kw) -> str | None:
        match event:

            # ── SNIPPET LIBRARY ─────────────────────────────────────────
            case "snippets.library_unreadable":
                return "Could not read snippets file. A new library will be created."

            case "snippets.clipboard_write_failed":
                return "Could not copy the snippet to the clipboard."

            # ── NOTEBOOK ────────────────────────────────────────────────
            case "notebook.dir_failed":
                return "Could not prepare the note directory."

            case "notebook.write_failed":
                return "Could not write to the learning notebook file."

            case _:
                return None


class HumanLogHandler(logging.Handler):
    """Handler de logging que filtra eventos HUMAN y los formatea.

    Solo procesa registros de nivel HUMAN (25). Escribe a stderr para no
    mezclarse con el resultado en stdout.
    """

    def __init__(self, stream=None) -> None:
        super().__init__(level=HUMAN)
        self.stream = stream or sys.stderr
        self.formatter_inst = HumanFormatter()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.levelno != HUMAN:
                return

            # structlog (wrap_for_formatter) deja el event_dict en record.msg
            if isinstance(record.msg, dict):
                kw = {
                    k: v for k, v in record.msg.items()
                    if not k.startswith("_") and k not in ("event", "level", "logger", "timestamp")
                }
                event = str(record.msg.get("event", ""))
            else:
                kw = {}
                event = record.getMessage()

            formatted = self.formatter_inst.format_event(event, **kw)
            if formatted is not None:
                self.stream.write(formatted + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


class HumanLog:
    """Helper tipado para emitir logs de nivel HUMAN desde el código.

    Uso:
        hlog = HumanLog(structlog.get_logger())
        hlog.clipboard_write_failed("pbcopy: command not found")
    """

    def __init__(self, logger) -> None:
        self._log = logger

    def library_unreadable(self, path: str, error: str) -> None:
        self._log.log(HUMAN, "snippets.library_unreadable", path=path, error=error)

    def clipboard_write_failed(self, error: str) -> None:
        self._log.log(HUMAN, "snippets.clipboard_write_failed", error=error)

    def notebook_dir_failed(self, path: str, error: str) -> None:
        self._log.log(HUMAN, "notebook.dir_failed", path=path, error=error)

    def notebook_write_failed(self, path: str, error: str) -> None:
        self._log.log(HUMAN, "notebook.write_failed", path=path, error=error)
