from pathlib import Path
import logging
import sys
from typing import Optional
from datetime import datetime


def setup_logging(
    logs_dir: Optional[str | Path] = None,
    log_file_name: str = "server.log",
    level: str | int = logging.INFO,
) -> logging.Logger:
    """Configure root logging to stderr and, optionally, a file under `logs_dir`.

    Idempotent: calling multiple times won't add duplicate handlers.
    stdout is never used because the stdio transport owns it for MCP frames.
    Returns a module-level logger for callers to use.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    if logs_dir is not None:
        logs_dir = Path(logs_dir)
        _add_file_handler(root_logger, logs_dir, log_file_name, formatter, level)

    # Ensure a StreamHandler to stderr exists (don't duplicate)
    stream_stderr_exists = False
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            if getattr(h, "stream", None) is sys.stderr:
                stream_stderr_exists = True
                break

    if not stream_stderr_exists:
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(formatter)
        sh.setLevel(level)
        root_logger.addHandler(sh)

    return logging.getLogger("picoli_mcp")


def _add_file_handler(
    root_logger: logging.Logger,
    logs_dir: Path,
    log_file_name: str,
    formatter: logging.Formatter,
    level: int,
) -> None:
    # One file handler per logs_dir; the timestamped name changes between calls.
    target_dir = logs_dir.resolve()
    for h in root_logger.handlers:
        if isinstance(h, logging.FileHandler) and hasattr(h, "baseFilename"):
            if Path(h.baseFilename).resolve().parent == target_dir:
                return

    # best-effort: an MCP client may launch us from a read-only directory
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    base = Path(log_file_name).stem
    ext = Path(log_file_name).suffix or ".log"
    log_file = logs_dir / f"{base}_{timestamp}{ext}"

    try:
        fh = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        return
    fh.setFormatter(formatter)
    fh.setLevel(level)
    root_logger.addHandler(fh)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Helper to get a logger by name; falls back to the package logger."""
    return logging.getLogger(name) if name else logging.getLogger("picoli_mcp")
