from __future__ import annotations

import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler


ENV_LOG_DIR = "SHEETFIT_LOG_DIR"


def configure_logging(*, debug: bool = False, log_path: str | None = None) -> None:
    """Configure library-wide logging for scripts that embed sheetfit.

    - Always logs to a rotating file (SHEETFIT_LOG_DIR, else ./logs)
    - Optionally logs to console when debug is enabled
    """

    level = logging.DEBUG if debug else logging.INFO

    if log_path is None:
        env_log_dir = os.environ.get(ENV_LOG_DIR)
        log_dir = Path(env_log_dir) if env_log_dir else Path.cwd() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = str(log_dir / "sheetfit.log")

    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicating handlers if called more than once.
    if getattr(root, "_sheetfit_configured", False):
        return

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if debug:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(fmt)
        root.addHandler(console)

    setattr(root, "_sheetfit_configured", True)
