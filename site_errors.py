# site_errors.py
# Error kinds shared by generate_catalog.py and update_news.py.
# Helpers raise SiteError; callers catch it as close as possible and report().

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    DIRECTORY_UNREADABLE = "directory_unreadable"
    ITEM_PARSE_FAILED = "item_parse_failed"
    DATE_UNPARSABLE = "date_unparsable"
    WRITE_FAILED = "write_failed"
    TARGET_ELEMENT_MISSING = "target_element_missing"


# skipped item / fallback value, the run itself is fine
RECOVERABLE = {ErrorKind.ITEM_PARSE_FAILED, ErrorKind.DATE_UNPARSABLE}


class SiteError(Exception):
    def __init__(self, kind: ErrorKind, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is not None:
            return f"[{self.kind.value}] {self.message} ({self.path})"
        return f"[{self.kind.value}] {self.message}"


def report(err: SiteError, log: Optional[logging.Logger] = None) -> None:
    log = log or logger
    level = logging.WARNING if err.kind in RECOVERABLE else logging.ERROR
    log.log(level, "%s", err, extra={"error_kind": err.kind.value})


def list_dir(folder: Path) -> list[str]:
    """
    sorted file names inside folder
    """
    try:
        return sorted(p.name for p in folder.iterdir())
    except OSError as exc:
        raise SiteError(ErrorKind.DIRECTORY_UNREADABLE, f"cannot read directory: {exc}", folder) from exc


def read_text(p: Path, errors: str = "ignore") -> str:
    try:
        return p.read_text(encoding="utf-8", errors=errors)
    except (OSError, UnicodeDecodeError) as exc:
        raise SiteError(ErrorKind.DIRECTORY_UNREADABLE, f"cannot read file: {exc}", p) from exc


def write_text(p: Path, text: str) -> None:
    try:
        p.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise SiteError(ErrorKind.WRITE_FAILED, f"cannot write file: {exc}", p) from exc
