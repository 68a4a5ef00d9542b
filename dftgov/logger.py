"""
DFT Governor Logging
====================

Console logging goes through `rich` so that addresses, proposal ids and
event names stand out; the optional log file stays plain text. Only the
``dftgov`` logger is configured, so an embedding application keeps control
of the root logger.

Usage:
    >>> from dftgov.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("ProposalCreated: #1")
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional, Tuple

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_DATE_FORMAT,
    LOG_FILE_OUTPUT,
    LOG_FORMAT,
    LOG_LEVEL,
    LOG_MAX_FILE_SIZE,
)


PACKAGE_LOGGER = "dftgov"
LOG_FILE_PATH = Path(__file__).resolve().parent.parent / "logs" / "dftgov.log"

GOVERNOR_THEME = Theme(
    {
        "dftgov.address":     "cyan",
        "dftgov.event":       "bold magenta",
        "dftgov.level_debug": "dim",
        "dftgov.level_info":  "bold green",
        "dftgov.level_warn":  "bold yellow",
        "dftgov.level_error": "bold red",
        "dftgov.logger_name": "magenta",
        "dftgov.proposal":    "bold yellow",
        "dftgov.state":       "bold white",
        "dftgov.timestamp":   "bold cyan",
    }
)


def _level_number(level_name) -> int:
    return getattr(logging, str(level_name).upper(), logging.INFO)


class LogManager:
    """
    Process-wide logging setup (singleton).

    configure() is idempotent: the first call wins, later calls are no-ops.
    set_level() can still adjust verbosity afterwards, which is what the CLI
    does once it has read ``[logging] level`` from config.toml.
    """

    _instance: Optional["LogManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "LogManager":
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._configured = False
                cls._instance = instance
        return cls._instance

    @staticmethod
    def checked_formats(log_format: str, date_format: str) -> Tuple[str, str]:
        """
        Return ``(log_format, date_format)`` if a dummy record formats cleanly
        with them, otherwise the defaults from constants.
        """
        fmt, datefmt = str(log_format or ""), str(date_format or "")
        try:
            if not fmt or not datefmt:
                raise ValueError("empty format")
            sample = logging.LogRecord(PACKAGE_LOGGER, logging.INFO, "", 0, "sample", (), None)
            rendered = logging.Formatter(fmt=fmt, datefmt=datefmt).format(sample)
            if "%(" in rendered or "sample" not in rendered:
                raise ValueError(f"format {fmt!r} does not render the message")
            time.strftime(datefmt)
        except (ValueError, KeyError, TypeError) as e:
            print(f"dftgov.logger: bad log format ({e}); using defaults", file=sys.stderr)
            return str(LOG_FORMAT.default()), str(LOG_DATE_FORMAT.default())
        return fmt, datefmt

    def configure(
        self,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        console_output: bool = True,
        file_output: Optional[bool] = None,
    ) -> None:
        """
        Attach handlers to the ``dftgov`` logger.

        Args:
            log_level: Level name; ``LOG_LEVEL`` from .env when omitted.
            log_file: Rotating log file; ``logs/dftgov.log`` when omitted.
            console_output: Attach the stderr handler.
            file_output: Attach the file handler; ``LOG_FILE_OUTPUT`` when omitted.
        """
        with self._lock:
            if self._configured:
                return

            level = _level_number(log_level or LOG_LEVEL)
            package_logger = logging.getLogger(PACKAGE_LOGGER)
            package_logger.setLevel(level)
            package_logger.handlers.clear()
            package_logger.propagate = False

            fmt, datefmt = self.checked_formats(LOG_FORMAT, LOG_DATE_FORMAT)
            # ledger timestamps are unix seconds, so log in UTC as well
            formatter = TerminalSafeFormatter(fmt=fmt, datefmt=f"{datefmt} UTC")
            formatter.converter = time.gmtime

            handlers = []
            if console_output:
                if LOG_CONSOLE_HIGHLIGHTING:
                    handlers.append(
                        RichHandler(
                            console=Console(theme=GOVERNOR_THEME, stderr=True, highlight=False),
                            highlighter=GovernorLogHighlighter(),
                            show_time=False,
                            show_level=False,
                            show_path=False,
                            markup=False,
                            rich_tracebacks=True,
                        )
                    )
                else:
                    handlers.append(logging.StreamHandler(sys.stderr))

            if LOG_FILE_OUTPUT if file_output is None else file_output:
                path = log_file or LOG_FILE_PATH
                path.parent.mkdir(parents=True, exist_ok=True)
                handlers.append(
                    logging.handlers.RotatingFileHandler(
                        str(path),
                        maxBytes=LOG_MAX_FILE_SIZE,
                        backupCount=LOG_BACKUP_COUNT,
                        encoding="utf-8",
                    )
                )

            for handler in handlers:
                handler.setLevel(level)
                handler.setFormatter(formatter)
                package_logger.addHandler(handler)

            self._configured = True

    def set_level(self, log_level: str) -> None:
        level = _level_number(log_level)
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(level)
        for handler in package_logger.handlers:
            handler.setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        if not self._configured:
            self.configure()
        return logging.getLogger(name)

    @property
    def is_configured(self) -> bool:
        return self._configured


class TerminalSafeFormatter(logging.Formatter):
    """
    Drops ANSI escape sequences and control characters from formatted lines.

    Proposal descriptions are free text written by the admin and are logged
    verbatim; they must not be able to drive the operator's terminal.
    """

    _unsafe = re.compile(
        r"\x1b\[[0-?]*[ -/]*[@-~]"      # CSI sequences
        r"|\x1b[@-Z\\-_]"               # two-byte escapes
        r"|[\x00-\x08\x0b-\x1f\x7f]"    # control chars except \t and \n
    )

    @classmethod
    def sanitize(cls, text: str) -> str:
        return cls._unsafe.sub("", text) if text else text

    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class GovernorLogHighlighter(RegexHighlighter):
    base_style = "dftgov."
    highlights = [
        r"^(?P<timestamp>.*?UTC)",
        r"\b(?P<level_debug>DEBUG)\b",
        r"\b(?P<level_info>INFO)\b",
        r"\b(?P<level_warn>WARNING)\b",
        r"\b(?P<level_error>ERROR|CRITICAL)\b",
        r" - (?P<logger_name>dftgov[\w.]*) - ",
        r"(?P<address>\b0x[0-9a-fA-F]{40}\b)",
        r"\b(?P<event>OwnershipTransferred|AdminSet|ParameterSet|AddressSet|GovernorJoin|"
        r"GovernorExit|ProposalCreated|ProposalCanceled|ProposalEndTimestampChanged|VoteCast)\b",
        r"(?P<proposal>#\d+)",
        r"\b(?P<state>PENDING|ACTIVE|DEFEATED|SUCCEED|CANCELED)\b",
    ]


_manager = LogManager()


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``; configures the ``dftgov`` handlers on first use."""
    return _manager.get_logger(name)
