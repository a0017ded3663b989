"""Logging for exprsimp, on top of the standard library.

Records carry the address of the statement being simplified through a
thread-local Mapped Diagnostic Context (MDC); :class:`ExprSimpFormatter`
renders it as ``%(statement)s``. :func:`configure_loggers` installs the
``conf`` dictionary with ``dictConfig`` and points the file handlers at a
log directory.
"""

import dataclasses
import functools
import logging
import logging.config
import pathlib
import threading
import typing

LOG_FILENAME = "exprsimp.log"
Z3_PROOF_FILENAME = "z3_rewrite_proofs.log"

# Bumped on every level change so cached LevelFlags re-query their logger.
_config_version = [0]


@dataclasses.dataclass(slots=True)
class LevelFlag:
    """Truthy when ``logger_name`` is enabled for ``level``.

    The answer is cached until the logging configuration changes, so the
    per-node debug guard in the simplifier costs one integer comparison.
    """

    _logger_name: str
    _level: int
    _seen_version: int = dataclasses.field(default=-1, init=False)
    _enabled: bool = dataclasses.field(default=False, init=False)

    def __bool__(self) -> bool:
        if self._seen_version != _config_version[0]:
            self._enabled = getLogger(self._logger_name).isEnabledFor(self._level)
            self._seen_version = _config_version[0]
        return self._enabled

    def __repr__(self):
        return f"<LevelFlag {self._logger_name}>={logging.getLevelName(self._level)}>"

    @staticmethod
    def bump_config_version() -> None:
        _config_version[0] += 1


class ExprSimpLogger(logging.Logger):
    """Logger that copies the thread's MDC into every record it makes."""

    _mdc_local = threading.local()

    @classmethod
    def mdc(cls) -> typing.Mapping[str, typing.Any]:
        if not getattr(cls._mdc_local, "mdc", None):
            cls._mdc_local.mdc = {"statement": ""}
        return cls._mdc_local.mdc

    @classmethod
    def add_mdc(cls, key: str, value: typing.Any) -> None:
        cls._mdc_local.mdc = {**cls.mdc(), key: value}

    @classmethod
    def get_mdc(cls, key: str, default: typing.Any | None = None):
        return cls.mdc().get(key, default)

    @classmethod
    def remove_mdc(cls, key: str) -> None:
        cls._mdc_local.mdc = {k: v for k, v in cls.mdc().items() if k != key}

    @classmethod
    def update_statement(cls, address: int | None) -> None:
        cls.add_mdc("statement", "" if address is None else f"{address:#x}")

    @classmethod
    def reset_statement(cls) -> None:
        cls.remove_mdc("statement")

    @functools.cached_property
    def debug_on(self) -> LevelFlag:
        return LevelFlag(self.name, logging.DEBUG)

    def makeRecord(
        self, name, level, fn, lno, msg, args, exc_info, func=None, extra=None, sinfo=None
    ):
        extra = {**(extra or {}), **self.mdc()}
        return super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func, extra, sinfo
        )


class ExprSimpFormatter(logging.Formatter):
    """Renders ``%(statement)s`` as `` - 0x...`` or nothing outside a statement."""

    def format(self, record: logging.LogRecord) -> str:
        statement = getattr(record, "statement", "")
        record.statement = f" - {statement}" if statement else ""
        return super().format(record)


# Handler filenames are filled in by configure_loggers().
conf: dict[str, typing.Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "ExprSimpFormatter": {
            "()": ExprSimpFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s%(statement)s - %(message)s",
        },
        "rawFormatter": {
            "format": "%(message)s",
        },
    },
    "handlers": {
        "consoleHandler": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "ExprSimpFormatter",
            "stream": "ext://sys.stdout",
        },
        "defaultFileHandler": {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "ExprSimpFormatter",
            "filename": None,
        },
        "z3FileHandler": {
            "class": "logging.FileHandler",
            "level": "INFO",
            "formatter": "rawFormatter",
            "filename": None,
        },
    },
    "loggers": {
        "ExprSimp": {
            "level": "INFO",
            "handlers": ["consoleHandler", "defaultFileHandler"],
            "propagate": False,
        },
        "ExprSimp.simplifier": {
            "level": "INFO",
            "handlers": ["defaultFileHandler"],
            "propagate": False,
        },
        "ExprSimp.config": {
            "level": "INFO",
            "handlers": ["consoleHandler", "defaultFileHandler"],
            "propagate": False,
        },
        "ExprSimp.z3": {
            "level": "INFO",
            "handlers": ["z3FileHandler"],
            "propagate": False,
        },
    },
    "root": {
        "level": "WARNING",
        "handlers": ["consoleHandler"],
    },
}


class LoggerConfigurator:
    """Change logger levels at runtime without leaving stale LevelFlags."""

    @staticmethod
    def set_level(logger_name: str, level_name: str) -> None:
        """Set ``logger_name`` to DEBUG, INFO, WARNING, ERROR or CRITICAL."""
        lvl = getattr(logging, level_name.upper(), None)
        if not isinstance(lvl, int):
            raise ValueError(f"Unknown logging level: {level_name}")
        getLogger(logger_name, lvl).setLevel(lvl)
        LevelFlag.bump_config_version()


def configure_loggers(log_dir: str | pathlib.Path) -> None:
    """Install ``conf``, writing the log files under ``log_dir``."""
    log_dir = pathlib.Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    handlers = conf["handlers"]
    handlers["defaultFileHandler"]["filename"] = (log_dir / LOG_FILENAME).as_posix()
    handlers["z3FileHandler"]["filename"] = (log_dir / Z3_PROOF_FILENAME).as_posix()
    logging.config.dictConfig(conf)
    LevelFlag.bump_config_version()


def getLogger(name: str, default_level: int = logging.INFO) -> ExprSimpLogger:
    """Return the :class:`ExprSimpLogger` registered under ``name``.

    A plain ``logging.Logger`` created earlier under the same name is replaced
    in the manager; its handlers, filters and parent carry over.
    """
    base = logging.getLogger(name)
    if isinstance(base, ExprSimpLogger):
        return base
    level = base.level
    if level == logging.NOTSET or level < default_level:
        level = default_level
    logger = ExprSimpLogger(base.name, level=level)
    logger.handlers = list(base.handlers)
    logger.filters = list(base.filters)
    logger.parent = base.parent
    logger.disabled = base.disabled
    # a logger with no handler of its own must reach its parent's
    logger.propagate = base.propagate or not base.handlers
    logging.Logger.manager.loggerDict[name] = logger
    return logger
