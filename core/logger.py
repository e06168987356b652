"""
FocusMate 日志。

所有模块的 logger 都挂在 "focusmate" 命名空间下：

- logs/system.log           INFO 及以上
- logs/error.log            ERROR 及以上，带堆栈
- logs/corruption_dump.log  无法解析的存储内容 (原文截断)
- stderr                    默认只显示 WARNING 及以上
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from core.paths import get_logs_dir

LOGS_DIR = get_logs_dir()

ROOT_LOGGER_NAME = "focusmate"
CORRUPTION_LOGGER_NAME = "focusmate.corruption"

MAX_BYTES = 2 * 1024 * 1024
BACKUP_COUNT = 5
RAW_PREVIEW_CHARS = 500

FILE_FORMAT = logging.Formatter(
    "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
CONSOLE_FORMAT = logging.Formatter("%(levelname)s: %(message)s")


def _rotating_handler(filename: str, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        LOGS_DIR / filename,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: int = logging.INFO,
    console_level: int = logging.WARNING,
) -> logging.Logger:
    """
    挂载文件与控制台 handler，可重复调用。

    Args:
        log_level: system.log 的级别
        console_level: stderr 的级别 (CLI 的 --verbose 会调低它)
    """
    LOGS_DIR.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(CONSOLE_FORMAT)

    root.addHandler(_rotating_handler("system.log", log_level, FILE_FORMAT))
    root.addHandler(_rotating_handler("error.log", logging.ERROR, FILE_FORMAT))
    root.addHandler(console)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """focusmate.<name> 下的子 logger，name 如 "banking" 或 "stores.github"。"""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


def _corruption_logger() -> logging.Logger:
    dump = logging.getLogger(CORRUPTION_LOGGER_NAME)
    if not dump.handlers:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        dump.addHandler(
            _rotating_handler(
                "corruption_dump.log",
                logging.DEBUG,
                logging.Formatter("%(asctime)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S"),
            )
        )
        dump.setLevel(logging.DEBUG)
        # 原文只进 dump 文件，不进 system.log
        dump.propagate = False
    return dump


def log_corruption(source: str, raw_payload: str, error_msg: str) -> None:
    """
    把读不出来的存储内容留档，同时在主日志里记一条 warning。

    Args:
        source: 文件路径或 "github:owner/repo/path"、"kv:key"
        raw_payload: 原始内容，只保留前 RAW_PREVIEW_CHARS 个字符
        error_msg: 解析失败原因
    """
    _corruption_logger().info("%s: %s\n  raw: %r", source, error_msg, raw_payload[:RAW_PREVIEW_CHARS])
    get_logger("stores").warning("Unreadable state in %s: %s", source, error_msg)
