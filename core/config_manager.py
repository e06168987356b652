"""
Configuration Manager for FocusMate State.

集中管理系统常量和配置参数。所有经验值显式声明，可通过
config/runtime.yaml 覆盖。存储后端配置见 config/store.yaml。

使用方式:
    from core.config_manager import config
    target = config.DEFAULT_WEEK_TARGET
"""
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.exceptions import ConfigError
from core.paths import CONFIG_DIR

RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"
STORE_CONFIG_PATH = CONFIG_DIR / "store.yaml"

DEFAULT_STORE_BACKEND = "file"


@dataclass
class SystemConfig:
    """
    系统运行时常量配置。
    """

    # === 周目标 ===

    # 周记录缺少 target 时使用的默认目标
    DEFAULT_WEEK_TARGET: int = 40

    # === 默认种子状态 ===

    # 首周种子的已完成单位数 (首次使用时展示 2 单位的结余)
    SEED_COMPLETED: int = 42

    # 首周种子的空目标条数
    SEED_GOAL_SLOTS: int = 3

    # === 存储 ===

    # 状态文件名 / KV 键 / GitHub 仓库内路径的默认值
    STATE_FILE_NAME: str = "focusmate-state.json"
    STATE_KEY: str = "focusmate-state"

    # === 外部接口 ===

    FOCUSMATE_API_BASE: str = "https://api.focusmate.com"

    # 会话接口响应的缓存时间 (秒)
    FOCUSMATE_CACHE_SECONDS: int = 300

    # 远程存储 / FocusMate 请求超时 (秒)
    HTTP_TIMEOUT: float = 10.0


def _load_runtime_config() -> dict:
    """加载运行时配置覆盖（如果存在）。"""
    if not RUNTIME_CONFIG_PATH.exists():
        return {}

    try:
        with open(RUNTIME_CONFIG_PATH, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError):
        return {}


def get_config() -> SystemConfig:
    """
    获取系统配置实例。

    优先级：runtime.yaml > 默认值
    """
    base = SystemConfig()
    overrides = _load_runtime_config()

    for key, value in overrides.items():
        if hasattr(base, key):
            setattr(base, key, value)

    return base


# 全局配置实例
config = get_config()


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _expand_env_vars(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Expand ${VAR} placeholders in config values with environment variables.

    Unset variables expand to an empty string; each store validates its own
    required settings.
    """
    result: Dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, str):
            result[key] = _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), ""), value)
        elif isinstance(value, dict):
            result[key] = _expand_env_vars(value)
        else:
            result[key] = value
    return result


def load_store_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load store backend configuration from YAML.

    The FOCUSMATE_STORE_BACKEND env var overrides the `backend` key.

    Returns:
        Dict with a `backend` name plus one settings section per backend.
    """
    config_path = path or STORE_CONFIG_PATH
    raw_config: Dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in store config: {e}", str(config_path))
        if not isinstance(raw_config, dict):
            raise ConfigError("Store config must be a mapping", str(config_path))

    result = _expand_env_vars(raw_config)
    backend_override = os.getenv("FOCUSMATE_STORE_BACKEND", "").strip()
    if backend_override:
        result["backend"] = backend_override
    result.setdefault("backend", DEFAULT_STORE_BACKEND)
    return result
