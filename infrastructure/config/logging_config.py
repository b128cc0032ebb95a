"""日志配置"""

import logging
import os
from typing import Dict, List, Optional

from infrastructure.config.settings import Settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# 日志器名称 -> 由 configure_logging 添加的处理器
_installed: Dict[Optional[str], List[logging.Handler]] = {}


def configure_logging(settings: Settings, logger_name: Optional[str] = None) -> logging.Logger:
    """
    按配置初始化日志

    日志始终输出到标准错误；配置了 log_file 时同时写入文件（目录不存在时自动创建）。
    重复调用会替换上一次添加的处理器，其他处理器保持不变。

    Args:
        settings: 应用配置
        logger_name: 要配置的日志器名称，默认为根日志器

    Returns:
        配置好的日志器
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(settings.log_level.upper())

    for handler in _installed.pop(logger_name, []):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    _installed[logger_name] = handlers

    return logger
