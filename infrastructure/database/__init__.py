"""
数据库基础设施模块

按 app_env 创建引擎与 Session 工厂，并创建 CardDAV 缓存所需的数据表。
"""

from .database_factory import DatabaseFactory, Environment

__all__ = [
    "DatabaseFactory",
    "Environment",
]
