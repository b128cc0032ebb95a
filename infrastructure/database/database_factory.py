"""
数据库工厂

根据应用环境创建 SQLAlchemy 引擎与 Session 工厂
"""

from enum import Enum
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from infrastructure.config.settings import Settings, get_settings


class Environment(str, Enum):
    """应用环境"""

    TEST = "test"
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class DatabaseFactory:
    """数据库引擎 / Session 工厂"""

    @staticmethod
    def create_engine(settings: Optional[Settings] = None) -> Engine:
        """
        创建数据库引擎

        - test: SQLite 内存数据库，所有连接共享同一个连接（StaticPool）
        - dev: SQLite 文件数据库
        - staging / prod: 带连接池的服务端数据库

        Args:
            settings: 应用配置，默认使用全局配置

        Returns:
            SQLAlchemy Engine
        """
        settings = settings or get_settings()
        env = Environment(settings.app_env)
        url = settings.database_url

        if env == Environment.TEST:
            return create_engine(
                url,
                echo=settings.debug,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )

        if url.startswith("sqlite"):
            return create_engine(
                url,
                echo=settings.debug,
                connect_args={"check_same_thread": False},
            )

        return create_engine(
            url,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
        )

    @staticmethod
    def create_session_factory(engine: Engine) -> sessionmaker:
        """创建 Session 工厂"""
        return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    @staticmethod
    def create_tables(engine: Engine) -> None:
        """创建 CardDAV 数据表（已存在的表不受影响）"""
        from infrastructure.carddav.models.carddav_models import Base

        Base.metadata.create_all(engine)

