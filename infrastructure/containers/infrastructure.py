"""
基础设施容器（InfraContainer）

管理所有基础设施组件：数据库、行存储、CardDAV 客户端、预设策略等。
依赖 ConfigContainer 获取配置。
"""

from dependency_injector import containers, providers
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from infrastructure.database import DatabaseFactory
from infrastructure.carddav.repositories.sqlalchemy_row_store import SqlAlchemyRowStore
from infrastructure.carddav.services.httpx_discovery_service import HttpxDiscoveryService
from infrastructure.carddav.services.httpx_sync_service import HttpxSyncService
from infrastructure.carddav.services.settings_preset_policy import SettingsPresetPolicy


class InfraContainer(containers.DeclarativeContainer):
    """基础设施容器 - 管理技术实现"""

    # 依赖配置容器
    config = providers.DependenciesContainer()

    # ============ 数据库 ============

    # 数据库引擎（单例）
    db_engine: providers.Singleton[Engine] = providers.Singleton(
        DatabaseFactory.create_engine,
        settings=config.settings,
    )

    # Session 工厂（单例）
    db_session_factory: providers.Singleton[sessionmaker] = providers.Singleton(
        DatabaseFactory.create_session_factory,
        engine=db_engine
    )

    # 数据库 Session（每次请求新实例）
    db_session = providers.Factory(
        lambda session_factory: session_factory(),
        session_factory=db_session_factory
    )

    # ============ 行存储 ============

    # 行存储（每次请求新实例，持有自己的 Session 与事务状态）
    row_store = providers.Factory(
        SqlAlchemyRowStore,
        session=db_session
    )

    # ============ CardDAV 服务 ============

    # 地址簿发现服务
    discovery_service = providers.Singleton(
        HttpxDiscoveryService,
        timeout=config.settings.provided.carddav_http_timeout,
    )

    # 地址簿同步服务
    sync_service = providers.Singleton(
        HttpxSyncService,
        timeout=config.settings.provided.carddav_http_timeout,
    )

    # 管理员预设策略
    preset_policy = providers.Singleton(
        SettingsPresetPolicy,
        presets=config.settings.provided.carddav_presets,
    )
