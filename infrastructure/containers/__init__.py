"""
依赖注入容器

使用示例：
    from infrastructure.containers import bootstrap

    boot = bootstrap()
    handler = boot.app.list_accounts_handler(manager__principal=principal)
"""

from dataclasses import dataclass
from typing import Optional

from infrastructure.config.logging_config import configure_logging
from infrastructure.config.settings import Settings
from infrastructure.database import DatabaseFactory
from .application import AppContainer
from .config import ConfigContainer
from .infrastructure import InfraContainer


@dataclass
class Bootstrap:
    """已装配的容器集合"""

    config: ConfigContainer
    infra: InfraContainer
    app: AppContainer


def bootstrap(settings: Optional[Settings] = None, create_tables: bool = True) -> Bootstrap:
    """
    装配配置、基础设施、应用三个容器，并按配置初始化日志

    Args:
        settings: 覆盖全局配置（测试时使用）
        create_tables: 是否创建缺失的数据表

    Returns:
        Bootstrap 容器集合
    """
    config = ConfigContainer()
    if settings is not None:
        config.settings.override(settings)

    infra = InfraContainer(config=config)
    app = AppContainer(config=config, infra=infra)

    configure_logging(config.settings())

    if create_tables:
        DatabaseFactory.create_tables(infra.db_engine())

    return Bootstrap(config=config, infra=infra, app=app)


__all__ = [
    "AppContainer",
    "Bootstrap",
    "ConfigContainer",
    "InfraContainer",
    "bootstrap",
]
