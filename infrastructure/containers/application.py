"""
应用容器（AppContainer）

管理应用层组件：地址簿管理器、命令/查询处理器。
依赖 InfraContainer 获取基础设施。

地址簿管理器按用户创建，调用时需要传入当前用户上下文::

    manager = container.addressbook_manager(principal=principal)
    handler = container.add_account_handler(manager__principal=principal)
"""

from dependency_injector import containers, providers

from application.carddav.services.addressbook_manager import AddressbookManager
from application.handlers.carddav import (
    AddAccountHandler,
    DeleteAccountHandler,
    ListAccountsHandler,
    RediscoverAccountHandler,
    SyncAddressbookHandler,
    ToggleAddressbookActiveHandler,
    UpdateAccountHandler,
    UpdateAddressbookHandler,
)


class AppContainer(containers.DeclarativeContainer):
    """应用容器 - 管理应用层服务"""

    # 依赖配置容器
    config = providers.DependenciesContainer()

    # 依赖基础设施容器
    infra = providers.DependenciesContainer()

    # ============ 应用服务 ============

    # 地址簿管理器（每个请求 / 用户一个实例）
    addressbook_manager = providers.Factory(
        AddressbookManager,
        store=infra.row_store,
        encryption_key=config.settings.provided.encryption_key,
        discovery=infra.discovery_service,
        sync=infra.sync_service,
        presets=infra.preset_policy,
    )

    # ============ 命令处理器 ============

    add_account_handler = providers.Factory(
        AddAccountHandler,
        manager=addressbook_manager,
    )

    delete_account_handler = providers.Factory(
        DeleteAccountHandler,
        manager=addressbook_manager,
    )

    rediscover_account_handler = providers.Factory(
        RediscoverAccountHandler,
        manager=addressbook_manager,
    )

    sync_addressbook_handler = providers.Factory(
        SyncAddressbookHandler,
        manager=addressbook_manager,
    )

    update_account_handler = providers.Factory(
        UpdateAccountHandler,
        manager=addressbook_manager,
    )

    update_addressbook_handler = providers.Factory(
        UpdateAddressbookHandler,
        manager=addressbook_manager,
    )

    toggle_addressbook_active_handler = providers.Factory(
        ToggleAddressbookActiveHandler,
        manager=addressbook_manager,
    )

    # ============ 查询处理器 ============

    list_accounts_handler = providers.Factory(
        ListAccountsHandler,
        manager=addressbook_manager,
    )
