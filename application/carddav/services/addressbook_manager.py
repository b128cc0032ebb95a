"""CardDAV 地址簿管理门面"""

import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from domain.common.exceptions import EntityNotFoundException
from domain.carddav.entities.account import Account
from domain.carddav.entities.addressbook import Addressbook
from domain.carddav.repositories.row_store import RowStore
from domain.carddav.services.credential_resolver import CredentialResolver
from domain.carddav.services.discovery_service import AddressbookDiscoveryService
from domain.carddav.services.preset_policy import PresetPolicy
from domain.carddav.services.sync_service import AddressbookSyncService
from domain.carddav.value_objects.addressbook_filter import (
    AddressbookFilter,
    ABF_ACTIVE,
    ABF_REGULAR,
)
from domain.carddav.value_objects.preset import Preset
from domain.carddav.value_objects.principal import PrincipalContext
from application.carddav.services.account_repository import AccountRepository
from application.carddav.services.addressbook_repository import AddressbookRepository
from application.carddav.services.contact_cache_writer import ContactCacheWriter
from application.carddav.services.discovery_reconciler import DiscoveryReconciler
from application.carddav.services.template_addressbook_service import (
    TemplateAddressbookService,
)


class AddressbookManager:
    """
    单个用户的地址簿管理入口

    组合账号仓储、地址簿仓储、发现协调器和模板服务。
    每个请求（每个用户上下文）创建一个实例，实例内的缓存只对该用户有效。
    """

    def __init__(
        self,
        store: RowStore,
        principal: PrincipalContext,
        encryption_key: Union[str, bytes],
        discovery: AddressbookDiscoveryService,
        sync: AddressbookSyncService,
        presets: PresetPolicy,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化管理器

        Args:
            store: 行存储网关
            principal: 当前用户上下文
            encryption_key: 密码加密密钥
            discovery: 地址簿发现服务
            sync: 地址簿同步服务
            presets: 管理员预设策略
            clock: 当前时间（Unix 秒）
            logger: 日志记录器（可选）
        """
        self._logger = logger or logging.getLogger(__name__)
        self._principal = principal
        self._presets = presets

        self.accounts = AccountRepository(store, principal, encryption_key, logger=self._logger)
        self.addressbooks = AddressbookRepository(store, self.accounts, logger=self._logger)
        self.credentials = CredentialResolver(principal)
        self.contacts = ContactCacheWriter(store, logger=self._logger)
        self.reconciler = DiscoveryReconciler(
            self.accounts,
            self.addressbooks,
            self.credentials,
            discovery,
            sync,
            self.contacts,
            clock=clock,
            logger=self._logger,
        )
        self.templates = TemplateAddressbookService(
            self.accounts, self.addressbooks, presets, logger=self._logger
        )

    @property
    def principal(self) -> PrincipalContext:
        return self._principal

    @property
    def presets(self) -> PresetPolicy:
        return self._presets

    # 账号

    def get_account_ids(self, presets_only: bool = False) -> List[str]:
        return self.accounts.list_account_ids(presets_only)

    def get_account_config(self, account_id: str) -> Account:
        return self.accounts.get_account(account_id)

    def find_preset(self, account: Account, addressbook_url: Optional[str] = None) -> Optional[Preset]:
        """
        返回账号所属的管理员预设

        Args:
            account: 账号
            addressbook_url: 可选的地址簿 URL，用于地址簿级别的覆盖配置

        Returns:
            Preset；普通账号或预设已从配置中移除时返回 None
        """
        if not account.is_preset:
            return None
        try:
            return self.presets.get_preset(account.presetname, addressbook_url)
        except EntityNotFoundException:
            self._logger.warning(
                f"Account {account.id} refers to unknown preset '{account.presetname}'"
            )
            return None

    def get_visible_account(self, account_id: str) -> Account:
        """
        获取用户可见的账号

        Raises:
            EntityNotFoundException: 账号不存在、不属于当前用户或是隐藏的预设账号
        """
        account = self.get_account_config(account_id)
        preset = self.find_preset(account)
        if preset is not None and preset.hide:
            raise EntityNotFoundException("account", account_id)
        return account

    def insert_account(self, settings: Mapping[str, Any]) -> str:
        return self.accounts.insert_account(settings)

    def update_account(self, account_id: str, settings: Mapping[str, Any]) -> None:
        self.accounts.update_account(account_id, settings)

    def delete_account(self, account_id: str) -> None:
        self.accounts.delete_account(account_id)

    # 地址簿

    def get_addressbook_ids(
        self,
        abook_filter: AddressbookFilter = ABF_ACTIVE,
        presets_only: bool = False,
    ) -> List[str]:
        return self.addressbooks.list_addressbook_ids(abook_filter, presets_only)

    def get_addressbook_config(self, abook_id: str) -> Addressbook:
        return self.addressbooks.get_addressbook(abook_id)

    def get_addressbook_configs_by_account(
        self,
        account_id: str,
        abook_filter: AddressbookFilter = ABF_REGULAR,
    ) -> Dict[str, Addressbook]:
        return self.addressbooks.list_for_account(account_id, abook_filter)

    def get_template_addressbook_for_account(self, account_id: str) -> Optional[Addressbook]:
        return self.addressbooks.get_template_for_account(account_id)

    def insert_addressbook(self, settings: Mapping[str, Any]) -> str:
        return self.addressbooks.insert_addressbook(settings)

    def update_addressbook(self, abook_id: str, settings: Mapping[str, Any]) -> None:
        self.addressbooks.update_addressbook(abook_id, settings)

    def delete_addressbooks(
        self,
        abook_ids: List[str],
        skip_transaction: bool = False,
        cache_only: bool = False,
    ) -> None:
        self.addressbooks.delete_addressbooks(abook_ids, skip_transaction, cache_only)

    def set_template_addressbook(self, account_id: str, settings: Mapping[str, Any]) -> str:
        return self.templates.set_template_addressbook(account_id, settings)

    # 发现与同步

    def discover_addressbooks(
        self,
        account_settings: Mapping[str, Any],
        template_settings: Mapping[str, Any],
    ) -> str:
        return self.reconciler.discover_addressbooks(account_settings, template_settings)

    def resync_addressbook(self, abook_id: str) -> int:
        return self.reconciler.resync_addressbook(abook_id)

    def clear_cache(self, abook_id: str) -> None:
        self.reconciler.clear_cache(abook_id)
