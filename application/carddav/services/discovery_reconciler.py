"""地址簿发现与同步协调服务"""

import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from domain.common.exceptions import ValidationException
from domain.carddav.services.addressbook_naming import (
    AddressbookNameResolver,
    DEFAULT_NAME_TEMPLATE,
)
from domain.carddav.services.credential_resolver import CredentialResolver
from domain.carddav.services.discovery_service import AddressbookDiscoveryService
from domain.carddav.services.sync_service import AddressbookSyncService
from domain.carddav.value_objects.addressbook_filter import ABF_DISCOVERED
from domain.carddav.value_objects.discovered_addressbook import DiscoveredAddressbook
from application.carddav.services.account_repository import AccountRepository
from application.carddav.services.addressbook_repository import AddressbookRepository
from application.carddav.services.contact_cache_writer import ContactCacheWriter


# 手动重新同步前，将下次到期时间推迟到 5 分钟后
RESYNC_GRACE_SECONDS = 300


class DiscoveryReconciler:
    """
    地址簿发现协调器

    业务流程：
    1. 校验账号有发现 URL
    2. 根据账号凭证构建连接描述
    3. 调用发现服务获取服务端地址簿
    4. 已有账号：更新发现时间，按 URL 对比本地已发现的地址簿，删除服务端已不存在的
    5. 新账号：插入账号，所有服务端地址簿都视为新地址簿
    6. 按模板插入新地址簿

    第 3 步之前失败时数据库状态不变；之后的每次插入 / 删除各自提交。
    """

    def __init__(
        self,
        accounts: AccountRepository,
        addressbooks: AddressbookRepository,
        credentials: CredentialResolver,
        discovery: AddressbookDiscoveryService,
        sync: AddressbookSyncService,
        contacts: ContactCacheWriter,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化协调器

        Args:
            accounts: 账号仓储
            addressbooks: 地址簿仓储
            credentials: 凭证占位符解析器
            discovery: 地址簿发现服务
            sync: 地址簿同步服务
            contacts: 联系人缓存写入服务
            clock: 当前时间（Unix 秒），便于测试替换
            logger: 日志记录器（可选）
        """
        self._accounts = accounts
        self._addressbooks = addressbooks
        self._credentials = credentials
        self._discovery = discovery
        self._sync = sync
        self._contacts = contacts
        self._naming = AddressbookNameResolver(credentials)
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def _now(self) -> int:
        return int(self._clock())

    def discover_addressbooks(
        self,
        account_settings: Mapping[str, Any],
        template_settings: Mapping[str, Any],
    ) -> str:
        """
        发现账号的地址簿并与本地记录对齐

        Args:
            account_settings: 账号设置；包含 id 时表示已有账号
            template_settings: 新地址簿的默认设置（name 为命名模板）

        Returns:
            账号 ID

        Raises:
            ValidationException: 账号没有发现 URL
            AuthenticationException: 请求 bearer 认证但没有 token
            DiscoveryException: 发现失败，此时数据库状态不变
        """
        if not account_settings.get("discovery_url"):
            raise ValidationException(
                field="discovery_url",
                reason="Cannot discover addressbooks for an account lacking a discovery URI",
            )

        connection = self._credentials.make_connection(account_settings)
        discovered = self._discovery.discover_addressbooks(connection)
        self._logger.info(
            f"Discovered {len(discovered)} addressbook(s) at {connection.discovery_url}"
        )

        account_id = account_settings.get("id")
        if account_id is not None:
            account_id = str(account_id)
            self._accounts.update_account(account_id, {"last_discovered": self._now()})

            known_by_url: Dict[str, str] = {
                abook.url: abook_id
                for abook_id, abook in self._addressbooks.list_for_account(
                    account_id, ABF_DISCOVERED
                ).items()
            }
            new_abooks: List[DiscoveredAddressbook] = []
            for remote in discovered:
                if remote.uri in known_by_url:
                    # 剩下的就是服务端已删除的地址簿
                    del known_by_url[remote.uri]
                else:
                    new_abooks.append(remote)

            vanished = list(known_by_url.values())
            self._addressbooks.delete_addressbooks(vanished)
        else:
            settings = dict(account_settings)
            settings["last_discovered"] = self._now()
            account_id = self._accounts.insert_account(settings)
            new_abooks = list(discovered)
            vanished = []

        account = self._accounts.get_account(account_id).to_settings()
        abook_settings = dict(template_settings)
        abook_settings["account_id"] = account_id
        abook_settings["discovered"] = True
        abook_settings["template"] = False
        abook_settings["sync_token"] = ""
        # 只有缺少 name 时才使用默认模板，空模板交给命名解析回退到 base name
        name_template = template_settings.get("name")
        if name_template is None:
            name_template = DEFAULT_NAME_TEMPLATE

        for remote in new_abooks:
            abook_settings["name"] = self._naming.resolve(name_template, account, remote)
            abook_settings["url"] = remote.uri
            self._addressbooks.insert_addressbook(abook_settings)

        self._logger.info(
            f"Account {account_id}: {len(new_abooks)} new, {len(vanished)} removed addressbook(s)"
        )
        return account_id

    def resync_addressbook(self, abook_id: str) -> int:
        """
        重新同步地址簿

        在耗时的同步开始之前，先把 last_updated 设为 ``now + 300 - refresh_time``，
        使下一次定时刷新不会重复处理该地址簿。即使同步随后失败，该写入也保留。

        Args:
            abook_id: 地址簿 ID

        Returns:
            同步耗时（秒）

        Raises:
            EntityNotFoundException: 地址簿不存在或不属于当前用户
            ValidationException: 模板地址簿不能同步
            DiscoveryException: 同步失败
        """
        started = self._clock()
        abook = self._addressbooks.get_addressbook(abook_id)
        if abook.template:
            raise ValidationException(
                field="abook_id", reason="Template addressbooks cannot be synchronized"
            )

        delayed = int(started) + RESYNC_GRACE_SECONDS - abook.refresh_time
        self._addressbooks.update_addressbook(abook.id, {"last_updated": delayed})

        account = self._addressbooks.get_account_for_addressbook(abook.id)

        connection = self._credentials.make_connection(account.to_settings(), url=abook.url)
        result = self._sync.sync(connection, abook)
        self._contacts.apply(abook.id, result)
        self._addressbooks.update_addressbook(
            abook.id, {"sync_token": result.sync_token, "last_updated": self._now()}
        )

        duration = int(round(self._clock() - started))
        self._logger.info(f"Resynced addressbook {abook.id} in {duration}s")
        return duration

    def clear_cache(self, abook_id: str) -> None:
        """清空地址簿的本地缓存数据并重置同步状态，保留地址簿本身"""
        self._addressbooks.delete_addressbooks([abook_id], cache_only=True)
