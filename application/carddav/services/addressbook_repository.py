"""CardDAV 地址簿仓储"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from domain.common.exceptions import EntityNotFoundException, ValidationException
from domain.carddav.entities.account import Account
from domain.carddav.entities.addressbook import Addressbook
from domain.carddav.repositories.row_store import RowStore
from domain.carddav.services.settings_codec import decode_row, prepare_row
from domain.carddav.value_objects.addressbook_filter import (
    AddressbookFilter,
    ABF_ACTIVE,
    ABF_ALL,
    ABF_REGULAR,
    ABF_TEMPLATE,
)
from domain.carddav.value_objects.field_spec import ADDRESSBOOK_SETTINGS
from domain.carddav.value_objects.flags import ADDRESSBOOK_FLAGS
from application.carddav.services.account_repository import AccountRepository


ADDRESSBOOKS_TABLE = "addressbooks"


class AddressbookRepository:
    """
    当前用户的地址簿仓储

    地址簿通过所属账号间接属于用户。所有地址簿在第一次读取时缓存，
    任何写操作（无论成功与否）都会清空缓存。
    """

    def __init__(
        self,
        store: RowStore,
        accounts: AccountRepository,
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化仓储

        Args:
            store: 行存储网关
            accounts: 同一用户的账号仓储
            logger: 日志记录器（可选）
        """
        self._store = store
        self._accounts = accounts
        self._logger = logger or logging.getLogger(__name__)
        self._cache: Optional[Dict[str, Addressbook]] = None
        accounts.attach_addressbooks(self)

    def invalidate(self) -> None:
        """清空地址簿缓存"""
        self._cache = None

    def _addressbooks(self) -> Dict[str, Addressbook]:
        if self._cache is None:
            cache: Dict[str, Addressbook] = {}
            account_ids = self._accounts.list_account_ids()
            if account_ids:
                rows = self._store.get({"account_id": account_ids}, (), ADDRESSBOOKS_TABLE)
                for row in rows:
                    abook = Addressbook.from_config(decode_row(row, ADDRESSBOOK_FLAGS))
                    cache[abook.id] = abook
            self._cache = cache
        return self._cache

    def list_addressbook_ids(
        self,
        abook_filter: AddressbookFilter = ABF_ACTIVE,
        presets_only: bool = False,
    ) -> List[str]:
        """
        返回当前用户满足筛选条件的地址簿 ID

        Args:
            abook_filter: flags 筛选条件
            presets_only: 为 True 时只返回预设账号下的地址簿

        Returns:
            地址簿 ID 列表
        """
        abooks = self._addressbooks()
        preset_accounts = set(self._accounts.list_account_ids(presets_only=True)) if presets_only else None

        return [
            abook_id
            for abook_id, abook in abooks.items()
            if abook_filter.matches(abook.flags)
            and (preset_accounts is None or abook.account_id in preset_accounts)
        ]

    def get_addressbook(self, abook_id: str) -> Addressbook:
        """
        获取地址簿

        Raises:
            EntityNotFoundException: 地址簿不存在或不属于当前用户
        """
        abook = self._addressbooks().get(str(abook_id))
        if abook is None:
            raise EntityNotFoundException("addressbook", abook_id)
        return abook

    def get_account_for_addressbook(self, abook_id: str) -> Account:
        """返回地址簿所属的账号（密码已解密）"""
        return self._accounts.get_account(self.get_addressbook(abook_id).account_id)

    def list_for_account(
        self,
        account_id: str,
        abook_filter: AddressbookFilter = ABF_REGULAR,
    ) -> Dict[str, Addressbook]:
        """
        返回账号下满足筛选条件的地址簿

        Args:
            account_id: 账号 ID
            abook_filter: flags 筛选条件

        Returns:
            地址簿 ID -> 地址簿

        Raises:
            EntityNotFoundException: 账号不存在或不属于当前用户
        """
        account = self._accounts.get_account(account_id)
        return {
            abook_id: abook
            for abook_id, abook in self._addressbooks().items()
            if abook.account_id == account.id and abook_filter.matches(abook.flags)
        }

    def get_template_for_account(self, account_id: str) -> Optional[Addressbook]:
        """返回账号的模板地址簿，没有时返回 None"""
        templates = self.list_for_account(account_id, ABF_TEMPLATE)
        return next(iter(templates.values()), None)

    def insert_addressbook(self, settings: Mapping[str, Any]) -> str:
        """
        插入新地址簿

        Returns:
            新地址簿 ID

        Raises:
            ValidationException: 缺少必填字段
            EntityNotFoundException: account_id 不属于当前用户
        """
        columns, values = prepare_row(
            settings, ADDRESSBOOK_SETTINGS, True, ADDRESSBOOK_FLAGS, ADDRESSBOOK_FLAGS.default
        )

        # 校验账号属于当前用户
        self._accounts.get_account(str(settings.get("account_id") or ""))

        try:
            abook_id = self._store.insert(ADDRESSBOOKS_TABLE, columns, [values])
        finally:
            self.invalidate()

        self._logger.debug(f"Inserted addressbook {abook_id} ({settings.get('url')!r})")
        return abook_id

    def update_addressbook(self, abook_id: str, settings: Mapping[str, Any]) -> None:
        """
        更新地址簿的部分设置

        没有需要写入的列时什么也不做。

        Raises:
            EntityNotFoundException: 地址簿不存在或不属于当前用户
            ValidationException: 试图修改不可更新的字段
        """
        abook = self.get_addressbook(abook_id)
        columns, values = prepare_row(
            settings, ADDRESSBOOK_SETTINGS, False, ADDRESSBOOK_FLAGS, int(abook.flags)
        )

        account_ids = self._accounts.list_account_ids()
        if columns and account_ids:
            try:
                self._store.update(
                    {"id": abook.id, "account_id": account_ids},
                    columns,
                    values,
                    ADDRESSBOOKS_TABLE,
                )
            finally:
                self.invalidate()

    def delete_addressbooks(
        self,
        abook_ids: Sequence[str],
        skip_transaction: bool = False,
        cache_only: bool = False,
    ) -> None:
        """
        删除地址簿及其所有缓存数据

        依次删除自定义子类型、分组成员、分组、联系人，最后删除地址簿行；
        ``cache_only`` 时保留地址簿行，只重置 last_updated 与 sync_token。

        Args:
            abook_ids: 地址簿 ID 列表
            skip_transaction: 为 True 时不开启事务，由调用方负责提交与回滚
            cache_only: 为 True 时只清空缓存数据并重置同步状态

        Raises:
            ValidationException: 任何 ID 不属于当前用户的地址簿
        """
        abook_ids = [str(abook_id) for abook_id in abook_ids]
        if not abook_ids:
            return

        try:
            if not skip_transaction:
                self._store.start_transaction(False)

            user_abook_ids = set(self.list_addressbook_ids(ABF_ALL))
            foreign = [abook_id for abook_id in abook_ids if abook_id not in user_abook_ids]
            if foreign:
                raise ValidationException(
                    field="abook_ids",
                    reason=f"IDs not referring to addressbooks of current user: {', '.join(foreign)}",
                )

            # 并非所有数据库后端都支持级联删除，因此显式删除
            self._store.delete({"abook_id": abook_ids}, "xsubtypes")

            group_ids = [
                row["id"] for row in self._store.get({"abook_id": abook_ids}, ["id"], "groups")
            ]
            if group_ids:
                self._store.delete({"group_id": group_ids}, "group_user")

            self._store.delete({"abook_id": abook_ids}, "groups")
            self._store.delete({"abook_id": abook_ids})

            if cache_only:
                self._store.update(
                    {"id": abook_ids}, ["last_updated", "sync_token"], [0, ""], ADDRESSBOOKS_TABLE
                )
            else:
                self._store.delete({"id": abook_ids}, ADDRESSBOOKS_TABLE)

            if not skip_transaction:
                self._store.end_transaction()
        except Exception:
            if not skip_transaction:
                self._store.rollback_transaction()
            raise
        finally:
            self.invalidate()

        action = "Cleared cache of" if cache_only else "Deleted"
        self._logger.info(f"{action} addressbook(s) {', '.join(abook_ids)}")
