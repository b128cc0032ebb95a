"""CardDAV 账号仓储"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from domain.common.exceptions import EntityNotFoundException, InvalidValueObjectException
from domain.carddav.entities.account import Account
from domain.carddav.repositories.row_store import RowStore
from domain.carddav.services.settings_codec import decode_row, prepare_row
from domain.carddav.value_objects.addressbook_filter import ABF_ALL
from domain.carddav.value_objects.encrypted_password import EncryptedPassword
from domain.carddav.value_objects.field_spec import ACCOUNT_SETTINGS
from domain.carddav.value_objects.flags import ACCOUNT_FLAGS
from domain.carddav.value_objects.principal import PrincipalContext

if TYPE_CHECKING:
    from application.carddav.services.addressbook_repository import AddressbookRepository


ACCOUNTS_TABLE = "accounts"


class AccountRepository:
    """
    当前用户的账号仓储

    在行存储之上提供账号的增删改查，所有操作都限定在当前用户范围内。
    账号列表在第一次读取时缓存，任何写操作（无论成功与否）都会清空缓存。
    """

    def __init__(
        self,
        store: RowStore,
        principal: PrincipalContext,
        encryption_key: Union[str, bytes],
        logger: Optional[logging.Logger] = None,
    ):
        """
        初始化仓储

        Args:
            store: 行存储网关
            principal: 当前用户上下文
            encryption_key: 密码加密密钥
            logger: 日志记录器（可选）
        """
        self._store = store
        self._principal = principal
        self._encryption_key = encryption_key
        self._logger = logger or logging.getLogger(__name__)
        self._cache: Optional[Dict[str, Account]] = None
        self._addressbooks: Optional["AddressbookRepository"] = None

    def attach_addressbooks(self, addressbooks: "AddressbookRepository") -> None:
        """关联地址簿仓储，删除账号时级联删除其地址簿"""
        self._addressbooks = addressbooks

    def invalidate(self) -> None:
        """清空账号缓存"""
        self._cache = None

    def _accounts(self) -> Dict[str, Account]:
        if self._cache is None:
            rows = self._store.get({"user_id": self._principal.user_id}, (), ACCOUNTS_TABLE)
            cache: Dict[str, Account] = {}
            for row in rows:
                account = Account.from_config(decode_row(row, ACCOUNT_FLAGS))
                cache[account.id] = account
            self._cache = cache
        return self._cache

    def list_account_ids(self, presets_only: bool = False) -> List[str]:
        """
        返回当前用户所有账号的 ID

        Args:
            presets_only: 为 True 时只返回管理员预设创建的账号

        Returns:
            账号 ID 列表
        """
        return [
            account_id
            for account_id, account in self._accounts().items()
            if not presets_only or account.is_preset
        ]

    def get_account(self, account_id: str) -> Account:
        """
        获取账号（密码已解密）

        Args:
            account_id: 账号 ID

        Returns:
            账号实体副本

        Raises:
            EntityNotFoundException: 账号不存在或不属于当前用户
        """
        account = self._accounts().get(str(account_id))
        if account is None:
            raise EntityNotFoundException("account", account_id)
        return replace(account, password=self._decrypt(account.password))

    def insert_account(self, settings: Mapping[str, Any]) -> str:
        """
        插入新账号

        Args:
            settings: 账号设置

        Returns:
            新账号 ID

        Raises:
            ValidationException: 缺少必填字段
        """
        settings = self._encrypt_password(settings)
        columns, values = prepare_row(
            settings, ACCOUNT_SETTINGS, True, ACCOUNT_FLAGS, ACCOUNT_FLAGS.default
        )
        columns.append("user_id")
        values.append(self._principal.user_id)

        try:
            account_id = self._store.insert(ACCOUNTS_TABLE, columns, [values])
        finally:
            self.invalidate()

        self._logger.info(f"Inserted carddav account {account_id} for user {self._principal.user_id}")
        return account_id

    def update_account(self, account_id: str, settings: Mapping[str, Any]) -> None:
        """
        更新账号的部分设置

        没有需要写入的列时什么也不做。

        Raises:
            EntityNotFoundException: 账号不存在或不属于当前用户
            ValidationException: 试图修改不可更新的字段
        """
        account = self._accounts().get(str(account_id))
        if account is None:
            raise EntityNotFoundException("account", account_id)

        settings = self._encrypt_password(settings)
        columns, values = prepare_row(
            settings, ACCOUNT_SETTINGS, False, ACCOUNT_FLAGS, int(account.flags)
        )

        if columns:
            try:
                self._store.update(
                    {"id": account.id, "user_id": self._principal.user_id},
                    columns,
                    values,
                    ACCOUNTS_TABLE,
                )
            finally:
                self.invalidate()

    def delete_account(self, account_id: str) -> None:
        """
        删除账号及其所有地址簿

        在一个事务中先级联删除账号的所有地址簿，再删除账号行。
        任何失败都会回滚整个事务并原样抛出异常。

        Raises:
            EntityNotFoundException: 账号不存在或不属于当前用户
        """
        if self._addressbooks is None:
            raise RuntimeError("AccountRepository has no attached AddressbookRepository")

        self._store.start_transaction(False)
        try:
            account = self.get_account(account_id)
            abook_ids = list(self._addressbooks.list_for_account(account.id, ABF_ALL))

            # 并非所有数据库后端都支持级联删除，因此显式删除
            self._addressbooks.delete_addressbooks(abook_ids, skip_transaction=True)
            self._store.delete(account.id, ACCOUNTS_TABLE)

            self._store.end_transaction()
        except Exception:
            self._store.rollback_transaction()
            self._logger.error(f"Failed to delete carddav account {account_id}, transaction rolled back")
            raise
        finally:
            self.invalidate()
            self._addressbooks.invalidate()

        self._logger.info(f"Deleted carddav account {account_id} with {len(abook_ids)} addressbook(s)")

    def _encrypt_password(self, settings: Mapping[str, Any]) -> Dict[str, Any]:
        result = dict(settings)
        if result.get("password") is not None:
            result["password"] = EncryptedPassword.from_plain(
                str(result["password"]), self._encryption_key
            ).token
        return result

    def _decrypt(self, token: str) -> str:
        if not token:
            return ""
        try:
            return EncryptedPassword(token=token).decrypt(self._encryption_key)
        except InvalidValueObjectException:
            self._logger.warning("Stored account password could not be decrypted")
            raise
