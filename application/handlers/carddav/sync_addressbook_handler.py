"""同步地址簿处理器"""

import logging
from typing import Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.commands.carddav.sync_addressbook import (
    SyncAddressbookCommand,
    SyncAddressbookResult,
    SyncType,
)
from application.handlers.carddav.error_codes import INTERNAL_ERROR, error_code_for
from domain.common.exceptions import DomainException, ValidationException


class SyncAddressbookHandler:
    """
    同步地址簿处理器

    sync 执行一次重新同步并返回耗时；clear_cache 清空本地缓存数据，
    下一次同步将从空 sync-token 开始全量同步。隐藏的预设账号的地址簿不能操作。
    """

    def __init__(self, manager: AddressbookManager, logger: Optional[logging.Logger] = None):
        self._manager = manager
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, command: SyncAddressbookCommand) -> SyncAddressbookResult:
        """
        处理同步命令

        Args:
            command: 同步命令

        Returns:
            SyncAddressbookResult: 处理结果
        """
        try:
            abook = self._manager.get_addressbook_config(command.abook_id)
            if abook.template:
                raise ValidationException(
                    field="abook_id", reason="Template addressbooks cannot be synchronized"
                )
            self._manager.get_visible_account(abook.account_id)

            if command.sync_type == SyncType.CLEAR_CACHE:
                self._manager.clear_cache(abook.id)
                return SyncAddressbookResult(
                    success=True,
                    abook_id=abook.id,
                    name=abook.name,
                    message=f"Cleared the cache of addressbook '{abook.name}'",
                )

            duration = self._manager.resync_addressbook(abook.id)
            return SyncAddressbookResult(
                success=True,
                abook_id=abook.id,
                name=abook.name,
                duration=duration,
                message=f"Synchronized addressbook '{abook.name}' in {duration} seconds",
            )

        except DomainException as e:
            self._logger.warning(f"Sync of addressbook {command.abook_id} failed: {e.message}")
            return SyncAddressbookResult(
                success=False,
                abook_id=command.abook_id,
                message=e.message,
                error_code=error_code_for(e),
            )
        except Exception as e:
            self._logger.exception(f"Unexpected error syncing addressbook {command.abook_id}")
            return SyncAddressbookResult(
                success=False,
                abook_id=command.abook_id,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
