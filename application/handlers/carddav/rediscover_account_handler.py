"""重新发现账号地址簿处理器"""

import logging
from typing import Any, Dict, Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.commands.carddav.rediscover_account import (
    RediscoverAccountCommand,
    RediscoverAccountResult,
)
from application.handlers.carddav.error_codes import INTERNAL_ERROR, error_code_for
from domain.carddav.entities.account import Account
from domain.carddav.value_objects.addressbook_filter import ABF_DISCOVERED
from domain.common.exceptions import DomainException


class RediscoverAccountHandler:
    """
    重新发现账号地址簿处理器

    业务流程：
    1. 读取账号；隐藏的预设账号视为不存在，配置中已移除的预设视为普通账号
    2. 新地址簿的模板取账号的模板地址簿，没有时取预设默认值
    3. 执行发现，对比前后已发现的地址簿，报告新增和删除的 ID
    """

    def __init__(self, manager: AddressbookManager, logger: Optional[logging.Logger] = None):
        self._manager = manager
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, command: RediscoverAccountCommand) -> RediscoverAccountResult:
        """
        处理重新发现命令

        Args:
            command: 重新发现命令

        Returns:
            RediscoverAccountResult: 处理结果
        """
        try:
            account = self._manager.get_visible_account(command.account_id)

            before = set(
                self._manager.get_addressbook_configs_by_account(account.id, ABF_DISCOVERED)
            )
            self._manager.discover_addressbooks(
                account.to_settings(), self._template_settings(account)
            )
            after = set(
                self._manager.get_addressbook_configs_by_account(account.id, ABF_DISCOVERED)
            )

            new_ids = sorted(after - before)
            removed_ids = sorted(before - after)

            return RediscoverAccountResult(
                success=True,
                account_id=account.id,
                new_addressbook_ids=new_ids,
                removed_addressbook_ids=removed_ids,
                message=f"{len(new_ids)} new, {len(removed_ids)} removed addressbook(s)",
            )

        except DomainException as e:
            self._logger.warning(f"Rediscovery of account {command.account_id} failed: {e.message}")
            return RediscoverAccountResult(
                success=False,
                account_id=command.account_id,
                message=e.message,
                error_code=error_code_for(e),
            )
        except Exception as e:
            self._logger.exception(f"Unexpected error rediscovering account {command.account_id}")
            return RediscoverAccountResult(
                success=False,
                account_id=command.account_id,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )

    def _template_settings(self, account: Account) -> Dict[str, Any]:
        template = self._manager.get_template_addressbook_for_account(account.id)
        if template is not None:
            return template.to_settings()
        preset = self._manager.find_preset(account)
        if preset is not None:
            return dict(preset.defaults)
        return {}
