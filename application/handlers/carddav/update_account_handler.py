"""更新 CardDAV 账号设置处理器"""

import logging
from typing import Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.commands.carddav.update_account import (
    UpdateAccountCommand,
    UpdateAccountResult,
)
from application.handlers.carddav.error_codes import INTERNAL_ERROR, error_code_for
from domain.common.exceptions import DomainException


class UpdateAccountHandler:
    """
    更新 CardDAV 账号设置处理器

    业务流程：
    1. 读取账号；隐藏的预设账号视为不存在
    2. 去掉预设固定的属性（账号字段与模板字段都按账号级别的固定属性处理）
    3. 更新账号，再更新（或创建）账号的模板地址簿
    """

    def __init__(self, manager: AddressbookManager, logger: Optional[logging.Logger] = None):
        """
        初始化处理器

        Args:
            manager: 当前用户的地址簿管理器
            logger: 日志记录器（可选）
        """
        self._manager = manager
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, command: UpdateAccountCommand) -> UpdateAccountResult:
        """
        处理更新账号命令

        Args:
            command: 更新账号命令

        Returns:
            UpdateAccountResult: 处理结果
        """
        try:
            account = self._manager.get_visible_account(command.account_id)
            account_settings = command.account_settings()
            template_settings = command.template_settings()
            ignored = []

            preset = self._manager.find_preset(account)
            if preset is not None:
                account_settings, ignored_account = preset.split_fixed(account_settings)
                template_settings, ignored_template = preset.split_fixed(template_settings)
                ignored = sorted(ignored_account + ignored_template)
                if ignored:
                    self._logger.info(
                        f"Ignoring fixed settings {ignored} of preset account {account.id}"
                    )

            self._manager.update_account(account.id, account_settings)
            template_id = self._manager.set_template_addressbook(account.id, template_settings)

            return UpdateAccountResult(
                success=True,
                account_id=account.id,
                template_id=template_id,
                ignored_fields=ignored,
                message="Account settings saved",
            )

        except DomainException as e:
            self._logger.warning(f"Failed to save account {command.account_id}: {e.message}")
            return UpdateAccountResult(
                success=False,
                account_id=command.account_id,
                message=e.message,
                error_code=error_code_for(e),
            )
        except Exception as e:
            self._logger.exception(f"Unexpected error saving account {command.account_id}")
            return UpdateAccountResult(
                success=False,
                account_id=command.account_id,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
