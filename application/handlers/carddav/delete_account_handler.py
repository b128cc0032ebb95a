"""删除 CardDAV 账号处理器"""

import logging
from typing import Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.commands.carddav.delete_account import (
    DeleteAccountCommand,
    DeleteAccountResult,
)
from application.handlers.carddav.error_codes import (
    INTERNAL_ERROR,
    PRESET_ACCOUNT,
    error_code_for,
)
from domain.common.exceptions import DomainException


class DeleteAccountHandler:
    """
    删除 CardDAV 账号处理器

    管理员预设的账号由预设配置维护，用户不能删除；隐藏的预设账号视为不存在。
    """

    def __init__(self, manager: AddressbookManager, logger: Optional[logging.Logger] = None):
        self._manager = manager
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, command: DeleteAccountCommand) -> DeleteAccountResult:
        """
        处理删除命令

        Args:
            command: 删除命令

        Returns:
            DeleteAccountResult: 删除结果
        """
        try:
            account = self._manager.get_visible_account(command.account_id)

            if account.is_preset:
                return DeleteAccountResult(
                    success=False,
                    account_id=account.id,
                    accountname=account.accountname,
                    message="Cannot delete an account created from an admin preset",
                    error_code=PRESET_ACCOUNT,
                )

            self._manager.delete_account(account.id)

            return DeleteAccountResult(
                success=True,
                account_id=account.id,
                accountname=account.accountname,
                message=f"Account '{account.accountname}' deleted successfully",
            )

        except DomainException as e:
            self._logger.warning(f"Failed to delete account {command.account_id}: {e.message}")
            return DeleteAccountResult(
                success=False,
                account_id=command.account_id,
                message=e.message,
                error_code=error_code_for(e),
            )
        except Exception as e:
            self._logger.exception(f"Unexpected error deleting account {command.account_id}")
            return DeleteAccountResult(
                success=False,
                account_id=command.account_id,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
