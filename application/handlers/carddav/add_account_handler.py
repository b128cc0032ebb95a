"""添加 CardDAV 账号处理器"""

import logging
from typing import Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.commands.carddav.add_account import AddAccountCommand, AddAccountResult
from application.handlers.carddav.error_codes import INTERNAL_ERROR, error_code_for
from domain.common.exceptions import DomainException


class AddAccountHandler:
    """
    添加 CardDAV 账号处理器

    业务流程：
    1. 有发现 URL 时发现服务端地址簿，表单同时作为账号设置和模板设置
    2. 没有发现 URL 时只插入账号
    3. 创建账号的模板地址簿
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

    async def handle(self, command: AddAccountCommand) -> AddAccountResult:
        """
        处理添加账号命令

        Args:
            command: 添加账号命令

        Returns:
            AddAccountResult 处理结果
        """
        form = command.account_settings()
        form.update(command.template_settings())

        try:
            if command.discovery_url:
                account_id = self._manager.discover_addressbooks(form, form)
            else:
                account_id = self._manager.insert_account(form)

            self._manager.set_template_addressbook(account_id, command.template_settings())
            abook_ids = list(self._manager.get_addressbook_configs_by_account(account_id))

            return AddAccountResult(
                success=True,
                account_id=account_id,
                addressbook_ids=abook_ids,
                message=f"Account '{command.accountname}' added with {len(abook_ids)} addressbook(s)",
            )

        except DomainException as e:
            self._logger.warning(f"Failed to add account '{command.accountname}': {e.message}")
            return AddAccountResult(
                success=False,
                message=e.message,
                error_code=error_code_for(e),
            )
        except Exception as e:
            self._logger.exception(f"Unexpected error adding account '{command.accountname}'")
            return AddAccountResult(
                success=False,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
