"""更新地址簿设置处理器"""

import logging
from typing import Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.commands.carddav.update_addressbook import (
    UpdateAddressbookCommand,
    UpdateAddressbookResult,
)
from application.handlers.carddav.error_codes import INTERNAL_ERROR, error_code_for
from domain.common.exceptions import DomainException, ValidationException


class UpdateAddressbookHandler:
    """
    更新地址簿设置处理器

    预设账号的地址簿按其 URL 查找固定属性（extra_addressbooks 可以覆盖账号级别的配置），
    固定属性不会被修改。模板地址簿随账号设置一起保存，不能单独修改。
    """

    def __init__(self, manager: AddressbookManager, logger: Optional[logging.Logger] = None):
        self._manager = manager
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, command: UpdateAddressbookCommand) -> UpdateAddressbookResult:
        """
        处理更新地址簿命令

        Args:
            command: 更新地址簿命令

        Returns:
            UpdateAddressbookResult: 处理结果
        """
        try:
            abook = self._manager.get_addressbook_config(command.abook_id)
            if abook.template:
                raise ValidationException(
                    field="abook_id",
                    reason="Template addressbooks are saved with their account settings",
                )
            account = self._manager.get_visible_account(abook.account_id)

            settings = command.settings()
            ignored = []
            preset = self._manager.find_preset(account, abook.url)
            if preset is not None:
                settings, ignored = preset.split_fixed(settings)

            self._manager.update_addressbook(abook.id, settings)
            abook = self._manager.get_addressbook_config(abook.id)

            return UpdateAddressbookResult(
                success=True,
                abook_id=abook.id,
                name=abook.name,
                ignored_fields=ignored,
                message=f"Addressbook '{abook.name}' saved",
            )

        except DomainException as e:
            self._logger.warning(f"Failed to save addressbook {command.abook_id}: {e.message}")
            return UpdateAddressbookResult(
                success=False,
                abook_id=command.abook_id,
                message=e.message,
                error_code=error_code_for(e),
            )
        except Exception as e:
            self._logger.exception(f"Unexpected error saving addressbook {command.abook_id}")
            return UpdateAddressbookResult(
                success=False,
                abook_id=command.abook_id,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
