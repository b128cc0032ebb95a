"""启用 / 停用地址簿处理器"""

import logging
from typing import Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.commands.carddav.toggle_addressbook_active import (
    ToggleAddressbookActiveCommand,
    ToggleAddressbookActiveResult,
)
from application.handlers.carddav.error_codes import (
    FIXED_SETTING,
    INTERNAL_ERROR,
    error_code_for,
)
from domain.common.exceptions import DomainException, ValidationException


class ToggleAddressbookActiveHandler:
    """
    启用 / 停用地址簿处理器

    预设固定了 active 的地址簿不能切换，返回 FIXED_SETTING 和地址簿的原状态。
    """

    def __init__(self, manager: AddressbookManager, logger: Optional[logging.Logger] = None):
        self._manager = manager
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, command: ToggleAddressbookActiveCommand) -> ToggleAddressbookActiveResult:
        """
        处理启用 / 停用命令

        Args:
            command: 启用 / 停用命令

        Returns:
            ToggleAddressbookActiveResult: 处理结果
        """
        state = "activate" if command.active else "deactivate"
        abook = None
        try:
            abook = self._manager.get_addressbook_config(command.abook_id)
            if abook.template:
                raise ValidationException(
                    field="abook_id", reason="Template addressbooks cannot be toggled"
                )
            account = self._manager.get_visible_account(abook.account_id)

            preset = self._manager.find_preset(account, abook.url)
            if preset is not None and preset.is_fixed("active"):
                self._logger.warning(
                    f"Cannot {state} addressbook {abook.id}: active is fixed by preset {preset.name}"
                )
                return ToggleAddressbookActiveResult(
                    success=False,
                    abook_id=abook.id,
                    active=abook.active,
                    message=f"active is a fixed setting for addressbook {abook.id}",
                    error_code=FIXED_SETTING,
                )

            self._manager.update_addressbook(abook.id, {"active": command.active})

            return ToggleAddressbookActiveResult(
                success=True,
                abook_id=abook.id,
                active=command.active,
                message=f"Addressbook '{abook.name}' {state}d",
            )

        except DomainException as e:
            self._logger.warning(f"Failed to {state} addressbook {command.abook_id}: {e.message}")
            return ToggleAddressbookActiveResult(
                success=False,
                abook_id=command.abook_id,
                active=abook.active if abook is not None else None,
                message=e.message,
                error_code=error_code_for(e),
            )
        except Exception as e:
            self._logger.exception(f"Unexpected error toggling addressbook {command.abook_id}")
            return ToggleAddressbookActiveResult(
                success=False,
                abook_id=command.abook_id,
                active=abook.active if abook is not None else None,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
