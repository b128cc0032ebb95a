"""查询 CardDAV 账号列表处理器"""

import logging
from typing import Optional

from application.carddav.services.addressbook_manager import AddressbookManager
from application.handlers.carddav.error_codes import INTERNAL_ERROR, error_code_for
from application.queries.carddav.list_accounts import (
    AccountItem,
    AddressbookItem,
    ListAccountsQuery,
    ListAccountsResult,
)
from domain.carddav.entities.account import Account
from domain.common.exceptions import DomainException


class ListAccountsHandler:
    """
    查询 CardDAV 账号列表处理器

    返回当前用户的账号及其普通（非模板）地址簿，隐藏的预设账号不返回。
    """

    def __init__(self, manager: AddressbookManager, logger: Optional[logging.Logger] = None):
        self._manager = manager
        self._logger = logger or logging.getLogger(__name__)

    async def handle(self, query: ListAccountsQuery) -> ListAccountsResult:
        """
        处理查询请求

        Args:
            query: 查询参数

        Returns:
            ListAccountsResult: 查询结果
        """
        try:
            items = []
            for account_id in self._manager.get_account_ids():
                account = self._manager.get_account_config(account_id)
                if self._is_hidden(account):
                    continue

                abooks = self._manager.get_addressbook_configs_by_account(account.id)
                items.append(
                    AccountItem(
                        id=account.id,
                        accountname=account.accountname,
                        username=account.username,
                        discovery_url=account.discovery_url,
                        presetname=account.presetname,
                        last_discovered=account.last_discovered,
                        addressbooks=[
                            AddressbookItem(
                                id=abook.id,
                                name=abook.name,
                                url=abook.url,
                                active=abook.active,
                                readonly=abook.readonly,
                                last_updated=abook.last_updated,
                                refresh_time=abook.refresh_time,
                            )
                            for abook in sorted(abooks.values(), key=lambda a: a.name)
                            if query.include_inactive or abook.active
                        ],
                    )
                )

            items.sort(key=lambda item: item.accountname)
            return ListAccountsResult(success=True, data=items, message="Query successful")

        except DomainException as e:
            self._logger.warning(f"Failed to list accounts: {e.message}")
            return ListAccountsResult(success=False, message=e.message, error_code=error_code_for(e))
        except Exception as e:
            self._logger.exception("Unexpected error listing accounts")
            return ListAccountsResult(
                success=False,
                message=f"Unexpected error: {str(e)}",
                error_code=INTERNAL_ERROR,
            )

    def _is_hidden(self, account: Account) -> bool:
        preset = self._manager.find_preset(account)
        return preset is not None and preset.hide
