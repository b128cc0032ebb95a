"""CardDAV 处理器模块"""

from application.handlers.carddav.add_account_handler import AddAccountHandler
from application.handlers.carddav.delete_account_handler import DeleteAccountHandler
from application.handlers.carddav.rediscover_account_handler import RediscoverAccountHandler
from application.handlers.carddav.sync_addressbook_handler import SyncAddressbookHandler
from application.handlers.carddav.update_account_handler import UpdateAccountHandler
from application.handlers.carddav.update_addressbook_handler import UpdateAddressbookHandler
from application.handlers.carddav.toggle_addressbook_active_handler import (
    ToggleAddressbookActiveHandler,
)
from application.handlers.carddav.list_accounts_handler import ListAccountsHandler

__all__ = [
    "AddAccountHandler",
    "DeleteAccountHandler",
    "RediscoverAccountHandler",
    "SyncAddressbookHandler",
    "UpdateAccountHandler",
    "UpdateAddressbookHandler",
    "ToggleAddressbookActiveHandler",
    "ListAccountsHandler",
]
