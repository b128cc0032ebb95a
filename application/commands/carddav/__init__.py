"""CardDAV 命令模块"""

from application.commands.carddav.add_account import AddAccountCommand, AddAccountResult
from application.commands.carddav.delete_account import (
    DeleteAccountCommand,
    DeleteAccountResult,
)
from application.commands.carddav.rediscover_account import (
    RediscoverAccountCommand,
    RediscoverAccountResult,
)
from application.commands.carddav.sync_addressbook import (
    SyncAddressbookCommand,
    SyncAddressbookResult,
    SyncType,
)
from application.commands.carddav.update_account import (
    UpdateAccountCommand,
    UpdateAccountResult,
)
from application.commands.carddav.update_addressbook import (
    UpdateAddressbookCommand,
    UpdateAddressbookResult,
)
from application.commands.carddav.toggle_addressbook_active import (
    ToggleAddressbookActiveCommand,
    ToggleAddressbookActiveResult,
)

__all__ = [
    "AddAccountCommand",
    "AddAccountResult",
    "DeleteAccountCommand",
    "DeleteAccountResult",
    "RediscoverAccountCommand",
    "RediscoverAccountResult",
    "SyncAddressbookCommand",
    "SyncAddressbookResult",
    "SyncType",
    "UpdateAccountCommand",
    "UpdateAccountResult",
    "UpdateAddressbookCommand",
    "UpdateAddressbookResult",
    "ToggleAddressbookActiveCommand",
    "ToggleAddressbookActiveResult",
]
