"""CardDAV queries package"""

from application.queries.carddav.list_accounts import (
    AccountItem,
    AddressbookItem,
    ListAccountsQuery,
    ListAccountsResult,
)

__all__ = [
    "AccountItem",
    "AddressbookItem",
    "ListAccountsQuery",
    "ListAccountsResult",
]
