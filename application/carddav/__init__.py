"""CardDAV 地址簿管理应用层模块"""

from application.carddav.services import (
    AccountRepository,
    AddressbookRepository,
    AddressbookManager,
    DiscoveryReconciler,
)

__all__ = [
    "AccountRepository",
    "AddressbookRepository",
    "AddressbookManager",
    "DiscoveryReconciler",
]
