"""CardDAV 实体模块"""

from domain.carddav.entities.account import Account
from domain.carddav.entities.addressbook import Addressbook

__all__ = [
    "Account",
    "Addressbook",
]
