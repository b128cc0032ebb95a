"""CardDAV 值对象模块"""

from domain.carddav.value_objects.flags import (
    AccountFlag,
    AddressbookFlag,
    FlagsColumn,
    ACCOUNT_FLAGS,
    ADDRESSBOOK_FLAGS,
)
from domain.carddav.value_objects.addressbook_filter import (
    AddressbookFilter,
    ABF_ALL,
    ABF_REGULAR,
    ABF_ACTIVE,
    ABF_ACTIVE_RW,
    ABF_DISCOVERED,
    ABF_EXTRA,
    ABF_TEMPLATE,
)
from domain.carddav.value_objects.field_spec import (
    FieldSpec,
    ACCOUNT_SETTINGS,
    ADDRESSBOOK_SETTINGS,
)
from domain.carddav.value_objects.encrypted_password import EncryptedPassword
from domain.carddav.value_objects.principal import PrincipalContext
from domain.carddav.value_objects.connection import CardDavConnection
from domain.carddav.value_objects.discovered_addressbook import DiscoveredAddressbook
from domain.carddav.value_objects.preset import Preset
from domain.carddav.value_objects.sync_result import RemoteCard, SyncResult

__all__ = [
    "AccountFlag",
    "AddressbookFlag",
    "FlagsColumn",
    "ACCOUNT_FLAGS",
    "ADDRESSBOOK_FLAGS",
    "AddressbookFilter",
    "ABF_ALL",
    "ABF_REGULAR",
    "ABF_ACTIVE",
    "ABF_ACTIVE_RW",
    "ABF_DISCOVERED",
    "ABF_EXTRA",
    "ABF_TEMPLATE",
    "FieldSpec",
    "ACCOUNT_SETTINGS",
    "ADDRESSBOOK_SETTINGS",
    "EncryptedPassword",
    "PrincipalContext",
    "CardDavConnection",
    "DiscoveredAddressbook",
    "Preset",
    "RemoteCard",
    "SyncResult",
]
