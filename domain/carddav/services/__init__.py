"""CardDAV 领域服务模块"""

from domain.carddav.services.settings_codec import decode_row, encode_update, prepare_row
from domain.carddav.services.credential_resolver import CredentialResolver
from domain.carddav.services.addressbook_naming import AddressbookNameResolver
from domain.carddav.services.discovery_service import AddressbookDiscoveryService
from domain.carddav.services.sync_service import AddressbookSyncService
from domain.carddav.services.preset_policy import PresetPolicy

__all__ = [
    "decode_row",
    "encode_update",
    "prepare_row",
    "CredentialResolver",
    "AddressbookNameResolver",
    "AddressbookDiscoveryService",
    "AddressbookSyncService",
    "PresetPolicy",
]
