"""CardDAV 应用服务"""

from application.carddav.services.account_repository import AccountRepository
from application.carddav.services.addressbook_repository import AddressbookRepository
from application.carddav.services.contact_cache_writer import ContactCacheWriter
from application.carddav.services.discovery_reconciler import DiscoveryReconciler
from application.carddav.services.template_addressbook_service import (
    TemplateAddressbookService,
)
from application.carddav.services.addressbook_manager import AddressbookManager

__all__ = [
    "AccountRepository",
    "AddressbookRepository",
    "ContactCacheWriter",
    "DiscoveryReconciler",
    "TemplateAddressbookService",
    "AddressbookManager",
]
