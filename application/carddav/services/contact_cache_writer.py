"""联系人缓存写入服务"""

import logging
from typing import Any, Dict, Optional

import vobject

from domain.carddav.repositories.row_store import RowStore
from domain.carddav.value_objects.sync_result import RemoteCard, SyncResult


CONTACTS_TABLE = "contacts"


class ContactCacheWriter:
    """
    将同步结果写入本地 contacts 表

    修改的卡片按 (abook_id, uri) 插入或更新，删除的卡片直接移除。
    全量同步时，服务端不再列出的本地卡片也会被移除。
    """

    def __init__(self, store: RowStore, logger: Optional[logging.Logger] = None):
        self._store = store
        self._logger = logger or logging.getLogger(__name__)

    def apply(self, abook_id: str, result: SyncResult) -> None:
        """
        应用同步结果

        Args:
            abook_id: 地址簿 ID
            result: 同步结果
        """
        existing = {
            row["uri"]: row["id"]
            for row in self._store.get({"abook_id": abook_id}, ["id", "uri"], CONTACTS_TABLE)
        }

        for card in result.changed:
            row = self._card_to_row(card)
            if card.uri in existing:
                self._store.update(
                    {"id": existing[card.uri]}, list(row.keys()), list(row.values()), CONTACTS_TABLE
                )
            else:
                columns = ["abook_id"] + list(row.keys())
                values = [abook_id] + list(row.values())
                self._store.insert(CONTACTS_TABLE, columns, [values])

        deleted = set(result.deleted)
        if result.full_sync:
            seen = {card.uri for card in result.changed}
            deleted.update(uri for uri in existing if uri not in seen)

        deleted &= set(existing)
        if deleted:
            self._store.delete({"abook_id": abook_id, "uri": sorted(deleted)}, CONTACTS_TABLE)

        self._logger.info(
            f"Addressbook {abook_id}: {len(result.changed)} card(s) changed, {len(deleted)} removed"
        )

    def _card_to_row(self, card: RemoteCard) -> Dict[str, Any]:
        name = ""
        email = ""
        try:
            vcard = vobject.readOne(card.vcard)
        except Exception as e:
            # vobject 对格式错误抛出多种异常类型
            self._logger.warning(f"Failed to parse vCard {card.uri}: {e}")
        else:
            if hasattr(vcard, "fn"):
                name = str(vcard.fn.value)
            if hasattr(vcard, "email"):
                email = str(vcard.email.value)

        return {
            "uri": card.uri,
            "etag": card.etag,
            "vcard": card.vcard,
            "name": name,
            "email": email,
        }
