"""CardDAV 地址簿同步服务 httpx 实现"""

import logging
from typing import List, Optional
from xml.sax.saxutils import escape

import httpx

from domain.common.exceptions import DiscoveryException
from domain.carddav.entities.addressbook import Addressbook
from domain.carddav.services.sync_service import AddressbookSyncService
from domain.carddav.value_objects.connection import CardDavConnection
from domain.carddav.value_objects.sync_result import RemoteCard, SyncResult
from infrastructure.carddav.services.carddav_http import (
    CARDDAV,
    DAV,
    build_client,
    parse_multistatus,
    parse_responses,
    send,
)


SYNC_COLLECTION_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<D:sync-collection xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:carddav">
  <D:sync-token>{token}</D:sync-token>
  <D:sync-level>1</D:sync-level>
  <D:prop>
    <D:getetag/>
    <C:address-data/>
  </D:prop>
</D:sync-collection>"""

MULTIGET_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<C:addressbook-multiget xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:carddav">
  <D:prop>
    <D:getetag/>
    <C:address-data/>
  </D:prop>
{hrefs}
</C:addressbook-multiget>"""

# 服务端拒绝过期 sync-token 时返回的状态码
INVALID_TOKEN_STATUSES = (403, 409)


class HttpxSyncService(AddressbookSyncService):
    """
    基于 httpx 的 sync-collection 同步（RFC 6578）

    - 带上次的 sync-token 请求变更，每个变更返回 etag 与 vCard
    - 响应状态为 404 的条目视为已删除
    - 服务端未返回 vCard 内容时，使用 addressbook-multiget 补取
    - 令牌失效（403/409）时，以空令牌重新全量同步一次
    """

    def __init__(self, timeout: float = 30.0, logger: Optional[logging.Logger] = None):
        """
        初始化同步服务

        Args:
            timeout: 每个 HTTP 请求的超时（秒）
            logger: 日志记录器（可选）
        """
        self._timeout = timeout
        self._logger = logger or logging.getLogger(__name__)

    def sync(self, connection: CardDavConnection, addressbook: Addressbook) -> SyncResult:
        """
        拉取地址簿自上次同步以来的变更

        Args:
            connection: 连接描述（discovery_url 为地址簿 URL）
            addressbook: 要同步的地址簿

        Returns:
            SyncResult

        Raises:
            DiscoveryException: 与服务端的交互失败
        """
        url = connection.discovery_url
        token = addressbook.sync_token or ""

        with build_client(connection, self._timeout) as client:
            try:
                return self._sync_collection(client, url, token)
            except DiscoveryException as e:
                if not token or e.status_code not in INVALID_TOKEN_STATUSES:
                    raise
                self._logger.warning(
                    f"Sync token of addressbook {addressbook.id} rejected "
                    f"(HTTP {e.status_code}), falling back to full resync"
                )
                return self._sync_collection(client, url, "")

    def _sync_collection(self, client: httpx.Client, url: str, token: str) -> SyncResult:
        body = SYNC_COLLECTION_TEMPLATE.format(token=escape(token)).encode("utf-8")
        response = send(client, "REPORT", url, body, "0")
        root = parse_multistatus(response.content, url)

        changed: List[RemoteCard] = []
        deleted: List[str] = []
        missing_data: List[str] = []
        collection_url = str(response.url).rstrip("/")

        for item in parse_responses(root, str(response.url)):
            if item.href.rstrip("/") == collection_url:
                continue
            if " 404" in item.status:
                deleted.append(item.href)
                continue

            etag = item.text(f"{DAV}getetag")
            if etag is None:
                continue
            vcard = item.text(f"{CARDDAV}address-data")
            if vcard:
                changed.append(RemoteCard(uri=item.href, etag=etag, vcard=vcard))
            else:
                missing_data.append(item.href)

        if missing_data:
            changed.extend(self._multiget(client, url, missing_data))

        new_token = (root.findtext(f"{DAV}sync-token") or "").strip()
        self._logger.info(
            f"Sync of {url}: {len(changed)} changed, {len(deleted)} deleted"
            f"{' (full)' if not token else ''}"
        )
        return SyncResult(
            sync_token=new_token,
            changed=changed,
            deleted=deleted,
            full_sync=not token,
        )

    def _multiget(self, client: httpx.Client, url: str, hrefs: List[str]) -> List[RemoteCard]:
        body = MULTIGET_TEMPLATE.format(
            hrefs="\n".join(f"  <D:href>{escape(href)}</D:href>" for href in hrefs)
        ).encode("utf-8")
        response = send(client, "REPORT", url, body, "1")
        root = parse_multistatus(response.content, url)

        cards = []
        for item in parse_responses(root, str(response.url)):
            vcard = item.text(f"{CARDDAV}address-data")
            if not vcard:
                self._logger.warning(f"Server returned no vCard for {item.href}")
                continue
            cards.append(
                RemoteCard(uri=item.href, etag=item.text(f"{DAV}getetag") or "", vcard=vcard)
            )
        return cards
