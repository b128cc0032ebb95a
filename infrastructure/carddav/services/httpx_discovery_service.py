"""CardDAV 地址簿发现服务 httpx 实现"""

import logging
from typing import List, Optional
from urllib.parse import unquote, urljoin, urlsplit, urlunsplit

import httpx

from domain.common.exceptions import DiscoveryException
from domain.carddav.services.discovery_service import AddressbookDiscoveryService
from domain.carddav.value_objects.connection import CardDavConnection
from domain.carddav.value_objects.discovered_addressbook import DiscoveredAddressbook
from infrastructure.carddav.services.carddav_http import (
    CARDDAV,
    DAV,
    DavResponse,
    build_client,
    parse_multistatus,
    parse_responses,
    send,
)


# PROPFIND 请求体
PROPFIND_PRINCIPAL = b"""<?xml version="1.0" encoding="UTF-8"?>
<D:propfind xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:carddav">
  <D:prop>
    <D:current-user-principal/>
    <D:resourcetype/>
    <D:displayname/>
    <C:addressbook-description/>
  </D:prop>
</D:propfind>"""

PROPFIND_AB_HOME = b"""<?xml version="1.0" encoding="UTF-8"?>
<D:propfind xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:carddav">
  <D:prop>
    <C:addressbook-home-set/>
  </D:prop>
</D:propfind>"""

PROPFIND_ADDRESSBOOKS = b"""<?xml version="1.0" encoding="UTF-8"?>
<D:propfind xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:carddav">
  <D:prop>
    <D:resourcetype/>
    <D:displayname/>
    <C:addressbook-description/>
  </D:prop>
</D:propfind>"""

WELL_KNOWN_PATH = "/.well-known/carddav"


class HttpxDiscoveryService(AddressbookDiscoveryService):
    """
    基于 httpx 的地址簿发现

    依次尝试给定 URL 与该主机的 /.well-known/carddav：

    1. PROPFIND 入口 URL 获取 current-user-principal（入口本身是地址簿时直接返回）
    2. PROPFIND principal 获取 addressbook-home-set
    3. PROPFIND home（Depth: 1）列出 addressbook 集合

    认证失败（401/403）立即抛出，不再尝试后续入口。
    """

    def __init__(self, timeout: float = 30.0, logger: Optional[logging.Logger] = None):
        """
        初始化发现服务

        Args:
            timeout: 每个 HTTP 请求的超时（秒）
            logger: 日志记录器（可选）
        """
        self._timeout = timeout
        self._logger = logger or logging.getLogger(__name__)

    def discover_addressbooks(self, connection: CardDavConnection) -> List[DiscoveredAddressbook]:
        """
        发现账号在服务端的所有地址簿

        Args:
            connection: 连接描述

        Returns:
            服务端地址簿列表（按 URL 去重）

        Raises:
            DiscoveryException: 所有入口都无法完成发现
        """
        last_error: Optional[DiscoveryException] = None

        with build_client(connection, self._timeout) as client:
            for entry_url in self._entry_points(connection.discovery_url):
                try:
                    addressbooks = self._discover_from(client, entry_url)
                except DiscoveryException as e:
                    if e.status_code in (401, 403):
                        raise
                    self._logger.info(f"Discovery via {entry_url} failed: {e.message}")
                    last_error = e
                    continue

                self._logger.info(f"Found {len(addressbooks)} addressbook(s) via {entry_url}")
                return addressbooks

        raise DiscoveryException(
            f"Cannot discover addressbooks at {connection.discovery_url}"
            + (f": {last_error.message}" if last_error else ""),
            url=connection.discovery_url,
            status_code=last_error.status_code if last_error else None,
        )

    @staticmethod
    def _entry_points(url: str) -> List[str]:
        if "://" not in url:
            url = f"https://{url}"
        parts = urlsplit(url)
        well_known = urlunsplit((parts.scheme, parts.netloc, WELL_KNOWN_PATH, "", ""))
        return [url] if url.rstrip("/") == well_known else [url, well_known]

    def _discover_from(self, client: httpx.Client, url: str) -> List[DiscoveredAddressbook]:
        entry = self._propfind_one(client, url, PROPFIND_PRINCIPAL)
        if entry.has_resourcetype(f"{CARDDAV}addressbook"):
            return [self._to_addressbook(entry)]

        principal_href = entry.href_of(f"{DAV}current-user-principal")
        if not principal_href:
            raise DiscoveryException(f"No current-user-principal at {url}", url=url)
        principal_url = urljoin(entry.href, principal_href)

        principal = self._propfind_one(client, principal_url, PROPFIND_AB_HOME)
        home_set = principal.props.get(f"{CARDDAV}addressbook-home-set")
        home_hrefs = [
            (href.text or "").strip()
            for href in (home_set.findall(f"{DAV}href") if home_set is not None else [])
        ]
        home_urls = [urljoin(principal.href, href) for href in home_hrefs if href]
        if not home_urls:
            raise DiscoveryException(f"No addressbook-home-set at {principal_url}", url=principal_url)

        found: dict = {}
        for home_url in home_urls:
            response = send(client, "PROPFIND", home_url, PROPFIND_ADDRESSBOOKS, "1")
            root = parse_multistatus(response.content, home_url)
            for item in parse_responses(root, str(response.url)):
                if item.has_resourcetype(f"{CARDDAV}addressbook") and item.href not in found:
                    found[item.href] = self._to_addressbook(item)

        return list(found.values())

    @staticmethod
    def _propfind_one(client: httpx.Client, url: str, body: bytes) -> DavResponse:
        response = send(client, "PROPFIND", url, body, "0")
        items = parse_responses(parse_multistatus(response.content, url), str(response.url))
        if not items:
            raise DiscoveryException(f"Empty PROPFIND response from {url}", url=url)
        return items[0]

    @staticmethod
    def _to_addressbook(item: DavResponse) -> DiscoveredAddressbook:
        path = urlsplit(item.href).path.rstrip("/")
        base_name = unquote(path.rsplit("/", 1)[-1]) if path else ""
        return DiscoveredAddressbook(
            uri=item.href,
            base_name=base_name,
            display_name=item.text(f"{DAV}displayname") or None,
            description=item.text(f"{CARDDAV}addressbook-description") or None,
        )
