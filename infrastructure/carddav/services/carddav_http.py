"""CardDAV HTTP 公共部分：认证、客户端构建、Multi-Status 解析"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, Generator, List, Optional
from urllib.parse import urljoin

import httpx

from domain.common.exceptions import DiscoveryException
from domain.carddav.value_objects.connection import CardDavConnection


# XML 命名空间（ElementTree 的 Clark 记法）
DAV = "{DAV:}"
CARDDAV = "{urn:ietf:params:xml:ns:carddav}"

XML_HEADERS = {"Content-Type": "application/xml; charset=utf-8"}


class ChallengeAuth(httpx.Auth):
    """
    非抢先认证

    第一个请求不带凭证；收到 401 后按 WWW-Authenticate 选择 Digest 或 Basic，
    之后的请求直接使用已选定的方式。
    """

    def __init__(self, username: str, password: str):
        self._basic = httpx.BasicAuth(username, password)
        self._digest = httpx.DigestAuth(username, password)
        self._scheme: Optional[str] = None

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._scheme == "digest":
            yield from self._digest.auth_flow(request)
            return
        if self._scheme == "basic":
            yield from self._basic.auth_flow(request)
            return

        response = yield request
        if response.status_code != 401:
            return

        challenges = [value.lower() for value in response.headers.get_list("www-authenticate")]
        if any(challenge.startswith("digest ") for challenge in challenges):
            self._scheme = "digest"
            flow = self._digest.auth_flow(request)
            next(flow)
            yield flow.send(response)
        else:
            self._scheme = "basic"
            yield from self._basic.auth_flow(request)


def build_client(connection: CardDavConnection, timeout: float) -> httpx.Client:
    """
    根据连接描述创建 httpx 客户端

    Args:
        connection: 连接描述
        timeout: 请求超时（秒）

    Returns:
        httpx.Client（调用方负责关闭）
    """
    headers = dict(XML_HEADERS)
    auth: Optional[httpx.Auth] = None

    if connection.uses_bearer_auth:
        headers["Authorization"] = f"Bearer {connection.bearer_token}"
    elif connection.username or connection.password:
        if connection.preemptive_basic_auth:
            auth = httpx.BasicAuth(connection.username, connection.password)
        else:
            auth = ChallengeAuth(connection.username, connection.password)

    return httpx.Client(
        auth=auth,
        headers=headers,
        verify=connection.verify_tls,
        timeout=timeout,
        follow_redirects=True,
    )


@dataclass
class DavResponse:
    """Multi-Status 中的一个 <response>"""

    href: str
    status: str = ""
    props: Dict[str, ET.Element] = field(default_factory=dict)

    def text(self, tag: str) -> Optional[str]:
        element = self.props.get(tag)
        if element is None:
            return None
        return (element.text or "").strip()

    def href_of(self, tag: str) -> Optional[str]:
        element = self.props.get(tag)
        if element is None:
            return None
        href = element.findtext(f"{DAV}href")
        return href.strip() if href else None

    def has_resourcetype(self, tag: str) -> bool:
        resourcetype = self.props.get(f"{DAV}resourcetype")
        return resourcetype is not None and resourcetype.find(tag) is not None


def parse_multistatus(content: bytes, url: str) -> ET.Element:
    """
    解析 207 Multi-Status 响应体

    Raises:
        DiscoveryException: 响应不是合法的 XML
    """
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise DiscoveryException(f"Invalid XML response from {url}: {e}", url=url) from e


def parse_responses(root: ET.Element, base_url: str) -> List[DavResponse]:
    """
    提取每个 <response> 的 href、状态和状态为 200 的属性

    href 转换为绝对 URL。
    """
    results = []
    for response_el in root.findall(f"{DAV}response"):
        href = (response_el.findtext(f"{DAV}href") or "").strip()
        if not href:
            continue

        item = DavResponse(
            href=urljoin(base_url, href),
            status=(response_el.findtext(f"{DAV}status") or "").strip(),
        )
        for propstat in response_el.findall(f"{DAV}propstat"):
            if " 200 " not in f"{propstat.findtext(f'{DAV}status', '')} ":
                continue
            prop = propstat.find(f"{DAV}prop")
            if prop is None:
                continue
            for child in prop:
                item.props[child.tag] = child
        results.append(item)
    return results


def send(
    client: httpx.Client,
    method: str,
    url: str,
    body: bytes,
    depth: str,
) -> httpx.Response:
    """
    发送 WebDAV 请求，非 2xx 响应转换为 DiscoveryException

    Raises:
        DiscoveryException: 网络错误或非 2xx 响应
    """
    try:
        response = client.request(method, url, content=body, headers={"Depth": depth})
    except httpx.HTTPError as e:
        raise DiscoveryException(f"{method} {url} failed: {e}", url=url) from e

    if not response.is_success:
        raise DiscoveryException(
            f"{method} {url} returned HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )
    return response
