"""HttpxSyncService 单元测试"""

import pytest
from pytest_httpx import HTTPXMock

from domain.common.exceptions import DiscoveryException
from domain.carddav.entities.addressbook import Addressbook
from domain.carddav.value_objects.connection import CardDavConnection
from infrastructure.carddav.services.httpx_sync_service import HttpxSyncService


URL = "https://dav.example.com/abooks/jane/contacts/"

JANE = "BEGIN:VCARD\nVERSION:3.0\nFN:Jane Doe\nEND:VCARD"

SYNC_RESPONSE = f"""<?xml version="1.0" encoding="UTF-8"?>
<D:multistatus xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:carddav">
  <D:response>
    <D:href>/abooks/jane/contacts/</D:href>
    <D:propstat>
      <D:prop><D:getetag>"c0"</D:getetag></D:prop>
      <D:status>HTTP/1.1 200 OK</D:status>
    </D:propstat>
  </D:response>
  <D:response>
    <D:href>/abooks/jane/contacts/jane.vcf</D:href>
    <D:propstat>
      <D:prop>
        <D:getetag>"e1"</D:getetag>
        <C:address-data>{JANE}</C:address-data>
      </D:prop>
      <D:status>HTTP/1.1 200 OK</D:status>
    </D:propstat>
  </D:response>
  <D:response>
    <D:href>/abooks/jane/contacts/gone.vcf</D:href>
    <D:status>HTTP/1.1 404 Not Found</D:status>
  </D:response>
  <D:sync-token>https://dav.example.com/sync/2</D:sync-token>
</D:multistatus>""".encode()

ETAG_ONLY_RESPONSE = b"""<?xml version="1.0" encoding="UTF-8"?>
<D:multistatus xmlns:D="DAV:">
  <D:response>
    <D:href>/abooks/jane/contacts/john.vcf</D:href>
    <D:propstat>
      <D:prop><D:getetag>"e2"</D:getetag></D:prop>
      <D:status>HTTP/1.1 200 OK</D:status>
    </D:propstat>
  </D:response>
  <D:sync-token>https://dav.example.com/sync/3</D:sync-token>
</D:multistatus>"""

MULTIGET_RESPONSE = b"""<?xml version="1.0" encoding="UTF-8"?>
<D:multistatus xmlns:D="DAV:" xmlns:C="urn:ietf:params:xml:ns:carddav">
  <D:response>
    <D:href>/abooks/jane/contacts/john.vcf</D:href>
    <D:propstat>
      <D:prop>
        <D:getetag>"e2"</D:getetag>
        <C:address-data>BEGIN:VCARD
VERSION:3.0
FN:John Roe
END:VCARD</C:address-data>
      </D:prop>
      <D:status>HTTP/1.1 200 OK</D:status>
    </D:propstat>
  </D:response>
</D:multistatus>"""


@pytest.fixture
def service() -> HttpxSyncService:
    return HttpxSyncService(timeout=5.0)


@pytest.fixture
def connection() -> CardDavConnection:
    return CardDavConnection(
        discovery_url=URL, username="jane", password="secret", preemptive_basic_auth=True
    )


def addressbook(sync_token: str = "") -> Addressbook:
    return Addressbook(id="5", account_id="1", name="Contacts", url=URL, sync_token=sync_token)


class TestSyncCollection:
    """sync-collection 报告"""

    def test_incremental_sync(self, service, connection, httpx_mock: HTTPXMock):
        """测试增量同步返回修改、删除与新令牌，跳过集合自身"""
        httpx_mock.add_response(method="REPORT", url=URL, status_code=207, content=SYNC_RESPONSE)

        result = service.sync(connection, addressbook("https://dav.example.com/sync/1"))

        assert result.sync_token == "https://dav.example.com/sync/2"
        assert result.full_sync is False
        assert [card.uri for card in result.changed] == [f"{URL}jane.vcf"]
        assert result.changed[0].etag == '"e1"'
        assert "FN:Jane Doe" in result.changed[0].vcard
        assert result.deleted == [f"{URL}gone.vcf"]

        request = httpx_mock.get_requests()[0]
        assert request.headers["Depth"] == "0"
        assert b"<D:sync-token>https://dav.example.com/sync/1</D:sync-token>" in request.content

    def test_initial_sync_is_full(self, service, connection, httpx_mock: HTTPXMock):
        """测试没有令牌时为全量同步"""
        httpx_mock.add_response(method="REPORT", url=URL, status_code=207, content=SYNC_RESPONSE)

        result = service.sync(connection, addressbook())

        assert result.full_sync is True
        assert b"<D:sync-token></D:sync-token>" in httpx_mock.get_requests()[0].content

    def test_token_is_xml_escaped(self, service, connection, httpx_mock: HTTPXMock):
        """测试令牌中的特殊字符被转义"""
        httpx_mock.add_response(method="REPORT", url=URL, status_code=207, content=SYNC_RESPONSE)

        service.sync(connection, addressbook("a&b<c"))

        assert b"a&amp;b&lt;c" in httpx_mock.get_requests()[0].content

    def test_missing_address_data_uses_multiget(self, service, connection, httpx_mock: HTTPXMock):
        """测试服务端只返回 etag 时通过 addressbook-multiget 补取 vCard"""
        httpx_mock.add_response(method="REPORT", url=URL, status_code=207, content=ETAG_ONLY_RESPONSE)
        httpx_mock.add_response(method="REPORT", url=URL, status_code=207, content=MULTIGET_RESPONSE)

        result = service.sync(connection, addressbook("tok"))

        assert [card.uri for card in result.changed] == [f"{URL}john.vcf"]
        assert "FN:John Roe" in result.changed[0].vcard
        multiget = httpx_mock.get_requests()[1]
        assert multiget.headers["Depth"] == "1"
        assert b"addressbook-multiget" in multiget.content
        assert f"<D:href>{URL}john.vcf</D:href>".encode() in multiget.content


class TestInvalidToken:
    """令牌失效"""

    @pytest.mark.parametrize("status_code", [403, 409])
    def test_rejected_token_falls_back_to_full_sync(
        self, service, connection, httpx_mock: HTTPXMock, status_code
    ):
        """测试服务端拒绝令牌时以空令牌重新全量同步"""
        httpx_mock.add_response(method="REPORT", url=URL, status_code=status_code)
        httpx_mock.add_response(method="REPORT", url=URL, status_code=207, content=SYNC_RESPONSE)

        result = service.sync(connection, addressbook("stale"))

        assert result.full_sync is True
        assert result.sync_token == "https://dav.example.com/sync/2"
        retry = httpx_mock.get_requests()[1]
        assert b"<D:sync-token></D:sync-token>" in retry.content

    def test_rejection_of_empty_token_raises(self, service, connection, httpx_mock: HTTPXMock):
        """测试空令牌也被拒绝时抛出异常"""
        httpx_mock.add_response(method="REPORT", url=URL, status_code=403)

        with pytest.raises(DiscoveryException) as exc_info:
            service.sync(connection, addressbook())

        assert exc_info.value.status_code == 403

    def test_server_error_is_not_retried(self, service, connection, httpx_mock: HTTPXMock):
        """测试其他错误不重试"""
        httpx_mock.add_response(method="REPORT", url=URL, status_code=500)

        with pytest.raises(DiscoveryException):
            service.sync(connection, addressbook("tok"))

        assert len(httpx_mock.get_requests()) == 1
