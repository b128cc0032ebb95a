"""DiscoveryReconciler 单元测试"""

from unittest.mock import Mock

import pytest

from application.carddav.services.account_repository import AccountRepository
from application.carddav.services.addressbook_repository import AddressbookRepository
from application.carddav.services.contact_cache_writer import ContactCacheWriter
from application.carddav.services.discovery_reconciler import DiscoveryReconciler
from domain.common.exceptions import (
    DiscoveryException,
    InvalidValueObjectException,
    ValidationException,
)
from domain.carddav.services.credential_resolver import CredentialResolver
from domain.carddav.services.discovery_service import AddressbookDiscoveryService
from domain.carddav.services.sync_service import AddressbookSyncService
from domain.carddav.value_objects.addressbook_filter import ABF_ALL, ABF_DISCOVERED
from domain.carddav.value_objects.discovered_addressbook import DiscoveredAddressbook
from domain.carddav.value_objects.sync_result import RemoteCard, SyncResult


BASE = "https://dav.example.com/abooks/"


def remote(name: str) -> DiscoveredAddressbook:
    return DiscoveredAddressbook(
        uri=f"{BASE}{name}/", base_name=name, display_name=f"{name.upper()} contacts"
    )


@pytest.fixture
def accounts(store, principal, encryption_key) -> AccountRepository:
    return AccountRepository(store, principal, encryption_key)


@pytest.fixture
def addressbooks(store, accounts) -> AddressbookRepository:
    return AddressbookRepository(store, accounts)


@pytest.fixture
def discovery() -> Mock:
    return Mock(spec=AddressbookDiscoveryService)


@pytest.fixture
def sync() -> Mock:
    return Mock(spec=AddressbookSyncService)


@pytest.fixture
def reconciler(store, principal, accounts, addressbooks, discovery, sync) -> DiscoveryReconciler:
    return DiscoveryReconciler(
        accounts,
        addressbooks,
        CredentialResolver(principal),
        discovery,
        sync,
        ContactCacheWriter(store),
        clock=lambda: 1000.0,
    )


class TestDiscoverExistingAccount:
    """已有账号的重新发现"""

    @pytest.fixture
    def account_id(self, seed_account) -> str:
        return seed_account(accountname="Work")

    def test_reconcile_by_url(
        self, reconciler, accounts, addressbooks, discovery, account_id, seed_addressbook
    ):
        """测试本地 {A, B} 对服务端 {B, C}：删除 A，插入 C，保留 B"""
        a_id = seed_addressbook(account_id, f"{BASE}a/")
        b_id = seed_addressbook(account_id, f"{BASE}b/")
        discovery.discover_addressbooks.return_value = [remote("b"), remote("c")]

        result = reconciler.discover_addressbooks(
            accounts.get_account(account_id).to_settings(), {"name": "%a - %N"}
        )

        assert result == account_id
        current = addressbooks.list_for_account(account_id, ABF_DISCOVERED)
        assert a_id not in current
        assert b_id in current
        by_url = {abook.url: abook for abook in current.values()}
        assert set(by_url) == {f"{BASE}b/", f"{BASE}c/"}
        assert by_url[f"{BASE}c/"].name == "Work - C contacts"
        assert by_url[f"{BASE}c/"].discovered is True
        assert by_url[f"{BASE}c/"].template is False

    def test_updates_last_discovered(self, reconciler, accounts, discovery, account_id):
        """测试更新账号的发现时间"""
        discovery.discover_addressbooks.return_value = []

        reconciler.discover_addressbooks(accounts.get_account(account_id).to_settings(), {})

        assert accounts.get_account(account_id).last_discovered == 1000

    def test_manual_and_template_addressbooks_survive(
        self, reconciler, accounts, addressbooks, discovery, account_id, seed_addressbook
    ):
        """测试手动添加的地址簿与模板不参与对比"""
        extra = seed_addressbook(account_id, f"{BASE}manual/", flags=0x01)
        template = seed_addressbook(account_id, "", flags=0x20)
        discovery.discover_addressbooks.return_value = []

        reconciler.discover_addressbooks(accounts.get_account(account_id).to_settings(), {})

        remaining = addressbooks.list_for_account(account_id, ABF_ALL)
        assert set(remaining) == {extra, template}

    def test_template_settings_apply_to_new_addressbooks(
        self, reconciler, accounts, addressbooks, discovery, account_id
    ):
        """测试模板设置应用到新地址簿，固定属性被覆盖"""
        discovery.discover_addressbooks.return_value = [
            DiscoveredAddressbook(uri=f"{BASE}c/", base_name="c")
        ]

        reconciler.discover_addressbooks(
            accounts.get_account(account_id).to_settings(),
            {"name": "", "refresh_time": 600, "readonly": True, "template": True, "url": ""},
        )

        abook = next(iter(addressbooks.list_for_account(account_id).values()))
        assert abook.name == "c"
        assert abook.refresh_time == 600
        assert abook.readonly is True
        assert abook.template is False
        assert abook.url == f"{BASE}c/"

    def test_empty_name_template_uses_base_name(
        self, reconciler, accounts, addressbooks, discovery, account_id
    ):
        """测试模板 name 为空串时使用 base name，而不是默认的 %N"""
        discovery.discover_addressbooks.return_value = [
            DiscoveredAddressbook(uri=f"{BASE}default/", base_name="default", display_name="Contacts")
        ]

        reconciler.discover_addressbooks(accounts.get_account(account_id).to_settings(), {"name": ""})

        names = [abook.name for abook in addressbooks.list_for_account(account_id).values()]
        assert names == ["default"]

    def test_missing_name_template_uses_display_name(
        self, reconciler, accounts, addressbooks, discovery, account_id
    ):
        """测试模板没有 name 时使用默认模板 %N"""
        discovery.discover_addressbooks.return_value = [
            DiscoveredAddressbook(uri=f"{BASE}default/", base_name="default", display_name="Contacts")
        ]

        reconciler.discover_addressbooks(accounts.get_account(account_id).to_settings(), {})

        names = [abook.name for abook in addressbooks.list_for_account(account_id).values()]
        assert names == ["Contacts"]

    def test_connection_uses_resolved_credentials(
        self, reconciler, accounts, discovery, seed_account
    ):
        """测试发现使用替换占位符后的凭证"""
        account_id = seed_account(username="%l", password="%p", discovery_url="https://%h/dav/")
        discovery.discover_addressbooks.return_value = []

        reconciler.discover_addressbooks(accounts.get_account(account_id).to_settings(), {})

        connection = discovery.discover_addressbooks.call_args[0][0]
        assert connection.discovery_url == "https://imap.example.com/dav/"
        assert connection.username == "jane"
        assert connection.password == "login-pass"


class TestDiscoverNewAccount:
    """新账号的发现"""

    def test_inserts_account_and_all_addressbooks(
        self, reconciler, accounts, addressbooks, discovery
    ):
        """测试插入账号并为每个服务端地址簿插入本地记录"""
        discovery.discover_addressbooks.return_value = [remote("a"), remote("b")]

        account_id = reconciler.discover_addressbooks(
            {
                "accountname": "New",
                "username": "jane",
                "password": "pw",
                "discovery_url": "https://dav.example.com/",
            },
            {"name": "%N"},
        )

        account = accounts.get_account(account_id)
        assert account.last_discovered == 1000
        assert account.password == "pw"
        names = sorted(abook.name for abook in addressbooks.list_for_account(account_id).values())
        assert names == ["A contacts", "B contacts"]

    def test_missing_discovery_url_raises_without_side_effects(
        self, reconciler, discovery, store
    ):
        """测试没有发现 URL 时抛出 ValidationException 且不做任何修改"""
        with pytest.raises(ValidationException):
            reconciler.discover_addressbooks(
                {"accountname": "New", "username": "u", "password": "p"}, {}
            )

        discovery.discover_addressbooks.assert_not_called()
        assert store.calls == []

    def test_discovery_failure_leaves_store_untouched(self, reconciler, discovery, store):
        """测试发现失败时数据库状态不变"""
        discovery.discover_addressbooks.side_effect = DiscoveryException("HTTP 500", status_code=500)

        with pytest.raises(DiscoveryException):
            reconciler.discover_addressbooks(
                {
                    "accountname": "New",
                    "username": "u",
                    "password": "p",
                    "discovery_url": "https://dav.example.com/",
                },
                {},
            )

        assert store.calls == []


class TestResync:
    """重新同步"""

    @pytest.fixture
    def abook_id(self, seed_account, seed_addressbook) -> str:
        account_id = seed_account(username="%u", password="pw")
        return seed_addressbook(account_id, f"{BASE}a/", refresh_time=3600, sync_token="old")

    def test_delays_next_refresh_before_sync(self, reconciler, addressbooks, sync, store, abook_id):
        """测试同步前先写入 now + 300 - refresh_time"""
        seen = {}

        def fake_sync(connection, addressbook):
            seen["last_updated"] = store.get(abook_id, ["last_updated"], "addressbooks")[0][
                "last_updated"
            ]
            return SyncResult(sync_token="new")

        sync.sync.side_effect = fake_sync

        duration = reconciler.resync_addressbook(abook_id)

        assert seen["last_updated"] == -2300
        assert duration == 0
        abook = addressbooks.get_addressbook(abook_id)
        assert abook.sync_token == "new"
        assert abook.last_updated == 1000

    def test_sync_uses_addressbook_url(self, reconciler, sync, abook_id):
        """测试同步连接指向地址簿 URL"""
        sync.sync.return_value = SyncResult(sync_token="new")

        reconciler.resync_addressbook(abook_id)

        connection, addressbook = sync.sync.call_args[0]
        assert connection.discovery_url == f"{BASE}a/"
        assert connection.username == "jane@example.com"
        assert addressbook.sync_token == "old"

    def test_changes_written_to_contacts(self, reconciler, sync, store, abook_id):
        """测试同步结果写入联系人缓存"""
        vcard = "BEGIN:VCARD\r\nVERSION:3.0\r\nFN:Jane Doe\r\nEMAIL:jane@example.com\r\nEND:VCARD\r\n"
        sync.sync.return_value = SyncResult(
            sync_token="new", changed=[RemoteCard(uri=f"{BASE}a/1.vcf", etag='"1"', vcard=vcard)]
        )

        reconciler.resync_addressbook(abook_id)

        contacts = store.get({"abook_id": abook_id})
        assert len(contacts) == 1
        assert contacts[0]["name"] == "Jane Doe"

    def test_failed_sync_keeps_delayed_timestamp(self, reconciler, addressbooks, sync, abook_id):
        """测试同步失败时保留推迟后的时间戳"""
        sync.sync.side_effect = DiscoveryException("HTTP 500", status_code=500)

        with pytest.raises(DiscoveryException):
            reconciler.resync_addressbook(abook_id)

        abook = addressbooks.get_addressbook(abook_id)
        assert abook.last_updated == -2300
        assert abook.sync_token == "old"

    def test_undecryptable_password_keeps_delayed_timestamp(
        self, reconciler, addressbooks, sync, store, abook_id
    ):
        """测试账号密码无法解密时，推迟后的时间戳已经写入"""
        store.tables["accounts"][0]["password"] = "not-a-fernet-token"

        with pytest.raises(InvalidValueObjectException):
            reconciler.resync_addressbook(abook_id)

        sync.sync.assert_not_called()
        assert addressbooks.get_addressbook(abook_id).last_updated == -2300

    def test_template_addressbook_is_rejected(
        self, reconciler, sync, store, seed_account, seed_addressbook
    ):
        """测试模板地址簿不能同步，也不写入任何数据"""
        template_id = seed_addressbook(seed_account(), "", flags=0x20)

        with pytest.raises(ValidationException):
            reconciler.resync_addressbook(template_id)

        sync.sync.assert_not_called()
        assert store.calls == []


class TestClearCache:
    """清空缓存"""

    def test_clear_cache(self, reconciler, addressbooks, store, seed_account, seed_addressbook):
        """测试清空联系人并重置同步状态"""
        abook_id = seed_addressbook(
            seed_account(), f"{BASE}a/", last_updated=500, sync_token="tok"
        )
        store.insert("contacts", ["abook_id", "uri"], [[abook_id, "1.vcf"]])

        reconciler.clear_cache(abook_id)

        abook = addressbooks.get_addressbook(abook_id)
        assert abook.sync_token == ""
        assert abook.last_updated == 0
        assert store.tables["contacts"] == []
