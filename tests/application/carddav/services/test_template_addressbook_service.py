"""TemplateAddressbookService 单元测试"""

import pytest

from application.carddav.services.account_repository import AccountRepository
from application.carddav.services.addressbook_repository import AddressbookRepository
from application.carddav.services.template_addressbook_service import TemplateAddressbookService
from domain.carddav.value_objects.addressbook_filter import ABF_TEMPLATE
from infrastructure.carddav.services.settings_preset_policy import SettingsPresetPolicy


@pytest.fixture
def accounts(store, principal, encryption_key) -> AccountRepository:
    return AccountRepository(store, principal, encryption_key)


@pytest.fixture
def addressbooks(store, accounts) -> AddressbookRepository:
    return AddressbookRepository(store, accounts)


@pytest.fixture
def service(accounts, addressbooks) -> TemplateAddressbookService:
    presets = SettingsPresetPolicy(
        {"Corp": {"fixed": ["refresh_time", "readonly"], "refresh_time": 900, "readonly": True}}
    )
    return TemplateAddressbookService(accounts, addressbooks, presets)


class TestCreateTemplate:
    """创建模板地址簿"""

    def test_creates_template_with_settings(self, service, addressbooks, seed_account):
        """测试没有模板时创建，并固定模板相关属性"""
        account_id = seed_account()

        template_id = service.set_template_addressbook(
            account_id, {"name": "%N", "refresh_time": 1200, "url": "https://ignored/"}
        )

        template = addressbooks.get_template_for_account(account_id)
        assert template.id == template_id
        assert template.name == "%N"
        assert template.refresh_time == 1200
        assert template.url == ""
        assert template.template is True
        assert template.discovered is False

    def test_missing_name_defaults_to_empty(self, service, addressbooks, seed_account):
        """测试未提供名称时以空名称创建"""
        account_id = seed_account()

        service.set_template_addressbook(account_id, {})

        assert addressbooks.get_template_for_account(account_id).name == ""

    def test_preset_fixed_attributes_override_form(self, service, addressbooks, seed_account):
        """测试预设账号的固定属性使用预设值"""
        account_id = seed_account(presetname="Corp")

        service.set_template_addressbook(
            account_id, {"name": "x", "refresh_time": 60, "readonly": False, "active": False}
        )

        template = addressbooks.get_template_for_account(account_id)
        assert template.refresh_time == 900
        assert template.readonly is True
        assert template.active is False


class TestUpdateTemplate:
    """更新已有模板"""

    def test_updates_existing_template(self, service, addressbooks, seed_account, seed_addressbook):
        """测试已有模板时只更新，不插入新行"""
        account_id = seed_account()
        existing = seed_addressbook(account_id, "", flags=0x20, name="old")

        template_id = service.set_template_addressbook(
            account_id,
            {"name": "%a - %N", "accountname": "ignored", "url": "x", "template": False},
        )

        assert template_id == existing
        assert addressbooks.list_for_account(account_id, ABF_TEMPLATE).keys() == {existing}
        template = addressbooks.get_addressbook(existing)
        assert template.name == "%a - %N"
        assert template.url == ""
        assert template.template is True
