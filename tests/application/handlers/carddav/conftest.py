"""CardDAV 处理器测试公共夹具"""

import logging
from functools import partial
from unittest.mock import Mock

import pytest

from application.carddav.services.addressbook_manager import AddressbookManager
from domain.carddav.entities.account import Account
from domain.carddav.entities.addressbook import Addressbook
from domain.carddav.services.preset_policy import PresetPolicy
from domain.carddav.value_objects.preset import Preset


@pytest.fixture
def mock_manager() -> Mock:
    """
    创建 Mock 地址簿管理器

    预设查找与账号可见性检查使用真实实现，基于 Mock 的 presets 与 get_account_config。
    默认返回一个普通账号和一个不隐藏、没有固定属性的预设。
    """
    manager = Mock(spec=AddressbookManager)
    manager.presets = Mock(spec=PresetPolicy)
    manager.presets.get_preset.return_value = Preset(name="Corp")
    manager.get_account_config.return_value = Account(
        id="1", user_id="42", accountname="Work", username="jane"
    )
    manager._logger = logging.getLogger("tests.carddav.handlers")
    manager.find_preset.side_effect = partial(AddressbookManager.find_preset, manager)
    manager.get_visible_account.side_effect = partial(
        AddressbookManager.get_visible_account, manager
    )
    return manager


@pytest.fixture
def make_account():
    """创建账号实体"""

    def _make(account_id: str = "1", **values) -> Account:
        values.setdefault("accountname", "Work")
        values.setdefault("username", "jane")
        values.setdefault("discovery_url", "https://dav.example.com/")
        return Account(id=account_id, user_id="42", **values)

    return _make


@pytest.fixture
def make_addressbook():
    """创建地址簿实体"""

    def _make(abook_id: str, account_id: str = "1", **values) -> Addressbook:
        values.setdefault("name", f"Book {abook_id}")
        values.setdefault("url", f"https://dav.example.com/{abook_id}/")
        return Addressbook(id=abook_id, account_id=account_id, **values)

    return _make
