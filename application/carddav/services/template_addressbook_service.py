"""模板地址簿服务"""

import logging
from typing import Any, Mapping, Optional

from domain.carddav.services.preset_policy import PresetPolicy
from domain.carddav.value_objects.field_spec import ADDRESSBOOK_SETTINGS
from application.carddav.services.account_repository import AccountRepository
from application.carddav.services.addressbook_repository import AddressbookRepository


class TemplateAddressbookService:
    """
    维护账号的模板地址簿

    模板地址簿保存新发现地址簿的初始设置。通常在创建账号时创建；
    如果保存账号设置时还没有模板，也会在那时创建。已存在时只做更新。
    """

    def __init__(
        self,
        accounts: AccountRepository,
        addressbooks: AddressbookRepository,
        presets: PresetPolicy,
        logger: Optional[logging.Logger] = None,
    ):
        self._accounts = accounts
        self._addressbooks = addressbooks
        self._presets = presets
        self._logger = logger or logging.getLogger(__name__)

    def set_template_addressbook(self, account_id: str, settings: Mapping[str, Any]) -> str:
        """
        创建或更新账号的模板地址簿

        Args:
            account_id: 账号 ID
            settings: 要写入模板的地址簿设置，缺失的设置使用默认值

        Returns:
            模板地址簿 ID
        """
        template = self._addressbooks.get_template_for_account(account_id)
        if template is not None:
            self._addressbooks.update_addressbook(template.id, _updatable_only(settings))
            return template.id

        account = self._accounts.get_account(account_id)
        abook_settings = dict(settings)

        if account.presetname:
            # 预设账号：用预设值覆盖固定属性，保证表单中缺失的必填字段也有值
            preset = self._presets.get_preset(account.presetname)
            for attribute in preset.fixed_attributes:
                if attribute in preset.defaults:
                    abook_settings[attribute] = preset.defaults[attribute]

        abook_settings["account_id"] = account.id
        abook_settings["discovered"] = False
        abook_settings["template"] = True
        abook_settings["url"] = ""
        abook_settings["sync_token"] = ""
        abook_settings.setdefault("name", "")

        template_id = self._addressbooks.insert_addressbook(abook_settings)
        self._logger.info(f"Created template addressbook {template_id} for account {account.id}")
        return template_id


def _updatable_only(settings: Mapping[str, Any]) -> dict:
    # 表单数据同时包含账号字段与地址簿字段，模板更新时去掉不可更新的地址簿字段

    return {
        key: value
        for key, value in settings.items()
        if key not in ADDRESSBOOK_SETTINGS or ADDRESSBOOK_SETTINGS[key].updatable
    }
