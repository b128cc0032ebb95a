"""CardDAV 地址簿实体"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from domain.carddav.value_objects.flags import AddressbookFlag


_FLAG_ATTRIBUTES = {
    "active": AddressbookFlag.ACTIVE,
    "use_categories": AddressbookFlag.USE_CATEGORIES,
    "discovered": AddressbookFlag.DISCOVERED,
    "readonly": AddressbookFlag.READONLY,
    "require_always_email": AddressbookFlag.REQUIRE_ALWAYS_EMAIL,
    "template": AddressbookFlag.TEMPLATE,
}


@dataclass
class Addressbook:
    """
    本地缓存的一个 CardDAV 地址簿

    每个账号最多有一个 ``template`` 地址簿，它只保存新发现地址簿的默认设置，
    URL 为空且从不同步。

    Attributes:
        id: 地址簿 ID
        account_id: 所属账号 ID
        name: 显示名
        url: 服务端集合 URL
        last_updated: 上次同步时间（Unix 时间戳，可以为负）
        refresh_time: 刷新间隔（秒）
        sync_token: 同步令牌
        active / use_categories / discovered / readonly /
        require_always_email / template: 布尔属性
    """

    id: str
    account_id: str
    name: str = ""
    url: str = ""
    last_updated: int = 0
    refresh_time: int = 3600
    sync_token: str = ""
    active: bool = True
    use_categories: bool = False
    discovered: bool = True
    readonly: bool = False
    require_always_email: bool = False
    template: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Addressbook":
        """从解码后的配置行创建实体，忽略未知列"""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in config.items() if key in known}
        values["id"] = str(values["id"])
        values["account_id"] = str(values["account_id"])
        for key in ("last_updated", "refresh_time"):
            if values.get(key) is not None:
                values[key] = int(values[key])
        if values.get("sync_token") is None:
            values["sync_token"] = ""
        return cls(**values)

    @property
    def flags(self) -> AddressbookFlag:
        """以 IntFlag 形式返回布尔属性"""
        result = AddressbookFlag(0)
        for attribute, flag in _FLAG_ATTRIBUTES.items():
            if getattr(self, attribute):
                result |= flag
        return result

    def to_settings(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
