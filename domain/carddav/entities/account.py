"""CardDAV 账号实体"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from domain.carddav.value_objects.flags import AccountFlag


@dataclass
class Account:
    """
    CardDAV 账号

    一个账号对应一个 CardDAV 服务端连接（凭证 + 发现 URL），只属于一个用户。
    带有 ``presetname`` 的账号由管理员预设创建。

    Attributes:
        id: 账号 ID（由存储分配）
        user_id: 所属用户 ID
        accountname: 账号显示名
        username: 用户名（可含占位符）
        password: 密码；从缓存读取时为加密 token，get_account 返回明文
        discovery_url: 发现 URL，为空则不做自动发现
        last_discovered: 上次发现时间（Unix 时间戳）
        rediscover_time: 重新发现间隔（秒）
        presetname: 管理员预设名称
        preemptive_basic_auth: 是否抢先发送基本认证
        ssl_noverify: 是否跳过 TLS 证书校验
    """

    id: str
    user_id: str
    accountname: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    discovery_url: Optional[str] = None
    last_discovered: int = 0
    rediscover_time: int = 86400
    presetname: Optional[str] = None
    preemptive_basic_auth: bool = False
    ssl_noverify: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Account":
        """从解码后的配置行创建实体，忽略未知列"""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in config.items() if key in known}
        values["id"] = str(values["id"])
        values["user_id"] = str(values["user_id"])
        for key in ("last_discovered", "rediscover_time"):
            if values.get(key) is not None:
                values[key] = int(values[key])
        return cls(**values)

    @property
    def flags(self) -> AccountFlag:
        """以 IntFlag 形式返回布尔属性"""
        result = AccountFlag(0)
        if self.preemptive_basic_auth:
            result |= AccountFlag.PREEMPTIVE_BASIC_AUTH
        if self.ssl_noverify:
            result |= AccountFlag.SSL_NOVERIFY
        return result

    @property
    def is_preset(self) -> bool:
        return bool(self.presetname)

    def to_settings(self) -> Dict[str, Any]:
        """返回可直接传给仓储 / 发现流程的设置字典"""
        return {f.name: getattr(self, f.name) for f in fields(self)}
