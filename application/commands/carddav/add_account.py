"""添加 CardDAV 账号命令"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class AddAccountCommand:
    """
    添加 CardDAV 账号命令

    账号字段与新地址簿模板字段来自同一个表单。

    Attributes:
        accountname: 账号显示名
        username: 用户名（可含 %u/%l/%d/%V 占位符）
        password: 密码（明文或 %p/%b 占位符，将被加密存储）
        discovery_url: 发现 URL，为空时只创建账号不做发现
        rediscover_time: 重新发现间隔（秒）
        preemptive_basic_auth: 是否抢先发送基本认证
        ssl_noverify: 是否跳过 TLS 证书校验
        presetname: 管理员预设名称（仅由预设同步使用）
        name: 新地址簿的命名模板，默认 "%N"
        refresh_time: 新地址簿的刷新间隔（秒）
        active: 新地址簿是否启用
        use_categories: 是否将分类作为分组
        readonly: 新地址簿是否只读
        require_always_email: 是否要求联系人总有邮箱
    """

    accountname: str
    username: str = ""
    password: str = ""
    discovery_url: Optional[str] = None
    rediscover_time: int = 86400
    preemptive_basic_auth: bool = False
    ssl_noverify: bool = False
    presetname: Optional[str] = None
    name: str = "%N"
    refresh_time: int = 3600
    active: bool = True
    use_categories: bool = False
    readonly: bool = False
    require_always_email: bool = False

    def account_settings(self) -> Dict[str, Any]:
        return {
            "accountname": self.accountname,
            "username": self.username,
            "password": self.password,
            "discovery_url": self.discovery_url,
            "rediscover_time": self.rediscover_time,
            "preemptive_basic_auth": self.preemptive_basic_auth,
            "ssl_noverify": self.ssl_noverify,
            "presetname": self.presetname,
        }

    def template_settings(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "refresh_time": self.refresh_time,
            "active": self.active,
            "use_categories": self.use_categories,
            "readonly": self.readonly,
            "require_always_email": self.require_always_email,
        }


@dataclass
class AddAccountResult:
    """
    添加 CardDAV 账号结果

    Attributes:
        success: 是否成功
        account_id: 新账号 ID（成功时）
        addressbook_ids: 发现并创建的地址簿 ID
        message: 结果消息
        error_code: 错误码（失败时）
    """

    success: bool
    account_id: Optional[str] = None
    addressbook_ids: List[str] = field(default_factory=list)
    message: str = ""
    error_code: Optional[str] = None
