"""更新 CardDAV 账号设置命令"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class UpdateAccountCommand:
    """
    更新 CardDAV 账号设置命令

    与添加账号一样，账号字段与模板地址簿字段来自同一个表单。
    值为 None 的字段保持不变。

    Attributes:
        account_id: 账号 ID
        accountname: 账号显示名
        username: 用户名（可含占位符）
        password: 新密码，None 表示不修改
        discovery_url: 发现 URL
        rediscover_time: 重新发现间隔（秒）
        preemptive_basic_auth: 是否抢先发送基本认证
        ssl_noverify: 是否跳过 TLS 证书校验
        name: 新地址簿的命名模板
        refresh_time: 新地址簿的刷新间隔（秒）
        active: 新地址簿是否启用
        use_categories: 是否将分类作为分组
        readonly: 新地址簿是否只读
        require_always_email: 是否要求联系人总有邮箱
    """

    account_id: str
    accountname: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    discovery_url: Optional[str] = None
    rediscover_time: Optional[int] = None
    preemptive_basic_auth: Optional[bool] = None
    ssl_noverify: Optional[bool] = None
    name: Optional[str] = None
    refresh_time: Optional[int] = None
    active: Optional[bool] = None
    use_categories: Optional[bool] = None
    readonly: Optional[bool] = None
    require_always_email: Optional[bool] = None

    def account_settings(self) -> Dict[str, Any]:
        return _given(
            accountname=self.accountname,
            username=self.username,
            password=self.password,
            discovery_url=self.discovery_url,
            rediscover_time=self.rediscover_time,
            preemptive_basic_auth=self.preemptive_basic_auth,
            ssl_noverify=self.ssl_noverify,
        )

    def template_settings(self) -> Dict[str, Any]:
        return _given(
            name=self.name,
            refresh_time=self.refresh_time,
            active=self.active,
            use_categories=self.use_categories,
            readonly=self.readonly,
            require_always_email=self.require_always_email,
        )


@dataclass
class UpdateAccountResult:
    """
    更新 CardDAV 账号结果

    Attributes:
        success: 是否成功
        account_id: 账号 ID
        template_id: 模板地址簿 ID（成功时）
        ignored_fields: 因管理员预设固定而未修改的字段
        message: 消息
        error_code: 错误码（失败时）
    """

    success: bool
    account_id: str = ""
    template_id: Optional[str] = None
    ignored_fields: List[str] = field(default_factory=list)
    message: str = ""
    error_code: Optional[str] = None


def _given(**values: Any) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}
