"""CardDAV 连接描述值对象"""

from dataclasses import dataclass, field
from typing import Optional

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException


@dataclass(frozen=True)
class CardDavConnection(BaseValueObject):
    """
    与 CardDAV 服务端通信所需的临时连接信息

    由凭证解析器根据账号设置构建，不会持久化。

    Attributes:
        discovery_url: 已替换占位符的发现 URL
        username: 基本认证用户名
        password: 基本认证密码
        bearer_token: OAuth bearer token，设置时忽略用户名密码
        preemptive_basic_auth: 是否不等待 401 直接发送基本认证
        verify_tls: 是否校验服务端证书
    """

    discovery_url: str
    username: str = ""
    password: str = field(default="", repr=False)
    bearer_token: Optional[str] = field(default=None, repr=False)
    preemptive_basic_auth: bool = False
    verify_tls: bool = True

    def validate(self) -> None:
        if not self.discovery_url or not self.discovery_url.strip():
            raise InvalidValueObjectException(
                value_object_type="CardDavConnection",
                value=self.discovery_url,
                reason="Discovery URL cannot be empty",
            )

    @property
    def uses_bearer_auth(self) -> bool:
        return self.bearer_token is not None
