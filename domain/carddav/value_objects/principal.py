"""请求级主体上下文"""

from dataclasses import dataclass, field
from typing import Optional

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException


@dataclass(frozen=True)
class PrincipalContext(BaseValueObject):
    """
    当前登录用户的上下文

    每个仓储都显式接收该对象，所有查询与修改都按 ``user_id`` 限定范围。

    Attributes:
        user_id: 当前用户 ID
        login_username: 登录用户名（``%u`` 等占位符的来源）
        login_password: 登录密码（``%p`` 占位符的来源）
        imap_host: 登录使用的 IMAP 主机（``%h`` 占位符的来源）
        oauth_access_token: 会话中的 OAuth access token（``%b`` 认证使用）
    """

    user_id: str
    login_username: str = ""
    login_password: str = field(default="", repr=False)
    imap_host: str = ""
    oauth_access_token: Optional[str] = field(default=None, repr=False)

    def validate(self) -> None:
        if not self.user_id:
            raise InvalidValueObjectException(
                value_object_type="PrincipalContext",
                value=self.user_id,
                reason="User ID cannot be empty",
            )
