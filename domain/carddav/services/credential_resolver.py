"""凭证占位符解析服务"""

from typing import Any, Mapping, Optional

from domain.common.exceptions import AuthenticationException, ValidationException
from domain.carddav.value_objects.connection import CardDavConnection
from domain.carddav.value_objects.principal import PrincipalContext


BEARER_PLACEHOLDER = "%b"


def translate_placeholders(text: str, table: Mapping[str, str]) -> str:
    """单遍替换，替换结果不会再次参与替换"""
    result = []
    i = 0
    while i < len(text):
        key = text[i:i + 2]
        if key in table:
            result.append(table[key])
            i += 2
        else:
            result.append(text[i])
            i += 1
    return "".join(result)


class CredentialResolver:
    """
    凭证占位符解析器

    账号的用户名、密码和 URL 可以引用当前登录用户的信息：

    - 用户名：``%u`` 登录名，``%l`` 本地部分，``%d`` 域名部分，
      ``%V`` 将 ``@`` 和 ``.`` 替换为 ``_`` 的登录名
    - 密码：``%p`` 登录密码，``%b`` 使用会话中的 OAuth bearer token
    - URL：用户名占位符以及 ``%h`` 登录 IMAP 主机
    """

    def __init__(self, principal: PrincipalContext):
        """
        初始化解析器

        Args:
            principal: 当前用户上下文
        """
        self._principal = principal

    def _username_table(self) -> dict:
        login = self._principal.login_username
        local, _, domain = login.partition("@")
        return {
            "%u": login,
            "%l": local,
            "%d": domain,
            "%V": login.replace("@", "_").replace(".", "_"),
        }

    def replace_username(self, text: str) -> str:
        return translate_placeholders(text, self._username_table())

    def replace_password(self, text: str) -> str:
        # %b 保留原样，由 make_connection 识别
        return translate_placeholders(text, {"%p": self._principal.login_password})

    def replace_url(self, text: str) -> str:
        table = self._username_table()
        table["%h"] = self._principal.imap_host
        return translate_placeholders(text, table)

    def make_connection(
        self,
        account: Mapping[str, Any],
        url: Optional[str] = None,
    ) -> CardDavConnection:
        """
        根据账号设置构建连接描述

        Args:
            account: 账号设置（密码为明文或占位符）
            url: 替代发现 URL 的目标地址（例如同步时的地址簿 URL）

        Returns:
            CardDavConnection

        Raises:
            ValidationException: 账号没有发现 URL
            AuthenticationException: 请求 bearer 认证但会话中没有 token
        """
        url = self.replace_url(url or account.get("discovery_url") or "")
        if not url:
            raise ValidationException(
                field="discovery_url",
                reason="Cannot connect to an account lacking a discovery URI",
            )

        password = self.replace_password(account.get("password") or "")
        preemptive = bool(account.get("preemptive_basic_auth") or False)
        verify_tls = not bool(account.get("ssl_noverify") or False)

        if password == BEARER_PLACEHOLDER:
            token = self._principal.oauth_access_token
            if not token:
                raise AuthenticationException(
                    "OAUTH2 bearer authentication requested, but no token available in session"
                )
            return CardDavConnection(
                discovery_url=url,
                bearer_token=token,
                preemptive_basic_auth=preemptive,
                verify_tls=verify_tls,
            )

        return CardDavConnection(
            discovery_url=url,
            username=self.replace_username(account.get("username") or ""),
            password=password,
            preemptive_basic_auth=preemptive,
            verify_tls=verify_tls,
        )
