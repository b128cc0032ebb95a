"""地址簿命名模板解析"""

from typing import Any, Mapping

from domain.carddav.services.credential_resolver import CredentialResolver, translate_placeholders
from domain.carddav.value_objects.discovered_addressbook import DiscoveredAddressbook


DEFAULT_NAME_TEMPLATE = "%N"


class AddressbookNameResolver:
    """
    将地址簿命名模板解析为具体名称

    支持的占位符：

    - 用户名占位符（``%u`` 等），最先替换
    - ``%N`` 服务端显示名，``%D`` 服务端描述
    - ``%a`` 账号名，``%c`` 集合 URL 的最后一段，``%k`` 预设名
    """

    def __init__(self, credentials: CredentialResolver):
        self._credentials = credentials

    def resolve(
        self,
        template: str,
        account: Mapping[str, Any],
        discovered: DiscoveredAddressbook,
    ) -> str:
        """
        解析命名模板

        Args:
            template: 命名模板
            account: 所属账号配置（需要 accountname / presetname）
            discovered: 服务端地址簿描述

        Returns:
            地址簿名称；模板解析为空时返回集合的 base name
        """
        name = self._credentials.replace_username(template)

        display_name = ""
        description = ""
        # 只有模板用到时才读取服务端属性
        if "%N" in name or "%D" in name:
            display_name = discovered.display_name or ""
            description = discovered.description or ""

        name = translate_placeholders(
            name,
            {
                "%N": display_name,
                "%D": description,
                "%a": account.get("accountname") or "",
                "%c": discovered.base_name,
                "%k": account.get("presetname") or "",
            },
        )

        if not name:
            name = discovered.base_name

        return name
