"""管理员预设策略接口"""

from abc import ABC, abstractmethod
from typing import Optional

from domain.carddav.value_objects.preset import Preset


class PresetPolicy(ABC):
    """
    管理员预设策略接口

    决定预设账号的哪些属性固定、默认值是什么、是否隐藏。
    """

    @abstractmethod
    def get_preset(self, name: str, addressbook_url: Optional[str] = None) -> Preset:
        """
        获取预设

        Args:
            name: 预设名称
            addressbook_url: 可选的地址簿 URL，用于地址簿级别的覆盖配置

        Returns:
            Preset 实例

        Raises:
            EntityNotFoundException: 如果预设不存在
        """
        raise NotImplementedError
