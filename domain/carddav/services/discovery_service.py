"""地址簿发现服务接口"""

from abc import ABC, abstractmethod
from typing import List

from domain.carddav.value_objects.connection import CardDavConnection
from domain.carddav.value_objects.discovered_addressbook import DiscoveredAddressbook


class AddressbookDiscoveryService(ABC):
    """
    地址簿发现服务接口

    枚举账号发现 URL 下可用的地址簿集合，具体实现在基础设施层。
    """

    @abstractmethod
    def discover_addressbooks(self, connection: CardDavConnection) -> List[DiscoveredAddressbook]:
        """
        发现地址簿

        Args:
            connection: 连接描述

        Returns:
            服务端地址簿列表

        Raises:
            DiscoveryException: 如果与服务端的交互失败
        """
        raise NotImplementedError
