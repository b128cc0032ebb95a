"""地址簿同步服务接口"""

from abc import ABC, abstractmethod

from domain.carddav.entities.addressbook import Addressbook
from domain.carddav.value_objects.connection import CardDavConnection
from domain.carddav.value_objects.sync_result import SyncResult


class AddressbookSyncService(ABC):
    """
    地址簿同步服务接口

    执行 sync-collection 协议交换，具体实现在基础设施层。
    """

    @abstractmethod
    def sync(self, connection: CardDavConnection, addressbook: Addressbook) -> SyncResult:
        """
        从服务端拉取自 ``addressbook.sync_token`` 以来的变更

        Args:
            connection: 连接描述
            addressbook: 要同步的地址簿

        Returns:
            SyncResult 包含新令牌与变更

        Raises:
            DiscoveryException: 如果与服务端的交互失败
        """
        raise NotImplementedError
