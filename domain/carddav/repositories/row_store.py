"""行存储网关接口"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Sequence, Union


RowFilter = Union[Mapping[str, Any], str, int]
"""
行筛选条件

``{列名: 标量或列表}``，多个条件之间为 AND，列表表示 IN。
直接传入标量时等价于 ``{"id": 标量}``。
"""


class RowStore(ABC):
    """
    行存储网关接口

    事务性关系存储的最小契约，具体实现在基础设施层。
    表名使用逻辑名：accounts, addressbooks, contacts, groups, group_user, xsubtypes。

    不在显式事务中时，每个写操作立即提交。
    """

    @abstractmethod
    def get(
        self,
        conditions: RowFilter,
        columns: Sequence[str] = (),
        table: str = "contacts",
    ) -> List[Dict[str, Any]]:
        """
        查询行

        Args:
            conditions: 筛选条件
            columns: 要返回的列，为空时返回全部列
            table: 表名

        Returns:
            行字典列表
        """
        raise NotImplementedError

    @abstractmethod
    def insert(self, table: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
        """
        插入行

        Args:
            table: 表名
            columns: 列名
            rows: 每行的值，顺序与 columns 对应

        Returns:
            最后插入行的 ID
        """
        raise NotImplementedError

    @abstractmethod
    def update(
        self,
        conditions: RowFilter,
        columns: Sequence[str],
        values: Sequence[Any],
        table: str = "contacts",
    ) -> int:
        """
        更新行

        Returns:
            受影响的行数
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, conditions: RowFilter, table: str = "contacts") -> int:
        """
        删除行

        Returns:
            受影响的行数
        """
        raise NotImplementedError

    @abstractmethod
    def start_transaction(self, readonly: bool = False) -> None:
        """开始事务"""
        raise NotImplementedError

    @abstractmethod
    def end_transaction(self) -> None:
        """提交事务"""
        raise NotImplementedError

    @abstractmethod
    def rollback_transaction(self) -> None:
        """回滚事务"""
        raise NotImplementedError
