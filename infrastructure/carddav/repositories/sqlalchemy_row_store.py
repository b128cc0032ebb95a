"""CardDAV 行存储 SQLAlchemy 实现"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import Integer, Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.common.exceptions import StoreException
from domain.carddav.repositories.row_store import RowFilter, RowStore
from infrastructure.carddav.models.carddav_models import (
    AccountModel,
    AddressbookModel,
    ContactModel,
    GroupModel,
    GroupUserModel,
    XSubtypeModel,
)


# 逻辑表名 -> 物理表
TABLES: Dict[str, Table] = {
    "accounts": AccountModel.__table__,
    "addressbooks": AddressbookModel.__table__,
    "contacts": ContactModel.__table__,
    "groups": GroupModel.__table__,
    "group_user": GroupUserModel.__table__,
    "xsubtypes": XSubtypeModel.__table__,
}


class SqlAlchemyRowStore(RowStore):
    """
    行存储 SQLAlchemy 实现

    基于 SQLAlchemy Core 语句在一个 Session 上执行。
    显式事务之外，每次写操作立即提交；显式事务中，写操作在 end_transaction 时统一提交。
    所有 SQLAlchemyError 都转换为 StoreException。
    """

    def __init__(self, session: Session, logger: Optional[logging.Logger] = None):
        """
        初始化行存储

        Args:
            session: SQLAlchemy Session
            logger: 日志记录器（可选）
        """
        self._session = session
        self._logger = logger or logging.getLogger(__name__)
        self._in_transaction = False

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def get(
        self,
        conditions: RowFilter,
        columns: Sequence[str] = (),
        table: str = "contacts",
    ) -> List[Dict[str, Any]]:
        """查询满足条件的行"""
        sa_table = self._table(table)
        selected = [self._column(sa_table, name) for name in columns] if columns else [sa_table]
        stmt = select(*selected).where(*self._where(sa_table, conditions))

        try:
            rows = [dict(row) for row in self._session.execute(stmt).mappings()]
            # 结束隐式读事务，把连接还给连接池
            self._commit_unless_in_transaction()
            return rows
        except SQLAlchemyError as e:
            self._fail(f"Failed to query {table}", table, e)

    def insert(self, table: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
        """插入一行或多行，返回最后插入行的 ID"""
        sa_table = self._table(table)
        for name in columns:
            self._column(sa_table, name)

        prepared = []
        for row in rows:
            if len(row) != len(columns):
                raise StoreException(
                    f"Insert into {table}: {len(columns)} columns but {len(row)} values", table
                )
            prepared.append(
                {name: self._coerce(sa_table, name, value) for name, value in zip(columns, row)}
            )

        last_id = ""
        try:
            for values in prepared:
                result = self._session.execute(insert(sa_table).values(values))
                pk = result.inserted_primary_key
                if pk:
                    last_id = str(pk[0])
            self._commit_unless_in_transaction()
        except SQLAlchemyError as e:
            self._fail(f"Failed to insert into {table}", table, e)

        self._logger.debug(f"Inserted {len(rows)} row(s) into {table}")
        return last_id

    def update(
        self,
        conditions: RowFilter,
        columns: Sequence[str],
        values: Sequence[Any],
        table: str = "contacts",
    ) -> int:
        """更新满足条件的行，返回受影响的行数"""
        sa_table = self._table(table)
        if len(columns) != len(values):
            raise StoreException(
                f"Update of {table}: {len(columns)} columns but {len(values)} values", table
            )
        assignments = {
            self._column(sa_table, name).name: self._coerce(sa_table, name, value)
            for name, value in zip(columns, values)
        }
        stmt = update(sa_table).where(*self._where(sa_table, conditions)).values(assignments)

        try:
            count = self._session.execute(stmt).rowcount
            self._commit_unless_in_transaction()
        except SQLAlchemyError as e:
            self._fail(f"Failed to update {table}", table, e)

        return count

    def delete(self, conditions: RowFilter, table: str = "contacts") -> int:
        """删除满足条件的行，返回删除的行数"""
        sa_table = self._table(table)
        stmt = delete(sa_table).where(*self._where(sa_table, conditions))

        try:
            count = self._session.execute(stmt).rowcount
            self._commit_unless_in_transaction()
        except SQLAlchemyError as e:
            self._fail(f"Failed to delete from {table}", table, e)

        return count

    def start_transaction(self, readonly: bool = False) -> None:
        """
        开启事务

        Raises:
            StoreException: 已有进行中的事务
        """
        if self._in_transaction:
            raise StoreException("Cannot start a transaction while another one is active")

        try:
            # 提交之前的隐式事务，保证回滚只影响本事务内的写入
            self._session.commit()
        except SQLAlchemyError as e:
            self._fail("Failed to start transaction", None, e)

        self._in_transaction = True
        self._logger.debug(f"Started {'readonly ' if readonly else ''}transaction")

    def end_transaction(self) -> None:
        """提交事务"""
        if not self._in_transaction:
            raise StoreException("No active transaction to commit")

        self._in_transaction = False
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            self._fail("Failed to commit transaction", None, e)

    def rollback_transaction(self) -> None:
        """回滚事务"""
        self._in_transaction = False
        try:
            self._session.rollback()
        except SQLAlchemyError as e:
            self._fail("Failed to roll back transaction", None, e)
        self._logger.debug("Rolled back transaction")

    # ============ 内部方法 ============

    def _commit_unless_in_transaction(self) -> None:
        if not self._in_transaction:
            self._session.commit()

    def _fail(self, message: str, table: Optional[str], error: SQLAlchemyError) -> None:
        self._logger.error(f"{message}: {error}")
        if not self._in_transaction:
            self._session.rollback()
        raise StoreException(f"{message}: {error}", table) from error

    @staticmethod
    def _table(name: str) -> Table:
        try:
            return TABLES[name]
        except KeyError:
            raise StoreException(f"Unknown table {name}", name) from None

    @staticmethod
    def _column(table: Table, name: str):
        if name not in table.c:
            raise StoreException(f"Unknown column {name} in {table.name}", table.name)
        return table.c[name]

    @classmethod
    def _coerce(cls, table: Table, name: str, value: Any) -> Any:
        # ID 在领域层以字符串传递，整数列需要转换
        if isinstance(value, str) and isinstance(table.c[name].type, Integer):
            try:
                return int(value)
            except ValueError:
                raise StoreException(
                    f"Invalid integer value {value!r} for {table.name}.{name}", table.name
                ) from None
        return value

    @classmethod
    def _where(cls, table: Table, conditions: RowFilter) -> list:
        if not isinstance(conditions, Mapping):
            conditions = {"id": conditions}

        clauses = []
        for name, value in conditions.items():
            column = cls._column(table, name)
            if isinstance(value, (list, tuple, set, frozenset)):
                clauses.append(column.in_([cls._coerce(table, name, v) for v in value]))
            elif value is None:
                clauses.append(column.is_(None))
            else:
                clauses.append(column == cls._coerce(table, name, value))
        return clauses
