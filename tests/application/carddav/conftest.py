"""CardDAV 应用层测试公共夹具"""

import copy
from typing import Any, Dict, List, Mapping, Sequence

import pytest
from cryptography.fernet import Fernet

from domain.carddav.repositories.row_store import RowFilter, RowStore
from domain.carddav.value_objects.principal import PrincipalContext


class FakeRowStore(RowStore):
    """
    内存行存储

    按表保存行字典，自增整数 ID；支持事务快照与回滚，
    并记录每次写操作便于断言。
    """

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self._next_id = 1
        self._snapshot = None
        self.fail_on = None

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _matches(row: Mapping[str, Any], conditions: RowFilter) -> bool:
        if not isinstance(conditions, Mapping):
            conditions = {"id": conditions}
        for column, value in conditions.items():
            if isinstance(value, (list, tuple, set)):
                if str(row.get(column)) not in {str(v) for v in value}:
                    return False
            elif str(row.get(column)) != str(value):
                return False
        return True

    def _check_fail(self, operation: str, table: str) -> None:
        if self.fail_on == (operation, table):
            raise RuntimeError(f"{operation} on {table} failed")

    def get(self, conditions, columns: Sequence[str] = (), table: str = "contacts"):
        rows = [row for row in self._rows(table) if self._matches(row, conditions)]
        if columns:
            return [{column: row.get(column) for column in columns} for row in rows]
        return [dict(row) for row in rows]

    def insert(self, table: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
        self.calls.append(("insert", table, list(columns)))
        self._check_fail("insert", table)
        last_id = ""
        for values in rows:
            row = dict(zip(columns, values))
            row.setdefault("id", self._next_id)
            self._next_id += 1
            self._rows(table).append(row)
            last_id = str(row["id"])
        return last_id

    def update(self, conditions, columns, values, table: str = "contacts") -> int:
        self.calls.append(("update", table, list(columns), list(values)))
        self._check_fail("update", table)
        count = 0
        for row in self._rows(table):
            if self._matches(row, conditions):
                row.update(zip(columns, values))
                count += 1
        return count

    def delete(self, conditions, table: str = "contacts") -> int:
        self.calls.append(("delete", table))
        self._check_fail("delete", table)
        rows = self._rows(table)
        keep = [row for row in rows if not self._matches(row, conditions)]
        self.tables[table] = keep
        return len(rows) - len(keep)

    def start_transaction(self, readonly: bool = False) -> None:
        self.calls.append(("start_transaction",))
        self._snapshot = copy.deepcopy(self.tables)

    def end_transaction(self) -> None:
        self.calls.append(("end_transaction",))
        self._snapshot = None

    def rollback_transaction(self) -> None:
        self.calls.append(("rollback_transaction",))
        if self._snapshot is not None:
            self.tables = self._snapshot
        self._snapshot = None

    def writes(self, table: str) -> List[tuple]:
        return [call for call in self.calls if len(call) > 1 and call[1] == table]


@pytest.fixture
def encryption_key() -> bytes:
    """生成测试用加密密钥"""
    return Fernet.generate_key()


@pytest.fixture
def principal() -> PrincipalContext:
    """当前用户上下文"""
    return PrincipalContext(
        user_id="42",
        login_username="jane@example.com",
        login_password="login-pass",
        imap_host="imap.example.com",
    )


@pytest.fixture
def store() -> FakeRowStore:
    """内存行存储"""
    return FakeRowStore()


@pytest.fixture
def seed_account(store: FakeRowStore, encryption_key: bytes):
    """直接向存储写入账号行，返回账号 ID"""
    from domain.carddav.value_objects.encrypted_password import EncryptedPassword

    def _seed(user_id: str = "42", password: str = "s3cret", flags: int = 0, **columns) -> str:
        row = {
            "user_id": user_id,
            "accountname": "Work",
            "username": "jane",
            "password": EncryptedPassword.from_plain(password, encryption_key).token,
            "discovery_url": "https://dav.example.com/",
            "last_discovered": 0,
            "rediscover_time": 86400,
            "presetname": None,
            "flags": flags,
        }
        row.update(columns)
        account_id = store.insert("accounts", list(row), [list(row.values())])
        store.calls.clear()
        return account_id

    return _seed


@pytest.fixture
def seed_addressbook(store: FakeRowStore):
    """直接向存储写入地址簿行，返回地址簿 ID"""

    def _seed(account_id: str, url: str, flags: int = 0x05, **columns) -> str:
        row = {
            "account_id": account_id,
            "name": url.rstrip("/").rsplit("/", 1)[-1],
            "url": url,
            "last_updated": 0,
            "refresh_time": 3600,
            "sync_token": "",
            "flags": flags,
        }
        row.update(columns)
        abook_id = store.insert("addressbooks", list(row), [list(row.values())])
        store.calls.clear()
        return abook_id

    return _seed
