"""查询 CardDAV 账号列表"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ListAccountsQuery:
    """
    查询当前用户的 CardDAV 账号

    Attributes:
        include_inactive: 是否包含未启用的地址簿
    """

    include_inactive: bool = True


@dataclass
class AddressbookItem:
    """地址簿列表项"""

    id: str
    name: str
    url: str
    active: bool
    readonly: bool
    last_updated: int
    refresh_time: int


@dataclass
class AccountItem:
    """
    账号列表项

    不包含敏感信息（密码）
    """

    id: str
    accountname: str
    username: str
    discovery_url: Optional[str]
    presetname: Optional[str]
    last_discovered: int
    addressbooks: List[AddressbookItem] = field(default_factory=list)


@dataclass
class ListAccountsResult:
    """
    查询 CardDAV 账号列表结果

    Attributes:
        success: 是否成功
        data: 账号列表
        message: 消息
        error_code: 错误码（失败时）
    """

    success: bool
    data: List[AccountItem] = field(default_factory=list)
    message: str = ""
    error_code: Optional[str] = None
