"""重新发现账号地址簿命令"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RediscoverAccountCommand:
    """
    重新发现账号地址簿命令

    Attributes:
        account_id: 账号 ID
    """

    account_id: str


@dataclass
class RediscoverAccountResult:
    """
    重新发现结果

    Attributes:
        success: 是否成功
        account_id: 账号 ID
        new_addressbook_ids: 新增的地址簿 ID
        removed_addressbook_ids: 已删除的地址簿 ID
        message: 消息
        error_code: 错误码（失败时）
    """

    success: bool
    account_id: str = ""
    new_addressbook_ids: List[str] = field(default_factory=list)
    removed_addressbook_ids: List[str] = field(default_factory=list)
    message: str = ""
    error_code: Optional[str] = None
