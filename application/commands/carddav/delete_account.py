"""删除 CardDAV 账号命令"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DeleteAccountCommand:
    """
    删除 CardDAV 账号命令

    Attributes:
        account_id: 要删除的账号 ID
    """

    account_id: str


@dataclass
class DeleteAccountResult:
    """
    删除 CardDAV 账号结果

    Attributes:
        success: 是否成功
        account_id: 被删除的账号 ID
        accountname: 被删除的账号显示名
        message: 消息
        error_code: 错误码（失败时）
            - ACCOUNT_NOT_FOUND: 账号不存在
            - PRESET_ACCOUNT: 管理员预设账号不能删除
    """

    success: bool
    account_id: str = ""
    accountname: str = ""
    message: str = ""
    error_code: Optional[str] = None
