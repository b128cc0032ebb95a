"""同步地址簿命令"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SyncType(str, Enum):
    """同步方式"""

    SYNC = "sync"
    CLEAR_CACHE = "clear_cache"


@dataclass
class SyncAddressbookCommand:
    """
    同步地址簿命令

    Attributes:
        abook_id: 地址簿 ID
        sync_type: sync 表示增量同步，clear_cache 表示清空本地缓存
    """

    abook_id: str
    sync_type: SyncType = SyncType.SYNC


@dataclass
class SyncAddressbookResult:
    """
    同步地址簿结果

    Attributes:
        success: 是否成功
        abook_id: 地址簿 ID
        name: 地址簿显示名
        duration: 同步耗时（秒，仅 sync）
        message: 消息
        error_code: 错误码（失败时）
    """

    success: bool
    abook_id: str = ""
    name: str = ""
    duration: Optional[int] = None
    message: str = ""
    error_code: Optional[str] = None
