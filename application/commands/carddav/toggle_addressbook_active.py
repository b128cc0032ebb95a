"""启用 / 停用地址簿命令"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ToggleAddressbookActiveCommand:
    """
    启用 / 停用地址簿命令

    Attributes:
        abook_id: 地址簿 ID
        active: 目标状态
    """

    abook_id: str
    active: bool


@dataclass
class ToggleAddressbookActiveResult:
    """
    启用 / 停用地址簿结果

    Attributes:
        success: 是否成功
        abook_id: 地址簿 ID
        active: 地址簿当前的启用状态；失败时为存储中的原状态（未知时为 None）
        message: 消息
        error_code: 错误码（失败时）
            - ADDRESSBOOK_NOT_FOUND: 地址簿不存在
            - FIXED_SETTING: 管理员预设固定了启用状态
    """

    success: bool
    abook_id: str = ""
    active: Optional[bool] = None
    message: str = ""
    error_code: Optional[str] = None
