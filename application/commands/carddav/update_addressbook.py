"""更新地址簿设置命令"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class UpdateAddressbookCommand:
    """
    更新地址簿设置命令

    值为 None 的字段保持不变。

    Attributes:
        abook_id: 地址簿 ID
        name: 显示名
        refresh_time: 刷新间隔（秒）
        active: 是否启用
        use_categories: 是否将分类作为分组
        readonly: 是否只读
        require_always_email: 是否要求联系人总有邮箱
    """

    abook_id: str
    name: Optional[str] = None
    refresh_time: Optional[int] = None
    active: Optional[bool] = None
    use_categories: Optional[bool] = None
    readonly: Optional[bool] = None
    require_always_email: Optional[bool] = None

    def settings(self) -> Dict[str, Any]:
        values = {
            "name": self.name,
            "refresh_time": self.refresh_time,
            "active": self.active,
            "use_categories": self.use_categories,
            "readonly": self.readonly,
            "require_always_email": self.require_always_email,
        }
        return {key: value for key, value in values.items() if value is not None}


@dataclass
class UpdateAddressbookResult:
    """
    更新地址簿结果

    Attributes:
        success: 是否成功
        abook_id: 地址簿 ID
        name: 更新后的显示名
        ignored_fields: 因管理员预设固定而未修改的字段
        message: 消息
        error_code: 错误码（失败时）
    """

    success: bool
    abook_id: str = ""
    name: str = ""
    ignored_fields: List[str] = field(default_factory=list)
    message: str = ""
    error_code: Optional[str] = None
