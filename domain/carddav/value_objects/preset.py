"""管理员预设值对象"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Tuple


@dataclass(frozen=True)
class Preset:
    """
    管理员预设账号配置

    Attributes:
        name: 预设名称
        fixed_attributes: 用户不可修改的属性名
        defaults: 预设的属性值（账号字段与模板地址簿字段）
        hide: 是否在界面中隐藏该账号
    """

    name: str
    fixed_attributes: FrozenSet[str] = field(default_factory=frozenset)
    defaults: Dict[str, Any] = field(default_factory=dict)
    hide: bool = False

    def is_fixed(self, attribute: str) -> bool:
        return attribute in self.fixed_attributes

    def split_fixed(self, settings: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
        """
        去掉用户设置中被预设固定的属性

        Returns:
            (可写入的设置, 被忽略的属性名)
        """
        allowed = {key: value for key, value in settings.items() if not self.is_fixed(key)}
        ignored = sorted(key for key in settings if self.is_fixed(key))
        return allowed, ignored
