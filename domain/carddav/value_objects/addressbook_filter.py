"""地址簿筛选条件值对象"""

from dataclasses import dataclass

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException
from domain.carddav.value_objects.flags import AddressbookFlag


@dataclass(frozen=True)
class AddressbookFilter(BaseValueObject):
    """
    基于 flags 位域的地址簿筛选条件

    当 ``(flags & mask) == expected`` 时地址簿匹配。这是选择地址簿子集
    （仅启用、仅模板、仅自动发现等）的唯一方式。

    Attributes:
        mask: 参与比较的位
        expected: 掩码后期望的值
    """

    mask: int
    expected: int

    def validate(self) -> None:
        if int(self.expected) & ~int(self.mask):
            raise InvalidValueObjectException(
                value_object_type="AddressbookFilter",
                value=(self.mask, self.expected),
                reason="Expected value has bits outside of the mask",
            )

    def matches(self, flags: int) -> bool:
        """检查给定的 flags 是否满足筛选条件"""
        return (int(flags) & self.mask) == self.expected


_T = AddressbookFlag.TEMPLATE

ABF_ALL = AddressbookFilter(0, 0)
"""所有地址簿，包括模板"""

ABF_REGULAR = AddressbookFilter(_T, 0)
"""所有地址簿，不含模板"""

ABF_ACTIVE = AddressbookFilter(_T | AddressbookFlag.ACTIVE, AddressbookFlag.ACTIVE)
"""已启用的地址簿，不含模板"""

ABF_ACTIVE_RW = AddressbookFilter(
    _T | AddressbookFlag.READONLY | AddressbookFlag.ACTIVE,
    AddressbookFlag.ACTIVE,
)
"""已启用且可写的地址簿，不含模板"""

ABF_DISCOVERED = AddressbookFilter(
    _T | AddressbookFlag.DISCOVERED, AddressbookFlag.DISCOVERED
)
"""自动发现的地址簿，不含模板"""

ABF_EXTRA = AddressbookFilter(_T | AddressbookFlag.DISCOVERED, 0)
"""手动添加的地址簿，不含模板"""

ABF_TEMPLATE = AddressbookFilter(_T, _T)
"""模板地址簿"""
