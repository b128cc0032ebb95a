"""位域标志定义

账号与地址簿的若干布尔属性在存储层打包为一个整型 ``flags`` 列。
应用层始终使用独立的布尔字段或下面的 IntFlag 类型，只有在存储边界
才会出现打包后的整数。
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Dict


class AddressbookFlag(IntFlag):
    """地址簿标志位"""

    ACTIVE = 1 << 0
    USE_CATEGORIES = 1 << 1
    DISCOVERED = 1 << 2
    READONLY = 1 << 3
    REQUIRE_ALWAYS_EMAIL = 1 << 4
    TEMPLATE = 1 << 5


class AccountFlag(IntFlag):
    """账号标志位"""

    PREEMPTIVE_BASIC_AUTH = 1 << 0
    SSL_NOVERIFY = 1 << 1


@dataclass(frozen=True)
class FlagsColumn:
    """
    一个位域列的描述

    Attributes:
        fields: 应用层属性名 -> 位号
        default: 插入新行时 flags 列的初始值
    """

    fields: Dict[str, int] = field(default_factory=dict)
    default: int = 0

    def mask(self, attribute: str) -> int:
        """返回属性对应的位掩码"""
        return 1 << self.fields[attribute]


ADDRESSBOOK_FLAGS = FlagsColumn(
    fields={
        "active": 0,
        "use_categories": 1,
        "discovered": 2,
        "readonly": 3,
        "require_always_email": 4,
        "template": 5,
    },
    default=int(AddressbookFlag.ACTIVE | AddressbookFlag.DISCOVERED),
)

ACCOUNT_FLAGS = FlagsColumn(
    fields={
        "preemptive_basic_auth": 0,
        "ssl_noverify": 1,
    },
    default=0,
)
