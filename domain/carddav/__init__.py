"""
CardDAV 账号 / 地址簿管理界限上下文

提供：
- Account, Addressbook 实体
- 位域标志、筛选条件、字段规格等值对象
- 设置编解码、占位符解析、地址簿命名等领域服务
- 行存储网关、发现 / 同步服务、预设策略接口
"""

from domain.carddav.entities import Account, Addressbook
from domain.carddav.value_objects import (
    AddressbookFilter,
    AddressbookFlag,
    AccountFlag,
    PrincipalContext,
)

__all__ = [
    "Account",
    "Addressbook",
    "AddressbookFilter",
    "AddressbookFlag",
    "AccountFlag",
    "PrincipalContext",
]
