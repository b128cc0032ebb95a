"""服务端地址簿描述值对象"""

from dataclasses import dataclass
from typing import Optional

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException


@dataclass(frozen=True)
class DiscoveredAddressbook(BaseValueObject):
    """
    发现服务返回的一个服务端地址簿集合

    Attributes:
        uri: 集合的绝对 URL，本地地址簿以此去重
        base_name: URL 最后一个路径分量
        display_name: DAV:displayname（可能缺失）
        description: CARDDAV:addressbook-description（可能缺失）
    """

    uri: str
    base_name: str
    display_name: Optional[str] = None
    description: Optional[str] = None

    def validate(self) -> None:
        if not self.uri:
            raise InvalidValueObjectException(
                value_object_type="DiscoveredAddressbook",
                value=self.uri,
                reason="Addressbook URI cannot be empty",
            )
