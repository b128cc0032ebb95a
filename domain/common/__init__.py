"""领域层公共组件：值对象基类与领域异常"""

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import (
    DomainException,
    EntityNotFoundException,
    ValidationException,
    AuthenticationException,
    StoreException,
    DiscoveryException,
    InvalidValueObjectException,
)

__all__ = [
    "BaseValueObject",
    "DomainException",
    "EntityNotFoundException",
    "ValidationException",
    "AuthenticationException",
    "StoreException",
    "DiscoveryException",
    "InvalidValueObjectException",
]
