"""领域异常定义

所有异常都携带 ``message`` 与 ``code``，上层处理器据此生成结果对象。
"""

from typing import Any, Optional


class DomainException(Exception):
    """
    领域异常基类

    Attributes:
        message: 可读的错误描述
        code: 机器可读的错误码
    """

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return self.message


class EntityNotFoundException(DomainException):
    """
    实体不存在，或不属于当前用户

    Attributes:
        entity_type: 实体类型，例如 "account" / "addressbook"
        entity_id: 请求的实体 ID
    """

    code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"No carddav {entity_type} with ID {entity_id}")


class ValidationException(DomainException):
    """
    设置校验失败

    包括：插入时缺少必填字段、更新不可更新字段、引用不属于当前用户的 ID、
    账号缺少发现 URL 等。

    Attributes:
        field: 出错的字段名
        reason: 失败原因
    """

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class AuthenticationException(DomainException):
    """认证信息不可用（例如请求了 OAuth bearer 认证但会话中没有 token）"""

    code = "AUTH_REQUIRED"


class StoreException(DomainException):
    """
    行存储错误

    由行存储网关抛出，核心逻辑原样向上传播。

    Attributes:
        table: 出错时操作的表名（可能为空）
    """

    code = "STORE_ERROR"

    def __init__(self, message: str, table: Optional[str] = None):
        self.table = table
        super().__init__(message)


class DiscoveryException(DomainException):
    """
    CardDAV 服务端交互失败

    Attributes:
        url: 请求的 URL
        status_code: HTTP 状态码（如果有响应）
    """

    code = "DISCOVERY_FAILED"

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class InvalidValueObjectException(DomainException):
    """
    值对象校验失败

    Attributes:
        value_object_type: 值对象类型名
        value: 出错的值（敏感数据需脱敏）
        reason: 失败原因
    """

    code = "INVALID_VALUE_OBJECT"

    def __init__(self, value_object_type: str, value: Any, reason: str):
        self.value_object_type = value_object_type
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {value_object_type}: {reason}")
