"""领域异常到错误码的映射"""

from domain.common.exceptions import DomainException, EntityNotFoundException


INTERNAL_ERROR = "INTERNAL_ERROR"
PRESET_ACCOUNT = "PRESET_ACCOUNT"
FIXED_SETTING = "FIXED_SETTING"


def error_code_for(error: Exception) -> str:
    """
    返回异常对应的结果错误码

    EntityNotFoundException 按实体类型区分，例如 ACCOUNT_NOT_FOUND、
    ADDRESSBOOK_NOT_FOUND；其他领域异常使用自身的 code。
    """
    if isinstance(error, EntityNotFoundException):
        return f"{error.entity_type.upper()}_NOT_FOUND"
    if isinstance(error, DomainException):
        return error.code
    return INTERNAL_ERROR
