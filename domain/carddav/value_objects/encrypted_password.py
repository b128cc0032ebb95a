"""加密密码值对象"""

from dataclasses import dataclass
from typing import Union

from cryptography.fernet import Fernet, InvalidToken

from domain.common.base_value_object import BaseValueObject
from domain.common.exceptions import InvalidValueObjectException


@dataclass(frozen=True)
class EncryptedPassword(BaseValueObject):
    """
    加密密码值对象

    使用 Fernet 对称加密存储 CardDAV 账号密码。密码可以是占位符
    （``%p`` 登录密码、``%b`` OAuth bearer），占位符同样加密存储，
    解密后由凭证解析器替换。

    Attributes:
        token: Fernet token（ASCII 文本，直接写入 accounts.password 列）
    """

    token: str

    def validate(self) -> None:
        """验证加密密码的有效性"""
        if not self.token:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value=None,
                reason="Encrypted password cannot be empty"
            )

    @classmethod
    def from_plain(
        cls,
        plain_password: str,
        encryption_key: Union[str, bytes]
    ) -> "EncryptedPassword":
        """
        从明文密码创建加密密码值对象

        Args:
            plain_password: 明文密码，允许为空字符串
            encryption_key: Fernet 加密密钥（32 字节 base64 编码）

        Returns:
            EncryptedPassword 实例

        Raises:
            InvalidValueObjectException: 如果加密失败
        """
        try:
            encrypted = _fernet(encryption_key).encrypt(plain_password.encode("utf-8"))
        except (ValueError, TypeError) as e:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value="[REDACTED]",
                reason=f"Failed to encrypt password: {e}"
            )
        return cls(token=encrypted.decode("ascii"))

    def decrypt(self, encryption_key: Union[str, bytes]) -> str:
        """
        解密获取明文密码

        Args:
            encryption_key: Fernet 加密密钥

        Returns:
            明文密码

        Raises:
            InvalidValueObjectException: 如果解密失败
        """
        try:
            decrypted = _fernet(encryption_key).decrypt(self.token.encode("ascii"))
            return decrypted.decode("utf-8")
        except InvalidToken:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value="[ENCRYPTED]",
                reason="Failed to decrypt password: invalid key or corrupted data"
            )
        except (ValueError, TypeError) as e:
            raise InvalidValueObjectException(
                value_object_type="EncryptedPassword",
                value="[ENCRYPTED]",
                reason=f"Failed to decrypt password: {e}"
            )

    def __repr__(self) -> str:
        """安全的字符串表示，不暴露加密值"""
        return "EncryptedPassword([ENCRYPTED])"

    def __str__(self) -> str:
        """安全的字符串表示"""
        return "[ENCRYPTED]"


def _fernet(encryption_key: Union[str, bytes]) -> Fernet:
    key = encryption_key if isinstance(encryption_key, bytes) else encryption_key.encode()
    return Fernet(key)
