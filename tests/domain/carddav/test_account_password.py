"""账号密码加密值对象测试"""

import pytest
from cryptography.fernet import Fernet

from domain.common.exceptions import InvalidValueObjectException
from domain.carddav.value_objects.encrypted_password import EncryptedPassword


class TestEncryptedPassword:
    """EncryptedPassword 值对象测试"""

    @pytest.fixture
    def encryption_key(self) -> bytes:
        """生成测试用加密密钥"""
        return Fernet.generate_key()

    def test_encrypt_and_decrypt(self, encryption_key: bytes):
        """测试加密后可以解密"""
        password = EncryptedPassword.from_plain("s3cret", encryption_key)

        assert password.token != "s3cret"
        assert password.decrypt(encryption_key) == "s3cret"

    def test_placeholder_password(self, encryption_key: bytes):
        """测试占位符密码同样加密存储"""
        password = EncryptedPassword.from_plain("%p", encryption_key)

        assert password.decrypt(encryption_key.decode()) == "%p"

    def test_empty_password_allowed(self, encryption_key: bytes):
        """测试允许空密码"""
        password = EncryptedPassword.from_plain("", encryption_key)

        assert password.decrypt(encryption_key) == ""

    def test_wrong_key_raises(self, encryption_key: bytes):
        """测试使用错误密钥解密抛出异常"""
        password = EncryptedPassword.from_plain("s3cret", encryption_key)

        with pytest.raises(InvalidValueObjectException) as exc_info:
            password.decrypt(Fernet.generate_key())

        assert "Failed to decrypt password" in exc_info.value.message

    def test_invalid_key_raises(self):
        """测试无效密钥抛出异常"""
        with pytest.raises(InvalidValueObjectException):
            EncryptedPassword.from_plain("s3cret", "not-a-fernet-key")

    def test_empty_token_raises(self):
        """测试空 token 抛出异常"""
        with pytest.raises(InvalidValueObjectException):
            EncryptedPassword(token="")

    def test_repr_does_not_expose_token(self, encryption_key: bytes):
        """测试 repr / str 不暴露加密值"""
        password = EncryptedPassword.from_plain("s3cret", encryption_key)

        assert password.token not in repr(password)
        assert str(password) == "[ENCRYPTED]"
