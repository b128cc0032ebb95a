"""CardDAV SQLAlchemy 数据模型"""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy 声明式基类"""
    pass


class AccountModel(Base):
    """
    CardDAV 账号数据库模型

    preemptive_basic_auth / ssl_noverify 打包在 flags 列中
    """

    __tablename__ = "carddav_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    accountname: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    discovery_url: Mapped[Optional[str]] = mapped_column(String(4095), nullable=True)
    last_discovered: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    rediscover_time: Mapped[int] = mapped_column(Integer, nullable=False, default=86400)
    presetname: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    flags: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<AccountModel(id={self.id}, user_id={self.user_id}, accountname={self.accountname})>"


class AddressbookModel(Base):
    """
    CardDAV 地址簿数据库模型

    active / use_categories / discovered / readonly / require_always_email / template
    打包在 flags 列中，默认 0x05（active | discovered）
    """

    __tablename__ = "carddav_addressbooks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("carddav_accounts.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(4095), nullable=False)
    # 手动同步时会写入负值
    last_updated: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    refresh_time: Mapped[int] = mapped_column(Integer, nullable=False, default=3600)
    sync_token: Mapped[str] = mapped_column(String(1023), nullable=False, default="")
    flags: Mapped[int] = mapped_column(Integer, nullable=False, default=0x05)

    def __repr__(self) -> str:
        return f"<AddressbookModel(id={self.id}, account_id={self.account_id}, name={self.name})>"


class ContactModel(Base):
    """缓存的联系人（一张 vCard）"""

    __tablename__ = "carddav_contacts"
    __table_args__ = (Index("ix_carddav_contacts_abook_uri", "abook_id", "uri", unique=True),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    abook_id: Mapped[int] = mapped_column(
        ForeignKey("carddav_addressbooks.id"), nullable=False, index=True
    )
    uri: Mapped[str] = mapped_column(String(4095), nullable=False)
    etag: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    vcard: Mapped[str] = mapped_column(Text, nullable=False, default="")
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    cuid: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class GroupModel(Base):
    """缓存的联系人分组"""

    __tablename__ = "carddav_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    abook_id: Mapped[int] = mapped_column(
        ForeignKey("carddav_addressbooks.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    uri: Mapped[Optional[str]] = mapped_column(String(4095), nullable=True)
    etag: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    vcard: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class GroupUserModel(Base):
    """分组成员关系"""

    __tablename__ = "carddav_group_user"

    group_id: Mapped[int] = mapped_column(ForeignKey("carddav_groups.id"), primary_key=True)
    contact_id: Mapped[int] = mapped_column(ForeignKey("carddav_contacts.id"), primary_key=True)


class XSubtypeModel(Base):
    """地址簿中出现的自定义属性子类型（例如 TEL;TYPE=x-car）"""

    __tablename__ = "carddav_xsubtypes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    abook_id: Mapped[int] = mapped_column(
        ForeignKey("carddav_addressbooks.id"), nullable=False, index=True
    )
    typename: Mapped[str] = mapped_column(String(128), nullable=False)
    subtype: Mapped[str] = mapped_column(String(128), nullable=False)
