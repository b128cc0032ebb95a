"""同步结果值对象"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class RemoteCard:
    """服务端的一张 vCard"""

    uri: str
    etag: str
    vcard: str


@dataclass
class SyncResult:
    """
    一次 sync-collection 交换的结果

    Attributes:
        sync_token: 服务端返回的新同步令牌
        changed: 新增或修改的卡片
        deleted: 已删除卡片的 URI
        full_sync: 是否为全量同步（旧令牌失效后重新拉取）
    """

    sync_token: str
    changed: List[RemoteCard] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    full_sync: bool = False
