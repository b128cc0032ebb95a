"""CardDAV 仓储接口模块"""

from domain.carddav.repositories.row_store import RowStore, RowFilter

__all__ = [
    "RowStore",
    "RowFilter",
]
