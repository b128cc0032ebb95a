"""设置编解码服务

在应用层配置（独立布尔属性）与存储行（打包的 flags 整型列）之间转换，
并根据字段规格表生成 insert / update 的列与值。
"""

from typing import Any, Dict, List, Mapping, Tuple

from domain.common.exceptions import ValidationException
from domain.carddav.value_objects.field_spec import FieldSpec
from domain.carddav.value_objects.flags import FlagsColumn


FLAGS_COLUMN_NAME = "flags"


def decode_row(row: Mapping[str, Any], flags_column: FlagsColumn) -> Dict[str, Any]:
    """
    将存储行转换为应用层配置

    非位域列原样保留，每个位域属性被设置为独立的布尔值。

    Args:
        row: 存储行（必须包含 flags 列）
        flags_column: 位域列描述

    Returns:
        新的配置字典
    """
    record = dict(row)
    flags = int(record.get(FLAGS_COLUMN_NAME) or 0)
    for attribute, bit in flags_column.fields.items():
        record[attribute] = (flags >> bit) & 1 != 0
    return record


def encode_update(
    existing_flags: int,
    changes: Mapping[str, Any],
    flags_column: FlagsColumn,
) -> int:
    """
    将布尔属性的变更应用到现有 flags 值

    只有 ``changes`` 中出现（且不为 None）的位域属性会修改对应位，
    其他位保持不变。没有任何位域属性时原样返回 ``existing_flags``。

    Args:
        existing_flags: 当前 flags 值
        changes: 属性变更
        flags_column: 位域列描述

    Returns:
        新的 flags 值
    """
    flags = int(existing_flags)
    for attribute in flags_column.fields:
        value = changes.get(attribute)
        if value is None:
            continue
        if _truthy(value):
            flags |= flags_column.mask(attribute)
        else:
            flags &= ~flags_column.mask(attribute)
    return flags


def prepare_row(
    settings: Mapping[str, Any],
    field_specs: Mapping[str, FieldSpec],
    is_insert: bool,
    flags_column: FlagsColumn,
    flags_init: int = 0,
) -> Tuple[List[str], List[Any]]:
    """
    根据字段规格准备 insert / update 的列与值

    - 只处理规格表中列出的字段，其他键被忽略
    - 值为 None 的字段视为未提供
    - 插入时缺少必填字段、更新时修改不可更新字段都会抛出 ValidationException，
      此时不会产生任何存储调用
    - 位域属性合并为末尾的一个 flags 列，只有至少提供了一个位域属性时才输出

    Args:
        settings: 设置字典
        field_specs: 字段规格表
        is_insert: True 表示插入，False 表示更新
        flags_column: 位域列描述
        flags_init: flags 的起始值（插入时为列默认值，更新时为当前值）

    Returns:
        (列名列表, 值列表)

    Raises:
        ValidationException: 字段校验失败
    """
    columns: List[str] = []
    values: List[Any] = []
    flag_changes: Dict[str, Any] = {}

    for name, spec in field_specs.items():
        value = settings.get(name)
        if value is not None:
            if not (is_insert or spec.updatable):
                raise ValidationException(
                    field=name,
                    reason="Attempt to update non-updatable field",
                )
            if name in flags_column.fields:
                flag_changes[name] = value
            else:
                columns.append(name)
                values.append(value)
        elif spec.mandatory and is_insert:
            raise ValidationException(field=name, reason="Mandatory field missing")

    if flag_changes:
        columns.append(FLAGS_COLUMN_NAME)
        values.append(encode_update(flags_init, flag_changes, flags_column))

    return columns, values


def _truthy(value: Any) -> bool:
    # 表单值可能是 "0" / "1" 字符串
    if isinstance(value, str):
        return value.strip() not in ("", "0", "false", "False")
    return bool(value)
