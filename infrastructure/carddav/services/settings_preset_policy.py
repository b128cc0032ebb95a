"""基于配置的管理员预设策略"""

from typing import Any, Dict, Mapping, Optional

from domain.common.exceptions import EntityNotFoundException
from domain.carddav.services.preset_policy import PresetPolicy
from domain.carddav.value_objects.preset import Preset


# 预设配置中的控制键，其余键都是账号 / 地址簿的预设值
_CONTROL_KEYS = ("fixed", "hide", "extra_addressbooks")


class SettingsPresetPolicy(PresetPolicy):
    """
    从 Settings.carddav_presets 读取管理员预设

    配置格式::

        {
            "Work": {
                "fixed": ["username", "refresh_time"],
                "hide": false,
                "username": "%u",
                "refresh_time": 1800,
                "extra_addressbooks": {
                    "https://dav.example.com/shared/": {"fixed": ["active"], "readonly": true}
                }
            }
        }

    extra_addressbooks 中的条目可以针对单个地址簿 URL 覆盖固定属性和预设值。
    """

    def __init__(self, presets: Mapping[str, Mapping[str, Any]]):
        """
        初始化预设策略

        Args:
            presets: 预设名称 -> 预设配置
        """
        self._presets = {name: dict(config) for name, config in presets.items()}

    def get_preset(self, name: str, addressbook_url: Optional[str] = None) -> Preset:
        """
        获取预设

        Raises:
            EntityNotFoundException: 预设不存在
        """
        config = self._presets.get(name)
        if config is None:
            raise EntityNotFoundException("preset", name)

        fixed = config.get("fixed", [])
        defaults = _defaults(config)

        extras = config.get("extra_addressbooks") or {}
        if addressbook_url is not None and addressbook_url in extras:
            extra = extras[addressbook_url]
            fixed = extra.get("fixed", fixed)
            defaults.update(_defaults(extra))

        return Preset(
            name=name,
            fixed_attributes=frozenset(fixed),
            defaults=defaults,
            hide=bool(config.get("hide", False)),
        )


def _defaults(config: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in config.items() if key not in _CONTROL_KEYS}
