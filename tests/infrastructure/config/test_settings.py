"""Settings 单元测试"""

import pytest

from infrastructure.config.settings import Settings


class TestDatabaseUrl:
    """按环境选择数据库"""

    @pytest.mark.parametrize(
        "values, expected",
        [
            ({"app_env": "test"}, "sqlite:///:memory:"),
            ({"app_env": "dev", "dev_db_path": "data/x.db"}, "sqlite:///data/x.db"),
            ({"app_env": "staging", "staging_database_url": "postgresql://s/db"}, "postgresql://s/db"),
            ({"app_env": "prod", "prod_database_url": "postgresql://p/db"}, "postgresql://p/db"),
        ],
    )
    def test_database_url(self, values, expected):
        """测试各环境的数据库 URL"""
        assert Settings(**values).database_url == expected

    def test_pool_settings(self):
        """测试连接池配置按环境选择"""
        prod = Settings(app_env="prod", prod_db_pool_size=7)
        staging = Settings(app_env="staging", staging_db_max_overflow=3)

        assert prod.db_pool_size == 7
        assert staging.db_max_overflow == 3


class TestCardDavSettings:
    """CardDAV 配置"""

    def test_presets_from_environment(self, monkeypatch):
        """测试从环境变量读取 JSON 格式的预设"""
        monkeypatch.setenv("CARDDAV_PRESETS", '{"Work": {"fixed": ["username"], "username": "%u"}}')
        monkeypatch.setenv("CARDDAV_HTTP_TIMEOUT", "12.5")

        settings = Settings()

        assert settings.carddav_presets == {"Work": {"fixed": ["username"], "username": "%u"}}
        assert settings.carddav_http_timeout == 12.5

    def test_defaults(self, monkeypatch):
        """测试默认值"""
        monkeypatch.delenv("CARDDAV_PRESETS", raising=False)

        settings = Settings(_env_file=None)

        assert settings.carddav_presets == {}
        assert settings.carddav_http_timeout == 30.0
        assert settings.app_name == "CardDavSync"
