"""ConfigLoader / load_yaml_config 测试"""

import pytest

from ydedupe import ConfigLoader, DeDupeSettings, load_yaml_config


@pytest.fixture(autouse=True)
def _clear_loader_cache():
    ConfigLoader.clear_cache()
    yield
    ConfigLoader.clear_cache()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "dedupe.yaml"
    path.write_text(
        "namespace: yaml-app\n"
        "expires_in: 120\n"
        "redis:\n"
        "  url: redis://yaml-host:6379/4\n",
        encoding="utf-8",
    )
    return path


class TestConfigLoader:
    """ConfigLoader 测试"""

    def test_load(self, config_file):
        data = ConfigLoader.load(str(config_file))

        assert data["namespace"] == "yaml-app"
        assert data["redis"]["url"] == "redis://yaml-host:6379/4"

    def test_load_relative_with_base_dir(self, config_file):
        data = ConfigLoader.load("dedupe.yaml", base_dir=str(config_file.parent))

        assert data["expires_in"] == 120

    def test_cache(self, config_file):
        """测试第二次加载读取缓存"""
        first = ConfigLoader.load(str(config_file))
        config_file.write_text("namespace: changed\n", encoding="utf-8")

        assert ConfigLoader.load(str(config_file)) is first
        assert ConfigLoader.get_cached_paths() == [str(config_file)]

    def test_reload(self, config_file):
        ConfigLoader.load(str(config_file))
        config_file.write_text("namespace: changed\n", encoding="utf-8")

        assert ConfigLoader.reload(str(config_file)) == {"namespace": "changed"}

    def test_without_cache(self, config_file):
        ConfigLoader.load(str(config_file), use_cache=False)

        assert ConfigLoader.get_cached_paths() == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert ConfigLoader.load(str(path)) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(str(tmp_path / "missing.yaml"))


class TestLoadYamlConfig:
    """load_yaml_config 测试"""

    def test_builds_settings(self, config_file):
        settings = load_yaml_config(str(config_file))

        assert isinstance(settings, DeDupeSettings)
        assert settings.namespace == "yaml-app"
        assert settings.expires_in == 120
        assert settings.redis.url == "redis://yaml-host:6379/4"

    def test_overrides(self, config_file):
        settings = load_yaml_config(str(config_file), expires_in=30)

        assert settings.expires_in == 30
        # 覆盖参数不会写回缓存
        assert ConfigLoader.load(str(config_file))["expires_in"] == 120

    def test_section(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text(
            "app:\n"
            "  name: demo\n"
            "dedupe:\n"
            "  namespace: section-app\n",
            encoding="utf-8",
        )

        settings = load_yaml_config(str(path), section="dedupe")

        assert settings.namespace == "section-app"
        assert settings.expires_in == 300

    def test_missing_section_uses_defaults(self, config_file):
        settings = load_yaml_config(str(config_file), section="nothing")

        assert settings.namespace == "de-dupe"
