import pytest

from dataset_curator.core import CuratorSettings, dump_settings, load_settings


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.extraction.dedupe_prefix_length == 50
        assert settings.analytics.histogram_bins == 5
        assert settings.analytics.min_quality_score == 70

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "curator.yaml"
        path.write_text("analytics:\n  histogram_bins: 8\n", encoding="utf-8")
        settings = load_settings(str(path))
        assert settings.analytics.histogram_bins == 8
        assert settings.analytics.top_words == 10
        assert settings.extraction.dedupe_prefix_length == 50

    def test_empty_file(self, tmp_path):
        path = tmp_path / "curator.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(str(path)) == CuratorSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "missing.yaml"))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "curator.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(str(path))

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "curator.yaml"
        path.write_text("analytics:\n  histogram_bins: 0\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_settings(str(path))

    def test_dump_and_reload(self, tmp_path):
        path = tmp_path / "curator.yaml"
        settings = CuratorSettings()
        settings.extraction.dedupe_prefix_length = 80
        dump_settings(settings, str(path))
        assert load_settings(str(path)).extraction.dedupe_prefix_length == 80
