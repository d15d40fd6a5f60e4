import pytest

from maplealerts.config import DEFAULT_BASE_URL, ConfigError, load_config
from maplealerts.regions import PROVINCE_OFFICES, REGION_KEYWORDS, office_for_province, province_code


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("MAPLEALERTS_CONFIG", "MAPLEALERTS_BASE_URL", "MAPLEALERTS_HOUR_WINDOW", "MAPLEALERTS_RETRIES"):
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_file():
    cfg = load_config()
    assert cfg.feed.base_url == DEFAULT_BASE_URL
    assert cfg.feed.hour_window == 6
    assert 8 <= cfg.feed.request_timeout_seconds <= 10
    assert cfg.parser.language == "en-CA"


def test_yaml_then_env_override(tmp_path, monkeypatch):
    p = tmp_path / "config.yaml"
    p.write_text(
        "feed:\n  base_url: https://mirror.example/cap/\n  hour_window: 3\n  retries: 1\nparser:\n  provider: EC\n",
        encoding="utf-8",
    )
    cfg = load_config(str(p))
    assert cfg.feed.base_url == "https://mirror.example/cap"
    assert cfg.feed.hour_window == 3
    assert cfg.parser.provider == "EC"

    monkeypatch.setenv("MAPLEALERTS_HOUR_WINDOW", "8")
    monkeypatch.setenv("MAPLEALERTS_RETRIES", "not-a-number")
    monkeypatch.setenv("MAPLEALERTS_CONFIG", str(p))
    cfg = load_config()
    assert cfg.feed.hour_window == 8
    assert cfg.feed.retries == 1


def test_bad_config_is_rejected(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text("feed:\n  hour_windw: 3\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))

    p.write_text("feed:\n  hour_window: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))

    p.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))


def test_province_tables():
    assert len(PROVINCE_OFFICES) == 13
    assert office_for_province("QC") == "CWUL"
    assert office_for_province("nu") == "CWWG"
    assert office_for_province("xx") is None
    assert office_for_province(None) is None
    with pytest.raises(TypeError):
        PROVINCE_OFFICES["xx"] = "NOPE"  # type: ignore[index]


def test_province_code_resolution():
    assert province_code("NS") == "ns"
    assert province_code("Nova Scotia") == "ns"
    assert province_code("  british columbia ") == "bc"
    assert province_code("Newfoundland") == "nl"
    assert province_code("Atlantis") is None
    assert province_code("") is None


def test_region_table_has_qualifiers():
    assert "prince rupert" in REGION_KEYWORDS["coastal"]
    assert "terrace" in REGION_KEYWORDS["inland"]
    assert len(REGION_KEYWORDS) > 50


def test_yaml_values_are_coerced_or_rejected(tmp_path):
    p = tmp_path / "config.yaml"
    p.write_text('feed:\n  hour_window: "4"\n  request_delay_seconds: "0.1"\n', encoding="utf-8")
    cfg = load_config(str(p))
    assert cfg.feed.hour_window == 4
    assert cfg.feed.request_delay_seconds == 0.1

    p.write_text("feed:\n  retries: two\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="feed.retries"):
        load_config(str(p))

    p.write_text("feed:\n  request_timeout_seconds: [1, 2]\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(p))
