from __future__ import annotations
import pytest
from pathlib import Path
from bvt_data.config.loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    CompareConfig,
    ConfigError,
    load_config,
    resolve_config_path,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.verbose is True
    assert cfg.show_progress is False
    assert cfg.diff_log_directory == "./logs"
    assert cfg.key_columns_for("Orders") == ["order_id", "line_no"]


def test_load_config_defaults(temp_workdir: Path):
    path = temp_workdir / "config" / "compare.yml"
    path.write_text("", encoding="utf-8")
    cfg = load_config(path)
    assert cfg == CompareConfig()


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError):
        load_config(missing)


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("verbose: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_wrong_type(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("verbose: true", "verbose: sometimes")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    # additionalProperties: false
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_empty_key_list_rejected(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("Customers: [id]", "Customers: []")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_key_columns_for_unknown_dataset(write_config: Path):
    cfg = load_config(write_config)
    with pytest.raises(ConfigError):
        cfg.key_columns_for("Nope")


def test_resolve_config_path_default(temp_workdir: Path):
    assert resolve_config_path() == DEFAULT_CONFIG_PATH


def test_resolve_config_path_from_env(temp_workdir: Path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, "custom/cmp.yml")
    assert resolve_config_path() == Path("custom/cmp.yml")


def test_resolve_config_path_from_dotenv(temp_workdir: Path, monkeypatch):
    (temp_workdir / ".env").write_text(f"{CONFIG_ENV_VAR}=from_dotenv.yml\n", encoding="utf-8")
    try:
        assert resolve_config_path() == Path("from_dotenv.yml")
    finally:
        # load_dotenv は os.environ を直接変更する
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def test_load_config_without_path_uses_default(write_config: Path):
    cfg = load_config()
    assert cfg.verbose is True
