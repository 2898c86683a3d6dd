from pathlib import Path
import textwrap

import pytest

from meshpolicy.config.loader import load_config
from meshpolicy.errors import ConfigError


def test_defaults_without_file():
    cfg = load_config(None)
    assert cfg.root_namespaces == ["istio-system"]
    assert cfg.policy_paths == []


def test_load_config_minimal_ok(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("MESHPOLICY_OVERRIDES_FILE", raising=False)
    monkeypatch.setenv("MESH_ROOT", "istio-config")
    f = tmp_path / "meshpolicy.yaml"
    f.write_text(textwrap.dedent("""
        root_namespaces: ["${MESH_ROOT}"]
        policy_paths: ["policies", "/abs/policies.yaml"]
    """))
    cfg = load_config(f)
    assert cfg.root_namespaces == ["istio-config"]
    assert cfg.policy_paths == [str(tmp_path / "policies"), "/abs/policies.yaml"]


def test_overrides_file_is_merged(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("MESHPOLICY_OVERRIDES_FILE", raising=False)
    f = tmp_path / "meshpolicy.yaml"
    f.write_text("verbose: false\nroot_namespaces: [istio-system]\n")
    (tmp_path / "overrides.yaml").write_text("verbose: true\nevents_file: ''\n")
    cfg = load_config(f)
    assert cfg.verbose is True
    assert cfg.events_file is None


def test_overrides_file_from_env(tmp_path: Path, monkeypatch):
    f = tmp_path / "meshpolicy.yaml"
    f.write_text("{}\n")
    o = tmp_path / "elsewhere.yaml"
    o.write_text("root_namespaces: [mesh-root]\n")
    monkeypatch.setenv("MESHPOLICY_OVERRIDES_FILE", str(o))
    assert load_config(f).root_namespaces == ["mesh-root"]


def test_unknown_key_is_a_config_error(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("MESHPOLICY_OVERRIDES_FILE", raising=False)
    f = tmp_path / "meshpolicy.yaml"
    f.write_text("root_namespace: typo\n")
    with pytest.raises(ConfigError):
        load_config(f)


def test_missing_file_is_a_config_error(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")
