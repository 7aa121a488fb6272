"""配置加载测试。"""

from __future__ import annotations

import pytest

from su2_setup.pipeline import PipelineConfig
from su2_setup.utils.config import ConfigError, load_config, resolve_path


def test_packaged_defaults(home):
    config = PipelineConfig.load()

    assert config.install_dir == home / "su2_install"
    assert config.num_cores is None
    assert config.use_sudo is True
    assert config.log_file == home / "su2_install" / "install.log"
    assert config.mpich.version == "4.0.3"
    assert config.mpich.prefix == home / "su2_install" / "mpich"
    assert config.su2.repository == "https://github.com/su2code/SU2.git"
    assert config.su2.meson_options == ["-Dcustom-mpi=true"]
    assert config.shell.aliases_file == home / ".su2_aliases"
    assert config.shell.startup_files == [home / ".bashrc", home / ".bash_profile", home / ".zshrc"]


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("mpich: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_resolve_path_handles_home_and_relative(tmp_path, home):
    assert resolve_path(tmp_path, "~/x") == home / "x"
    assert resolve_path(tmp_path, "sub/dir") == (tmp_path / "sub" / "dir").resolve()
    assert resolve_path(tmp_path, "/abs/path").as_posix() == "/abs/path"


@pytest.mark.parametrize("value", [0, -2, "many"])
def test_invalid_num_cores(tmp_path, value):
    with pytest.raises(ConfigError):
        PipelineConfig.from_dict({"install_dir": str(tmp_path), "num_cores": value}, tmp_path)


def test_custom_mpich_version(tmp_path):
    config = PipelineConfig.from_dict(
        {"install_dir": str(tmp_path), "mpich": {"version": "4.1.2"}, "num_cores": 8},
        tmp_path,
    )
    assert config.num_cores == 8
    assert config.mpich.url.endswith("/4.1.2/mpich-4.1.2.tar.gz")
    assert config.mpich.source_dir.name == "mpich-4.1.2"


def test_section_must_be_mapping(tmp_path):
    with pytest.raises(ConfigError):
        PipelineConfig.from_dict({"install_dir": str(tmp_path), "su2": "SU2"}, tmp_path)
