"""平台探测与 CPU 核数探测测试。"""

from __future__ import annotations

import pytest

from su2_setup.system.detect import (
    UnsupportedPlatformError,
    count_cpuinfo_processors,
    current_ostype,
    detect_num_cores,
    detect_platform,
)


def _which_from(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


@pytest.mark.parametrize(
    "ostype, available, expected",
    [
        ("linux-gnu", ("apt-get", "yum"), ("linux", "apt")),
        ("linux-gnueabihf", ("apt-get",), ("linux", "apt")),
        ("linux-gnu", ("yum",), ("linux", "yum")),
        ("darwin23", (), ("macos", "brew")),
        ("darwin", ("brew",), ("macos", "brew")),
    ],
)
def test_supported_platforms_select_one_branch(ostype, available, expected):
    info = detect_platform(ostype, _which_from(*available))
    assert (info.os_type, info.package_manager) == expected
    assert info.ostype == ostype


@pytest.mark.parametrize("ostype", ["plan9", "msys", "cygwin", "freebsd13.0", ""])
def test_unknown_os_is_rejected(ostype):
    with pytest.raises(UnsupportedPlatformError, match="Unsupported operating system"):
        detect_platform(ostype, _which_from("apt-get", "yum", "brew"))


def test_linux_without_package_manager_is_rejected():
    with pytest.raises(UnsupportedPlatformError, match="Unsupported package manager"):
        detect_platform("linux-gnu", _which_from("brew"))


def test_current_ostype_prefers_environment():
    assert current_ostype({"OSTYPE": "darwin22"}, platform="linux") == "darwin22"


@pytest.mark.parametrize(
    "platform, expected",
    [("linux", "linux-gnu"), ("darwin", "darwin"), ("plan9", "plan9")],
)
def test_current_ostype_falls_back_to_sys_platform(platform, expected):
    assert current_ostype({}, platform=platform) == expected


def test_num_cores_defaults_to_four_when_probes_fail():
    assert detect_num_cores([lambda: None, lambda: None]) == 4


def test_num_cores_uses_first_positive_probe():
    assert detect_num_cores([lambda: 0, lambda: 12, lambda: 3]) == 12


def test_count_cpuinfo_processors(tmp_path):
    cpuinfo = tmp_path / "cpuinfo"
    cpuinfo.write_text(
        "processor\t: 0\nmodel name\t: test\n\nprocessor\t: 1\n\nprocessor\t: 2\n",
        encoding="utf-8",
    )
    assert count_cpuinfo_processors(cpuinfo) == 3


def test_count_cpuinfo_processors_missing_or_empty(tmp_path):
    assert count_cpuinfo_processors(tmp_path / "missing") is None
    empty = tmp_path / "cpuinfo"
    empty.write_text("model name\t: test\n", encoding="utf-8")
    assert count_cpuinfo_processors(empty) is None
