"""系统依赖安装命令测试。"""

from __future__ import annotations

import os

from su2_setup.deps.install import (
    HOMEBREW_INSTALL_URL,
    bootstrap_homebrew,
    install_python_tools,
    install_system_packages,
    system_package_commands,
)
from su2_setup.steps import StepStatus
from su2_setup.system.detect import PlatformInfo

APT = PlatformInfo(os_type="linux", package_manager="apt", ostype="linux-gnu")
YUM = PlatformInfo(os_type="linux", package_manager="yum", ostype="linux-gnu")
BREW = PlatformInfo(os_type="macos", package_manager="brew", ostype="darwin23")


def test_apt_commands():
    commands = system_package_commands(APT)
    assert commands == [
        ["sudo", "apt-get", "update"],
        [
            "sudo", "apt-get", "install", "-y",
            "build-essential", "make", "gfortran", "wget", "git", "python3-pip", "python3-dev",
        ],
    ]


def test_yum_commands_keep_group_name_as_single_argument():
    commands = system_package_commands(YUM)
    assert commands[0] == ["sudo", "yum", "-y", "update"]
    assert commands[1] == ["sudo", "yum", "-y", "groupinstall", "Development Tools"]
    assert commands[2][:4] == ["sudo", "yum", "-y", "install"]
    assert "gcc-gfortran" in commands[2]


def test_sudo_can_be_disabled():
    for command in system_package_commands(APT, use_sudo=False):
        assert command[0] == "apt-get"


def test_brew_never_uses_sudo():
    assert system_package_commands(BREW) == [["brew", "install", "gcc", "make", "wget", "git", "python3"]]


def test_homebrew_is_bootstrapped_when_missing(make_runner):
    runner = make_runner(outputs={"curl": "echo installing brew"})
    result = install_system_packages(BREW, runner)

    assert result.status is StepStatus.SUCCEEDED
    assert runner.commands == [
        ["curl", "-fsSL", HOMEBREW_INSTALL_URL],
        ["/bin/bash", "-c", "echo installing brew"],
        ["brew", "install", "gcc", "make", "wget", "git", "python3"],
    ]


def test_existing_homebrew_is_reused(make_runner):
    runner = make_runner(available=("brew",))
    install_system_packages(BREW, runner)
    assert runner.executables() == ["brew"]


def test_python_tools_installed_for_user(make_runner):
    runner = make_runner()
    result = install_python_tools(runner)
    assert result.status is StepStatus.SUCCEEDED
    assert runner.commands == [["pip3", "install", "--user", "meson", "ninja"]]


def test_bootstrapped_brew_directory_is_put_on_path(make_runner, tmp_path):
    brew_dir = tmp_path / "homebrew" / "bin"
    brew_dir.mkdir(parents=True)
    (brew_dir / "brew").write_text("#!/bin/sh\n", encoding="utf-8")
    runner = make_runner()

    bootstrap_homebrew(runner, bin_dirs=[tmp_path / "missing", brew_dir])

    assert runner.env["PATH"].split(os.pathsep)[0] == str(brew_dir)
