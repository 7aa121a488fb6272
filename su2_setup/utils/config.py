"""配置文件加载与路径管理工具。

安装流程的所有“常量”（MPICH 版本、安装目录、SU2 仓库地址等）均放在 YAML 配置中，
本模块负责统一加载配置、解析路径并提供目录与文本文件的写出能力。
"""

from __future__ import annotations

import typing as t
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"


class ConfigError(RuntimeError):
    """配置解析异常。"""


def load_config(config_path: t.Union[str, Path] = DEFAULT_CONFIG_PATH) -> t.Tuple[dict, Path]:
    """读取 YAML 配置文件并返回配置字典及配置文件所在目录。

    参数:
        config_path: 配置文件路径，可以是相对路径或绝对路径。

    返回:
        (config, base_dir)
        config: 解析后的配置字典，内部并未做路径展开。
        base_dir: 配置文件所在目录，供后续路径解析使用。

    异常:
        ConfigError: 当文件不存在、解析失败或顶层不是映射时抛出。
    """

    path = Path(config_path).expanduser().resolve()
    if not path.is_file():
        raise ConfigError(f"配置文件不存在: {path}")

    try:
        with path.open("r", encoding="utf-8") as fh:
            config = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"配置文件解析失败: {exc}") from exc

    if not isinstance(config, dict):
        raise ConfigError(f"配置文件顶层必须是映射: {path}")

    return config, path.parent


def resolve_path(base_dir: Path, target: t.Union[str, Path]) -> Path:
    """将配置中的路径字段统一转换为绝对路径。

    ``~`` 会展开为当前用户主目录；其余相对路径以配置文件所在目录为基准。
    """

    path = Path(target).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return path


def ensure_directory(path: t.Union[str, Path]) -> Path:
    """创建安装根目录等目录（已存在时不做任何事）。"""

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_text_file(path: t.Union[str, Path], content: str) -> Path:
    """覆盖写出 UTF-8 文本，例如 ~/.su2_aliases。"""

    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding="utf-8")
    return file_path
