"""依赖清单加载

清单格式:

    dependencies:
      nginx:
        version: "~> 2.7"
        git: https://example.com/nginx.git
        tag: v${version}
      base:
        git: git@example.com:org/monorepo.git
        rel: packages/${name}

非 git 来源的条目跳过并告警。
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from depfetch.core.exceptions import ConfigError
from depfetch.core.models import DEFAULT_BRANCH, LOCATION_KEY, LocationRequest
from depfetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)


class Manifest:
    """依赖清单 - 从 YAML 文件加载 LocationRequest"""

    section_key = "dependencies"

    def __init__(self, manifest_path: str | Path, default_branch: str = DEFAULT_BRANCH) -> None:
        self.manifest_path = Path(manifest_path)
        self.default_branch = default_branch

    def load(self) -> list[LocationRequest]:
        if not self.manifest_path.exists():
            logger.warning("清单文件不存在: %s", self.manifest_path)
            return []

        try:
            data = load_yaml(self.manifest_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"无法读取清单 {self.manifest_path}: {e}") from e

        section = data.get(self.section_key) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"清单 {self.manifest_path} 的 {self.section_key} 段不是字典")

        requests: list[LocationRequest] = []
        for name, info in section.items():
            if info is None:
                continue
            if not isinstance(info, dict):
                raise ConfigError(f"依赖 '{name}' 的定义不是字典")
            if LOCATION_KEY not in info:
                logger.warning("依赖 '%s' 不是 git 来源，跳过", name)
                continue
            options = {k: v for k, v in info.items() if k != "version"}
            requests.append(LocationRequest.from_options(
                str(name), info.get("version"), options,
                default_branch=self.default_branch,
            ))

        logger.info("已加载 %d 个 git 依赖", len(requests))
        return requests
