"""本地缓存包

职责:
- CachedPackage: 已校验的本地包目录 + 对应提交（解析结果句柄）
- MetadataLayout: 通过元数据文件判断目录是否为包
- PackageValidator: 通用内容校验（名称、版本约束、文件名）
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from semantic_version import Version

from depfetch.core.exceptions import (
    ConstraintNotSatisfied,
    ContentValidationError,
    InvalidPackageFiles,
    MismatchedPackageName,
)
from depfetch.core.models import ResolvedLocation
from depfetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

METADATA_FILES = ("metadata.yml", "metadata.yaml", "metadata.json")
DEFAULT_VERSION = "0.0.0"


def find_metadata_file(path: Path) -> Path | None:
    """返回包目录下的元数据文件，按 METADATA_FILES 顺序查找"""
    for filename in METADATA_FILES:
        candidate = path / filename
        if candidate.is_file():
            return candidate
    return None


def load_metadata(path: Path) -> dict[str, Any]:
    """读取包元数据"""
    meta_file = find_metadata_file(path)
    if meta_file is None:
        raise ContentValidationError(f"包目录缺少元数据文件: {path}")
    try:
        if meta_file.suffix == ".json":
            data = json.loads(meta_file.read_text(encoding="utf-8"))
        else:
            data = load_yaml(meta_file)
    except (OSError, ValueError) as e:
        raise ContentValidationError(f"无法解析元数据 {meta_file}: {e}") from e
    if not isinstance(data, dict):
        raise ContentValidationError(f"元数据不是字典类型: {meta_file}")
    return data


class MetadataLayout:
    """包结构标记: 目录根部存在元数据文件"""

    def looks_like_package(self, path: Path) -> bool:
        return path.is_dir() and find_metadata_file(path) is not None


@dataclass(frozen=True)
class CachedPackage:
    """解析结果句柄，以 (name, commit) 标识"""

    path: Path
    name: str
    version: Version
    commit: str
    location: ResolvedLocation

    @classmethod
    def from_store_path(cls, path: Path, location: ResolvedLocation) -> CachedPackage:
        """从缓存目录加载，名称缺省取请求名，版本缺省 0.0.0"""
        meta = load_metadata(path)
        raw_version = str(meta.get("version") or DEFAULT_VERSION)
        try:
            version = Version.coerce(raw_version)
        except ValueError as e:
            raise ContentValidationError(
                f"包 '{location.name}' 的版本号无效: '{raw_version}'"
            ) from e
        return cls(
            path=path,
            name=str(meta.get("name") or location.name),
            version=version,
            commit=location.ref,
            location=location,
        )

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.commit)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": str(self.version),
            "path": str(self.path),
            "location": self.location.to_dict(),
        }


class PackageValidator:
    """通用内容校验"""

    def validate(self, package: CachedPackage) -> None:
        location = package.location
        if package.name != location.name:
            raise MismatchedPackageName(
                f"请求的包名 '{location.name}' 与元数据中的 '{package.name}' 不一致 "
                f"({location})"
            )
        if not location.version_constraint.match(package.version):
            raise ConstraintNotSatisfied(
                f"包 '{package.name}' 版本 {package.version} "
                f"不满足约束 '{location.version_constraint}' ({location})"
            )
        bad_files = self._files_with_whitespace(package.path)
        if bad_files:
            raise InvalidPackageFiles(
                f"包 '{package.name}' 含有带空白字符的文件名: {', '.join(bad_files)}",
                files=bad_files,
            )
        logger.debug("内容校验通过: %s@%s", package.name, package.version)

    @staticmethod
    def _files_with_whitespace(root: Path) -> list[str]:
        results = []
        for p in sorted(root.rglob("*")):
            rel = p.relative_to(root)
            if rel.parts and rel.parts[0] == ".git":
                continue
            if any(c.isspace() for c in rel.as_posix()):
                results.append(rel.as_posix())
        return results
