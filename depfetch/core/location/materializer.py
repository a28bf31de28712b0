"""包落地

职责:
- 计算包所在子目录（clone 根目录或 clone/rel）
- 检查包结构标记，不存在时抛 PackageNotFound
- 复制到 <destination>/<name>-<commit>，已有目录直接覆盖
- 加载为 CachedPackage 并执行通用内容校验
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from depfetch.core.exceptions import PackageNotFound
from depfetch.core.package import CachedPackage

if TYPE_CHECKING:
    from depfetch.core.models import ResolvedLocation
    from depfetch.core.protocols import ContentValidator, PackageLayout

logger = logging.getLogger(__name__)


def revision_path(destination: Path, name: str, ref: str) -> Path:
    """缓存目录路径 <destination>/<name>-<ref>"""
    return destination / f"{name}-{ref}"


def not_found_message(location: ResolvedLocation) -> str:
    msg = f"包 '{location.name}' 未在 git: {location.uri} 中找到"
    if location.branch:
        msg += f" with branch '{location.branch}'"
    if location.ref:
        msg += f" with ref '{location.ref}'"
    if location.rel:
        msg += f" at path '{location.rel}'"
    return msg


class Materializer:
    """把检出的包目录落地到缓存并校验"""

    def __init__(self, layout: PackageLayout, validator: ContentValidator) -> None:
        self.layout = layout
        self.validator = validator

    @staticmethod
    def source_path(clone_dir: Path, rel: str | None) -> Path:
        return clone_dir / rel if rel else clone_dir

    def materialize(
        self, clone_dir: Path, location: ResolvedLocation, destination: Path,
    ) -> CachedPackage:
        src = self.source_path(clone_dir, location.rel)
        if not self._inside(src, clone_dir) or not self.layout.looks_like_package(src):
            raise PackageNotFound(not_found_message(location))

        destination.mkdir(parents=True, exist_ok=True)
        dest = revision_path(destination, location.name, location.ref)
        self._replace_dir(src, dest)
        logger.info("已落地: %s -> %s", location.name, dest)

        return self.load(dest, location)

    def load(self, path: Path, location: ResolvedLocation) -> CachedPackage:
        """加载缓存目录并校验内容"""
        package = CachedPackage.from_store_path(path, location)
        self.validator.validate(package)
        return package

    @staticmethod
    def _inside(path: Path, root: Path) -> bool:
        try:
            path.resolve().relative_to(root.resolve())
        except ValueError:
            return False
        return True

    @staticmethod
    def _replace_dir(src: Path, dest: Path) -> None:
        """先复制到同目录下的暂存区，再删除旧目录并 rename 到位

        clone 本身保持不动，供同一地址的后续依赖复用。
        """
        staging = Path(tempfile.mkdtemp(dir=str(dest.parent), prefix=f".{dest.name}-"))
        try:
            staged = staging / dest.name
            shutil.copytree(src, staged, ignore=shutil.ignore_patterns(".git"))
            if dest.is_dir() and not dest.is_symlink():
                logger.info("覆盖已有目录: %s", dest)
                shutil.rmtree(dest)
            elif dest.exists() or dest.is_symlink():
                logger.info("覆盖已有文件: %s", dest)
                dest.unlink()
            os.replace(staged, dest)
        finally:
            shutil.rmtree(staging, ignore_errors=True)
