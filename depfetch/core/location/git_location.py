"""Git 来源位置解析

把一个 LocationRequest 解析为本地缓存中已校验的包目录:

  请求 → (显式 ref 且缓存已存在 → 直接返回)
       → 共享 clone → 版本 tag 解析（指针含 ${version} 时）
       → checkout + 记录实际提交 → 落地到 <destination>/<name>-<commit>

请求对象不可变，解析结果以新的 ResolvedLocation 返回。
传输层失败直接向上抛出，不做重试。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from depfetch.core.location.clone_cache import CloneCache, get_clone_cache
from depfetch.core.location.materializer import Materializer, revision_path
from depfetch.core.location.tag_resolver import VersionTagResolver
from depfetch.core.location.versioning import is_version_template
from depfetch.core.models import LOCATION_KEY, LocationRequest, ResolvedLocation

if TYPE_CHECKING:
    from depfetch.core.package import CachedPackage
    from depfetch.core.protocols import ContentValidator, GitTransport, PackageLayout

logger = logging.getLogger(__name__)


def display_branch(branch: str | None, pointer: str | None) -> str | None:
    """分支只在与实际检出的指针一致时展示"""
    if branch and branch == pointer:
        return branch
    return None


class GitLocation:
    """单个 Git 来源依赖的解析器"""

    def __init__(
        self,
        request: LocationRequest,
        *,
        transport: GitTransport | None = None,
        clone_cache: CloneCache | None = None,
        layout: PackageLayout | None = None,
        validator: ContentValidator | None = None,
    ) -> None:
        if transport is None:
            from depfetch.services.git_source import GitSource
            transport = GitSource()
        if layout is None or validator is None:
            from depfetch.core.package import MetadataLayout, PackageValidator
            layout = layout or MetadataLayout()
            validator = validator or PackageValidator()

        transport.validate_uri(request.uri)

        self.request = request
        self.transport = transport
        self.clone_cache = clone_cache or get_clone_cache()
        self.tag_resolver = VersionTagResolver(transport)
        self.materializer = Materializer(layout, validator)

    def cached_path(self, destination: Path) -> Path | None:
        """仅显式 ref 有可预先计算的缓存路径"""
        ref = self.request.ref
        if not ref or is_version_template(ref):
            return None
        return revision_path(destination, self.request.name, ref)

    def resolve(self, destination: str | Path) -> CachedPackage:
        """解析并落地，返回已校验的 CachedPackage"""
        destination = Path(destination)
        request = self.request

        cached = self.cached_path(destination)
        if cached is not None and cached.exists():
            logger.info("缓存命中，跳过 clone: %s@%s -> %s", request.name, request.ref, cached)
            return self.materializer.load(cached, self._finalize(request, request.ref or ""))

        clone_dir = self.clone_cache.get_or_clone(request.uri, self.transport)
        resolved = self.tag_resolver.resolve(request, clone_dir)

        pointer = resolved.effective_pointer
        if pointer:
            logger.info("checkout: %s -> %s", request.name, pointer)
            self.transport.checkout(clone_dir, pointer)
        commit = self.transport.resolve_current_commit(clone_dir)

        location = self._finalize(resolved, commit, pointer, requested_branch=request.branch)
        return self.materializer.materialize(clone_dir, location, destination)

    @staticmethod
    def _finalize(
        request: LocationRequest,
        commit: str,
        pointer: str | None = None,
        *,
        requested_branch: str | None = None,
    ) -> ResolvedLocation:
        """requested_branch 为解析前的分支，tag 解析改写过的指针不作为分支展示"""
        return ResolvedLocation(
            name=request.name,
            version_constraint=request.version_constraint,
            uri=request.uri,
            ref=commit,
            branch=display_branch(requested_branch, pointer),
            rel=request.rel,
        )

    def __str__(self) -> str:
        s = f"{LOCATION_KEY}: '{self.request.uri}'"
        if self.request.branch:
            s += f" with branch: '{self.request.branch}'"
        if self.request.ref:
            s += f" at ref: '{self.request.ref}'"
        return s


def resolve_location(
    request: LocationRequest,
    destination: str | Path,
    *,
    transport: GitTransport | None = None,
    clone_cache: CloneCache | None = None,
    layout: PackageLayout | None = None,
    validator: ContentValidator | None = None,
) -> CachedPackage:
    """一次性解析的便捷函数"""
    return GitLocation(
        request,
        transport=transport,
        clone_cache=clone_cache,
        layout=layout,
        validator=validator,
    ).resolve(destination)
