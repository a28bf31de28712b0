"""依赖拉取服务

统一组装传输层、clone 缓存和包校验，单个或批量解析 Git 依赖。
同一服务实例内的依赖共享 clone 缓存，逐个顺序解析，互不影响。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from depfetch.core.exceptions import DepFetchError
from depfetch.core.location import CloneCache, GitLocation, ProcessTempRoot
from depfetch.core.package import MetadataLayout, PackageValidator

if TYPE_CHECKING:
    from depfetch.core.config import Config
    from depfetch.core.models import LocationRequest
    from depfetch.core.package import CachedPackage
    from depfetch.core.protocols import GitTransport

logger = logging.getLogger(__name__)


class FetchService:
    """Git 依赖拉取服务"""

    def __init__(
        self,
        config: Config | None = None,
        *,
        transport: GitTransport | None = None,
        clone_cache: CloneCache | None = None,
    ) -> None:
        if config is None:
            from depfetch.core.config import get_config
            config = get_config()
        if transport is None:
            from depfetch.services.git_source import GitSource
            transport = GitSource(git_bin=config.git_bin, timeout=config.git_timeout)

        self.config = config
        self.destination = Path(config.cache_dir)
        self.transport = transport
        self.clone_cache = clone_cache or CloneCache(ProcessTempRoot(config.tmp_root or None))
        self.layout = MetadataLayout()
        self.validator = PackageValidator()

    def location(self, request: LocationRequest) -> GitLocation:
        return GitLocation(
            request,
            transport=self.transport,
            clone_cache=self.clone_cache,
            layout=self.layout,
            validator=self.validator,
        )

    def fetch(self, request: LocationRequest) -> CachedPackage:
        """解析单个依赖"""
        package = self.location(request).resolve(self.destination)
        logger.info("就绪: %s@%s (%s) -> %s", package.name, package.version, package.location, package.path)
        return package

    def install(self, requests: list[LocationRequest]) -> dict[str, CachedPackage | str]:
        """依次解析全部依赖，返回 {name: CachedPackage | 错误信息}，单个失败不中断"""
        results: dict[str, CachedPackage | str] = {}
        failed: list[str] = []
        for request in requests:
            try:
                results[request.name] = self.fetch(request)
            except (DepFetchError, OSError) as exc:
                logger.exception("拉取失败: %s", request.name)
                failed.append(request.name)
                results[request.name] = f"[FAILED] {exc}"
        if failed:
            logger.warning(
                "拉取汇总: %d 成功, %d 失败 (%s)",
                len(results) - len(failed), len(failed), ", ".join(failed),
            )
        return results
