"""Git 来源位置解析

拆分说明:
- substitution.py: ${name} / ${version} 变量替换
- versioning.py: 版本约束与 tag 模板
- clone_cache.py: 共享 clone 目录
- tag_resolver.py: 版本 tag 解析
- materializer.py: 包结构检查与落地
- git_location.py: 解析流程编排
"""

from depfetch.core.location.clone_cache import (
    CloneCache,
    ProcessTempRoot,
    get_clone_cache,
    set_clone_cache,
)
from depfetch.core.location.git_location import GitLocation, resolve_location
from depfetch.core.location.materializer import Materializer
from depfetch.core.location.tag_resolver import VersionTagResolver

__all__ = [
    "CloneCache",
    "ProcessTempRoot",
    "get_clone_cache",
    "set_clone_cache",
    "GitLocation",
    "resolve_location",
    "Materializer",
    "VersionTagResolver",
]
