"""协作方协议定义

Git 位置解析只依赖这些接口，传输层、包结构检查、内容校验和临时目录
均可替换。使用 typing.Protocol，实现类无需继承。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from depfetch.core.package import CachedPackage


# =========================================================================
# 版本控制传输协议
# =========================================================================

class GitTransport(Protocol):
    """Git 传输层，所有方法失败时抛 TransportError"""

    def validate_uri(self, uri: str) -> None:
        """地址非法时抛 InvalidGitUri"""
        ...

    def clone(self, uri: str, dest: Path) -> None:
        ...

    def checkout(self, repo_dir: Path, pointer: str) -> None:
        ...

    def list_tags(self, repo_dir: Path) -> list[str]:
        ...

    def resolve_current_commit(self, repo_dir: Path) -> str:
        ...


# =========================================================================
# 包结构 / 内容校验协议
# =========================================================================

class PackageLayout(Protocol):
    """判断目录是否为合法的包结构"""

    def looks_like_package(self, path: Path) -> bool:
        ...


class ContentValidator(Protocol):
    """包内容校验，失败时抛 ContentValidationError 子类"""

    def validate(self, package: CachedPackage) -> None:
        ...


# =========================================================================
# 临时目录协议
# =========================================================================

class TempRootProvider(Protocol):
    """进程级临时根目录，首次调用时创建，之后复用"""

    def process_temp_root(self) -> Path:
        ...
