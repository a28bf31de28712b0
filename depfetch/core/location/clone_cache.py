"""共享 clone 目录缓存

同一进程内引用同一 Git 地址的依赖共用一个 clone，目录名为地址的文件系统安全编码。
已存在的 clone 不做新鲜度检查，后续 checkout 会切换到精确指针。

每个地址持有独立的锁，并发调用方对同一地址最多 clone 一次。
"""

from __future__ import annotations

import logging
import re
import tempfile
import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depfetch.core.protocols import GitTransport

logger = logging.getLogger(__name__)

_UNSAFE_RE = re.compile(r"[/:\\]")


def uri_slug(uri: str) -> str:
    """把地址中的路径分隔符替换为 '-'"""
    return _UNSAFE_RE.sub("-", uri)


class ProcessTempRoot:
    """进程级临时根目录，懒创建，进程内复用，不主动清理"""

    def __init__(self, parent: str | Path | None = None) -> None:
        self._parent = str(parent) if parent else None
        self._path: Path | None = None
        self._lock = threading.Lock()

    def process_temp_root(self) -> Path:
        with self._lock:
            if self._path is None:
                if self._parent:
                    Path(self._parent).mkdir(parents=True, exist_ok=True)
                self._path = Path(tempfile.mkdtemp(prefix="depfetch-", dir=self._parent))
                logger.debug("创建临时根目录: %s", self._path)
            return self._path


class CloneCache:
    """地址 -> 本地 clone 目录"""

    def __init__(self, temp_root: ProcessTempRoot | None = None) -> None:
        self.temp_root = temp_root or ProcessTempRoot()
        self._clones: dict[str, Path] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, uri: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(uri, threading.Lock())

    def path_for(self, uri: str) -> Path:
        return self.temp_root.process_temp_root() / uri_slug(uri)

    def get_or_clone(self, uri: str, transport: GitTransport) -> Path:
        """返回地址对应的 clone 目录，不存在时才执行 clone"""
        with self._lock_for(uri):
            clone_dir = self.path_for(uri)
            if clone_dir.exists():
                logger.info("复用已有 clone: %s -> %s", uri, clone_dir)
            else:
                logger.info("clone: %s -> %s", uri, clone_dir)
                transport.clone(uri, clone_dir)
            self._clones[uri] = clone_dir
            return clone_dir

    def known(self) -> dict[str, Path]:
        """本进程内已登记的 clone"""
        return dict(self._clones)


# =========================================================================
# 全局默认缓存（可替换）
# =========================================================================

_default_cache: CloneCache | None = None
_default_lock = threading.Lock()


def get_clone_cache() -> CloneCache:
    """获取进程级默认 clone 缓存"""
    global _default_cache  # noqa: PLW0603
    with _default_lock:
        if _default_cache is None:
            from depfetch.core.config import get_config
            _default_cache = CloneCache(ProcessTempRoot(get_config().tmp_root or None))
        return _default_cache


def set_clone_cache(cache: CloneCache | None) -> None:
    """替换默认 clone 缓存（传 None 则下次重新创建）"""
    global _default_cache  # noqa: PLW0603
    with _default_lock:
        _default_cache = cache
