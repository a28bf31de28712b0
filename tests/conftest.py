"""测试共享 fixture — 内存版 Git 传输层

FakeGit 按指针（分支/tag/提交）保存文件快照:
  clone     → 创建空目录并写入默认分支
  checkout  → 用指针对应的快照替换工作区（.git 保留）
  list_tags → 返回登记的 tag
所有调用记录在 calls 中，便于断言是否访问了“网络”。
"""

from __future__ import annotations

import hashlib
import shutil
from pathlib import Path

import pytest

from depfetch.core.exceptions import TransportError
from depfetch.core.location.clone_cache import CloneCache, ProcessTempRoot


def metadata(name: str, version: str) -> dict[str, str]:
    return {"metadata.yml": f"name: {name}\nversion: {version}\n"}


class FakeGit:
    """内存版 GitTransport"""

    def __init__(self, default_branch: str = "master") -> None:
        self.default_branch = default_branch
        self.snapshots: dict[str, dict[str, str]] = {}
        self.commits: dict[str, str] = {}
        self.tags: list[str] = []
        self.calls: list[tuple[str, ...]] = []
        self._head: dict[Path, str] = {}

    def add(self, pointer: str, files: dict[str, str], *, commit: str = "", tag: bool = False) -> None:
        self.snapshots[pointer] = files
        self.commits[pointer] = commit or hashlib.sha1(pointer.encode()).hexdigest()
        if tag:
            self.tags.append(pointer)

    # ---- GitTransport ----

    def validate_uri(self, uri: str) -> None:
        self.calls.append(("validate_uri", uri))

    def clone(self, uri: str, dest: Path) -> None:
        self.calls.append(("clone", uri))
        dest.mkdir(parents=True)
        (dest / ".git").mkdir()
        if self.default_branch in self.snapshots:
            self._write(dest, self.default_branch)

    def checkout(self, repo_dir: Path, pointer: str) -> None:
        self.calls.append(("checkout", pointer))
        if pointer not in self.snapshots:
            raise TransportError(f"git checkout 失败 (rc=1): pathspec '{pointer}' did not match", returncode=1)
        self._write(repo_dir, pointer)

    def list_tags(self, repo_dir: Path) -> list[str]:
        self.calls.append(("list_tags",))
        return list(self.tags)

    def resolve_current_commit(self, repo_dir: Path) -> str:
        self.calls.append(("rev_parse",))
        return self.commits[self._head[repo_dir]]

    # ---- helpers ----

    def count(self, op: str) -> int:
        return sum(1 for c in self.calls if c[0] == op)

    def _write(self, repo_dir: Path, pointer: str) -> None:
        for child in repo_dir.iterdir():
            if child.name == ".git":
                continue
            if child.is_dir():
                shutil.rmtree(child)
            else:
                child.unlink()
        for rel, content in self.snapshots[pointer].items():
            target = repo_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        self._head[repo_dir] = pointer


@pytest.fixture()
def meta():
    """生成包元数据文件内容"""
    return metadata


@pytest.fixture()
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture()
def clone_cache(tmp_path: Path) -> CloneCache:
    return CloneCache(ProcessTempRoot(tmp_path / "tmp"))


@pytest.fixture()
def dest(tmp_path: Path) -> Path:
    return tmp_path / "cache"
