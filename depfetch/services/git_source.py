"""Git 传输层 — 通过 git 命令行实现 GitTransport

职责:
- 地址校验
- clone / checkout / 列出 tag / 读取当前提交
"""

from __future__ import annotations

import logging
from pathlib import Path

from depfetch.core.exceptions import TransportError
from depfetch.utils.net import validate_git_uri
from depfetch.utils.shell import CommandExecutor, CommandResult, get_executor

logger = logging.getLogger(__name__)


class GitSource:
    """基于 git 可执行文件的传输层"""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        git_bin: str = "",
        timeout: int | None = None,
    ) -> None:
        if not git_bin or timeout is None:
            from depfetch.core.config import get_config
            cfg = get_config()
            git_bin = git_bin or cfg.git_bin
            timeout = cfg.git_timeout if timeout is None else timeout
        self.executor = executor or get_executor()
        self.git_bin = git_bin
        self.timeout = timeout

    def validate_uri(self, uri: str) -> None:
        validate_git_uri(uri)

    def clone(self, uri: str, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        self._git(["clone", "--quiet", uri, str(dest)], cwd=dest.parent, label="clone")

    def checkout(self, repo_dir: Path, pointer: str) -> None:
        self._git(["checkout", "--quiet", pointer, "--"], cwd=repo_dir, label="checkout")

    def list_tags(self, repo_dir: Path) -> list[str]:
        r = self._git(["tag", "--list"], cwd=repo_dir, label="tag")
        return [line.strip() for line in r.stdout.splitlines() if line.strip()]

    def resolve_current_commit(self, repo_dir: Path) -> str:
        r = self._git(["rev-parse", "HEAD"], cwd=repo_dir, label="rev-parse")
        return r.stdout.strip()

    def _git(self, args: list[str], *, cwd: Path, label: str) -> CommandResult:
        cmd = [self.git_bin, *args]
        r = self.executor.execute(cmd, cwd=str(cwd), timeout=self.timeout)
        if not r.success:
            raise TransportError(
                f"git {label} 失败 (rc={r.returncode}): {r.stderr.strip()[:300]}",
                command=cmd, returncode=r.returncode, stderr=r.stderr,
            )
        return r
