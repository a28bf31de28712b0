"""系统测试 fixture — 在临时目录中构建真实的 git 仓库

仓库结构:
  master: metadata.yml (foo 1.3.0) + packages/bar/metadata.yml
  tags:   v1.0.0 / v1.2.0 / v1.3.0，各自对应 metadata.yml 中的版本
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest


def run_git(*args: str, cwd: Path) -> str:
    r = subprocess.run(
        [
            "git",
            "-c", "user.name=depfetch",
            "-c", "user.email=depfetch@example.com",
            "-c", "commit.gpgsign=false",
            "-c", "tag.gpgsign=false",
            *args,
        ],
        cwd=str(cwd), capture_output=True, text=True, check=True,
    )
    return r.stdout.strip()


@dataclass
class Remote:
    path: Path

    @property
    def uri(self) -> str:
        return self.path.as_uri()

    def rev(self, pointer: str) -> str:
        return run_git("rev-parse", f"{pointer}^{{commit}}", cwd=self.path)


@pytest.fixture()
def remote(tmp_path: Path) -> Remote:
    repo = tmp_path / "remote"
    repo.mkdir()
    run_git("init", "--quiet", cwd=repo)
    run_git("symbolic-ref", "HEAD", "refs/heads/master", cwd=repo)

    bar = repo / "packages" / "bar"
    bar.mkdir(parents=True)
    (bar / "metadata.yml").write_text("name: bar\nversion: 0.1.0\n", encoding="utf-8")

    for version in ("1.0.0", "1.2.0", "1.3.0"):
        (repo / "metadata.yml").write_text(f"name: foo\nversion: {version}\n", encoding="utf-8")
        run_git("add", "-A", cwd=repo)
        run_git("commit", "--quiet", "-m", f"release {version}", cwd=repo)
        run_git("tag", f"v{version}", cwd=repo)
    return Remote(repo)
