"""网络工具 — Git 地址校验"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from depfetch.core.exceptions import InvalidGitUri

_ALLOWED_SCHEMES = frozenset(("git", "ssh", "http", "https", "file"))

# scp 风格: user@host:path/to/repo.git
_SCP_LIKE_RE = re.compile(r"^[\w.\-]+@[\w.\-]+:[^\s]+$")


def is_valid_git_uri(uri: str | None) -> bool:
    """判断地址是否为 git 可接受的远程地址"""
    if not uri or not isinstance(uri, str) or any(c.isspace() for c in uri):
        return False
    if _SCP_LIKE_RE.match(uri):
        return True
    parsed = urlparse(uri)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        return False
    if parsed.scheme == "file":
        return bool(parsed.path)
    return bool(parsed.netloc) and bool(parsed.path.strip("/"))


def validate_git_uri(uri: str | None) -> None:
    """校验 Git 地址，非法时抛 InvalidGitUri

    支持 git:// ssh:// http(s):// file:// 以及 user@host:path 形式。
    """
    if not is_valid_git_uri(uri):
        raise InvalidGitUri(uri or "")
