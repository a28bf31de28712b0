"""变量替换

构造阶段把 ``${name}`` 替换为包名。``${version}`` 原样保留，
具体版本要等列出 tag 后才能确定。
"""

from __future__ import annotations

from depfetch.core.location.versioning import VERSION_TOKEN

NAME_TOKEN = "${name}"


def substitute_variables(value: str | None, name: str) -> str | None:
    """替换 ${name}，空值原样返回"""
    if not value:
        return value
    return value.replace(NAME_TOKEN, name)


def substitute_version(value: str | None, version: str) -> str | None:
    """tag 选定后替换 ${version}"""
    if not value:
        return value
    return value.replace(VERSION_TOKEN, version)
