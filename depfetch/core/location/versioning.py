"""语义化版本工具

基于 semantic_version:
- 解析版本约束（兼容 ``~>`` 悲观约束和 ``= x.y.z`` 写法）
- 将 ``${version}`` 模板编译为匹配 tag 的正则
"""

from __future__ import annotations

import re

from semantic_version import SimpleSpec, Version

from depfetch.core.exceptions import ValidationError

VERSION_TOKEN = "${version}"
VERSION_GROUP = r"([0-9]+\.[0-9]+\.[0-9]+)"

ANY_VERSION = ">=0.0.0"

_CLAUSE_RE = re.compile(r"^(~>|>=|<=|==|!=|~=|=|>|<|\^|~)?\s*(\S+)$")


def _normalize_clause(clause: str) -> str:
    m = _CLAUSE_RE.match(clause.strip())
    if not m:
        raise ValidationError(f"无法解析版本约束: '{clause}'")
    op, ver = m.group(1) or "==", m.group(2)
    if op == "~>":
        op = "~="
    elif op == "=":
        op = "=="
    return f"{op}{ver}"


def normalize_constraint(text: str | None) -> str:
    """将约束字符串规范化为 SimpleSpec 语法，空值视为任意版本"""
    if text is None or not str(text).strip():
        return ANY_VERSION
    clauses = [c for c in str(text).split(",") if c.strip()]
    return ",".join(_normalize_clause(c) for c in clauses)


def parse_constraint(text: str | SimpleSpec | None) -> SimpleSpec:
    """解析版本约束

    >>> parse_constraint(">= 1.1.0, < 1.3.0").match(Version("1.2.0"))
    True
    """
    if isinstance(text, SimpleSpec):
        return text
    normalized = normalize_constraint(text)
    try:
        return SimpleSpec(normalized)
    except ValueError as e:
        raise ValidationError(f"无法解析版本约束: '{text}' ({e})") from e


def parse_version(text: str) -> Version:
    """解析 MAJOR.MINOR.PATCH 三段数字版本（容忍前导零）"""
    parts = text.strip().split(".")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValidationError(f"不是三段式语义化版本: '{text}'")
    major, minor, patch = (int(p) for p in parts)
    return Version(major=major, minor=minor, patch=patch)


def exact_constraint(version: Version) -> SimpleSpec:
    """收窄为恰好等于该版本的约束"""
    return SimpleSpec(f"=={version}")


def is_version_template(value: str | None) -> bool:
    return bool(value) and VERSION_TOKEN in value


def compile_version_pattern(template: str) -> re.Pattern[str]:
    """把 ``release-${version}`` 编译为整串匹配的正则，版本号为第 1 个捕获组

    模板其余部分按字面量处理。
    """
    head, _, tail = template.partition(VERSION_TOKEN)
    return re.compile(re.escape(head) + VERSION_GROUP + re.escape(tail))
