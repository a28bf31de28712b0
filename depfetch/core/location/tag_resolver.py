"""版本 tag 解析器

当有效指针（ref 优先，否则 branch）包含 ``${version}`` 时:
  1. 列出 clone 中全部 tag
  2. 把模板编译为正则，``${version}`` 位置捕获 MAJOR.MINOR.PATCH
  3. 整串匹配的 tag 解析出版本，丢弃不满足约束的
  4. 取语义化版本最大的 tag，约束收窄为该版本
  5. 无候选时仅告警，模板原样保留，由后续 checkout 失败暴露问题
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from semantic_version import SimpleSpec

from depfetch.core.exceptions import ValidationError
from depfetch.core.location.substitution import substitute_version
from depfetch.core.location.versioning import (
    compile_version_pattern,
    exact_constraint,
    is_version_template,
    parse_version,
)
from depfetch.core.models import LocationRequest, TagCandidate

if TYPE_CHECKING:
    from depfetch.core.protocols import GitTransport

logger = logging.getLogger(__name__)


def match_tags(
    tags: Iterable[str], template: str, constraint: SimpleSpec,
) -> list[TagCandidate]:
    """返回匹配模板且满足约束的 tag 候选"""
    pattern = compile_version_pattern(template)
    candidates = []
    for tag in tags:
        m = pattern.fullmatch(tag)
        if not m:
            continue
        try:
            version = parse_version(m.group(1))
        except ValidationError:
            continue
        if constraint.match(version):
            candidates.append(TagCandidate(tag=tag, version=version))
    return candidates


def select_candidate(candidates: list[TagCandidate]) -> TagCandidate | None:
    """按语义化版本取最大者"""
    if not candidates:
        return None
    return max(candidates, key=lambda c: c.version)


class VersionTagResolver:
    """把版本模板解析为具体 tag"""

    def __init__(self, transport: GitTransport) -> None:
        self.transport = transport

    def resolve(self, request: LocationRequest, clone_dir: Path) -> LocationRequest:
        """返回指针替换为选中 tag 的新请求；无需解析或无候选时返回原请求"""
        template = request.effective_pointer
        if template is None or not is_version_template(template):
            return request

        constraint = request.tag_constraint
        tags = self.transport.list_tags(clone_dir)
        candidates = match_tags(tags, template, constraint)
        winner = select_candidate(candidates)
        if winner is None:
            logger.warning(
                "依赖 '%s' 没有满足约束 '%s' 的 tag (模板: %s, 共 %d 个 tag)",
                request.name, constraint, template, len(tags),
            )
            return request

        logger.info(
            "依赖 '%s' 选中 tag %s (版本 %s, 候选 %d 个)",
            request.name, winner.tag, winner.version, len(candidates),
        )
        changes: dict[str, object] = {
            "version_constraint": exact_constraint(winner.version),
            "rel": substitute_version(request.rel, str(winner.version)),
        }
        if request.ref:
            changes.update(ref=winner.tag, branch=None)
        else:
            changes.update(branch=winner.tag, ref=None)
        return dataclasses.replace(request, **changes)
