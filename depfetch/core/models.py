"""核心数据模型

- LocationRequest: 单个 Git 来源依赖的寻址请求（不可变）
- ResolvedLocation: 解析完成后实际检出的寻址信息
- TagCandidate: tag 解析过程中的候选项
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from semantic_version import SimpleSpec, Version

from depfetch.core.exceptions import ConfigError

LOCATION_KEY = "git"
VALID_OPTIONS = frozenset(("git", "ref", "branch", "tag", "rel", "version_from_metadata"))
DEFAULT_BRANCH = "master"


@dataclass(frozen=True)
class LocationRequest:
    """Git 来源依赖的寻址请求

    通过 create() / from_options() 构造：补全默认分支、替换 ${name}、校验地址。
    ref 与 branch 同时存在时以 ref 为准。
    """

    name: str
    version_constraint: SimpleSpec
    uri: str
    ref: str | None = None
    branch: str | None = None
    rel: str | None = None
    version_from_metadata: str | None = None

    @classmethod
    def create(
        cls,
        name: str,
        version_constraint: str | SimpleSpec | None = None,
        *,
        uri: str,
        ref: str | None = None,
        branch: str | None = None,
        tag: str | None = None,
        rel: str | None = None,
        version_from_metadata: str | None = None,
        default_branch: str = DEFAULT_BRANCH,
    ) -> LocationRequest:
        from depfetch.core.location.substitution import substitute_variables
        from depfetch.core.location.versioning import parse_constraint
        from depfetch.utils.net import validate_git_uri

        branch = branch or tag
        if not branch and not ref:
            branch = default_branch

        validate_git_uri(uri)
        return cls(
            name=name,
            version_constraint=parse_constraint(version_constraint),
            uri=uri,
            ref=substitute_variables(ref, name),
            branch=substitute_variables(branch, name),
            rel=substitute_variables(rel, name),
            version_from_metadata=version_from_metadata,
        )

    @classmethod
    def from_options(
        cls,
        name: str,
        version_constraint: str | SimpleSpec | None,
        options: Mapping[str, Any],
        *,
        default_branch: str = DEFAULT_BRANCH,
    ) -> LocationRequest:
        """从选项字典构造，仅接受 git/ref/branch/tag/rel/version_from_metadata"""
        unknown = sorted(set(options) - VALID_OPTIONS)
        if unknown:
            raise ConfigError(
                f"依赖 '{name}' 的 git 来源包含不支持的选项: {', '.join(unknown)}。"
                f"可用: {', '.join(sorted(VALID_OPTIONS))}"
            )

        def _opt(key: str) -> str | None:
            value = options.get(key)
            return None if value is None else str(value)

        return cls.create(
            name,
            version_constraint,
            uri=_opt("git") or "",
            ref=_opt("ref"),
            branch=_opt("branch"),
            tag=_opt("tag"),
            rel=_opt("rel"),
            version_from_metadata=_opt("version_from_metadata"),
            default_branch=default_branch,
        )

    @property
    def effective_pointer(self) -> str | None:
        """实际用于 checkout 的指针"""
        return self.ref or self.branch

    @property
    def tag_constraint(self) -> SimpleSpec:
        """用于筛选版本 tag 的约束

        调用方显式提供 version_from_metadata 时以其为准，否则使用 version_constraint。
        """
        if self.version_from_metadata:
            from depfetch.core.location.versioning import parse_constraint
            return parse_constraint(self.version_from_metadata)
        return self.version_constraint


@dataclass(frozen=True)
class ResolvedLocation:
    """解析后的寻址信息，ref 始终是实际检出的提交"""

    name: str
    version_constraint: SimpleSpec
    uri: str
    ref: str
    branch: str | None = None
    rel: str | None = None

    def to_dict(self) -> dict[str, str]:
        result = {"type": LOCATION_KEY, "value": self.uri}
        if self.branch:
            result["branch"] = self.branch
        result["ref"] = self.ref
        if self.rel:
            result["rel"] = self.rel
        return result

    def __str__(self) -> str:
        s = f"{LOCATION_KEY}: '{self.uri}'"
        if self.branch:
            s += f" with branch: '{self.branch}'"
        if self.ref:
            s += f" at ref: '{self.ref}'"
        return s


@dataclass
class TagCandidate:
    """版本 tag 候选"""

    tag: str
    version: Version
