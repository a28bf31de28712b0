"""CLI — Git 依赖拉取命令"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any

import click

from depfetch.core.config import get_config
from depfetch.core.exceptions import DepFetchError
from depfetch.core.models import LocationRequest


def register(group: click.Group) -> None:
    group.add_command(fetch)
    group.add_command(install)
    group.add_command(show)


def _location_options(func: Any) -> Any:
    """fetch / show 共用的位置选项"""
    options = [
        click.argument("name"),
        click.option("--git", "uri", required=True, help="Git 仓库地址"),
        click.option("--branch", default=None, help="分支名，可含 ${version}"),
        click.option("--tag", default=None, help="同 --branch"),
        click.option("--ref", default=None, help="提交或其别名，优先于 --branch"),
        click.option("--rel", default=None, help="包在仓库内的相对路径"),
        click.option("--constraint", default=None, help="版本约束，如 '>= 1.1.0, < 2.0.0'"),
        click.option("--version-from-metadata", default=None, help="用于筛选 tag 的版本约束（覆盖 --constraint）"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_request(name: str, uri: str, **kwargs: str | None) -> LocationRequest:
    try:
        return LocationRequest.create(
            name,
            kwargs.pop("constraint"),
            uri=uri,
            default_branch=get_config().default_branch,
            **kwargs,
        )
    except DepFetchError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e


@click.command()
@_location_options
@click.option("--dest", default=None, help="落地根目录（默认取配置 cache_dir）")
@click.option("--json", "as_json", is_flag=True, help="以 JSON 输出结果")
def fetch(name: str, uri: str, dest: str | None, as_json: bool, **kwargs: str | None) -> None:
    """解析单个 Git 依赖并落地到缓存目录"""
    from depfetch.services.fetch_service import FetchService

    request = _build_request(name, uri, **kwargs)
    cfg = get_config()
    if dest:
        cfg = replace(cfg, cache_dir=dest)
    try:
        package = FetchService(cfg).fetch(request)
    except DepFetchError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e

    if as_json:
        click.echo(json.dumps(package.to_dict(), ensure_ascii=False, indent=2))
    else:
        click.echo(f"就绪: {package.name} {package.version} ({package.location}) -> {package.path}")


@click.command()
@click.option("--manifest", "-m", default=None, help="依赖清单路径（默认取配置 manifest）")
@click.option("--dest", default=None, help="落地根目录（默认取配置 cache_dir）")
def install(manifest: str | None, dest: str | None) -> None:
    """按清单依次解析全部 Git 依赖"""
    from depfetch.services.fetch_service import FetchService
    from depfetch.services.manifest import Manifest

    cfg = get_config()
    if dest:
        cfg = replace(cfg, cache_dir=dest)
    try:
        requests = Manifest(manifest or cfg.manifest, cfg.default_branch).load()
    except DepFetchError as e:
        raise click.ClickException(f"[{e.code}] {e}") from e
    if not requests:
        click.echo("清单中没有 git 依赖。")
        return

    results = FetchService(cfg).install(requests)
    failed = 0
    for name, result in results.items():
        if isinstance(result, str):
            failed += 1
            click.echo(f"  {name:20s} {result}")
        else:
            click.echo(f"  {name:20s} {str(result.version):10s} {result.location}")
    if failed:
        raise click.ClickException(f"{failed} 个依赖拉取失败")


@click.command()
@_location_options
def show(name: str, uri: str, **kwargs: str | None) -> None:
    """显示解析前的寻址信息（不访问网络）"""
    request = _build_request(name, uri, **kwargs)
    click.echo(f"name:       {request.name}")
    click.echo(f"constraint: {request.version_constraint}")
    click.echo(f"uri:        {request.uri}")
    for label, value in (("branch", request.branch), ("ref", request.ref), ("rel", request.rel)):
        if value:
            click.echo(f"{label + ':':11s} {value}")
