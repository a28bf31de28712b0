"""FetchService 测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from depfetch.core.config import Config
from depfetch.core.models import LocationRequest
from depfetch.core.package import CachedPackage
from depfetch.services.fetch_service import FetchService

URI = "https://example.com/org/mono.git"


@pytest.fixture()
def svc(tmp_path: Path, fake_git, clone_cache) -> FetchService:
    cfg = Config(cache_dir=str(tmp_path / "cache"), tmp_root=str(tmp_path / "tmp"))
    return FetchService(cfg, transport=fake_git, clone_cache=clone_cache)


class TestFetchService:
    def test_fetch(self, svc: FetchService, fake_git, meta, tmp_path: Path) -> None:
        fake_git.add("master", meta("foo", "1.0.0"))
        pkg = svc.fetch(LocationRequest.create("foo", uri=URI))
        assert pkg.path.parent == tmp_path / "cache"

    def test_install_shares_clone_and_continues(self, svc: FetchService, fake_git, meta) -> None:
        fake_git.add("master", {
            "packages/a/metadata.yml": meta("a", "1.0.0")["metadata.yml"],
            "packages/b/metadata.yml": meta("b", "1.0.0")["metadata.yml"],
        })
        requests = [
            LocationRequest.create("a", uri=URI, rel="packages/${name}"),
            LocationRequest.create("missing", uri=URI, rel="packages/${name}"),
            LocationRequest.create("b", uri=URI, rel="packages/${name}"),
        ]
        results = svc.install(requests)

        assert isinstance(results["a"], CachedPackage)
        assert isinstance(results["b"], CachedPackage)
        assert isinstance(results["missing"], str)
        assert results["missing"].startswith("[FAILED]")
        assert fake_git.count("clone") == 1

    def test_default_transport_from_config(self, tmp_path: Path) -> None:
        cfg = Config(cache_dir=str(tmp_path / "c"), git_bin="/usr/local/bin/git", git_timeout=12)
        svc = FetchService(cfg)
        assert svc.transport.git_bin == "/usr/local/bin/git"  # type: ignore[attr-defined]
        assert svc.transport.timeout == 12  # type: ignore[attr-defined]
