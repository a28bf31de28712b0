"""CachedPackage / 包结构 / 内容校验测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from semantic_version import SimpleSpec, Version

from depfetch.core.exceptions import (
    ConstraintNotSatisfied,
    ContentValidationError,
    InvalidPackageFiles,
    MismatchedPackageName,
)
from depfetch.core.models import ResolvedLocation
from depfetch.core.package import CachedPackage, MetadataLayout, PackageValidator


def _location(constraint: str = ">=0.0.0", name: str = "foo") -> ResolvedLocation:
    return ResolvedLocation(
        name=name, version_constraint=SimpleSpec(constraint),
        uri="https://example.com/foo.git", ref="c0ffee",
    )


def _pkg_dir(tmp_path: Path, body: str = "name: foo\nversion: 1.2.0\n") -> Path:
    d = tmp_path / "foo"
    d.mkdir()
    (d / "metadata.yml").write_text(body, encoding="utf-8")
    return d


class TestMetadataLayout:
    def test_marker_present(self, tmp_path: Path) -> None:
        assert MetadataLayout().looks_like_package(_pkg_dir(tmp_path))

    @pytest.mark.parametrize("filename", ["metadata.yaml", "metadata.json"])
    def test_alternative_markers(self, tmp_path: Path, filename: str) -> None:
        (tmp_path / filename).write_text("{}", encoding="utf-8")
        assert MetadataLayout().looks_like_package(tmp_path)

    def test_marker_absent(self, tmp_path: Path) -> None:
        (tmp_path / "README").write_text("x")
        assert not MetadataLayout().looks_like_package(tmp_path)
        assert not MetadataLayout().looks_like_package(tmp_path / "missing")


class TestCachedPackage:
    def test_from_yaml(self, tmp_path: Path) -> None:
        pkg = CachedPackage.from_store_path(_pkg_dir(tmp_path), _location())
        assert pkg.name == "foo"
        assert pkg.version == Version("1.2.0")
        assert pkg.commit == "c0ffee"
        assert pkg.key == ("foo", "c0ffee")

    def test_from_json(self, tmp_path: Path) -> None:
        (tmp_path / "metadata.json").write_text(json.dumps({"name": "foo", "version": "2.0"}))
        pkg = CachedPackage.from_store_path(tmp_path, _location())
        assert pkg.version == Version("2.0.0")

    def test_defaults(self, tmp_path: Path) -> None:
        pkg = CachedPackage.from_store_path(_pkg_dir(tmp_path, "description: x\n"), _location())
        assert pkg.name == "foo"
        assert pkg.version == Version("0.0.0")

    def test_bad_version(self, tmp_path: Path) -> None:
        with pytest.raises(ContentValidationError, match="版本号无效"):
            CachedPackage.from_store_path(_pkg_dir(tmp_path, "version: banana\n"), _location())

    def test_missing_metadata(self, tmp_path: Path) -> None:
        with pytest.raises(ContentValidationError, match="缺少元数据"):
            CachedPackage.from_store_path(tmp_path, _location())

    def test_to_dict(self, tmp_path: Path) -> None:
        d = CachedPackage.from_store_path(_pkg_dir(tmp_path), _location()).to_dict()
        assert d["version"] == "1.2.0"
        assert d["location"]["ref"] == "c0ffee"


class TestPackageValidator:
    def test_ok(self, tmp_path: Path) -> None:
        PackageValidator().validate(CachedPackage.from_store_path(_pkg_dir(tmp_path), _location()))

    def test_name_mismatch(self, tmp_path: Path) -> None:
        pkg = CachedPackage.from_store_path(_pkg_dir(tmp_path), _location(name="bar"))
        with pytest.raises(MismatchedPackageName):
            PackageValidator().validate(pkg)

    def test_constraint(self, tmp_path: Path) -> None:
        pkg = CachedPackage.from_store_path(_pkg_dir(tmp_path), _location("==1.3.0"))
        with pytest.raises(ConstraintNotSatisfied, match="不满足约束"):
            PackageValidator().validate(pkg)

    def test_whitespace_files(self, tmp_path: Path) -> None:
        d = _pkg_dir(tmp_path)
        (d / "bad name.txt").write_text("x")
        (d / ".git").mkdir()
        (d / ".git" / "ignored file").write_text("x")
        pkg = CachedPackage.from_store_path(d, _location())
        with pytest.raises(InvalidPackageFiles) as exc:
            PackageValidator().validate(pkg)
        assert exc.value.files == ["bad name.txt"]
