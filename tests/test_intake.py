"""Tests for directory intake."""

from __future__ import annotations

from pathlib import Path

import pytest

from blockdoc.intake import ProjectLoader, file_extension, is_supported
from tests._fixtures.project_builder import ProjectBuilder


def test_loader_collects_supported_files(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/utils/math.js": "export function add(a, b) { return a + b; }\n",
            "package.json": '{"name": "demo"}\n',
            "LICENSE": "MIT\n",
            "assets/logo.png": "not really a png\n",
            "node_modules/left-pad/index.js": "module.exports = 1;\n",
        }
    )

    project = project_builder.load()

    paths = [file.path for file in project.files]
    assert paths == ["LICENSE", "package.json", "src/utils/math.js"]
    assert project.name == "project"
    assert project.file_count == 3
    assert project.total_size == sum(file.size for file in project.files)
    math = project.files[-1]
    assert math.name == "math.js"
    assert math.extension == "js"
    assert project.files[0].extension == "unknown"


def test_loader_honours_gitignore_and_exclude_patterns(tmp_path: Path) -> None:
    builder = ProjectBuilder(tmp_path)
    builder.write(
        {
            ".gitignore": "dist/\n*.log.txt\n!keep.log.txt\n",
            "dist/bundle.js": "var x = 1;\n",
            "debug.log.txt": "noise\n",
            "keep.log.txt": "signal\n",
            "vendor/lib.js": "var y = 2;\n",
            "app.js": "var z = 3;\n",
        }
    )

    loader = ProjectLoader(exclude_paths=["vendor/"])
    project = loader.load(builder.path(), name="custom")

    assert project.name == "custom"
    assert [file.path for file in project.files] == [".gitignore", "app.js", "keep.log.txt"]


def test_loader_skips_large_and_undecodable_files(tmp_path: Path) -> None:
    builder = ProjectBuilder(tmp_path)
    builder.write({"small.js": "var a = 1;\n", "big.js": "x" * 200})
    (builder.path() / "binary.txt").write_bytes(b"\xff\xfe\x00bad")

    loader = ProjectLoader(max_file_size=100)
    project = loader.load(builder.path())

    assert [file.path for file in project.files] == ["small.js"]
    assert loader.last_stats.total == 3
    assert loader.last_stats.supported == 1
    assert sorted(loader.last_stats.skipped) == ["big.js", "binary.txt"]


def test_loader_rejects_missing_or_file_roots(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ProjectLoader().load(tmp_path / "missing")

    target = tmp_path / "file.js"
    target.write_text("var a;", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        ProjectLoader().load(target)


def test_supported_names_and_extensions() -> None:
    assert is_supported("main.PY")
    assert is_supported("README")
    assert is_supported("LICENSE-MIT")
    assert not is_supported("photo.jpeg")
    assert file_extension("archive.tar.gz") == "gz"
    assert file_extension("Makefile") == "unknown"
    assert file_extension(".env") == "env"
