"""Tests for trill.static — static file resolution."""

from pathlib import Path

import pytest

from trill.static import StaticFiles


@pytest.fixture
def site(tmp_path: Path) -> Path:
    (tmp_path / "css").mkdir()
    (tmp_path / "css" / "site.css").write_text("body {}")
    (tmp_path / "index.html").write_text("<h1>Home</h1>")
    (tmp_path / "docs").mkdir()
    return tmp_path


class TestRootPrefix:
    def test_file(self, site: Path) -> None:
        assert StaticFiles(site).resolve("/css/site.css") == (site / "css" / "site.css").resolve()

    def test_missing(self, site: Path) -> None:
        assert StaticFiles(site).resolve("/css/none.css") is None

    def test_root_serves_index(self, site: Path) -> None:
        assert StaticFiles(site).resolve("/") == (site / "index.html").resolve()

    def test_directory_without_index(self, site: Path) -> None:
        assert StaticFiles(site).resolve("/docs") is None

    def test_traversal(self, site: Path) -> None:
        assert StaticFiles(site / "css").resolve("/../index.html") is None


class TestPrefix:
    def test_under_prefix(self, site: Path) -> None:
        static = StaticFiles(site, prefix="/static/")
        assert static.resolve("/static/css/site.css") is not None

    def test_outside_prefix(self, site: Path) -> None:
        static = StaticFiles(site, prefix="/static")
        assert static.resolve("/css/site.css") is None

    def test_prefix_lookalike(self, site: Path) -> None:
        static = StaticFiles(site, prefix="/static")
        assert static.resolve("/staticcss/site.css") is None
