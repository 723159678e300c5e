"""Tests for documentation file discovery."""

import shutil
import subprocess
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from snippetcheck.core.errors import ContentRootError
from snippetcheck.core.loader import (
    _list_with_ripgrep,
    _list_with_walk,
    collect_documents,
    load_document,
)


def make_tree(root: Path, files):
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("# doc\n", encoding="utf-8")


class TestCollectDocuments:
    """File listing with the directory walk."""

    @pytest.fixture(autouse=True)
    def no_ripgrep(self):
        with patch("snippetcheck.core.loader.shutil.which", return_value=None):
            yield

    def test_finds_nested_mdx_files(self, tmp_path, monkeypatch):
        make_tree(tmp_path / "docs", ["intro.mdx", "guide/setup.mdx", "guide/notes.md"])
        monkeypatch.chdir(tmp_path)

        files = collect_documents("docs")

        assert files == ["docs/guide/setup.mdx", "docs/intro.mdx"]

    def test_paths_keep_root_prefix(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "content"
            make_tree(root, ["a.mdx"])

            files = collect_documents(root)

            assert files == [f"{root.as_posix()}/a.mdx"]

    def test_sorted_output(self, tmp_path):
        make_tree(tmp_path, ["b.mdx", "a.mdx", "c/a.mdx"])

        files = collect_documents(tmp_path)

        assert files == sorted(files)
        assert len(files) == 3

    def test_exclude_directory_name(self, tmp_path):
        make_tree(tmp_path, ["keep.mdx", "node_modules/pkg/readme.mdx"])

        files = collect_documents(tmp_path, exclude=["node_modules"])

        assert [Path(f).name for f in files] == ["keep.mdx"]

    def test_exclude_glob(self, tmp_path):
        make_tree(tmp_path, ["keep.mdx", "drafts/wip.mdx"])

        files = collect_documents(tmp_path, exclude=["drafts/*"])

        assert [Path(f).name for f in files] == ["keep.mdx"]

    def test_custom_extension(self, tmp_path):
        make_tree(tmp_path, ["a.mdx", "b.md"])

        files = collect_documents(tmp_path, extension=".md")

        assert [Path(f).name for f in files] == ["b.md"]

    def test_empty_root(self, tmp_path):
        assert collect_documents(tmp_path) == []

    def test_missing_root(self, tmp_path):
        with pytest.raises(ContentRootError):
            collect_documents(tmp_path / "missing")

    def test_root_is_file(self, tmp_path):
        target = tmp_path / "file.mdx"
        target.write_text("", encoding="utf-8")

        with pytest.raises(ContentRootError):
            collect_documents(target)


class TestRipgrepListing:
    """ripgrep is preferred when installed."""

    def test_uses_ripgrep_output(self, tmp_path):
        result = MagicMock(stdout="./b.mdx\na.mdx\n\n")
        with patch("snippetcheck.core.loader.shutil.which", return_value="/usr/bin/rg"), \
                patch("snippetcheck.core.loader.subprocess.run", return_value=result) as run:
            files = collect_documents(tmp_path)

        args, kwargs = run.call_args
        assert args[0] == ["/usr/bin/rg", "--files", "--hidden", "--no-ignore", "-g", "*.mdx"]
        assert kwargs["cwd"] == tmp_path
        assert files == [f"{tmp_path.as_posix()}/a.mdx", f"{tmp_path.as_posix()}/b.mdx"]

    def test_falls_back_when_ripgrep_fails(self, tmp_path):
        make_tree(tmp_path, ["a.mdx"])
        error = subprocess.CalledProcessError(2, ["rg"])
        with patch("snippetcheck.core.loader.shutil.which", return_value="/usr/bin/rg"), \
                patch("snippetcheck.core.loader.subprocess.run", side_effect=error):
            files = collect_documents(tmp_path)

        assert files == [f"{tmp_path.as_posix()}/a.mdx"]


class TestListingEquivalence:
    """Both listing strategies see hidden and ignored files alike."""

    @pytest.fixture
    def tree(self, tmp_path):
        make_tree(tmp_path, ["a.mdx", ".drafts/b.mdx", "gen/c.mdx"])
        (tmp_path / ".ignore").write_text("gen/\n", encoding="utf-8")
        (tmp_path / ".gitignore").write_text("gen/\n.drafts/\n", encoding="utf-8")
        return tmp_path

    def test_walk_includes_hidden_and_ignored(self, tree):
        assert sorted(_list_with_walk(tree, ".mdx")) == [".drafts/b.mdx", "a.mdx", "gen/c.mdx"]

    @pytest.mark.skipif(shutil.which("rg") is None, reason="ripgrep not installed")
    def test_ripgrep_matches_walk(self, tree):
        listed = [p[2:] if p.startswith("./") else p for p in _list_with_ripgrep(tree, ".mdx")]

        assert sorted(listed) == sorted(_list_with_walk(tree, ".mdx"))

    def test_collect_documents_includes_hidden(self, tree):
        with patch("snippetcheck.core.loader.shutil.which", return_value=None):
            files = collect_documents(tree)

        assert f"{tree.as_posix()}/.drafts/b.mdx" in files
        assert f"{tree.as_posix()}/gen/c.mdx" in files


class TestLoadDocument:
    """Reading document text."""

    def test_reads_text(self, tmp_path):
        path = tmp_path / "page.mdx"
        path.write_text("héllo\n", encoding="utf-8")

        document = load_document(path)

        assert document.raw_text == "héllo\n"
        assert document.path == path.as_posix()

    def test_invalid_bytes_replaced(self, tmp_path):
        path = tmp_path / "page.mdx"
        path.write_bytes(b"ok \xff\n")

        assert load_document(path).raw_text.startswith("ok ")

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_document(tmp_path / "missing.mdx")
