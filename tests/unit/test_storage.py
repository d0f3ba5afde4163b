"""Unit tests for the content store."""

import re

import pytest

from projectninjas.exceptions import StorageError
from projectninjas.kernel.files.storage import (
    ContentStore,
    base_name,
    generate_artifact_name,
    sanitize_filename,
)


class TestSanitizeFilename:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("report.pdf", "report.pdf"),
            ("My Report (v2).pdf", "My_Report_v2.pdf"),
            ("../../etc/passwd", "passwd"),
            ("..\\..\\windows\\system.ini", "system.ini"),
            (".hidden", "hidden"),
            ("...", "file"),
            ("", "file"),
            (None, "file"),
            ("résumé.docx", "rsum.docx"),
        ],
    )
    def test_sanitize(self, raw, expected):
        assert sanitize_filename(raw) == expected

    def test_base_name_strips_both_separators(self):
        assert base_name("a/b\\c/d.txt") == "d.txt"


class TestArtifactNames:

    def test_format(self):
        name = generate_artifact_name("Final Report.pdf")

        assert re.fullmatch(r"\d{13}-\d{9}-Final_Report\.pdf", name)

    def test_names_are_unique(self):
        names = {generate_artifact_name("x.pdf") for _ in range(200)}

        assert len(names) == 200


class TestContentStore:

    def test_resolve_stays_inside_root(self, content_store: ContentStore):
        path = content_store.resolve("123-456-file.pdf")

        assert path.parent == content_store.root

    @pytest.mark.parametrize("name", ["../outside.pdf", "sub/dir.pdf", "/etc/passwd"])
    def test_resolve_rejects_escapes(self, content_store: ContentStore, name):
        with pytest.raises(StorageError):
            content_store.resolve(name)

    def test_write_never_overwrites(self, content_store: ContentStore):
        content_store.write_bytes("a.bin", b"one")

        with pytest.raises(FileExistsError):
            content_store.write_bytes("a.bin", b"two")
        assert content_store.resolve("a.bin").read_bytes() == b"one"

    def test_remove_missing_is_tolerated(self, content_store: ContentStore):
        assert content_store.remove("never-existed.pdf") is False

    def test_remove_existing(self, content_store: ContentStore):
        content_store.write_bytes("b.bin", b"data")

        assert content_store.remove("b.bin") is True
        assert not content_store.exists("b.bin")
