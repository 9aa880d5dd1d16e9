"""Tests for the flattened directory walk and tree-row formatting.

Covers pre-order layout, hidden-file filtering, deterministic ordering,
and the best-effort handling of unreadable or missing directories.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dirpane.theme import PLAIN_THEME
from dirpane.tree import (
    TreeEntry,
    build_tree_entries,
    format_plain_tree,
    format_tree_entry,
    list_directory_children,
)


def _layout(entries: list[TreeEntry]) -> list[tuple[str, int, bool]]:
    return [(entry.name, entry.depth, entry.is_dir) for entry in entries]


def _make_tree(root: Path, layout: dict) -> None:
    for name, value in layout.items():
        target = root / name
        if isinstance(value, dict):
            target.mkdir()
            _make_tree(target, value)
        else:
            target.write_text(value, encoding="utf-8")


class BuildTreeEntriesTests(unittest.TestCase):
    def test_directory_children_follow_directly_after_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_tree(root, {"a.txt": "a", "b": {"c.txt": "c"}, "d.txt": "d"})

            entries = build_tree_entries(root, show_hidden=False)

        self.assertEqual(
            _layout(entries),
            [
                ("a.txt", 0, False),
                ("b", 0, True),
                ("c.txt", 1, False),
                ("d.txt", 0, False),
            ],
        )
        self.assertEqual(entries[2].path, root / "b" / "c.txt")

    def test_every_directory_subtree_is_a_contiguous_block(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_tree(
                root,
                {
                    "src": {"pkg": {"mod.py": "", "sub": {"deep.py": ""}}, "main.py": ""},
                    "docs": {"index.md": ""},
                    "empty": {},
                    "README": "",
                },
            )

            entries = build_tree_entries(root, show_hidden=False)

        for idx, entry in enumerate(entries):
            if not entry.is_dir:
                continue
            end = idx + 1
            while end < len(entries) and entries[end].depth > entry.depth:
                end += 1
            block = entries[idx + 1 : end]
            for child in block:
                self.assertIn(entry.path, child.path.parents)
            # Nothing after the block belongs to this directory.
            for later in entries[end:]:
                self.assertNotIn(entry.path, later.path.parents)

    def test_children_are_sorted_by_code_point(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_tree(root, {"b.txt": "", "B.txt": "", "a.txt": "", "_x": ""})

            names = [entry.name for entry in build_tree_entries(root, show_hidden=False)]

        self.assertEqual(names, ["B.txt", "_x", "a.txt", "b.txt"])

    def test_hidden_entries_and_their_subtrees_are_excluded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_tree(
                root,
                {
                    ".git": {"config": "", "objects": {"x": ""}},
                    ".env": "SECRET=1",
                    "src": {".cache": {"blob": ""}, "app.py": ""},
                },
            )

            hidden_off = build_tree_entries(root, show_hidden=False)
            hidden_on = build_tree_entries(root, show_hidden=True)

        self.assertEqual(_layout(hidden_off), [("src", 0, True), ("app.py", 1, False)])
        for entry in hidden_off:
            parts = entry.path.relative_to(root).parts
            self.assertFalse(any(part.startswith(".") for part in parts))

        self.assertEqual(
            _layout(hidden_on),
            [
                (".env", 0, False),
                (".git", 0, True),
                ("config", 1, False),
                ("objects", 1, True),
                ("x", 2, False),
                ("src", 0, True),
                (".cache", 1, True),
                ("blob", 2, False),
                ("app.py", 1, False),
            ],
        )

    def test_missing_root_yields_empty_tree(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "gone"
            self.assertEqual(build_tree_entries(missing, show_hidden=False), [])

    def test_unreadable_subdirectory_is_listed_without_children(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_tree(root, {"locked": {"inner.txt": ""}, "open": {"file.txt": ""}})
            real_scandir = os.scandir

            def fake_scandir(path):
                if Path(path).name == "locked":
                    raise PermissionError("denied")
                return real_scandir(path)

            with mock.patch("dirpane.tree.os.scandir", side_effect=fake_scandir):
                entries = build_tree_entries(root, show_hidden=False)

        self.assertEqual(
            _layout(entries),
            [("locked", 0, True), ("open", 0, True), ("file.txt", 1, False)],
        )

    def test_symlinked_directory_is_listed_but_not_entered(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _make_tree(root, {"real": {"file.txt": ""}})
            os.symlink(root, root / "zloop")

            entries = build_tree_entries(root, show_hidden=False)

        self.assertEqual(
            _layout(entries),
            [("real", 0, True), ("file.txt", 1, False), ("zloop", 0, True)],
        )

    def test_list_directory_children_reports_scan_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            children, error = list_directory_children(Path(tmp) / "missing", show_hidden=True)

        self.assertEqual(children, [])
        self.assertIsInstance(error, OSError)


class FormatTreeEntryTests(unittest.TestCase):
    def test_rows_indent_two_spaces_per_depth_and_mark_directories(self) -> None:
        root = Path("/work")
        self.assertEqual(format_tree_entry(TreeEntry(root / "b", 0, True), PLAIN_THEME), "b/")
        self.assertEqual(format_tree_entry(TreeEntry(root / "b" / "c.txt", 1, False), PLAIN_THEME), "  c.txt")
        self.assertEqual(
            format_tree_entry(TreeEntry(root / "b" / "x" / "y.py", 2, False), PLAIN_THEME),
            "    y.py",
        )

    def test_default_theme_colors_directory_names(self) -> None:
        row = format_tree_entry(TreeEntry(Path("/work/src"), 1, True))
        self.assertTrue(row.startswith("  \033["))
        self.assertIn("src/", row)
        self.assertTrue(row.endswith("\033[0m"))

    def test_plain_tree_has_one_line_per_entry(self) -> None:
        root = Path("/work")
        entries = [
            TreeEntry(root / "a.txt", 0, False),
            TreeEntry(root / "b", 0, True),
            TreeEntry(root / "b" / "c.txt", 1, False),
        ]
        self.assertEqual(format_plain_tree(entries), "a.txt\nb/\n  c.txt\n")


if __name__ == "__main__":
    unittest.main()
