"""
Convert Markdown fenced code blocks into Confluence Storage Format.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from markdown2confluence.__main__ import get_help, main
from markdown2confluence.compatibility import override
from markdown2confluence.environment import LANGUAGES_ENV_VAR, ArgumentError, get_language_file
from tests.utility import TypedTestCase

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
)


class TestCommandLine(TypedTestCase):
    temp_dir: tempfile.TemporaryDirectory[str]
    work_dir: Path

    @override
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.work_dir = Path(self.temp_dir.name)

    @override
    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def write_file(self, name: str, content: str) -> Path:
        path = self.work_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_help(self) -> None:
        text = get_help()
        self.assertIn("--languages", text)
        self.assertIn("--no-line-numbers", text)
        self.assertIn("--validate", text)

    def test_convert(self) -> None:
        source = self.write_file("index.md", "Example:\n\n```Python\nprint('hello')\n```\n")
        target = self.work_dir / "index.csf"
        main([source.as_posix(), "--output", target.as_posix(), "--no-line-numbers", "--validate"])

        storage = target.read_text(encoding="utf-8")
        self.assertIn("<p>Example:</p>", storage)
        self.assertIn('<ac:parameter ac:name="linenumbers">false</ac:parameter>', storage)
        self.assertIn('<ac:parameter ac:name="language">py</ac:parameter>', storage)
        self.assertIn("<![CDATA[print('hello')]]>", storage)

    def test_language_file(self) -> None:
        languages = self.write_file("languages.json", '[{"name": "python3", "aliases": ["python"]}]')
        source = self.write_file("index.md", "```python\nx = 1\n```\n")
        target = self.work_dir / "index.csf"
        main([source.as_posix(), "-o", target.as_posix(), "--languages", languages.as_posix()])

        storage = target.read_text(encoding="utf-8")
        self.assertIn('<ac:parameter ac:name="language">python3</ac:parameter>', storage)

    def test_language_file_missing(self) -> None:
        source = self.write_file("index.md", "text\n")
        with mock.patch("sys.stderr"):
            with self.assertRaises(SystemExit) as cm:
                main([source.as_posix(), "--languages", (self.work_dir / "missing.json").as_posix()])
        self.assertEqual(cm.exception.code, 2)

    def test_validate_malformed(self) -> None:
        source = self.write_file("index.md", "```CONFLUENCE-MACRO\nname: info\nrich-text-body: <p>unclosed\n```\n")
        target = self.work_dir / "index.csf"
        with self.assertLogs(level=logging.ERROR):
            with self.assertRaises(SystemExit) as cm:
                main([source.as_posix(), "-o", target.as_posix(), "--validate"])
        self.assertEqual(cm.exception.code, 1)
        self.assertFalse(target.exists())

    def test_environment(self) -> None:
        languages = self.write_file("languages.json", "[]")
        with mock.patch.dict(os.environ, {LANGUAGES_ENV_VAR: languages.as_posix()}):
            self.assertEqual(get_language_file(), languages)
            self.assertEqual(get_language_file(self.work_dir / "languages.json"), languages)
        with mock.patch.dict(os.environ, {LANGUAGES_ENV_VAR: (self.work_dir / "missing.json").as_posix()}):
            with self.assertRaises(ArgumentError):
                get_language_file()
        with mock.patch.dict(os.environ, {LANGUAGES_ENV_VAR: ""}):
            self.assertIsNone(get_language_file())


if __name__ == "__main__":
    unittest.main()
