import tempfile
import unittest
from pathlib import Path

from backend.routers import system_context as system_context_router
from backend.services.system_context import SystemContextLoader


class SystemContextTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.workspace = Path(tmpdir.name)
        (self.workspace / "AGENTS.md").write_text("# Agents\n", encoding="utf-8")
        (self.workspace / "SOUL.md").write_text("Be kind. ✓\n", encoding="utf-8")
        self.loader = SystemContextLoader(self.workspace, ["AGENTS.md", "SOUL.md", "USER.md"])

    def test_existing_files_are_read_verbatim(self) -> None:
        response = system_context_router.get_system_context(loader=self.loader)

        agents, soul, user = response.files
        self.assertTrue(agents.exists)
        self.assertEqual(agents.content, "# Agents\n")
        self.assertEqual(agents.path, str(self.workspace / "AGENTS.md"))
        self.assertEqual(soul.content, "Be kind. ✓\n")
        self.assertEqual(soul.size, len("Be kind. ✓\n".encode("utf-8")))

    def test_missing_files_are_flagged(self) -> None:
        user = self.loader.load_file("USER.md")

        self.assertFalse(user.exists)
        self.assertIsNone(user.content)
        self.assertEqual(user.size, 0)
        self.assertEqual(user.sizeFormatted, "0 B")

    def test_summary_totals_existing_files(self) -> None:
        summary = self.loader.load().summary

        self.assertEqual(summary.total, 3)
        self.assertEqual(summary.existing, 2)
        self.assertEqual(summary.totalSize, len("# Agents\n") + len("Be kind. ✓\n".encode("utf-8")))
        self.assertEqual(summary.totalSizeFormatted, f"{summary.totalSize} B")

    def test_undecodable_file_is_reported_missing(self) -> None:
        (self.workspace / "USER.md").write_bytes(b"\xff\xfe\x00bad")

        with self.assertLogs("clawd_inspector.system_context", level="WARNING") as logs:
            self.assertFalse(self.loader.load_file("USER.md").exists)

        self.assertIn("USER.md", logs.output[0])


if __name__ == "__main__":
    unittest.main()
