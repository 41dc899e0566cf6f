import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi import HTTPException

from backend.routers import sessions as sessions_router
from backend.services.session_store import SessionStore, is_valid_session_id


def _message(entry_id: str, role: str, text: str) -> dict:
    return {
        "type": "message",
        "id": entry_id,
        "timestamp": "2026-02-16T10:00:00Z",
        "message": {"role": role, "content": [{"type": "text", "text": text}]},
    }


class SessionsRouterTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)
        self.sessions_dir = self.root / "sessions"
        self.sessions_dir.mkdir()

        older = self.sessions_dir / "older.jsonl"
        older.write_text(json.dumps(_message("m1", "user", "hello")) + "\n", encoding="utf-8")
        newer = self.sessions_dir / "newer.jsonl"
        newer.write_text(
            "\n".join(
                [
                    json.dumps(_message("m1", "user", "Deploy the gateway")),
                    "garbage",
                    json.dumps(_message("m2", "assistant", "Deployed.")),
                ]
            )
            + "\n",
            encoding="utf-8",
        )
        (self.sessions_dir / "notes.txt").write_text("ignored", encoding="utf-8")
        os.utime(older, (1_700_000_000, 1_700_000_000))
        os.utime(newer, (1_700_000_500, 1_700_000_500))

        self.store = SessionStore(self.sessions_dir)

    def test_list_sessions_newest_first(self) -> None:
        response = sessions_router.list_sessions(store=self.store)

        self.assertIsNone(response.error)
        self.assertEqual([s.id for s in response.sessions], ["newer", "older"])
        self.assertEqual(response.sessions[0].filename, "newer.jsonl")
        self.assertTrue(response.sessions[0].modifiedTime.endswith("Z"))
        self.assertEqual(response.sessions[1].modifiedTime, "2023-11-14T22:13:20.000Z")
        self.assertTrue(response.sessions[1].sizeFormatted.endswith(" B"))

    def test_list_sessions_reports_missing_directory(self) -> None:
        response = sessions_router.list_sessions(store=SessionStore(self.root / "absent"))

        self.assertEqual(response.sessions, [])
        self.assertEqual(response.error, "Sessions directory not found")

    def test_list_sessions_surfaces_read_failures_as_500(self) -> None:
        with patch.object(self.store, "list_sessions", side_effect=PermissionError("denied")):
            with self.assertRaises(HTTPException) as ctx:
                sessions_router.list_sessions(store=self.store)

        self.assertEqual(ctx.exception.status_code, 500)

    def test_get_session_returns_entries_and_stats(self) -> None:
        session = sessions_router.get_session("newer", store=self.store)

        self.assertEqual(session.id, "newer")
        self.assertEqual(len(session.entries), 2)
        self.assertEqual(session.skippedLines, 1)
        self.assertEqual(session.stats.userMessages, 1)
        self.assertEqual(session.stats.assistantMessages, 1)

    def test_get_session_404_when_missing(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            sessions_router.get_session("S-missing", store=self.store)

        self.assertEqual(ctx.exception.status_code, 404)

    def test_get_session_rejects_path_traversal(self) -> None:
        (self.root / "secret.jsonl").write_text(json.dumps(_message("x", "user", "secret")), encoding="utf-8")

        with self.assertRaises(HTTPException) as ctx:
            sessions_router.get_session("../secret", store=self.store)

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertFalse(is_valid_session_id("../secret"))
        self.assertFalse(is_valid_session_id("a/b"))
        self.assertTrue(is_valid_session_id("2026-02-16_abc.def"))

    def test_messages_endpoint_filters(self) -> None:
        entries = sessions_router.get_session_messages("newer", role="assistant", q="", store=self.store)
        self.assertEqual([e.id for e in entries], ["m2"])

        entries = sessions_router.get_session_messages("newer", role="all", q="gateway", store=self.store)
        self.assertEqual([e.id for e in entries], ["m1"])

    def test_messages_endpoint_rejects_unknown_role(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            sessions_router.get_session_messages("newer", role="robot", q="", store=self.store)

        self.assertEqual(ctx.exception.status_code, 400)

    def test_export_returns_markdown_attachment(self) -> None:
        response = sessions_router.export_session("newer", store=self.store)

        self.assertTrue(response.media_type.startswith("text/markdown"))
        self.assertEqual(response.headers["content-disposition"], 'attachment; filename="session-newer.md"')
        body = response.body.decode("utf-8")
        self.assertTrue(body.startswith("# Session: newer\n"))
        self.assertIn("Deploy the gateway", body)


if __name__ == "__main__":
    unittest.main()
