import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi import HTTPException

from backend.models import CONTINUATION, NEW_TURN
from backend.parsers.turn_classifier import default_turn_classifier
from backend.routers import payloads as payloads_router
from backend.services.payload_log import PayloadLog

_LINES = [
    {
        "ts": "2026-02-16T10:00:00Z",
        "stage": "request",
        "runId": "run-1",
        "provider": "anthropic",
        "payloadDigest": "d1",
        "payload": {
            "model": "claude-opus-4",
            "max_tokens": 1024,
            "system": "You are helpful",
            "messages": [{"role": "user", "content": "hello there"}],
            "tools": [{"name": "read"}],
        },
    },
    "this line is not json",
    {"ts": "2026-02-16T10:00:01Z", "stage": "usage", "usage": {"input_tokens": 100, "output_tokens": 20}},
    {
        "ts": "2026-02-16T10:00:02Z",
        "stage": "request",
        "payloadDigest": "d2",
        "payload": {
            "messages": [
                {"role": "user", "content": "hello there"},
                {"role": "assistant", "content": [{"type": "tool_use", "id": "toolu_1", "name": "read", "input": {}}]},
                {"role": "user", "content": [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "file body"}]},
            ],
        },
    },
    {
        "ts": "2026-02-16T10:00:03Z",
        "stage": "usage",
        "usage": {"input_tokens": 150, "output_tokens": 30, "cache_read_input_tokens": 50},
    },
]


class PayloadsRouterTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.path = Path(tmpdir.name) / "anthropic-payload.jsonl"
        rendered = [line if isinstance(line, str) else json.dumps(line) for line in _LINES]
        self.path.write_text("\n".join(rendered) + "\n", encoding="utf-8")
        self.log = PayloadLog(self.path)
        self.missing_log = PayloadLog(Path(tmpdir.name) / "absent.jsonl")

    def _list(self, log: PayloadLog, limit: int = 100, raw: bool = False):
        return payloads_router.list_payloads(limit=limit, raw=raw, log=log, classifier=default_turn_classifier)

    def test_list_reports_not_enabled_when_log_missing(self) -> None:
        response = self._list(self.missing_log)

        self.assertFalse(response.enabled)
        self.assertEqual(response.entries, [])
        self.assertIn("CLAWDBOT_ANTHROPIC_PAYLOAD_LOG=1", response.message)
        self.assertTrue(response.path.endswith("absent.jsonl"))

    def test_list_returns_newest_first_with_summaries(self) -> None:
        response = self._list(self.log)

        self.assertTrue(response.enabled)
        self.assertEqual(response.totalEntries, 4)
        self.assertEqual(response.skippedLines, 1)
        self.assertTrue(response.fileSize.endswith(" B") or response.fileSize.endswith(" KB"))
        self.assertEqual(
            [entry.ts for entry in response.entries],
            ["2026-02-16T10:00:03Z", "2026-02-16T10:00:02Z", "2026-02-16T10:00:01Z", "2026-02-16T10:00:00Z"],
        )
        self.assertIsNone(response.entries[0].summary)
        self.assertEqual(response.entries[1].summary.turnType, CONTINUATION)
        self.assertEqual(response.entries[3].summary.turnType, NEW_TURN)
        self.assertEqual(response.entries[3].summary.model, "claude-opus-4")
        self.assertEqual(response.entries[3].runId, "run-1")
        self.assertTrue(all(entry.payload is None for entry in response.entries))

    def test_list_includes_raw_payload_on_request(self) -> None:
        response = self._list(self.log, raw=True)

        self.assertEqual(response.entries[3].payload["model"], "claude-opus-4")
        self.assertIsNone(response.entries[0].payload)

    def test_list_honors_limit(self) -> None:
        response = self._list(self.log, limit=2)

        self.assertEqual(response.totalEntries, 2)
        self.assertEqual(response.skippedLines, 0)
        self.assertEqual([entry.ts for entry in response.entries], ["2026-02-16T10:00:03Z", "2026-02-16T10:00:02Z"])

    def test_list_clamps_non_positive_limit(self) -> None:
        response = self._list(self.log, limit=0)

        self.assertEqual(response.totalEntries, 1)

    def test_list_surfaces_read_failures_as_500(self) -> None:
        with patch.object(self.log, "read_recent", side_effect=OSError("disk gone")):
            with self.assertRaises(HTTPException) as ctx:
                self._list(self.log)

        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.detail, "disk gone")

    def test_turns_groups_tool_loop_into_one_turn(self) -> None:
        response = payloads_router.list_payload_turns(limit=100, log=self.log, classifier=default_turn_classifier)

        self.assertTrue(response.enabled)
        self.assertEqual(response.skippedLines, 1)
        self.assertEqual(len(response.turns), 1)
        turn = response.turns[0]
        self.assertEqual(turn.id, "d1")
        self.assertEqual(turn.triggeringMessage, "hello there")
        self.assertEqual(turn.messageCount, 1)
        self.assertEqual(turn.requestCount, 2)
        self.assertEqual(turn.usage.input, 250)
        self.assertEqual(turn.usage.output, 50)
        self.assertEqual(turn.usage.cacheRead, 50)
        self.assertEqual([entry.ts for entry in turn.entries][0], "2026-02-16T10:00:00Z")

    def test_turns_reports_not_enabled_when_log_missing(self) -> None:
        response = payloads_router.list_payload_turns(limit=100, log=self.missing_log, classifier=default_turn_classifier)

        self.assertFalse(response.enabled)
        self.assertEqual(response.turns, [])

    def test_get_payload_returns_entry_verbatim(self) -> None:
        entry = payloads_router.get_payload("d2", log=self.log)

        self.assertEqual(entry, _LINES[3])

    def test_get_payload_404_when_digest_missing(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            payloads_router.get_payload("nope", log=self.log)

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.detail, "Payload not found")

    def test_get_payload_404_when_log_missing(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            payloads_router.get_payload("d1", log=self.missing_log)

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.detail, "Payload log not found")


if __name__ == "__main__":
    unittest.main()
