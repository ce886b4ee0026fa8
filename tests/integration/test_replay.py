"""Replay scripts through a real asyncio loop.

Offsets and pause windows are kept small; margins between a silence commit
and the automatic stop are at least 50ms.
"""

import json

import pytest

from matilda_scribe.recognition import EngineRuntimeError, SessionConfig
from matilda_scribe.replay import ScriptError, load_script, parse_event, replay_script


def _write_script(path, events, extra_lines=()):
    lines = list(extra_lines) + [json.dumps(event, ensure_ascii=False) for event in events]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class TestLoadScript:
    def test_skips_comments_and_sorts(self, tmp_path):
        path = _write_script(
            tmp_path / "events.jsonl",
            [
                {"at_ms": 300, "type": "end"},
                {"at_ms": 100, "type": "result", "results": ["xin"]},
                {"at_ms": 0, "type": "start"},
            ],
            extra_lines=["# recorded on a phone", ""],
        )

        events = load_script(path)

        assert [event.type for event in events] == ["start", "result", "end"]
        assert events[1].results[0].transcript == "xin"
        assert events[1].results[0].is_final is False

    def test_invalid_json_reports_line(self, tmp_path):
        path = tmp_path / "broken.jsonl"
        path.write_text('{"type": "start"}\n{not json}\n', encoding="utf-8")

        with pytest.raises(ScriptError) as exc_info:
            load_script(path)

        assert exc_info.value.line_no == 2
        assert "line 2" in str(exc_info.value)

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "an", "object"],
            {"type": "pause"},
            {"type": "result", "at_ms": -1},
            {"type": "result", "at_ms": "soon"},
            {"type": "result", "results": [42]},
        ],
    )
    def test_parse_event_rejects(self, data):
        with pytest.raises(ScriptError):
            parse_event(data)

    def test_parse_event_fields(self):
        event = parse_event(
            {
                "at_ms": 250,
                "type": "result",
                "result_index": 1,
                "results": [{"transcript": "alo", "is_final": True}, "alo 1"],
            }
        )
        assert event.at_ms == 250
        assert event.result_index == 1
        assert [(r.transcript, r.is_final) for r in event.results] == [("alo", True), ("alo 1", False)]

        error = parse_event({"type": "error", "error": "network", "message": "offline"})
        assert (error.error, error.message, error.at_ms) == ("network", "offline", 0)


class TestReplayScript:
    @pytest.mark.asyncio
    async def test_debounced_commit_and_auto_stop(self, tmp_path):
        events = load_script(
            _write_script(
                tmp_path / "debounced.jsonl",
                [
                    {"at_ms": 0, "type": "result", "results": ["xin"]},
                    {"at_ms": 20, "type": "result", "results": ["xin chào"]},
                    {"at_ms": 40, "type": "result", "results": [{"transcript": "xin chào.", "is_final": True}]},
                ],
            )
        )

        outcome = await replay_script(events, SessionConfig(strategy="debounced", pause_ms=50))

        assert [item.text for item in outcome.committed] == ["xin chào"]
        assert outcome.transcript == "xin chào"
        assert outcome.errors == []
        assert outcome.metrics.results_received == 3
        assert outcome.metrics.commits == 1

    @pytest.mark.asyncio
    async def test_incremental_with_end_event(self, tmp_path):
        events = load_script(
            _write_script(
                tmp_path / "incremental.jsonl",
                [
                    {"at_ms": 0, "type": "start"},
                    {"at_ms": 10, "type": "result", "results": [{"transcript": "alo", "is_final": True}]},
                    {
                        "at_ms": 20,
                        "type": "result",
                        "results": [
                            {"transcript": "alo", "is_final": True},
                            {"transcript": "alo 1", "is_final": True},
                        ],
                    },
                    {"at_ms": 30, "type": "error", "error": "no-speech"},
                    {"at_ms": 40, "type": "end"},
                ],
            )
        )

        outcome = await replay_script(events, SessionConfig(strategy="incremental"))

        assert outcome.transcript == "alo\n1"
        assert len(outcome.errors) == 1
        assert isinstance(outcome.errors[0], EngineRuntimeError)
        assert outcome.errors[0].code == "no-speech"

    @pytest.mark.asyncio
    async def test_empty_script_stops_cleanly(self):
        outcome = await replay_script([], SessionConfig(pause_ms=20))
        assert outcome.items == []
        assert outcome.errors == []
