from __future__ import annotations

import json
import unittest

from evolution_metadata.config import RewriteConfig
from evolution_metadata.json_render import dumps_generic, render_compact
from evolution_metadata.json_rewriter import rewrite_metadata_json
from evolution_metadata.proposal_status import ProposalStatus
from tests.status_fixtures import ALL_VARIANTS


def _metadata(statuses: list[ProposalStatus], version_count: int = 23) -> dict:
    return {
        "commit": "abc123",
        "implementationVersions": [f"5.{index}" for index in range(version_count)],
        "proposals": [
            {
                "authors": [{"link": "https://example.invalid", "name": "Ana"}],
                "id": f"SE-{index:04d}",
                "status": status,
                "summary": "Nöt ASCII, kept",
                "trackingBugs": [],
                "upcomingFeatureFlag": {},
            }
            for index, status in enumerate(statuses, start=1)
        ],
        "schemaVersion": "1.0.0",
        "toolVersion": 1.5,
        "warnings": None,
    }


class DumpsGenericTests(unittest.TestCase):
    def test_generic_layout_uses_spaced_separators(self) -> None:
        text = dumps_generic({"status": ProposalStatus.implemented("5.9"), "title": "x"})
        self.assertEqual(
            text,
            "{\n"
            "  \"status\" : {\n"
            "    \"state\" : \"implemented\",\n"
            "    \"version\" : \"5.9\"\n"
            "  },\n"
            "  \"title\" : \"x\"\n"
            "}",
        )

    def test_unsupported_objects_raise(self) -> None:
        with self.assertRaises(TypeError):
            dumps_generic({"value": object()})


class RenderCompactTests(unittest.TestCase):
    def test_matches_text_pipeline_for_every_variant(self) -> None:
        payload = _metadata(ALL_VARIANTS)
        self.assertEqual(render_compact(payload), rewrite_metadata_json(dumps_generic(payload)))

    def test_matches_text_pipeline_with_custom_grouping(self) -> None:
        config = RewriteConfig(group_size=4)
        for count in (1, 4, 5, 12):
            with self.subTest(count=count):
                payload = _metadata([ProposalStatus.previewing()], version_count=count)
                self.assertEqual(
                    render_compact(payload, config),
                    rewrite_metadata_json(dumps_generic(payload), config),
                )

    def test_status_as_last_member_matches_text_pipeline(self) -> None:
        payload = {"proposals": [{"id": "SE-0001", "status": ProposalStatus.rejected()}]}
        self.assertEqual(render_compact(payload), rewrite_metadata_json(dumps_generic(payload)))

    def test_renders_status_nested_under_state(self) -> None:
        text = render_compact({"status": ProposalStatus.scheduled_for_review("2024-03-01", "2024-03-14")})
        self.assertEqual(
            text,
            "{\n"
            "  \"status\" : {\n"
            "    \"scheduledForReview\" : {\n"
            "      \"start\" : \"2024-03-01\",\n"
            "      \"end\" : \"2024-03-14\"\n"
            "    }\n"
            "  }\n"
            "}\n",
        )

    def test_status_under_other_keys_keeps_generic_shape(self) -> None:
        parsed = json.loads(render_compact({"previousStatus": ProposalStatus.accepted()}))
        self.assertEqual(parsed, {"previousStatus": {"state": "accepted"}})

    def test_output_parses_back_to_compact_values(self) -> None:
        parsed = json.loads(render_compact(_metadata([ProposalStatus.implemented("5.9")])))
        self.assertEqual(parsed["proposals"][0]["status"], {"implemented": {"version": "5.9"}})
        self.assertEqual(len(parsed["implementationVersions"]), 23)
        self.assertIsNone(parsed["warnings"])


if __name__ == "__main__":
    unittest.main()
