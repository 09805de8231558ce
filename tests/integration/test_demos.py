"""
Integration tests for the example programs.

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os

import pytest

from cqlstamp.demos import run_person_demo, run_tweet_demo

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and a reachable Cassandra",
)


def test_tweet_demo_reads_back_timeline(live_harness, test_settings):
    outcome = run_tweet_demo(live_harness, test_settings, timeline="it-timeline", text="hello world")

    assert outcome["first"] is not None
    assert outcome["first"]["text"] == "hello world"
    assert outcome["inserted_id"] in {row["id"] for row in outcome["timeline"]}


def test_person_demo_walks_crud_cycle(live_harness, test_settings):
    outcome = run_person_demo(live_harness, test_settings, person_id="it-person")

    assert outcome["inserted"] == {"name": "Shalabh Aggarwal", "phone": "1234567890"}
    assert outcome["updated"]["phone"] == "0987654321"
    assert outcome["updated"] in outcome["listing"]
    assert outcome["deleted"] is True
