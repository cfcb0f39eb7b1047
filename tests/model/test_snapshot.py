from __future__ import annotations

import pytest
from pydantic import ValidationError

from mycodash.model import Metrics, PersonaOverride, PersonaOverrideList, StatusSnapshot
from tests.helpers import status_wire


def test_snapshot_parses_flat_agent_reply() -> None:
    snapshot = StatusSnapshot.from_wire(
        status_wire(safe_mode=1, persona_override=1, persona_override_value="bulk", persona="BULK")
    )

    assert snapshot.safe_mode is True
    assert snapshot.override_active is True
    assert snapshot.persona_override == PersonaOverride(active=True, value="bulk")
    assert snapshot.persona == "bulk"
    assert snapshot.metrics.tx_bps == 1_500_000
    assert snapshot.baseline.rtt_ms == 10.0
    assert snapshot.policy.bandwidth_kbit == 20000
    assert snapshot.policy.boosted is False


def test_snapshot_accepts_camel_case_keys_and_nested_override() -> None:
    snapshot = StatusSnapshot.from_wire(
        {
            "safeMode": True,
            "personaOverride": {"active": True, "value": "interactive"},
            "metrics": {"rttMs": 30, "cpuPct": "55.5"},
            "policy": {"bandwidthKbit": 8000, "boosted": True},
        }
    )

    assert snapshot.safe_mode is True
    assert snapshot.persona_override is not None
    assert snapshot.persona_override.value == "interactive"
    assert snapshot.metrics.rtt_ms == 30.0
    assert snapshot.metrics.cpu_pct == 55.5
    assert snapshot.policy.bandwidth_kbit == 8000


def test_snapshot_degrades_bad_fields_to_absent() -> None:
    snapshot = StatusSnapshot.from_wire(
        {
            "persona": 42,
            "reason": "   ",
            "metrics": {"rtt_ms": -1, "jitter_ms": "fast", "tx_bps": float("nan"), "rx_bps": True},
            "baseline": [1, 2],
            "policy": "none",
        }
    )

    assert snapshot.persona == "unknown"
    assert snapshot.reason is None
    assert snapshot.metrics == Metrics()
    assert snapshot.baseline.rtt_ms is None
    assert snapshot.policy.bandwidth_kbit is None
    assert snapshot.override_active is False


def test_snapshot_from_non_mapping_is_empty() -> None:
    snapshot = StatusSnapshot.from_wire(None)

    assert snapshot == StatusSnapshot()
    assert snapshot.persona_override is None


def test_snapshot_keeps_nested_model_instances() -> None:
    snapshot = StatusSnapshot(
        metrics=Metrics(rtt_ms=5.0),
        persona_override=PersonaOverride(active=True, value="bulk"),
    )

    assert snapshot.metrics.rtt_ms == 5.0
    assert snapshot.override_active is True


def test_snapshot_is_immutable() -> None:
    snapshot = StatusSnapshot.from_wire(status_wire())

    with pytest.raises(ValidationError):
        snapshot.persona = "bulk"  # type: ignore[misc]


def test_persona_override_list_from_wire() -> None:
    listed = PersonaOverrideList.from_wire({"current": "bulk", "override_active": 1, "override": "bulk"})
    empty = PersonaOverrideList.from_wire({"current": "interactive", "override_active": 0, "override": ""})

    assert listed.has_override is True
    assert listed.override == "bulk"
    assert empty.has_override is False
    assert empty.override is None
