import pytest

from src.briefdesk.core.phases import (
    PHASES,
    UNKNOWN_INDEX,
    PhaseKey,
    StepState,
    UnknownPhaseError,
    build_steps,
    phase_index,
    phase_label,
    step_state,
)


def test_phase_order_is_fixed():
    assert [p.key.value for p in PHASES] == [
        "submitted",
        "in_design",
        "review",
        "revisions",
        "approved",
        "delivered",
    ]
    assert [p.label for p in PHASES] == [
        "Brief Submitted",
        "In Design",
        "Review",
        "Revisions",
        "Approved",
        "Delivered",
    ]


def test_phase_index_is_unique_and_increasing():
    indices = [phase_index(p.key) for p in PHASES]
    assert indices == list(range(len(PHASES)))
    # plain strings resolve the same as enum members
    assert [phase_index(p.key.value) for p in PHASES] == indices


def test_unknown_key_lenient_returns_sentinel():
    assert phase_index("shipped", strict=False) == UNKNOWN_INDEX


def test_unknown_key_strict_raises():
    with pytest.raises(UnknownPhaseError) as excinfo:
        phase_index("shipped", strict=True)
    assert isinstance(excinfo.value, KeyError)
    assert excinfo.value.key == "shipped"


def test_strict_mode_from_env(monkeypatch):
    monkeypatch.setenv("BRIEFDESK_STRICT_PHASES", "1")
    with pytest.raises(UnknownPhaseError):
        phase_index("nope")
    # known keys are unaffected
    assert phase_index(PhaseKey.REVIEW) == 2


def test_phase_label():
    assert phase_label(PhaseKey.IN_DESIGN) == "In Design"
    assert phase_label("delivered") == "Delivered"


@pytest.mark.parametrize(
    "index,current,expected",
    [
        (0, 2, StepState.COMPLETED),
        (2, 2, StepState.CURRENT),
        (3, 2, StepState.UPCOMING),
        (0, UNKNOWN_INDEX, StepState.UPCOMING),
        (UNKNOWN_INDEX, 2, StepState.UPCOMING),
    ],
)
def test_step_state(index, current, expected):
    assert step_state(index, current) == expected


def test_build_steps_for_review():
    steps = build_steps(PhaseKey.REVIEW)
    assert [s["state"] for s in steps] == [
        "completed",
        "completed",
        "current",
        "upcoming",
        "upcoming",
        "upcoming",
    ]
    assert steps[2]["key"] == "review"
    assert steps[2]["label"] == "Review"


def test_build_steps_unknown_current_is_all_upcoming():
    steps = build_steps("archived")
    assert len(steps) == 6
    assert all(s["state"] == "upcoming" for s in steps)
