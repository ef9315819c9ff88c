from __future__ import annotations

from fiducial_target import Detection, TargetSelection

from tag_align import PollState, cancel_state, start_state, step


def _present() -> TargetSelection:
    det = Detection.from_translation(tag_id=7, translation=[3.0, 0.0, 0.0])
    return TargetSelection.present(det, "single")


def test_start_state_resets_everything() -> None:
    st = start_state()
    assert st.phase == "polling"
    assert st.cycles == 0
    assert st.running
    assert not st.pose_computed


def test_idle_step_is_noop() -> None:
    st = PollState()
    new, emit = step(st, _present(), max_empty_cycles=10)
    assert new == st
    assert not emit


def test_absent_increments_until_timeout() -> None:
    st = start_state()
    for i in range(1, 11):
        st, emit = step(st, TargetSelection.absent(), max_empty_cycles=10)
        assert not emit
        assert st.cycles == i
        assert st.phase == "polling"

    st, emit = step(st, TargetSelection.absent(), max_empty_cycles=10)
    assert not emit
    assert st.phase == "timed_out"
    assert st.cycles == 11
    assert not st.running
    assert not st.pose_computed


def test_present_emits_once_and_terminates() -> None:
    st = start_state()
    st, _ = step(st, TargetSelection.absent(), max_empty_cycles=10)
    st, emit = step(st, _present(), max_empty_cycles=10)
    assert emit
    assert st.phase == "succeeded"
    assert st.pose_computed
    assert not st.running
    assert st.cycles == 1

    again, emit2 = step(st, _present(), max_empty_cycles=10)
    assert not emit2
    assert again == st


def test_zero_threshold_times_out_on_first_empty() -> None:
    st, _ = step(start_state(), TargetSelection.absent(), max_empty_cycles=0)
    assert st.phase == "timed_out"


def test_cancel_state() -> None:
    st = cancel_state(start_state())
    assert st.phase == "cancelled"
    assert not st.running
    assert st.is_terminal

    _, emit = step(st, _present(), max_empty_cycles=10)
    assert not emit

    done, _ = step(start_state(), _present(), max_empty_cycles=10)
    assert cancel_state(done).phase == "succeeded"
