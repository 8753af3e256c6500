import pytest

from congkak.coordinator import ExternalTrigger, GamePhase, PhaseMachine, Rendezvous, SowCompleted, SowStarted
from congkak.game import IllegalMove, LOWER, UPPER


def freeplay():
    m = PhaseMachine()
    m.advance_phase(ExternalTrigger())
    return m


def test_countdown_blocks_moves():
    m = PhaseMachine()
    assert m.phase is GamePhase.COUNTDOWN
    with pytest.raises(IllegalMove):
        m.check_can_move(UPPER)
    assert freeplay().phase is GamePhase.FREEPLAY


def test_freeplay_rendezvous_first_finisher_moves_first():
    m = freeplay()
    m.advance_phase(SowStarted(UPPER))
    m.advance_phase(SowStarted(LOWER))
    with pytest.raises(IllegalMove):
        m.advance_phase(SowStarted(UPPER))

    m.advance_phase(SowCompleted(UPPER, extra_turn=False))
    assert m.is_waiting(UPPER)
    assert not m.can_move(UPPER)
    assert m.phase is GamePhase.FREEPLAY

    m.advance_phase(SowCompleted(LOWER, extra_turn=True))
    assert m.phase is GamePhase.FREEPLAY
    assert m.can_move(LOWER)

    m.advance_phase(SowStarted(LOWER))
    assert m.advance_phase(SowCompleted(LOWER, extra_turn=False)) is GamePhase.TURN_SELECT
    assert m.turn == UPPER
    assert not m.is_waiting(UPPER)


def test_rendezvous_waits_while_other_side_sows():
    r = Rendezvous()
    r.start(UPPER)
    r.start(LOWER)
    assert r.finish(LOWER, extra_turn=False) is None
    assert r.first_to_finish == LOWER
    assert r.finish(UPPER, extra_turn=False) == LOWER
    assert r.waiting == [False, False]


def test_alternating_turns():
    m = PhaseMachine()
    m.enter(GamePhase.TURN_SELECT, UPPER)
    with pytest.raises(IllegalMove):
        m.check_can_move(LOWER)

    assert m.advance_phase(SowStarted(UPPER)) is GamePhase.TURN_SOWING
    assert not m.can_move(UPPER)
    m.advance_phase(SowCompleted(UPPER, extra_turn=True))
    assert (m.phase, m.turn) == (GamePhase.TURN_SELECT, UPPER)

    m.advance_phase(SowStarted(UPPER))
    m.advance_phase(SowCompleted(UPPER, extra_turn=False))
    assert (m.phase, m.turn) == (GamePhase.TURN_SELECT, LOWER)


def test_unexpected_events_raise():
    m = freeplay()
    with pytest.raises(IllegalMove):
        m.advance_phase(ExternalTrigger())
    m.enter(GamePhase.MATCH_END)
    with pytest.raises(IllegalMove):
        m.advance_phase(SowCompleted(UPPER, extra_turn=False))
    with pytest.raises(IllegalMove):
        m.check_can_move(LOWER)


def test_round_end_trigger_starts_redistribution():
    m = PhaseMachine()
    m.enter(GamePhase.ROUND_END)
    assert m.advance_phase(ExternalTrigger()) is GamePhase.REDISTRIBUTING


def test_skip_turn():
    m = PhaseMachine()
    m.enter(GamePhase.TURN_SELECT, LOWER)
    m.skip_turn()
    assert m.turn == UPPER
