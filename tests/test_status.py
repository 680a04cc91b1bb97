"""Unit tests for the item status vocabulary and web-tier transitions."""
import pytest

from hostpanel.exceptions import InvalidStatusTransition
from hostpanel.models.status import (
    IN_PROGRESS,
    TERMINAL,
    ItemStatus,
    can_transition,
    ensure_transition,
    humanize_status,
)


def test_parse_known_value():
    assert ItemStatus.parse("todelete") is ItemStatus.TODELETE


def test_parse_error_string_is_none():
    assert ItemStatus.parse("error: disk full") is None
    assert ItemStatus.parse(None) is None


def test_terminal_and_in_progress_are_disjoint():
    assert not (TERMINAL & IN_PROGRESS)
    assert ItemStatus.OK.is_terminal
    assert ItemStatus.TOCHANGE.is_in_progress
    assert not ItemStatus.ORDERED.is_terminal
    assert not ItemStatus.ORDERED.is_in_progress


@pytest.mark.parametrize("current,target", [
    (None, ItemStatus.TOADD),
    (None, ItemStatus.ORDERED),
    ("ordered", ItemStatus.TOADD),
    ("ok", ItemStatus.TODELETE),
    ("ok", ItemStatus.TODISABLE),
    ("disabled", ItemStatus.TOENABLE),
    ("uninstalled", ItemStatus.TOINSTALL),
])
def test_allowed_web_transitions(current, target):
    ensure_transition(current, target)


@pytest.mark.parametrize("current,target", [
    ("toadd", ItemStatus.OK),          # only the daemon finishes work
    ("todelete", ItemStatus.TOCHANGE),
    ("ok", ItemStatus.TOENABLE),
    ("disabled", ItemStatus.TODISABLE),
    (None, ItemStatus.OK),
])
def test_rejected_web_transitions(current, target):
    with pytest.raises(InvalidStatusTransition):
        ensure_transition(current, target)


def test_error_state_cannot_be_scheduled():
    with pytest.raises(InvalidStatusTransition) as exc:
        ensure_transition("error: disk full", ItemStatus.TODELETE)
    assert exc.value.current == "error: disk full"
    assert exc.value.target == "todelete"


def test_no_web_transition_writes_a_terminal_value():
    for current in [None, *ItemStatus]:
        for target in TERMINAL:
            assert not can_transition(current, target)


def test_humanize_status():
    assert humanize_status("todelete") == "Deletion in progress..."
    assert humanize_status("ordered") == "Awaiting for approval"
    assert humanize_status("error: disk full") == "Unexpected error"
    assert humanize_status("error: disk full", show_error=True) == "error: disk full"
