"""Tests for header-matching heuristics."""

from __future__ import annotations

from services.column_heuristics_service import (
    detect_maintenance_columns,
    find_column,
    find_column_index,
    find_role_column,
    first_matching_index,
)


def test_match_is_case_insensitive_substring():
    assert find_column(["WO Number", "Current STATUS"], ["status"]) == "Current STATUS"


def test_fragment_priority_beats_header_order():
    headers = ["Equipment Type", "Panel"]
    assert find_column(headers, ["panel", "equipment"]) == "Panel"


def test_first_header_wins_within_a_fragment():
    assert find_column(["Price A", "Price B"], ["price"]) == "Price A"


def test_no_match_returns_none():
    assert find_column(["A", "B"], ["status"]) is None
    assert find_column_index(["A", "B"], ["status"]) == -1


def test_role_lookup():
    headers = ["No", "Area Usage", "Part Model 1", "Total Price Part 1"]
    assert find_role_column(headers, "price") == "Total Price Part 1"
    assert find_role_column(headers, "area") == "Area Usage"


def test_role_falls_back_to_later_fragments():
    assert find_role_column(["Unit Cost", "Machine Model"], "price") == "Unit Cost"
    assert find_role_column(["Unit Cost", "Machine Model"], "area") == "Machine Model"


def test_detect_maintenance_columns_lists_every_match():
    headers = ["Approval Status", "Panel ID", "Approved By", "Equipment"]
    detected = detect_maintenance_columns(headers)
    assert detected["status"] == ["Approval Status", "Approved By"]
    assert detected["equipment"] == ["Panel ID", "Equipment"]
    assert detected["approver"] == ["Approved By"]


def test_first_matching_index_follows_header_order():
    headers = ["Part", "StartTime Planned", "Start Time"]
    assert first_matching_index(headers, ["start time", "starttime"]) == 1
    assert find_column_index(headers, ["start time", "starttime"]) == 2
    assert first_matching_index(headers, ["created"]) == -1
