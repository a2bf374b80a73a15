import json

import pytest

from matching.engine import match_detailed
from matching.evaluation import (
    compute_pool_statistics,
    rejection_reason_counts,
    check_tie_break_uniformity,
    create_match_report,
    details_to_frame,
    top_candidates,
)

from conftest import NOW, SEEKER_ID, make_entity


@pytest.fixture()
def mixed_result(seeker, config):
    pool = [
        make_entity("a", audience_count=52),
        make_entity("blocked1", blacklist={SEEKER_ID}),
        make_entity("b", audience_count=50),
        make_entity("blocked2", blacklist={SEEKER_ID}),
        make_entity("recent", last_matched={SEEKER_ID: NOW - 1}),
        make_entity("c", audience_count=51),
    ]
    selected, details = match_detailed(seeker, pool, SEEKER_ID, config, current_time=NOW)
    return selected, details


def test_details_frame_has_one_row_per_candidate(mixed_result):
    _, details = mixed_result
    frame = details_to_frame(details)
    assert len(frame) == 6
    assert frame["rejected"].sum() == 3
    assert list(frame.loc[frame["candidate_id"] == "b", "total_score"]) == [23]


def test_details_frame_for_empty_list_keeps_columns():
    frame = details_to_frame([])
    assert frame.empty
    assert "total_score" in frame.columns


def test_top_candidates_ranked_by_score(mixed_result):
    _, details = mixed_result
    ranked = top_candidates(details, n=2)
    assert [d.candidate.entity_id for d in ranked] == ["b", "c"]


def test_rejection_reason_counts(mixed_result):
    _, details = mixed_result
    counts = rejection_reason_counts(details)
    assert counts["blocked by candidate"] == 2
    assert counts["cooldown not elapsed (matched 1s ago)"] == 1
    assert list(counts)[0] == "blocked by candidate"


def test_pool_statistics(mixed_result):
    _, details = mixed_result
    stats = compute_pool_statistics(details)
    assert (stats.total, stats.valid, stats.rejected) == (6, 3, 3)
    assert stats.valid_pct == pytest.approx(50.0)
    assert stats.max_score == 23


def test_pool_statistics_empty():
    stats = compute_pool_statistics([])
    assert stats.total == 0
    assert stats.valid_pct == 0.0
    assert stats.max_score is None


def test_summary_explains_selected_match(seeker, mixed_result):
    selected, details = mixed_result
    summary = create_match_report(seeker, selected, details).summary()
    assert "Matched: b" in summary
    assert "Total:      23" in summary
    assert "1. b (score: 23" in summary


def test_summary_lists_rejections_when_nothing_matched(seeker, config):
    pool = [make_entity("blocked", blacklist={SEEKER_ID})]
    selected, details = match_detailed(seeker, pool, SEEKER_ID, config, current_time=NOW)
    summary = create_match_report(seeker, selected, details).summary()
    assert "No match found" in summary
    assert "blocked by candidate: 1" in summary


def test_report_save(tmp_path, seeker, mixed_result):
    selected, details = mixed_result
    path = tmp_path / "report.json"
    create_match_report(seeker, selected, details, top_n=3).save(str(path))

    saved = json.loads(path.read_text())
    assert saved["selected_id"] == "b"
    assert len(saved["top_candidates"]) == 3
    assert saved["statistics"]["rejected"] == 3


def test_skewed_selection_is_not_uniform():
    check = check_tie_break_uniformity({"a": 900, "b": 50, "c": 50})
    assert not check.is_uniform
    assert check.n_trials == 1000


def test_uniformity_needs_two_candidates():
    with pytest.raises(ValueError):
        check_tie_break_uniformity({"a": 10})
