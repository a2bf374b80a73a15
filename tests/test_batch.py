import pytest

from matching.engine import BatchMatcher, Matcher, batch_match, create_batch_matcher_from_config

from conftest import NOW, make_entity


def _pool():
    return [make_entity(f"cand{i}", audience_count=50 + (i % 3)) for i in range(9)]


def test_length_mismatch_raises_without_partial_result(config):
    seekers = [make_entity(f"seeker{i}") for i in range(3)]
    with pytest.raises(ValueError, match="same length"):
        batch_match(seekers, _pool(), ["user1", "user2"], config, current_time=NOW)


def test_results_are_keyed_by_seeker_entity_id(config):
    seekers = [make_entity(f"seeker{i}") for i in range(3)]
    results = batch_match(seekers, _pool(), ["user1", "user2", "user3"], config,
                          current_time=NOW, random_state=0)

    assert set(results) == {"seeker0", "seeker1", "seeker2"}
    assert all(c.audience_count == 50 for c in results.values())


def test_unmatched_and_missing_seekers_have_no_entry(config):
    pool = [make_entity("blocker", blacklist={"user2"})]
    seekers = [make_entity("seeker1"), make_entity("seeker2"), None]
    results = batch_match(seekers, pool, ["user1", "user2", "user3"], config, current_time=NOW)

    assert list(results) == ["seeker1"]
    assert results["seeker1"] is pool[0]


def test_same_candidate_may_serve_several_seekers(config):
    pool = [make_entity("only")]
    seekers = [make_entity(f"seeker{i}") for i in range(4)]
    results = batch_match(seekers, pool, [f"user{i}" for i in range(4)], config, current_time=NOW)

    assert len(results) == 4
    assert all(c is pool[0] for c in results.values())


def test_seeker_ids_are_used_per_position(config):
    pool = [make_entity("cand", last_matched={"user_b": NOW - 30})]
    seekers = [make_entity("seeker_a"), make_entity("seeker_b")]
    results = batch_match(seekers, pool, ["user_a", "user_b"], config, current_time=NOW)

    assert set(results) == {"seeker_a"}


def test_threaded_batch_matches_sequential_batch(config):
    pool = _pool()
    seekers = [make_entity(f"seeker{i}") for i in range(12)]
    seeker_ids = [f"user{i}" for i in range(12)]

    sequential = BatchMatcher(config, n_jobs=1, random_state=99).batch_match(
        seekers, pool, seeker_ids, current_time=NOW)
    threaded = BatchMatcher(config, n_jobs=4, random_state=99).batch_match(
        seekers, pool, seeker_ids, current_time=NOW)

    assert {k: v.entity_id for k, v in sequential.items()} == \
        {k: v.entity_id for k, v in threaded.items()}


def test_empty_batch_returns_empty_mapping(config):
    assert batch_match([], _pool(), [], config, current_time=NOW) == {}


def test_zero_jobs_is_invalid(config):
    with pytest.raises(ValueError):
        BatchMatcher(config, n_jobs=0)


def test_factory_reads_batch_section():
    config = {
        "global": {"random_seed": 5},
        "matching": {"cooldown_seconds": 30, "max_wait_seconds": 300, "min_wait_seconds": 10},
        "batch": {"n_jobs": 2, "shared_timestamp": False},
    }
    batch_matcher = create_batch_matcher_from_config(config)

    assert batch_matcher.n_jobs == 2
    assert batch_matcher.shared_timestamp is False
    assert batch_matcher.config.cooldown_seconds == 30
    assert batch_matcher.config.min_wait_seconds == 10


class HighOnly:
    """Random source exposing only randint(high)."""

    def __init__(self):
        self.calls = 0

    def randint(self, high):
        self.calls += 1
        return self.calls % high


def test_batch_accepts_randint_high_only_source(config):
    source = HighOnly()
    seekers = [make_entity("seeker_a"), None, make_entity("seeker_b")]
    results = BatchMatcher(config, random_state=source).batch_match(
        seekers, _pool(), ["user_a", "user_x", "user_b"], current_time=NOW)

    assert set(results) == {"seeker_a", "seeker_b"}
    assert source.calls == 3


class _RecordingMatcher(Matcher):
    seen_times = []

    def match(self, seeker, pool, seeker_id, current_time=None):
        _RecordingMatcher.seen_times.append(current_time)
        return super().match(seeker, pool, seeker_id, current_time)


@pytest.mark.parametrize("shared, expect_shared", [(True, True), (False, False)])
def test_shared_timestamp_controls_time_capture(config, monkeypatch, shared, expect_shared):
    monkeypatch.setattr("matching.engine.batch.Matcher", _RecordingMatcher)
    _RecordingMatcher.seen_times = []
    seekers = [make_entity(f"seeker{i}") for i in range(3)]

    BatchMatcher(config, shared_timestamp=shared, random_state=0).batch_match(
        seekers, _pool(), ["u0", "u1", "u2"])

    seen = _RecordingMatcher.seen_times
    assert len(seen) == 3
    if expect_shared:
        assert all(isinstance(t, int) for t in seen)
        assert len(set(seen)) == 1
    else:
        # each seeker's matcher captures its own time
        assert seen == [None, None, None]


def test_per_seeker_time_capture_still_applies_cooldown(config):
    import time

    pool = [make_entity("cand", last_matched={"u0": int(time.time()) - 5})]
    results = BatchMatcher(config, shared_timestamp=False).batch_match(
        [make_entity("seeker0"), make_entity("seeker1")], pool, ["u0", "u1"])

    assert set(results) == {"seeker1"}
