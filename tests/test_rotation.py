"""
Tests for the Rotation Engine.

Tests verify that rotation:
    - Partitions options into group buckets plus singleton buckets
    - Keeps groups contiguous when bucket order is shuffled
    - Pins top / bottom codes
    - Keeps fixed options last
    - Never drops or duplicates a code
    - Treats malformed configuration as a logged no-op
"""

import random

import pytest
from sarc.errors import ConfigurationError
from sarc.model import NONE_OF_THE_ABOVE, Option, OptionKind, Question, Survey
from sarc.rotation import RotationConfig, build_buckets, plan_rotation, rotate
from sarc.store import InMemoryOptionStore


FIXED_ORDER = {"group": False, "option": False}


def make_store(codes=(1, 2, 3, 4, 5, 6), fixed=(99,)) -> InMemoryOptionStore:
    options = [Option(code=c) for c in codes]
    options += [Option(code=c, kind=OptionKind.FIXED) for c in fixed]
    return InMemoryOptionStore(Survey(name="Rotation", questions=[Question(id=1, options=options)]))


class TestRotationConfig:
    def test_defaults(self):
        config = RotationConfig()
        assert config.group and config.option
        assert config.top is None and config.bot is None
        assert config.top_shuffle and config.bot_shuffle

    def test_from_dict_accepts_authored_keys(self):
        config = RotationConfig.from_dict({"group": False, "top": [1], "topShuffle": False, "botShuffle": False})
        assert config.group is False
        assert config.top == [1]
        assert config.top_shuffle is False
        assert config.bot_shuffle is False

    def test_from_dict_rejects_unknown_key(self):
        with pytest.raises(ConfigurationError):
            RotationConfig.from_dict({"shuffle": True})

    def test_from_dict_rejects_non_array_top(self):
        with pytest.raises(ConfigurationError, match="top must be an array"):
            RotationConfig.from_dict({"top": 5})

    def test_from_none(self):
        assert RotationConfig.from_dict(None) == RotationConfig()


class TestBuckets:
    def test_groups_then_singletons(self):
        buckets = build_buckets([6, 5, 4, 3, 2, 1], [[4, 5], [1, 2]], False, random.Random(0))
        assert buckets == [[4, 5], [1, 2], [3], [6]]

    def test_code_claimed_once(self):
        buckets = build_buckets([1, 2, 3], [[1, 2], [2, 3]], False, random.Random(0))
        assert buckets == [[1, 2], [3]]

    def test_codes_missing_from_question_are_ignored(self):
        buckets = build_buckets([1, 2, 3], [[8, 9], [3]], False, random.Random(0))
        assert buckets == [[3], [1], [2]]

    def test_partition_is_exhaustive_and_disjoint(self):
        codes = list(range(1, 13))
        buckets = build_buckets(codes, [[1, 5, 9], [2, 3], [12]], True, random.Random(3))
        flat = [code for bucket in buckets for code in bucket]
        assert sorted(flat) == codes


class TestRotate:
    def test_unshuffled_groups(self):
        store = make_store()
        rotate(store, 1, [[4, 5], [1, 2]], FIXED_ORDER)
        assert store.codes(1) == [4, 5, 1, 2, 3, 6, 99]

    def test_top_and_bottom(self):
        store = make_store()
        config = {"group": False, "option": False, "top": [6], "topShuffle": False, "bot": [4], "botShuffle": False}
        rotate(store, 1, [[4, 5], [1, 2]], config)
        assert store.codes(1) == [6, 5, 1, 2, 3, 4, 99]

    def test_top_order_kept_without_shuffle(self):
        store = make_store()
        rotate(store, 1, [[1, 2]], RotationConfig(group=False, option=False, top=[5, 3], top_shuffle=False))
        assert store.codes(1)[:2] == [5, 3]

    def test_missing_top_code_is_skipped(self, caplog):
        store = make_store()
        rotate(store, 1, [[1, 2]], {"group": False, "option": False, "top": [42, 6], "topShuffle": False})
        assert store.codes(1) == [6, 1, 2, 3, 4, 5, 99]
        assert "42" in caplog.text

    def test_fixed_bottom_code_is_reported_as_fixed(self, caplog):
        store = make_store()
        rotate(store, 1, [[1, 2]], {"group": False, "option": False, "bot": [99, 5], "botShuffle": False})
        assert store.codes(1) == [1, 2, 3, 4, 6, 5, 99]
        assert "rank 99 is fixed" in caplog.text
        assert "not found" not in caplog.text

    def test_fixed_options_stay_last(self):
        store = make_store(fixed=(98, 99))
        store.reorder(1, [98, 1, 2, 99, 3, 4, 5, 6])
        rotate(store, 1, [[1, 2, 3]], rng=random.Random(1))
        assert store.codes(1)[-2:] == [98, 99]

    def test_sentinel_stays_last(self):
        store = make_store(codes=(1, 2, 3, NONE_OF_THE_ABOVE), fixed=())
        for seed in range(10):
            rotate(store, 1, [[1, 2], [3]], rng=random.Random(seed))
            assert store.codes(1)[-1] == NONE_OF_THE_ABOVE

    def test_groups_stay_contiguous(self):
        store = make_store()
        for seed in range(20):
            rotate(store, 1, [[2, 4, 6]], rng=random.Random(seed))
            order = store.codes(1)
            positions = sorted(order.index(code) for code in (2, 4, 6))
            assert positions[-1] - positions[0] == 2

    def test_set_conservation(self):
        store = make_store()
        before = sorted(store.codes(1))
        for seed in range(20):
            config = {"top": [1, 2], "bot": [6]}
            rotate(store, 1, [[1, 3], [4, 5]], config, rng=random.Random(seed))
            assert sorted(store.codes(1)) == before

    def test_always_reports_success(self):
        store = make_store()
        assert rotate(store, 1, [[1, 2]], rng=random.Random(0)) is True


class TestRotateFailures:
    def test_empty_groups_is_noop(self):
        store = make_store()
        rotate(store, 1, [], {"top": [6], "topShuffle": False})
        assert store.codes(1) == [1, 2, 3, 4, 5, 6, 99]

    def test_non_array_group_is_logged_noop(self, caplog):
        store = make_store()
        assert rotate(store, 1, [1, 2]) is True
        assert store.codes(1) == [1, 2, 3, 4, 5, 6, 99]
        assert "optionGroups must be an array of arrays" in caplog.text

    def test_non_array_bottom_is_logged_noop(self, caplog):
        store = make_store()
        assert rotate(store, 1, [[1, 2]], {"bot": 6}) is True
        assert store.codes(1) == [1, 2, 3, 4, 5, 6, 99]
        assert "bottom must be an array" in caplog.text

    def test_unknown_question_is_logged(self, caplog):
        store = make_store()
        assert rotate(store, 42, [[1, 2]]) is True
        assert "Q42" in caplog.text

    def test_plan_rotation_raises(self):
        store = make_store()
        with pytest.raises(ConfigurationError):
            plan_rotation(store, 1, [[1], "2"], RotationConfig())
