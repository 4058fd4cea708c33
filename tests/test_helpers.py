"""
Tests for shared helpers and option visibility.
"""

import pytest
from sarc.errors import ConfigurationError
from sarc.helpers import as_code_list, between, check, guarded, settle_fixed
from sarc.model import Option, OptionKind, Question, Survey
from sarc.store import InMemoryOptionStore
from sarc.visibility import disable, hide, show


def make_store() -> InMemoryOptionStore:
    options = [Option(code=1), Option(code=99, kind=OptionKind.FIXED), Option(code=2), Option(code=3)]
    return InMemoryOptionStore(Survey(name="Helpers", questions=[Question(id=1, options=options)]))


def test_between():
    assert between(3, 6) == [3, 4, 5, 6]
    assert between(2, 2) == [2]
    assert between(5, 4) == []


class TestAsCodeList:
    def test_single_code(self):
        assert as_code_list(4) == [4]

    def test_tuple(self):
        assert as_code_list((1, 2)) == [1, 2]

    def test_rejects_strings(self):
        with pytest.raises(ConfigurationError):
            as_code_list("1")
        with pytest.raises(ConfigurationError):
            as_code_list([1, "2"])

    def test_rejects_booleans(self):
        with pytest.raises(ConfigurationError):
            as_code_list(True)


def test_settle_fixed():
    store = make_store()
    settle_fixed(store, 1)
    assert store.codes(1) == [1, 2, 3, 99]


def test_guarded_logs_and_succeeds(caplog):
    def broken():
        raise RuntimeError("boom")

    assert guarded(broken) is True
    assert "boom" in caplog.text


def test_check():
    assert check(lambda: False) is False
    assert check(lambda: 1 / 0) is True


class TestVisibility:
    def test_hide_and_show(self):
        store = make_store()
        question = store.survey.get_question(1)
        hide(store, 1, [1, 2])
        assert question.get_option(1).hidden and question.get_option(2).hidden
        show(store, 1, 1)
        assert not question.get_option(1).hidden
        hide(store, 1, 2, cond=False)
        assert not question.get_option(2).hidden

    def test_disable(self):
        store = make_store()
        option = store.survey.get_question(1).get_option(3)
        disable(store, 1, 3)
        assert option.read_only and option.visually_disabled
        disable(store, 1, [3], cond=False)
        assert not option.read_only and not option.visually_disabled

    def test_unknown_code_is_logged(self, caplog):
        store = make_store()
        assert hide(store, 1, [42]) is True
        assert "Q1" in caplog.text
