import datetime

import pytest

from ferretwire.paths import (
    compare_and_set_by_path_num,
    compare_and_set_by_path_time,
    get_by_path,
    set_by_path,
)


def new_doc():
    return {
        "client": {"driver": {"name": "nodejs"}},
        "compression": ["none"],
    }


@pytest.mark.parametrize(
    "path, value, res",
    [
        (
            ["compression", "0"],
            "zstd",
            {"client": {"driver": {"name": "nodejs"}}, "compression": ["zstd"]},
        ),
        (
            ["client"],
            "foo",
            {"client": "foo", "compression": ["none"]},
        ),
    ],
)
def test_set_by_path(path, value, res):
    doc = new_doc()
    set_by_path(doc, value, *path)
    assert doc == res
    assert list(doc) == list(res)
    assert get_by_path(doc, *path) == value


def test_get_by_path_nested():
    assert get_by_path(new_doc(), "client", "driver", "name") == "nodejs"


def test_set_by_path_errors():
    doc = new_doc()
    with pytest.raises(ValueError):
        set_by_path(doc, 1)
    with pytest.raises(KeyError):
        set_by_path(doc, 1, "missing")
    with pytest.raises(IndexError):
        set_by_path(doc, 1, "compression", "1")
    with pytest.raises(ValueError):
        set_by_path(doc, 1, "compression", "x")
    with pytest.raises(TypeError):
        get_by_path(doc, "client", "driver", "name", "deeper")
    assert doc == new_doc()


def test_compare_and_set_by_path_num():
    expected = {"a": [1.0]}
    actual = {"a": [1.05]}
    compare_and_set_by_path_num(expected, actual, 0.1, "a", "0")
    assert expected == {"a": [1.05]}


def test_compare_and_set_by_path_num_failures():
    within = {"a": 1.0}
    compare_and_set_by_path_num(within, {"a": 1.4}, 0.5, "a")
    assert within == {"a": 1.4}

    with pytest.raises(AssertionError):
        compare_and_set_by_path_num({"a": 1.0}, {"a": 2.0}, 0.5, "a")
    with pytest.raises(AssertionError):
        compare_and_set_by_path_num({"a": 1}, {"a": 1.0}, 0.5, "a")


def test_compare_and_set_by_path_time():
    utc = datetime.timezone.utc
    t1 = datetime.datetime(2021, 7, 24, 12, 54, 41, tzinfo=utc)
    t2 = t1 + datetime.timedelta(seconds=2)
    expected = {"localTime": t1}
    compare_and_set_by_path_time(expected, {"localTime": t2}, datetime.timedelta(seconds=5), "localTime")
    assert expected["localTime"] == t2

    with pytest.raises(AssertionError):
        compare_and_set_by_path_time({"t": t1}, {"t": t2}, 1, "t")
    with pytest.raises(AssertionError):
        compare_and_set_by_path_time({"t": 1}, {"t": 2}, 10, "t")