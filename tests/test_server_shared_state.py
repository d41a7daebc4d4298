import threading
from dataclasses import dataclass
from typing import Optional

import pytest

from servertestkit.server_shared_state import ServerSharedState


@pytest.fixture
def state():
    return ServerSharedState()


def test_new_state_is_empty(state):
    snap = state.snapshot()
    assert snap.scheme is None
    assert snap.cookies == {}
    assert snap.headers == ()
    assert snap.query_string == ""


def test_set_scheme(state):
    state.set_scheme("https")
    assert state.snapshot().scheme == "https"


def test_add_cookies_by_header_stores_value_and_attributes(state):
    state.add_cookies_by_header(["test-cookie=cookie-found!; Path=/; HttpOnly"])
    cookie = state.snapshot().cookies["test-cookie"]
    assert cookie.value == "cookie-found!"
    assert cookie["path"] == "/"
    assert cookie["httponly"] is True


def test_add_cookies_by_header_accepts_bytes(state):
    state.add_cookies_by_header([b"first-cookie=my-custom-cookie"])
    assert state.snapshot().cookies["first-cookie"].value == "my-custom-cookie"


def test_later_cookie_replaces_earlier_with_same_name(state):
    state.add_cookies_by_header(["test-cookie=one", "test-cookie=two"])
    cookies = state.snapshot().cookies
    assert list(cookies) == ["test-cookie"]
    assert cookies["test-cookie"].value == "two"


@pytest.mark.parametrize("header", ["no-equals-sign", "=value-only"])
def test_invalid_cookie_header_raises(state, header):
    with pytest.raises(ValueError):
        state.add_cookies_by_header([header])
    assert state.snapshot().cookies == {}


def test_add_cookie_and_clear(state):
    state.add_cookie("test-cookie", "my-custom-cookie")
    assert state.snapshot().cookies["test-cookie"].value == "my-custom-cookie"
    state.clear_cookies()
    assert state.snapshot().cookies == {}


def test_add_cookies_from_mapping(state):
    state.add_cookies({"first-cookie": "my-custom-cookie", "second-cookie": "other-cookie"})
    cookies = state.snapshot().cookies
    assert sorted(f"{n}={c.value}" for n, c in cookies.items()) == [
        "first-cookie=my-custom-cookie",
        "second-cookie=other-cookie",
    ]


def test_add_cookies_rejects_non_cookie_items(state):
    with pytest.raises(TypeError):
        state.add_cookies(["first-cookie"])


def test_query_params_from_mapping_are_form_encoded(state):
    state.add_query_params({"message": "it works"})
    assert state.query_string() == "message=it+works"


def test_query_params_from_pairs_and_calls_keep_order(state):
    state.add_query_params([("message", "it works")])
    state.add_query_param("other", "yup")
    assert state.query_string() == "message=it+works&other=yup"


def test_query_params_from_dataclass_skip_none():
    @dataclass
    class QueryParams:
        first: Optional[str]
        second: Optional[str]

    state = ServerSharedState()
    state.add_query_params(QueryParams(first="first", second=None))
    assert state.query_string() == "first=first"


def test_query_params_bool_values(state):
    state.add_query_param("flag", True)
    assert state.query_string() == "flag=true"


def test_nested_query_values_raise(state):
    with pytest.raises(TypeError):
        state.add_query_params({"nested": {"a": 1}})
    assert state.query_string() == ""


def test_raw_query_params_are_not_encoded(state):
    state.add_raw_query_param("arrs[]=one")
    state.add_raw_query_param("arrs[]=two")
    assert state.query_string() == "arrs[]=one&arrs[]=two"


def test_clear_query_params(state):
    state.add_query_params({"first": "first", "second": "second"})
    state.clear_query_params()
    assert state.query_string() == ""
    state.add_query_param("first", "first")
    assert state.query_string() == "first=first"


def test_add_header_lowercases_name(state):
    state.add_header("Test-Header", "Test header content")
    assert state.snapshot().headers == (("test-header", "Test header content"),)


def test_headers_keep_duplicates_in_order(state):
    state.add_header("test-header", "a")
    state.add_header("test-header", b"b")
    assert [v for _, v in state.snapshot().headers] == ["a", "b"]


@pytest.mark.parametrize("name", ["bad header", "", "bad:name"])
def test_invalid_header_name_raises(state, name):
    with pytest.raises(ValueError):
        state.add_header(name, "value")


def test_invalid_header_value_raises(state):
    with pytest.raises(ValueError):
        state.add_header("test-header", "line\r\nbreak")
    assert state.snapshot().headers == ()


def test_clear_headers(state):
    state.add_header("test-header", "Test header content")
    state.clear_headers()
    assert state.snapshot().headers == ()


def test_snapshot_is_independent_of_later_changes(state):
    state.add_cookie("test-cookie", "one")
    state.add_header("test-header", "one")
    before = state.snapshot()
    state.add_cookie("test-cookie", "two")
    state.clear_headers()
    assert before.cookies["test-cookie"].value == "one"
    assert before.headers == (("test-header", "one"),)


def test_concurrent_header_adds_are_all_kept(state):
    def add_many():
        for _ in range(200):
            state.add_header("test-header", "v")

    threads = [threading.Thread(target=add_many) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(state.snapshot().headers) == 800