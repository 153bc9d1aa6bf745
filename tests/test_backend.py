"""
State backend contract tests, run against the in-memory and SQLite backends.
"""

import pytest

from infoshare.core.backend import (
    IStateBackend,
    InMemoryStateBackend,
    ListQueryIterator,
    KV,
    matches_selector,
    selector_fields,
)
from infoshare.core.errors import BackendError, KeyExistsError, SelectorError
from infoshare.core.sqlite_backend import SQLiteStateBackend, compile_selector


def _drain(iterator):
    results = []
    with iterator:
        while iterator.has_next():
            results.append(iterator.next())
    return results


def test_backends_implement_interface(backend):
    assert isinstance(backend, IStateBackend)


def test_get_missing_key_returns_none(backend):
    assert backend.get("missing") is None


def test_put_then_get_returns_exact_bytes(backend):
    backend.put("k1", b'{"docType":"info","Content":"x"}')
    assert backend.get("k1") == b'{"docType":"info","Content":"x"}'


def test_put_rejects_empty_key(backend):
    with pytest.raises(BackendError):
        backend.put("", b"{}")


def test_put_never_overwrites_existing_key(backend):
    backend.put("k1", b'{"docType":"info","Content":"first"}')

    with pytest.raises(KeyExistsError) as exc_info:
        backend.put("k1", b'{"docType":"info","Content":"second"}')

    assert exc_info.value.key == "k1"
    assert backend.get("k1") == b'{"docType":"info","Content":"first"}'


def test_sqlite_unencodable_key_raises_backend_error(sqlite_backend):
    key = "bad" + chr(0xDCFF)

    with pytest.raises(BackendError):
        sqlite_backend.get(key)
    with pytest.raises(BackendError):
        sqlite_backend.put(key, b'{"docType":"info"}')


def test_query_by_selector_matches_every_field(backend):
    backend.put("a", b'{"docType":"info","Department":"airforce"}')
    backend.put("b", b'{"docType":"info","Department":"navy"}')
    backend.put("c", b'{"docType":"marble","Department":"airforce"}')

    results = _drain(backend.query_by_selector({"selector": {"docType": "info", "Department": "airforce"}}))

    assert [kv.key for kv in results] == ["a"]
    assert results[0].value == b'{"docType":"info","Department":"airforce"}'


def test_query_by_selector_skips_non_json_values(backend):
    backend.put("raw", b"\x00\xffnot json")
    backend.put("list", b'["docType", "info"]')
    backend.put("doc", b'{"docType":"info"}')

    results = _drain(backend.query_by_selector({"selector": {"docType": "info"}}))

    assert [kv.key for kv in results] == ["doc"]


def test_query_by_selector_requires_string_equality(backend):
    backend.put("num", b'{"docType":"info","InfoID":1}')
    backend.put("str", b'{"docType":"info","InfoID":"1"}')

    results = _drain(backend.query_by_selector({"selector": {"InfoID": "1"}}))

    assert [kv.key for kv in results] == ["str"]


def test_query_by_selector_no_matches_is_empty(backend):
    backend.put("a", b'{"docType":"info","Department":"navy"}')
    assert _drain(backend.query_by_selector({"selector": {"Department": "army"}})) == []


@pytest.mark.parametrize("selector", [
    None,
    "docType == info",
    {},
    {"selector": {}},
    {"selector": {"docType": 1}},
    {"selector": {"docType": "info"}, "sort": ["InfoID"]},
])
def test_malformed_selectors_are_rejected(backend, selector):
    with pytest.raises(SelectorError):
        backend.query_by_selector(selector)


def test_iterator_next_after_close_fails(backend):
    backend.put("a", b'{"docType":"info"}')
    iterator = backend.query_by_selector({"selector": {"docType": "info"}})
    iterator.close()

    assert iterator.has_next() is False
    with pytest.raises(BackendError):
        iterator.next()


def test_iterator_exhausted_next_fails(backend):
    iterator = backend.query_by_selector({"selector": {"docType": "info"}})
    try:
        assert iterator.has_next() is False
        with pytest.raises(BackendError):
            iterator.next()
    finally:
        iterator.close()


def test_in_memory_results_follow_insertion_order():
    backend = InMemoryStateBackend()
    for key in ["z", "a", "m"]:
        backend.put(key, b'{"docType":"info"}')

    results = _drain(backend.query_by_selector({"selector": {"docType": "info"}}))
    assert [kv.key for kv in results] == ["z", "a", "m"]
    assert len(backend) == 3


def test_in_memory_query_is_a_snapshot():
    backend = InMemoryStateBackend()
    backend.put("a", b'{"docType":"info"}')
    iterator = backend.query_by_selector({"selector": {"docType": "info"}})
    backend.put("b", b'{"docType":"info"}')

    assert [kv.key for kv in _drain(iterator)] == ["a"]


def test_sqlite_results_are_ordered_by_key(sqlite_backend):
    for key in ["z", "a", "m"]:
        sqlite_backend.put(key, b'{"docType":"info"}')

    results = _drain(sqlite_backend.query_by_selector({"selector": {"docType": "info"}}))
    assert [kv.key for kv in results] == ["a", "m", "z"]


def test_sqlite_state_survives_reopen(tmp_path):
    db_path = str(tmp_path / "state.db")
    SQLiteStateBackend(db_path).put("k", b'{"docType":"info"}')

    assert SQLiteStateBackend(db_path).get("k") == b'{"docType":"info"}'


def test_sqlite_rejects_unsafe_field_names():
    with pytest.raises(SelectorError):
        compile_selector({"selector": {'Department") OR 1=1 --': "x"}})


def test_sqlite_compile_selector_parameterizes_values():
    sql, params = compile_selector({"selector": {"docType": "info", "Uploader": "o'brien"}})

    assert "o'brien" not in sql
    assert params == ['$."docType"', '$."docType"', "info", '$."Uploader"', '$."Uploader"', "o'brien"]


def test_sqlite_iterator_close_releases_connection(sqlite_backend):
    sqlite_backend.put("a", b'{"docType":"info"}')
    iterator = sqlite_backend.query_by_selector({"selector": {"docType": "info"}})
    iterator.close()
    iterator.close()

    assert iterator.closed is True


def test_selector_helpers():
    assert selector_fields({"selector": {"docType": "info"}}) == {"docType": "info"}
    assert matches_selector(b'{"a":"1","b":"2"}', {"a": "1"}) is True
    assert matches_selector(b'{"a":"1"}', {"a": "1", "b": "2"}) is False
    assert matches_selector(b"garbage", {"a": "1"}) is False


def test_list_iterator_yields_kv_pairs():
    iterator = ListQueryIterator([KV("k", b"v")])
    assert _drain(iterator) == [KV("k", b"v")]
    assert iterator.closed is True
