"""Tests for the Headers bag."""

from __future__ import annotations

import pytest

from httpmsg import Headers, InvalidHeader
from httpmsg import _headers
from httpmsg._headers import fold


class TestQueries:
    def test_empty(self) -> None:
        h = Headers()
        assert h.get("Accept") == ()
        assert not h.has("Accept")
        assert len(h) == 0
        assert list(h) == []

    def test_case_insensitive_get(self) -> None:
        h = Headers().with_values("Content-Type", ["a"])
        assert h.get("content-type") == ("a",)
        assert h.get("CONTENT-TYPE") == ("a",)
        assert h.has("cOnTeNt-TyPe")
        assert "content-type" in h

    def test_contains_non_string(self) -> None:
        assert 42 not in Headers.of({"A": "1"})

    @pytest.mark.parametrize("lookup", [Headers.get, Headers.has, Headers.line, Headers.without])
    def test_non_string_name_rejected(self, lookup) -> None:
        with pytest.raises(InvalidHeader, match="name must be str"):
            lookup(Headers.of({"A": "1"}), None)

    def test_line(self) -> None:
        h = Headers.of({"Accept": ["text/html", "application/json"]})
        assert h.line("accept") == "text/html, application/json"
        assert h.line("missing") == ""

    def test_iteration_order_and_casing(self) -> None:
        h = Headers.of([("Host", "x"), ("accept", "a"), ("X-Trace", "1"), ("ACCEPT", "b")])
        assert list(h) == ["Host", "accept", "X-Trace"]
        assert list(h.items()) == [
            ("Host", ("x",)),
            ("accept", ("a", "b")),
            ("X-Trace", ("1",)),
        ]

    def test_fold_is_ascii_only(self) -> None:
        assert fold("X-Foo") == "x-foo"
        assert fold("ÄB") == "Äb"


class TestWithValues:
    def test_replaces_all_values(self) -> None:
        h = Headers.of({"Accept": ["a", "b"]})
        assert h.with_values("ACCEPT", ["c"]).get("accept") == ("c",)

    def test_keeps_position_and_first_casing(self) -> None:
        h = Headers.of([("Accept", "a"), ("X-B", "b")])
        h2 = h.with_values("ACCEPT", ["c"])
        assert list(h2) == ["Accept", "X-B"]

    def test_new_name_appended(self) -> None:
        h = Headers.of([("A", "1")]).with_values("B", ["2"])
        assert list(h) == ["A", "B"]

    def test_single_string(self) -> None:
        assert Headers().with_values("A", "1").get("a") == ("1",)

    def test_empty_values_remove(self) -> None:
        h = Headers.of({"A": "1", "B": "2"}).with_values("a", [])
        assert list(h) == ["B"]

    def test_receiver_untouched(self) -> None:
        h = Headers.of({"A": "1"})
        h.with_values("A", ["2"])
        assert h.get("A") == ("1",)

    def test_invalid_name(self) -> None:
        with pytest.raises(InvalidHeader):
            Headers().with_values("Bad Name", ["x"])

    def test_invalid_value(self) -> None:
        with pytest.raises(InvalidHeader):
            Headers().with_values("X", ["ok", "bad\r\nInjected: yes"])


class TestWithAdded:
    def test_appends_in_order(self) -> None:
        h = Headers.of({"Accept": "a"}).with_added("accept", "b").with_added("ACCEPT", "c")
        assert h.get("Accept") == ("a", "b", "c")
        assert list(h) == ["Accept"]

    def test_inserts_new(self) -> None:
        h = Headers.of({"A": "1"}).with_added("B", "2")
        assert list(h) == ["A", "B"]
        assert h.get("b") == ("2",)

    def test_receiver_untouched(self) -> None:
        h = Headers.of({"A": "1"})
        h.with_added("A", "2")
        assert h.get("A") == ("1",)

    def test_invalid_value(self) -> None:
        with pytest.raises(InvalidHeader):
            Headers().with_added("X", "a\nb")


class TestWithout:
    def test_removes_all_values(self) -> None:
        h = Headers.of({"A": ["1", "2"], "B": "3"}).without("a")
        assert h.get("A") == ()
        assert list(h) == ["B"]

    def test_absent_returns_self(self) -> None:
        h = Headers.of({"A": "1"})
        assert h.without("missing") is h

    def test_re_add_takes_new_casing_and_position(self) -> None:
        h = Headers.of([("accept", "a"), ("B", "b")]).without("ACCEPT").with_added("Accept", "c")
        assert list(h) == ["B", "Accept"]

    def test_later_headers_still_found(self) -> None:
        h = Headers.of([("A", "1"), ("B", "2"), ("C", "3")]).without("a")
        assert h.get("B") == ("2",)
        assert h.get("c") == ("3",)
        assert h.with_added("C", "4").get("C") == ("3", "4")


class TestConstruction:
    def test_of_none(self) -> None:
        assert Headers.of(None) == Headers()

    def test_of_headers_is_identity(self) -> None:
        h = Headers.of({"A": "1"})
        assert Headers.of(h) is h

    def test_mapping_and_pairs_agree(self) -> None:
        assert Headers.of({"A": ["1", "2"]}) == Headers.of([("A", "1"), ("A", "2")])

    def test_entries_normalized_to_tuples(self) -> None:
        h = Headers((("A", ["1", "2"]),))  # type: ignore[arg-type]
        assert h.get("a") == ("1", "2")
        assert hash(h) == hash(Headers.of({"A": ["1", "2"]}))

    def test_duplicate_entries_rejected(self) -> None:
        with pytest.raises(ValueError, match="duplicate"):
            Headers((("A", ("1",)), ("a", ("2",))))

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(InvalidHeader):
            Headers.of({"Bad Name": "x"})

    def test_frozen(self) -> None:
        h = Headers()
        with pytest.raises(AttributeError):
            h.entries = ()  # type: ignore[misc]

    def test_mapping_empty_values_skipped(self) -> None:
        h = Headers.of({"A": [], "B": "2", "C": []})
        assert list(h) == ["B"]
        assert h.get("b") == ("2",)
        assert not h.has("A")

    def test_of_matches_incremental_build(self) -> None:
        pairs = [("A", "1"), ("b", "2"), ("a", "3")]
        built = Headers()
        for name, value in pairs:
            built = built.with_added(name, value)
        assert Headers.of(pairs) == built
        assert Headers.of(pairs) == Headers((("A", ("1", "3")), ("b", ("2",))))

    def test_non_string_value_rejected(self) -> None:
        with pytest.raises(InvalidHeader, match="must be str"):
            Headers.of({"A": 1})  # type: ignore[dict-item]

    def test_many_headers(self) -> None:
        h = Headers.of([(f"X-{i}", "v") for i in range(2000)])
        assert len(h) == 2000
        assert h.get("x-1999") == ("v",)
        assert h.without("X-0").get("X-1999") == ("v",)


class TestDerivation:
    """Copy-on-write updates validate only the incoming name and values."""

    @pytest.fixture
    def name_checks(self, big: Headers, monkeypatch: pytest.MonkeyPatch) -> list[str]:
        seen: list[str] = []
        check = _headers.validate_header_name

        def counting(name: str) -> str:
            seen.append(name)
            return check(name)

        monkeypatch.setattr(_headers, "validate_header_name", counting)
        return seen

    @pytest.fixture
    def big(self) -> Headers:
        return Headers.of([(f"X-{i}", "v") for i in range(100)])

    def test_with_added(self, big: Headers, name_checks: list[str]) -> None:
        big.with_added("X-5", "w")
        big.with_added("Y", "w")
        assert name_checks == ["X-5", "Y"]

    def test_with_values(self, big: Headers, name_checks: list[str]) -> None:
        big.with_values("X-5", ["w"])
        assert name_checks == ["X-5"]

    def test_without(self, big: Headers, name_checks: list[str]) -> None:
        big.without("X-5")
        assert name_checks == ["X-5"]

    def test_parent_index_untouched(self, big: Headers) -> None:
        big.with_added("Y", "w")
        big.without("X-0")
        assert not big.has("Y")
        assert big.get("X-99") == ("v",)
