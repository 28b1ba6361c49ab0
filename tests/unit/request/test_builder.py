"""
Tests for the shape modifiers and the fluent RequestBuilder.
"""

import pytest

from conftest import RecordingTransport
from pgrequest.request import builder as ops
from pgrequest.request.builder import RequestBuilder
from pgrequest.request.state import Method


class TestShapeModifiers:
    """Test select, insert, update, delete, order and pagination."""

    def test_select(self, state):
        """Test that select sets the projection header and forces GET."""
        selected = ops.select(ops.rpc(state, "fn", {}), ["id", "name"])

        assert selected.headers["select"] == "id,name"
        assert selected.method == Method.GET

    def test_select_string(self, state):
        """Test select with a pre-joined column string."""
        assert ops.select(state, "id,name").headers["select"] == "id,name"

    def test_insert(self, state):
        """Test a plain insert."""
        rows = [{"name": "Ann"}]
        inserted = ops.insert(state, rows)

        assert inserted.headers["Prefer"] == ""
        assert inserted.method == Method.POST
        assert inserted.body == rows

    def test_upsert(self, state):
        """Test that upsert asks for merge-duplicates."""
        rows = [{"id": 1, "name": "Ann"}]
        inserted = ops.insert(state, rows, True)

        assert "resolution=merge-duplicates" in inserted.headers["Prefer"]
        assert inserted.method == Method.POST
        assert inserted.body == rows

    def test_update(self, state):
        """Test that update PATCHes and returns the representation."""
        updated = ops.update(state, {"name": "Ann"})

        assert updated.headers["Prefer"] == "return=representation"
        assert updated.method == Method.PATCH
        assert updated.body == {"name": "Ann"}

    def test_delete(self, state):
        """Test delete with and without criteria."""
        assert ops.delete(state).method == Method.DELETE
        assert ops.delete(state).body == {}
        assert ops.delete(state, {"id": 3}).body == {"id": 3}

    @pytest.mark.parametrize(
        "desc, nulls_first, expected",
        [
            (False, False, "age  "),
            (True, False, "age .desc "),
            (False, True, "age  .nullsfirst"),
            (True, True, "age .desc .nullsfirst"),
        ],
    )
    def test_order(self, state, desc, nulls_first, expected):
        """Test the verbatim order header."""
        assert ops.order(state, "age", desc, nulls_first).headers["order"] == expected

    def test_limit(self, state):
        """Test that limit encodes an inclusive item range."""
        limited = ops.limit(state, 10, 20)

        assert limited.headers["Range"] == "20-29"
        assert limited.headers["Range-Unit"] == "items"

    def test_limit_defaults_to_first_page(self, state):
        """Test limit without a start offset."""
        assert ops.limit(state, 5).headers["Range"] == "0-4"

    def test_limit_rejects_non_positive_size(self, state):
        """Test that an empty page cannot be requested."""
        with pytest.raises(ValueError):
            ops.limit(state, 0, 10)

    def test_range(self, state):
        """Test that range is half-open."""
        ranged = ops.range_(state, 10, 20)

        assert ranged.headers["Range"] == "10-19"
        assert ranged.headers["Range-Unit"] == "items"

    def test_range_rejects_empty(self, state):
        """Test that end must exceed start."""
        with pytest.raises(ValueError):
            ops.range_(state, 5, 5)

    def test_single(self, state):
        """Test the singular object Accept header."""
        assert ops.single(state).headers["Accept"] == "application/vnd.pgrst.object+json"

    def test_profile_headers_survive_modifiers(self, state):
        """Test that modifiers keep the initial profile headers."""
        shaped = ops.single(ops.limit(ops.order(ops.insert(state, []), "id"), 5))

        assert shaped.headers["Accept-Profile"] == state.schema_name
        assert shaped.headers["Content-Profile"] == state.schema_name
        assert shaped.headers["Content-Type"] == "application/json"


class TestRequestBuilder:
    """Test the fluent builder."""

    def test_chain(self):
        """Test a full read chain."""
        qb = (
            RequestBuilder("api")
            .from_("people")
            .select("id", "name")
            .gt("age", 18)
            .lt("age", 65)
            .order("name")
            .limit(10)
        )
        state = qb.state

        assert state.path == "http://localhost:3000/people"
        assert state.method == Method.GET
        assert state.headers["select"] == "id,name"
        assert state.params == {"age": ["gt.18", "lt.65"]}
        assert state.headers["Range"] == "0-9"

    def test_select_defaults_to_star(self):
        """Test select with no columns."""
        assert RequestBuilder().select().state.headers["select"] == "*"

    def test_not(self):
        """Test negation through the builder."""
        state = RequestBuilder().from_("todos").not_().eq("done", True).eq("owner", "me").state

        assert state.params == {"done": ["not.eq.true"], "owner": ["eq.me"]}

    def test_failed_filter_consumes_negation(self):
        """Test that a failing filter still clears the pending negation."""
        qb = RequestBuilder().from_("events").not_()

        with pytest.raises(ValueError):
            qb.adj("during", [1])

        assert qb.state.negate_next is False
        assert qb.eq("id", 1).state.params == {"id": ["eq.1"]}

    def test_write_chain(self):
        """Test a filtered update chain."""
        state = RequestBuilder().from_("users").update({"active": False}).eq("id", 7).state

        assert state.method == Method.PATCH
        assert state.body == {"active": False}
        assert state.params == {"id": ["eq.7"]}

    def test_upsert(self):
        """Test the upsert shortcut."""
        state = RequestBuilder().from_("users").upsert([{"id": 1}]).state

        assert state.headers["Prefer"] == "resolution=merge-duplicates"
        assert state.method == Method.POST

    def test_copy_forks_chain(self):
        """Test that a copied builder evolves independently."""
        base = RequestBuilder().from_("users")
        fork = base.copy().eq("id", 1)

        assert base.state.params == {}
        assert fork.state.params == {"id": ["eq.1"]}

    def test_all_filter_methods(self):
        """Test that every filter method reaches the engine."""
        state = (
            RequestBuilder()
            .neq("a", 1)
            .gte("b", 2)
            .lte("c", 3)
            .is_("d", None)
            .like("e", "x%")
            .ilike("f", "%y")
            .fts("g", "q")
            .plfts("h", "q")
            .phfts("i", "q")
            .wfts("j", "q")
            .in_("k", [1])
            .cs("l", ["x"])
            .cd("m", ["x"])
            .ov("n", ["x"])
            .sl("o", [1, 2])
            .sr("p", [1, 2])
            .nxl("q", [1, 2])
            .nxr("r", [1, 2])
            .adj("s", [1, 2])
            .filter("t", "eq", "raw")
            .state
        )

        assert state.params["a"] == ["neq.1"]
        assert state.params["d"] == ["is.null"]
        assert state.params["f"] == ["ilike.*y"]
        assert state.params["k"] == ["in.(1)"]
        assert state.params["n"] == ["ov.{x}"]
        assert state.params["s"] == ["adj.(1,2)"]
        assert state.params["t"] == ["eq.raw"]
        assert len(state.params) == 20

    def test_execute_uses_transport(self):
        """Test that execute dispatches through the bound transport."""
        transport = RecordingTransport()
        response = RequestBuilder(transport=transport).from_("users").eq("id", 1).execute()

        assert response is transport.response
        assert len(transport.calls) == 1
        assert transport.calls[0]["method"] == "GET"
        assert transport.calls[0]["params"] == [("id", "eq.1")]

    def test_execute_without_transport(self):
        """Test that an unbound builder refuses to execute."""
        with pytest.raises(RuntimeError):
            RequestBuilder().from_("users").execute()

    def test_repr(self):
        """Test the builder representation."""
        text = repr(RequestBuilder().from_("users").eq("id", 1))

        assert "RequestBuilder" in text
        assert "GET" in text
        assert "users" in text
