"""
Tests for the Mealie REST adapter.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from src.adapters.mealie_store import INITIAL_LAST_PAGE, PER_PAGE, MealieStoreAdapter
from src.components.reconcile import RunCycleInput, run_cycle
from src.core.entities import Recipe, TaxonomyTerm, TermKind
from src.core.ports.store import (
    Deadline,
    StoreError,
    StoreResponseError,
    StoreTimeoutError,
)
from src.rules.models import Assignment, OrganiserActions, Query, QueryAssignments


def _response(status_code: int = 200, body: Any = None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def _page(items: list[Any], total_pages: int) -> MagicMock:
    return _response(body={"items": items, "total_pages": total_pages})


@pytest.fixture
def session() -> MagicMock:
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def adapter(session: MagicMock) -> MealieStoreAdapter:
    return MealieStoreAdapter("http://mealie:9000/", "secret", session=session)


@pytest.fixture
def deadline() -> Deadline:
    return Deadline.after(30)


class TestSession:
    def test_bearer_token_header(self, adapter: MealieStoreAdapter, session: MagicMock) -> None:
        assert session.headers["Authorization"] == "Bearer secret"

    def test_close(self, adapter: MealieStoreAdapter, session: MagicMock) -> None:
        adapter.close()

        session.close.assert_called_once()


class TestPagination:
    def test_follows_total_pages(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.side_effect = [
            _page([{"id": "1", "name": "Made", "slug": "made"}], total_pages=2),
            _page([{"id": "2", "name": "Not  Made ", "slug": "not-made"}], total_pages=2),
        ]

        terms = adapter.fetch_taxonomy(TermKind.CATEGORY, deadline)

        assert terms == [
            TaxonomyTerm(id="1", name="Made", slug="made", kind=TermKind.CATEGORY),
            TaxonomyTerm(id="2", name="Not Made", slug="not-made", kind=TermKind.CATEGORY),
        ]
        assert session.request.call_count == 2
        first, second = session.request.call_args_list
        assert first.args == ("GET", "http://mealie:9000/api/organizers/categories")
        assert first.kwargs["params"] == {"page": "1", "perPage": str(PER_PAGE)}
        assert second.kwargs["params"]["page"] == "2"

    def test_empty_collection_fetches_one_page(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _page([], total_pages=0)

        assert adapter.fetch_taxonomy(TermKind.TAG, deadline) == []
        assert session.request.call_count == 1

    def test_provisional_last_page_replaced(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        """The store's total_pages overrides the initial guess."""
        pages = INITIAL_LAST_PAGE + 2
        session.request.side_effect = [
            _page([{"slug": f"r{n}"}], total_pages=pages) for n in range(pages)
        ]

        slugs = adapter.search_recipe_ids({"search": "soup"}, deadline)

        assert len(slugs) == pages
        assert session.request.call_count == pages

    def test_failing_page_fails_whole_listing(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.side_effect = [
            _page([{"id": "1", "name": "Made"}], total_pages=2),
            _response(status_code=500, text="boom"),
        ]

        with pytest.raises(StoreResponseError) as exc_info:
            adapter.fetch_taxonomy(TermKind.CATEGORY, deadline)

        assert exc_info.value.status_code == 500


class TestSearch:
    def test_filter_params_passed_through(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _page(
            [{"slug": "tomato-soup"}, {"slug": "pho"}, {"name": "no slug"}], total_pages=1
        )

        slugs = adapter.search_recipe_ids({"queryFilter": "lastMade IS NOT NULL"}, deadline)

        assert slugs == ["tomato-soup", "pho"]
        params = session.request.call_args.kwargs["params"]
        assert params["queryFilter"] == "lastMade IS NOT NULL"
        assert params["page"] == "1"


class TestRecipe:
    def test_fetch_recipe(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _response(
            body={
                "id": "abc",
                "slug": "soup",
                "name": "Tomato  Soup",
                "recipeCategory": [{"id": "c1", "name": "NotMade", "slug": "notmade"}],
                "tags": None,
            }
        )

        recipe = adapter.fetch_recipe("soup", deadline)

        assert recipe.name == "Tomato Soup"
        assert [c.name for c in recipe.categories] == ["NotMade"]
        assert recipe.categories[0].kind is TermKind.CATEGORY
        assert recipe.tags == ()
        assert session.request.call_args.args == ("GET", "http://mealie:9000/api/recipes/soup")

    def test_write_payload(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _response(body={})
        recipe = Recipe(id="abc", slug="soup")

        adapter.write_recipe_taxonomy(
            recipe,
            [TaxonomyTerm(id="c1", name="Made", slug="made")],
            [TaxonomyTerm(id="t1", name="Yummy", slug="yummy", kind=TermKind.TAG)],
            deadline,
        )

        call = session.request.call_args
        assert call.args == ("PATCH", "http://mealie:9000/api/recipes/soup")
        assert call.kwargs["json"] == {
            "recipeCategory": [{"id": "c1", "name": "Made", "slug": "made"}],
            "tags": [{"id": "t1", "name": "Yummy", "slug": "yummy"}],
        }

    def test_write_rejected(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _response(status_code=422, text="invalid")

        with pytest.raises(StoreResponseError, match="422"):
            adapter.write_recipe_taxonomy(Recipe(id="abc", slug="soup"), [], [], deadline)


class TestErrors:
    def test_expired_deadline_makes_no_request(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
    ) -> None:
        expired = Deadline(expires_at=5.0, clock=lambda: 10.0)

        with pytest.raises(StoreTimeoutError):
            adapter.fetch_recipe("soup", expired)

        session.request.assert_not_called()

    def test_remaining_time_used_as_request_timeout(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
    ) -> None:
        session.request.return_value = _response(body={"slug": "soup"})

        adapter.fetch_recipe("soup", Deadline(expires_at=12.5, clock=lambda: 10.0))

        assert session.request.call_args.kwargs["timeout"] == 2.5

    def test_timeout(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(StoreTimeoutError):
            adapter.search_recipe_ids({}, deadline)

    def test_connection_error(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(StoreError, match="refused"):
            adapter.fetch_taxonomy(TermKind.TAG, deadline)

    def test_invalid_json(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _response(body=ValueError("not json"), text="<html>")

        with pytest.raises(StoreError, match="not valid JSON"):
            adapter.fetch_recipe("soup", deadline)


class TestCheck:
    def test_returns_lowercased_group(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
    ) -> None:
        session.request.return_value = _response(
            body={"username": "chef", "group": "Home", "household": "Family"}
        )

        assert adapter.check() == "home"
        assert session.request.call_args.args == ("GET", "http://mealie:9000/api/users/self")

    def test_unauthorized(self, adapter: MealieStoreAdapter, session: MagicMock) -> None:
        session.request.return_value = _response(status_code=401, text="unauthorized")

        with pytest.raises(StoreResponseError):
            adapter.check()


class TestMalformedBodies:
    """Bodies of unexpected shape surface as StoreError."""

    def test_null_organiser_in_recipe(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _response(
            body={"id": "abc", "slug": "bad", "recipeCategory": [None], "tags": []}
        )

        with pytest.raises(StoreError, match="get recipe bad"):
            adapter.fetch_recipe("bad", deadline)

    def test_non_dict_search_item(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _page(["tomato-soup"], total_pages=1)

        with pytest.raises(StoreError, match="search recipes"):
            adapter.search_recipe_ids({}, deadline)

    def test_non_numeric_total_pages(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _response(body={"items": [], "total_pages": "many"})

        with pytest.raises(StoreError, match="malformed page 1"):
            adapter.fetch_taxonomy(TermKind.TAG, deadline)

    def test_non_dict_organiser(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
        deadline: Deadline,
    ) -> None:
        session.request.return_value = _page([None], total_pages=1)

        with pytest.raises(StoreError, match="get categories"):
            adapter.fetch_taxonomy(TermKind.CATEGORY, deadline)


class TestCycleIsolation:
    """A malformed recipe is skipped; the rest of the working set is still updated."""

    def test_malformed_recipe_does_not_abort_cycle(
        self,
        adapter: MealieStoreAdapter,
        session: MagicMock,
    ) -> None:
        base = "http://mealie:9000"
        routes = {
            ("GET", f"{base}/api/organizers/categories"): _page(
                [{"id": "c1", "name": "Made", "slug": "made"}], total_pages=1
            ),
            ("GET", f"{base}/api/organizers/tags"): _page([], total_pages=0),
            ("GET", f"{base}/api/recipes"): _page(
                [{"slug": "bad"}, {"slug": "good"}], total_pages=1
            ),
            ("GET", f"{base}/api/recipes/bad"): _response(
                body={"id": "1", "slug": "bad", "recipeCategory": [None], "tags": []}
            ),
            ("GET", f"{base}/api/recipes/good"): _response(
                body={"id": "2", "slug": "good", "recipeCategory": [], "tags": []}
            ),
            ("PATCH", f"{base}/api/recipes/good"): _response(body={}),
        }
        session.request.side_effect = lambda method, url, **kwargs: routes[(method, url)]
        config = QueryAssignments(
            repeat_secs=60,
            timeout_secs=5,
            assignments=(
                Assignment(
                    queries=(Query(params={"queryFilter": "lastMade IS NOT NULL"}, mode="add"),),
                    categories=OrganiserActions(set=("Made",)),
                ),
            ),
        )

        report = run_cycle(RunCycleInput(config=config), store=adapter)

        assert not report.skipped
        assert report.assignments[0].failed == ("bad",)
        assert report.assignments[0].updated == ("good",)
        patches = [c for c in session.request.call_args_list if c.args[0] == "PATCH"]
        assert [c.args[1] for c in patches] == [f"{base}/api/recipes/good"]
