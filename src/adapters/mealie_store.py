"""
Mealie Store Adapter.

HTTP implementation of RecipeStorePort against the Mealie REST API.

Endpoints used:
- GET   /api/organizers/{categories|tags}   paginated taxonomy listing
- GET   /api/recipes?<filter>               paginated recipe search
- GET   /api/recipes/{slug}                 recipe detail
- PATCH /api/recipes/{slug}                 organiser write-back
- GET   /api/users/self                     connectivity check

Pagination starts with a provisional last page and then trusts the
``total_pages`` reported by each response. If the collection changes while
pages are fetched the result is best effort.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from src.core.entities import Recipe, TaxonomyTerm, TermKind, collapse_whitespace
from src.core.ports.store import (
    Deadline,
    StoreError,
    StoreResponseError,
    StoreTimeoutError,
)

logger = logging.getLogger(__name__)

PER_PAGE = 200
INITIAL_LAST_PAGE = 10
CHECK_TIMEOUT_SECONDS = 30.0

# Errors from parsing a body of unexpected shape.
_MALFORMED = (AttributeError, KeyError, TypeError, ValueError)


def _parse_term(item: Mapping[str, Any], kind: TermKind) -> TaxonomyTerm:
    return TaxonomyTerm(
        id=str(item.get("id") or ""),
        name=collapse_whitespace(str(item.get("name") or "")),
        slug=str(item.get("slug") or ""),
        kind=kind,
    )


def _parse_recipe(data: Mapping[str, Any]) -> Recipe:
    return Recipe(
        id=collapse_whitespace(str(data.get("id") or "")),
        slug=str(data.get("slug") or ""),
        name=collapse_whitespace(str(data.get("name") or "")),
        categories=tuple(
            _parse_term(item, TermKind.CATEGORY) for item in data.get("recipeCategory") or []
        ),
        tags=tuple(_parse_term(item, TermKind.TAG) for item in data.get("tags") or []),
    )


class MealieStoreAdapter:
    """
    Mealie REST client implementing RecipeStorePort.

    Every request is bounded by the remaining time of the call's Deadline.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize adapter.

        Args:
            base_url: Mealie URL without the /api suffix
            token: API token sent as a bearer token
            session: Optional pre-configured requests session
        """
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {token}"})

    def close(self) -> None:
        self._session.close()

    def _request(
        self,
        method: str,
        path: str,
        deadline: Deadline,
        operation: str,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        deadline.check(operation)
        remaining = deadline.remaining()

        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=payload,
                timeout=remaining,
            )
        except requests.Timeout as e:
            raise StoreTimeoutError(operation) from e
        except requests.RequestException as e:
            raise StoreError(f"{operation}: {e}") from e

        if response.status_code != 200:
            raise StoreResponseError(operation, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            logger.debug("body of %s: %s", operation, response.text)
            raise StoreError(f"{operation}: response is not valid JSON") from e

    def _get_paginated(
        self,
        path: str,
        params: Mapping[str, str],
        deadline: Deadline,
        operation: str,
    ) -> list[Mapping[str, Any]]:
        page = 1
        last_page = INITIAL_LAST_PAGE
        items: list[Mapping[str, Any]] = []

        while page <= last_page:
            query = dict(params)
            query["page"] = str(page)
            query["perPage"] = str(PER_PAGE)

            data = self._request("GET", path, deadline, operation, params=query)
            if not isinstance(data, dict):
                raise StoreError(f"{operation}: unexpected response shape on page {page}")

            try:
                page_items = list(data.get("items") or [])
                last_page = int(data.get("total_pages") or 0)
            except _MALFORMED as e:
                raise StoreError(f"{operation}: malformed page {page}: {e}") from e
            items.extend(page_items)
            logger.debug("retrieved %d items from page %d of %s", len(page_items), page, path)
            page += 1

        logger.info("retrieved %d items in total from %s", len(items), path)
        return items

    # --- RecipeStorePort ---

    def fetch_taxonomy(self, kind: TermKind, deadline: Deadline) -> list[TaxonomyTerm]:
        items = self._get_paginated(
            f"/api/organizers/{kind.value}", {}, deadline, f"get {kind.value}"
        )
        try:
            return [_parse_term(item, kind) for item in items]
        except _MALFORMED as e:
            raise StoreError(f"get {kind.value}: malformed item: {e}") from e

    def search_recipe_ids(self, params: Mapping[str, str], deadline: Deadline) -> list[str]:
        items = self._get_paginated("/api/recipes", params, deadline, "search recipes")
        try:
            return [str(item["slug"]) for item in items if item.get("slug")]
        except _MALFORMED as e:
            raise StoreError(f"search recipes: malformed item: {e}") from e

    def fetch_recipe(self, slug: str, deadline: Deadline) -> Recipe:
        data = self._request("GET", f"/api/recipes/{slug}", deadline, f"get recipe {slug}")
        if not isinstance(data, dict):
            raise StoreError(f"get recipe {slug}: unexpected response shape")
        try:
            return _parse_recipe(data)
        except _MALFORMED as e:
            raise StoreError(f"get recipe {slug}: malformed body: {e}") from e

    def write_recipe_taxonomy(
        self,
        recipe: Recipe,
        categories: list[TaxonomyTerm],
        tags: list[TaxonomyTerm],
        deadline: Deadline,
    ) -> None:
        logger.info("updating organisers for %s", recipe.slug)
        payload = {
            "recipeCategory": [term.to_payload() for term in categories],
            "tags": [term.to_payload() for term in tags],
        }
        self._request(
            "PATCH",
            f"/api/recipes/{recipe.slug}",
            deadline,
            f"update organisers of {recipe.slug}",
            payload=payload,
        )

    # --- Startup ---

    def check(self) -> str:
        """
        Verify the connection and token.

        Returns:
            The lower-cased group of the authenticated user.

        Raises:
            StoreError: if Mealie cannot be reached or rejects the token
        """
        data = self._request(
            "GET",
            "/api/users/self",
            Deadline.after(CHECK_TIMEOUT_SECONDS),
            "verify connection to mealie",
        )
        if not isinstance(data, dict):
            raise StoreError("verify connection to mealie: unexpected response shape")
        logger.info(
            "successful login with user %s (group=%s, household=%s)",
            data.get("username"),
            data.get("group"),
            data.get("household"),
        )
        return str(data.get("group") or "").lower()
