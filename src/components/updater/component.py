"""
Updater component - Apply an assignment's organiser changes to recipes.

For every recipe in the working set: fetch it, compute
``(current ∪ set) \\ unset`` for categories and tags by name, and write back
only if either collection changed.

Invariants:
- I1: Collections are sets by name; order and duplicates are irrelevant
- I2: Change detection compares name sets, never sizes
- I3: At most one write per recipe per assignment
- I4: Re-applying an assignment to its own result changes nothing
- I5: A failing recipe never stops the rest of the working set
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.core.entities import Recipe, TaxonomyTerm, term_names
from src.core.ports.store import Deadline, StoreError

from .models import (
    RecipeDelta,
    RecipePlan,
    RecipeResult,
    UpdateRecipesInput,
    UpdateRecipesOutput,
)
from .ports import RecipeWriterPort

logger = logging.getLogger(__name__)


def apply_actions(
    current: Iterable[TaxonomyTerm],
    add: Iterable[TaxonomyTerm],
    remove: Iterable[TaxonomyTerm],
) -> tuple[list[TaxonomyTerm], bool]:
    """
    Add then remove terms by name.

    Returns:
        Tuple of (new terms, changed). Existing terms keep their position and
        identity; additions are appended.
    """
    original = list(current)
    merged: dict[str, TaxonomyTerm] = {}
    for term in original:
        merged.setdefault(term.name, term)
    for term in add:
        merged.setdefault(term.name, term)
    for term in remove:
        merged.pop(term.name, None)

    updated = list(merged.values())
    return updated, term_names(updated) != term_names(original)


def plan_recipe(recipe: Recipe, delta: RecipeDelta) -> RecipePlan:
    """Pure computation of a recipe's new categories and tags."""
    categories, categories_changed = apply_actions(
        recipe.categories, delta.categories.add, delta.categories.remove
    )
    tags, tags_changed = apply_actions(recipe.tags, delta.tags.add, delta.tags.remove)
    return RecipePlan(
        categories=categories,
        tags=tags,
        categories_changed=categories_changed,
        tags_changed=tags_changed,
    )


def _update_one(slug: str, inp: UpdateRecipesInput, store: RecipeWriterPort) -> RecipeResult:
    try:
        recipe = store.fetch_recipe(slug, Deadline.after(inp.timeout_seconds))
    except StoreError as e:
        logger.error("skipping recipe %s that failed to yield details: %s", slug, e)
        return RecipeResult(slug=slug, status="failed", error=str(e))

    plan = plan_recipe(recipe, inp.delta)
    if not plan.changed:
        logger.debug("recipe %s already up to date", slug)
        return RecipeResult(slug=slug, status="unchanged")

    try:
        store.write_recipe_taxonomy(
            recipe, plan.categories, plan.tags, Deadline.after(inp.timeout_seconds)
        )
    except StoreError as e:
        logger.error("failed to update organisers of %s: %s", slug, e)
        return RecipeResult(slug=slug, status="failed", error=str(e))

    logger.info(
        "updated organisers of %s: categories=[%s] tags=[%s]",
        slug,
        ", ".join(t.name for t in plan.categories),
        ", ".join(t.name for t in plan.tags),
    )
    return RecipeResult(slug=slug, status="updated")


def run_update(
    inp: UpdateRecipesInput,
    *,
    store: RecipeWriterPort,
) -> UpdateRecipesOutput:
    """
    Update every recipe in an assignment's working set, sequentially.

    Args:
        inp: Input containing the slugs, resolved delta and per-call timeout.
        store: Port used to fetch and write recipes.

    Returns:
        UpdateRecipesOutput with one result per slug.
    """
    total = len(inp.slugs)
    if total == 0:
        logger.info(
            "no recipes to process for assignment %d/%d",
            inp.assignment_number,
            inp.assignment_count,
        )
        return UpdateRecipesOutput()

    results = []
    for position, slug in enumerate(inp.slugs, start=1):
        logger.info(
            "processing recipe %d/%d for assignment %d/%d",
            position,
            total,
            inp.assignment_number,
            inp.assignment_count,
        )
        results.append(_update_one(slug, inp, store))

    return UpdateRecipesOutput(results=tuple(results))
