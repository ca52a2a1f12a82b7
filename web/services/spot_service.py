"""
Spot Service - Web Layer Service for Spot Operations.

Thin wrapper over core.spot_catalog plus the translation from request
form data to catalog types.
"""

from typing import Iterable

from core.spot_catalog import (
    Outcome,
    Spot,
    SpotCatalog,
    SpotFields,
    SpotPatch,
    is_storable_id,
)

# Form field name -> spot attribute.
FORM_FIELDS = {
    "name": "name",
    "description": "description",
    "ticket": "ticket",
    "transport": "transport",
    "imageurl": "image_url",
}


def fields_from_form(form) -> SpotFields:
    """Builds the fields of a new spot from submitted form data."""
    return SpotFields(
        **{attr: form.get(key, "") for key, attr in FORM_FIELDS.items()}
    )


def patch_from_form(form) -> SpotPatch:
    """Builds a partial update from form data. Blank inputs leave values unchanged."""
    return SpotPatch(
        **{attr: form.get(key) for key, attr in FORM_FIELDS.items()}
    )


def parse_spot_id(raw) -> int | None:
    """
    Returns the id as int, or None when it is not a valid id.

    Only plain ASCII digit strings are accepted ("1_0", " 3 " and
    non-ASCII digits are rejected), and the value must fit in SQLite's
    integer range.
    """
    text = str(raw) if raw is not None else ""
    if not (text.isascii() and text.isdigit()):
        return None
    spot_id = int(text)
    return spot_id if is_storable_id(spot_id) else None


def parse_spot_ids(raw_ids: Iterable) -> list[int]:
    """Parses a list of submitted ids, dropping anything that is not an integer."""
    ids = []
    for raw in raw_ids or ():
        spot_id = parse_spot_id(raw)
        if spot_id is not None:
            ids.append(spot_id)
    return ids


def list_spots(catalog: SpotCatalog) -> list[Spot]:
    """All spots in ranking order."""
    return catalog.list()


def search_spots(catalog: SpotCatalog, query: str) -> list[Spot]:
    return catalog.search(query)


def create_spot(catalog: SpotCatalog, spot_fields: SpotFields) -> Spot:
    return catalog.create(spot_fields)


def recommend_spot(catalog: SpotCatalog, spot_id: int) -> Outcome:
    return catalog.recommend(spot_id)


def update_spot(catalog: SpotCatalog, spot_id: int, patch: SpotPatch) -> Outcome:
    return catalog.update(spot_id, patch)


def delete_spot(catalog: SpotCatalog, spot_id: int) -> Outcome:
    return catalog.delete(spot_id)


def batch_delete_spots(catalog: SpotCatalog, spot_ids: Iterable[int]) -> Outcome:
    return catalog.batch_delete(spot_ids)
