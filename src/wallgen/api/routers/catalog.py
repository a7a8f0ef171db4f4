"""Model catalog route: fal.ai models merged with their pricing."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from wallgen.api.dependencies import get_fal_client, require_fal_key
from wallgen.core.fal import FalClient

router = APIRouter(prefix="/models", tags=["models"])

DEFAULT_LIMIT = 50


def _merge_entry(model: dict, price: dict | None) -> dict:
    metadata = model.get("metadata") or {}
    return {
        "id": model.get("endpoint_id"),
        "name": metadata.get("display_name"),
        "description": metadata.get("description"),
        "category": metadata.get("category"),
        "status": metadata.get("status"),
        "tags": metadata.get("tags") or [],
        "thumbnail_url": metadata.get("thumbnail_url"),
        "pricing": (
            {
                "unit_price": price.get("unit_price"),
                "unit": price.get("unit"),
                "currency": price.get("currency"),
            }
            if price
            else None
        ),
    }


@router.get("")
async def list_models(
    category: str = "text-to-image",
    q: str | None = None,
    limit: int = DEFAULT_LIMIT,
    cursor: str | None = None,
    fal_key: str = Depends(require_fal_key),
    fal: FalClient = Depends(get_fal_client),
) -> dict:
    """List active fal.ai models with pricing.

    Pricing is best-effort: if the pricing call fails, models are returned
    with ``pricing: null``.
    """
    catalog = await fal.list_models(
        fal_key,
        category=category,
        q=q,
        limit=limit or DEFAULT_LIMIT,
        cursor=cursor,
    )
    models = catalog.get("models") or []
    pricing = await fal.fetch_pricing(fal_key, [m["endpoint_id"] for m in models if "endpoint_id" in m])

    return {
        "models": [_merge_entry(m, pricing.get(m.get("endpoint_id"))) for m in models],
        "has_more": bool(catalog.get("has_more")),
        "next_cursor": catalog.get("next_cursor"),
    }
