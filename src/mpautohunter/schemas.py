from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # Wire format is camelCase to match the Browse API payloads we relay
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Search ---

class EnrichedItemSummary(_CamelModel):
    # Pass-through fields are relayed verbatim, whatever their upstream type
    item_id: Any = None
    title: Any = None
    price: Any = None
    image: Any = None
    item_web_url: Any = None
    affiliate_url: str | None = None


class SearchResponse(_CamelModel):
    total: int
    items: list[EnrichedItemSummary]


# --- System ---

class HealthResponse(BaseModel):
    status: str
    token_cached: bool
    token_expires_in: int | None = None
