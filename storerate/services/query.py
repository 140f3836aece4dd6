import re
from typing import Dict, Optional

from pydantic.alias_generators import to_snake
from pymongo import ASCENDING, DESCENDING

def contains(value: str) -> Dict[str, str]:
    """Case-insensitive substring match"""
    return {"$regex": re.escape(value), "$options": "i"}

def sort_spec(sort_by: Optional[str], sort_order: Optional[str]):
    # sortBy arrives as the camelCase JSON name, documents are stored snake_case
    if not sort_by:
        return []
    return [(to_snake(sort_by), DESCENDING if sort_order == "desc" else ASCENDING)]

async def find_sorted(collection, query: dict, sort_by: Optional[str], sort_order: Optional[str]):
    cursor = collection.find(query)
    sort = sort_spec(sort_by, sort_order)
    if sort:
        cursor = cursor.sort(sort)
    return await cursor.to_list(None)
