from fastapi import APIRouter, Depends

from conduit.cache import TAGS_KEY, cache
from conduit.config import settings
from conduit.dependencies import get_tag_queries
from conduit.queries import TagQueryService

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("")
async def list_tags(queries: TagQueryService = Depends(get_tag_queries)):
    cached = await cache.get(TAGS_KEY)
    if cached is not None:
        return {"tags": cached}
    tags = await queries.all()
    await cache.set(TAGS_KEY, tags, ttl=settings.CACHE_TTL_LIST)
    return {"tags": tags}
