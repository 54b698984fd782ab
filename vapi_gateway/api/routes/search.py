from fastapi import APIRouter

from vapi_gateway.core.deps import PropertySearchDep
from vapi_gateway.schemas.search import SearchRequest, SearchResponse

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/search", response_model=SearchResponse)
def search_properties(payload: SearchRequest, search: PropertySearchDep) -> SearchResponse:
    """
    Search listed properties by price, rooms, location and type.

    At most 100 properties are returned. Declared sync so FastAPI runs the
    blocking query in its threadpool.
    """
    return search.search(payload.criteria)
