# catalog/routes/search.py
from fastapi import APIRouter, Depends, Query

from catalog.core.config import SEARCH_PAGE_SIZE
from catalog.schemas.search import SearchPage
from catalog.services.deps import get_search_service
from catalog.services.search import SearchService

router = APIRouter(prefix="/search", tags=["search"])


# No authentication: search covers content visible to guests too
@router.get("", response_model=SearchPage)
def search(
    q: str = Query("", max_length=200),
    page: int = Query(1),
    search_service: SearchService = Depends(get_search_service),
):
    return search_service.search(q, page=page, page_size=SEARCH_PAGE_SIZE)
