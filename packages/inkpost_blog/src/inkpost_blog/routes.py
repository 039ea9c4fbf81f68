from fastapi import APIRouter, Depends, Query, status
from inkpost_authentication.schemas import AuthenticatedUser
from inkpost_authorization import auth_required, require_admin
from inkpost_core.config import InkpostSettings
from inkpost_core.dependencies import get_settings
from inkpost_core.schemas import MAX_PAGE, MessageResponse, PaginationParams
from inkpost_db import get_db
from sqlalchemy.ext.asyncio import AsyncSession

from .schemas import PostCreate, PostListResponse, PostRead, PostUpdate
from .service import PostService

router = APIRouter(prefix="/api/posts", tags=["posts"])


def get_post_service() -> PostService:
    return PostService()


def get_pagination(
    page: int = Query(1, ge=1, le=MAX_PAGE, description="1-indexed page number"),
    limit: int | None = Query(None, ge=1, description="Items per page"),
    search: str | None = Query(None, description="Match in title or content"),
    settings: InkpostSettings = Depends(get_settings),
) -> PaginationParams:
    return PaginationParams(
        page=page,
        limit=limit or settings.DEFAULT_LIST_PER_PAGE,
        search=search,
        max_limit=settings.MAX_API_LIMIT,
    )


@router.get("", response_model=PostListResponse)
async def list_published_posts(
    params: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
) -> PostListResponse:
    return await service.list_posts(db, params, published_only=True)


# Declared before "/{slug}" so "admin" is never read as a slug
@router.get("/admin", response_model=PostListResponse)
async def list_all_posts(
    params: PaginationParams = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
    _admin: AuthenticatedUser = Depends(require_admin),
) -> PostListResponse:
    return await service.list_posts(db, params, published_only=False)


@router.get("/{slug}", response_model=PostRead)
async def get_post(
    slug: str,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
):
    return await service.get_by_slug(db, slug)


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
    _user: AuthenticatedUser = Depends(auth_required),
):
    return await service.create(db, payload)


@router.put("/{post_id}", response_model=PostRead)
async def update_post(
    post_id: int,
    payload: PostUpdate,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
    _user: AuthenticatedUser = Depends(auth_required),
):
    return await service.update(db, post_id, payload)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
    _user: AuthenticatedUser = Depends(auth_required),
) -> MessageResponse:
    await service.delete(db, post_id)
    return MessageResponse(message="Post deleted successfully")
