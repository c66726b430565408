# schoolhub/services/news_service.py
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from schoolhub.core.permissions import Action, Resource
from schoolhub.core.scope import CallerContext, resolve_scope, resolve_target_school
from schoolhub.models import NewsPost
from schoolhub.schemas.enums import NewsCategory, NewsStatus
from schoolhub.schemas.news import NewsCreateRequest, NewsUpdateRequest
from schoolhub.services.base_service import BaseService, ListParams


class NewsService(BaseService):
    """News posts. Only staff see drafts and archived posts."""
    model = NewsPost
    resource = Resource.NEWS
    label = "News post"
    search_fields = ("title", "excerpt", "author")

    def ordering(self):
        return (
            NewsPost.published_at.desc().nulls_last(),
            NewsPost.created_at.desc(),
            NewsPost.id.desc(),
        )

    async def list_news(
        self,
        ctx: CallerContext,
        params: ListParams,
        category: Optional[NewsCategory] = None,
        status: Optional[NewsStatus] = None,
        featured: Optional[bool] = None
    ) -> Tuple[List[NewsPost], int]:
        filters = []
        if category is not None:
            filters.append(NewsPost.category == category)
        if status is not None:
            filters.append(NewsPost.status == status)
        if featured is not None:
            filters.append(NewsPost.featured == featured)
        return await self.list(ctx, params, filters)

    async def create(self, ctx: CallerContext, data: NewsCreateRequest) -> NewsPost:
        resolve_scope(ctx, self.resource, Action.CREATE)
        school_id = data.school_id
        # super may publish to every school at once
        if not (ctx.is_super and school_id is None):
            school_id = resolve_target_school(ctx, school_id)
            await self.get_school(school_id)

        post = NewsPost(**data.model_dump(exclude={"school_id"}), school_id=school_id)
        if post.status is NewsStatus.PUBLISHED and post.published_at is None:
            post.published_at = datetime.now(timezone.utc)
        return await self.save(post)

    async def update(self, ctx: CallerContext, post_id: int, data: NewsUpdateRequest) -> NewsPost:
        post = await self.get(ctx, post_id, Action.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        self.apply_changes(post, changes)
        if (
            changes.get("status") is NewsStatus.PUBLISHED
            and not changes.get("published_at")
            and post.published_at is None
        ):
            post.published_at = datetime.now(timezone.utc)
        return await self.save(post)
