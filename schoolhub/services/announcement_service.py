# schoolhub/services/announcement_service.py
from schoolhub.core.permissions import Resource
from schoolhub.core.scope import CallerContext
from schoolhub.models import Announcement
from schoolhub.schemas.announcement import AnnouncementCreateRequest, AnnouncementUpdateRequest
from schoolhub.services.bulletin_service import BulletinService


class AnnouncementService(BulletinService):
    model = Announcement
    resource = Resource.ANNOUNCEMENTS
    label = "Announcement"
    date_column = "date"

    def ordering(self):
        return (Announcement.date.desc(), Announcement.id.desc())

    async def create(self, ctx: CallerContext, data: AnnouncementCreateRequest) -> Announcement:
        return await self.create_bulletin(ctx, data.model_dump())

    async def update(self, ctx: CallerContext, announcement_id: int, data: AnnouncementUpdateRequest) -> Announcement:
        return await self.update_bulletin(ctx, announcement_id, data.model_dump(exclude_unset=True))
