# schoolhub/services/event_service.py
from schoolhub.core.errors import ValidationError
from schoolhub.core.permissions import Resource
from schoolhub.core.scope import CallerContext
from schoolhub.models import Event
from schoolhub.schemas.event import EventCreateRequest, EventUpdateRequest, ends_after
from schoolhub.services.bulletin_service import BulletinService


class EventService(BulletinService):
    model = Event
    resource = Resource.EVENTS
    label = "Event"
    date_column = "start_time"

    def ordering(self):
        return (Event.start_time.desc(), Event.id.desc())

    async def create(self, ctx: CallerContext, data: EventCreateRequest) -> Event:
        return await self.create_bulletin(ctx, data.model_dump())

    async def update(self, ctx: CallerContext, event_id: int, data: EventUpdateRequest) -> Event:
        changes = data.model_dump(exclude_unset=True)
        for field in ("title", "start_time", "end_time"):
            if field in changes and changes[field] is None:
                del changes[field]

        if "start_time" in changes or "end_time" in changes:
            current = await self.get(ctx, event_id)
            start = changes.get("start_time", current.start_time)
            end = changes.get("end_time", current.end_time)
            if not ends_after(start, end):
                raise ValidationError(
                    "End time must be after start time",
                    details=[{"field": "end_time", "message": "End time must be after start time"}]
                )
        return await self.update_bulletin(ctx, event_id, changes)
