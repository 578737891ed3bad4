from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from fitplan.models.profile import ProfileRecord
from fitplan.schemas.profile import LastKnownMetrics, PersonalizationOverride, UserProfile


class ProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_record(self, user_id: str) -> Optional[ProfileRecord]:
        result = await self.db.execute(select(ProfileRecord).where(ProfileRecord.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        record = await self._get_record(user_id)
        if record is None:
            return None
        return UserProfile.model_validate(record.profile)

    async def get_override(self, user_id: str) -> Optional[PersonalizationOverride]:
        record = await self._get_record(user_id)
        if record is None or record.override is None:
            return None
        return PersonalizationOverride.model_validate(record.override)

    async def get_last_known(self, user_id: str) -> Optional[LastKnownMetrics]:
        record = await self._get_record(user_id)
        if record is None or record.last_known is None:
            return None
        return LastKnownMetrics.model_validate(record.last_known)

    async def save_profile(self, user_id: str, profile: UserProfile) -> UserProfile:
        """
        Сохранить анкету. Известные рост и вес запоминаются отдельно,
        чтобы подставлять их, если в следующей анкете они не указаны.
        """
        record = await self._get_record(user_id)
        if record is None:
            record = ProfileRecord(user_id=user_id)
            self.db.add(record)

        last_known = dict(record.last_known or {})
        if profile.height_cm is not None:
            last_known["height_cm"] = profile.height_cm
        if profile.weight_kg is not None:
            last_known["weight_kg"] = profile.weight_kg

        record.profile = profile.model_dump(mode="json")
        record.last_known = last_known or None
        await self.db.commit()
        return profile

    async def save_override(self, user_id: str, override: PersonalizationOverride) -> Optional[PersonalizationOverride]:
        """Сохранить переопределение. Новые поля дополняют ранее заданные."""
        record = await self._get_record(user_id)
        if record is None:
            return None

        merged = dict(record.override or {})
        merged.update(override.model_dump(mode="json", exclude_none=True))
        record.override = merged
        await self.db.commit()
        return PersonalizationOverride.model_validate(merged)
