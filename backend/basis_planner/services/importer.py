"""JSON import: replaces settings, activity types and the landscape hierarchy atomically."""

import logging
from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from basis_planner.core.errors import ImportFailedError
from basis_planner.models.planner import Activity, ActivityType, Landscape, Sid
from basis_planner.models.settings import Setting
from basis_planner.schemas.import_data import ImportDocument, ImportLandscape

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    settings: int = 0
    activity_types: int = 0
    landscapes: int = 0
    sids: int = 0
    activities: int = 0


class JsonImporter:
    """Runs an import in its own transaction: it commits completely or not at all."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]):
        self.sessionmaker = sessionmaker

    async def run(self, document: ImportDocument) -> ImportSummary:
        summary = ImportSummary()
        try:
            async with self.sessionmaker.begin() as session:
                await self._import_settings(session, document, summary)
                if document.activityTypes is not None:
                    await self._import_activity_types(session, document, summary)
                if document.landscapes is not None:
                    await self._replace_landscapes(session, document.landscapes, summary)
        except SQLAlchemyError as e:
            logger.error("Import rolled back: %s", e)
            detail = getattr(e, "orig", None) or e
            raise ImportFailedError(f"Fehler beim Import: {detail}") from e

        logger.info("Import committed: %s", summary)
        return summary

    async def _import_settings(
        self, session: AsyncSession, document: ImportDocument, summary: ImportSummary
    ) -> None:
        for key in ("year", "bundesland"):
            value = getattr(document, key)
            if value is None or value == "":
                continue
            stmt = sqlite_insert(Setting).values(key=key, value=str(value))
            await session.execute(
                stmt.on_conflict_do_update(index_elements=[Setting.key], set_={"value": stmt.excluded.value})
            )
            summary.settings += 1

    async def _import_activity_types(
        self, session: AsyncSession, document: ImportDocument, summary: ImportSummary
    ) -> None:
        # Types still referenced by an activity survive, everything else is replaced
        in_use = select(Activity.type_id).distinct()
        await session.execute(delete(ActivityType).where(ActivityType.id.not_in(in_use)))

        for index, activity_type in enumerate(document.activityTypes):
            stmt = sqlite_insert(ActivityType).values(
                id=activity_type.id,
                label=activity_type.label,
                color=activity_type.color,
                sort_order=index,
            )
            await session.execute(
                stmt.on_conflict_do_update(
                    index_elements=[ActivityType.id],
                    set_={
                        "label": stmt.excluded.label,
                        "color": stmt.excluded.color,
                        "sort_order": stmt.excluded.sort_order,
                    },
                )
            )
            summary.activity_types += 1

    async def _replace_landscapes(
        self, session: AsyncSession, landscapes: list[ImportLandscape], summary: ImportSummary
    ) -> None:
        # Dependency order; sub-activities go with their activities (ON DELETE CASCADE)
        await session.execute(delete(Activity))
        await session.execute(delete(Sid))
        await session.execute(delete(Landscape))

        for landscape_index, landscape_data in enumerate(landscapes):
            landscape = Landscape(name=landscape_data.name, sort_order=landscape_index)
            session.add(landscape)
            await session.flush()
            summary.landscapes += 1

            for sid_index, sid_data in enumerate(landscape_data.sids or []):
                sid = Sid(
                    landscape_id=landscape.id,
                    name=sid_data.name or "",
                    is_prd=bool(sid_data.isPRD),
                    notes=sid_data.notes or "",
                    sort_order=sid_index,
                )
                session.add(sid)
                await session.flush()
                summary.sids += 1

                for activity_data in sid_data.activities or []:
                    session.add(
                        Activity(
                            sid_id=sid.id,
                            type_id=activity_data.type,
                            start_date=activity_data.startDate,
                            duration=activity_data.duration or 1,
                            includes_weekend=bool(activity_data.includesWeekend),
                        )
                    )
                    summary.activities += 1
                await session.flush()
