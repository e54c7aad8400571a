import asyncio
import sys

from urfu_schedule.config import settings
from urfu_schedule.logger import quiet_library_loggers, setup_logger
from urfu_schedule.urfu.schemas import ScheduleQuery
from urfu_schedule.urfu.service import ScheduleService
from urfu_schedule.urfu.utils import format_event_line

logger = setup_logger(__name__, settings.LOG_LEVEL)


def default_query() -> ScheduleQuery:
    return ScheduleQuery(
        group_id=settings.GROUP_ID,
        start_date=settings.START_DATE,
        end_date=settings.END_DATE,
    )


async def run(query: ScheduleQuery, service: ScheduleService | None = None) -> int:
    service = service or ScheduleService()
    result = await service.get_schedule(query)

    for event in result.events:
        print(format_event_line(event), flush=True)

    if not result.ok:
        logger.error(
            f"Failed to load schedule for group {query.group_id}: {result.error}",
            exc_info=result.error,
        )
        return 1

    return 0


def use_utf8_stdout() -> None:
    # redirected output may default to the locale codepage
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8")


def main() -> int:
    use_utf8_stdout()
    quiet_library_loggers()
    return asyncio.run(run(default_query()))


if __name__ == "__main__":
    sys.exit(main())
