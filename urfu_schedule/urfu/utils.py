from datetime import date, timedelta
from html import escape
from typing import Iterable, Optional, Tuple

from urfu_schedule.urfu.schemas import ScheduleEvent

MISSING_VALUE = "Нет данных"

WEEKDAYS_RU = {
    0: "понедельник",
    1: "вторник",
    2: "среда",
    3: "четверг",
    4: "пятница",
    5: "суббота",
    6: "воскресенье",
}


def _value(value: Optional[str]) -> str:
    return MISSING_VALUE if value is None else value


def format_event_line(event: ScheduleEvent) -> str:
    return (
        f"Предмет: {_value(event.title)} {event.date} "
        f"{event.time_begin} {event.time_end} {_value(event.teacher_name)}"
    )


def format_date_ru(day: date) -> str:
    return f"{WEEKDAYS_RU[day.weekday()]}, {day.strftime('%d.%m.%Y')}"


def week_bounds(day: date) -> Tuple[date, date]:
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def _format_time(value: str) -> str:
    # API sends HH:MM:SS
    return value[:5]


def _day_heading(raw_date: str) -> str:
    try:
        day = date.fromisoformat(raw_date[:10])
    except ValueError:
        return escape(raw_date)
    return format_date_ru(day)


def _format_room(event: ScheduleEvent) -> Optional[str]:
    room = event.auditory_title
    location = event.auditory_location

    if room and location and room != location:
        return f"{escape(location)}, каб. {escape(room)}"
    if room:
        # location == title marks an online class
        return escape(room)
    return None


def format_schedule(events: Iterable[ScheduleEvent], start: date, end: date) -> str:
    ordered = sorted(events, key=lambda e: (e.date, e.time_begin))
    if not ordered:
        return "Расписание не найдено"

    lines = [f"📆 Период: {start.strftime('%d.%m.%Y')} - {end.strftime('%d.%m.%Y')}"]
    previous_date = None

    for event in ordered:
        if event.date != previous_date:
            lines.append(f"\n<b>📌 {_day_heading(event.date)}</b>")
            previous_date = event.date

        if not event.title:
            lines.append("   🎉 Выходной")
            continue

        lines.append(
            f"\n🕒 <i>{_format_time(event.time_begin)} - {_format_time(event.time_end)}</i>"
        )
        lines.append(f"   <b>{escape(event.title)}</b>")

        if event.teacher_name:
            lines.append(f"   👨‍🏫 {escape(event.teacher_name)}")

        room = _format_room(event)
        if room:
            lines.append(f"   🚪 {room}")

        if event.load_type:
            lines.append(f"   🏷 Тип: {escape(event.load_type)}")

    return "\n".join(lines)
