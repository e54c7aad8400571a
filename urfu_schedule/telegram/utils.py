from typing import Iterable, List

from aiogram.types import KeyboardButton
from aiogram.utils.keyboard import InlineKeyboardBuilder, ReplyKeyboardBuilder

from urfu_schedule.urfu.schemas import GroupInfo

MESSAGE_LIMIT = 4096
GROUP_CALLBACK_PREFIX = "group_"

THIS_WEEK_BUTTON = "📅 Эта неделя"
NEXT_WEEK_BUTTON = "🔜 Следующая неделя"


def get_main_keyboard():
    builder = ReplyKeyboardBuilder()
    builder.row(
        KeyboardButton(text=THIS_WEEK_BUTTON), KeyboardButton(text=NEXT_WEEK_BUTTON)
    )

    return builder.as_markup(resize_keyboard=True)


def get_groups_keyboard(groups: Iterable[GroupInfo]):
    builder = InlineKeyboardBuilder()
    for group in groups:
        builder.button(
            text=group.title, callback_data=f"{GROUP_CALLBACK_PREFIX}{group.id}"
        )
    builder.adjust(1)

    return builder.as_markup()


def is_potential_group_name(text: str) -> bool:
    """Group names look like РИЗ-220501: letters and digits, at least 5 chars."""
    text = text.strip()
    return (
        len(text) >= 5
        and any(ch.isalpha() for ch in text)
        and any(ch.isdigit() for ch in text)
    )


def split_message(text: str, limit: int = MESSAGE_LIMIT) -> List[str]:
    chunks: List[str] = []
    current = ""

    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]

        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate

    if current:
        chunks.append(current)

    return chunks
