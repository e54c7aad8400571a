from datetime import date, timedelta

from aiogram import Bot, F, Router, types
from aiogram.filters import Command, CommandObject, CommandStart

from urfu_schedule.config import settings
from urfu_schedule.database.crud import get_user_group, save_user_group
from urfu_schedule.logger import setup_logger
from urfu_schedule.urfu.errors import ScheduleError
from urfu_schedule.urfu.schemas import ScheduleQuery
from urfu_schedule.urfu.service import ScheduleService
from urfu_schedule.urfu.utils import format_schedule, week_bounds
from urfu_schedule.telegram.utils import (
    GROUP_CALLBACK_PREFIX,
    NEXT_WEEK_BUTTON,
    THIS_WEEK_BUTTON,
    get_groups_keyboard,
    get_main_keyboard,
    is_potential_group_name,
    split_message,
)

router = Router()
logger = setup_logger(__name__, settings.LOG_LEVEL)

WELCOME_TEXT = (
    "📚 <b>Бот расписания УрФУ</b>\n\n"
    "Для поиска расписания используйте:\n"
    "/search [номер группы]\n"
    "Пример: /search РИЗ-220501\n\n"
    "Или просто введите номер группы"
)

HELP_TEXT = (
    "ℹ️ <b>Помощь</b>\n\n"
    "<b>Доступные команды:</b>\n"
    "• /search [группа] - найти группу\n"
    "• /week - расписание на эту неделю\n"
    "• /next - расписание на следующую неделю\n"
    "• /start - перезапустить бота\n\n"
    "Также можно просто написать номер группы"
)

NO_GROUP_TEXT = "Сначала выберите группу: /search [номер группы]"


@router.message(CommandStart())
async def cmd_start(message: types.Message):
    await message.answer(WELCOME_TEXT, reply_markup=get_main_keyboard())


@router.message(Command("help"))
async def cmd_help(message: types.Message):
    await message.answer(HELP_TEXT)


async def handle_group_search(message: types.Message, search: str):
    try:
        groups = await ScheduleService().search_groups(search)
    except ScheduleError as e:
        logger.error(f"Search error for {search!r}: {e}", exc_info=e)
        await message.answer("⚠ Ошибка при поиске. Попробуйте позже.")
        return

    if not groups:
        await message.answer("Группы не найдены. Проверьте правильность запроса.")
        return

    await message.answer(
        "🔍 Найденные группы:", reply_markup=get_groups_keyboard(groups)
    )


async def send_schedule(message: types.Message, group_id: str, start: date, end: date):
    query = ScheduleQuery(group_id=group_id, start_date=start, end_date=end)
    result = await ScheduleService().get_schedule(query)

    if not result.ok:
        logger.error(
            f"Schedule load error for group {group_id}: {result.error}",
            exc_info=result.error,
        )
        await message.answer("Не удалось загрузить расписание для выбранной группы")
        return

    for chunk in split_message(format_schedule(result.events, start, end)):
        await message.answer(chunk)


@router.message(Command("search"), flags={"chat_action": "typing"})
async def cmd_search(message: types.Message, command: CommandObject):
    search = (command.args or "").strip()
    if not search:
        await message.answer("Укажите группу: /search РИЗ-220501")
        return

    await handle_group_search(message, search)


async def send_week(message: types.Message, weeks_ahead: int = 0):
    group_id = await get_user_group(message.chat.id)
    if not group_id:
        await message.answer(NO_GROUP_TEXT)
        return

    start, end = week_bounds(date.today() + timedelta(weeks=weeks_ahead))
    await send_schedule(message, group_id, start, end)


@router.message(Command("week"), flags={"chat_action": "typing"})
async def cmd_week(message: types.Message):
    await send_week(message)


@router.message(Command("next"), flags={"chat_action": "typing"})
async def cmd_next(message: types.Message):
    await send_week(message, weeks_ahead=1)


@router.message(F.text == THIS_WEEK_BUTTON, flags={"chat_action": "typing"})
async def button_week(message: types.Message):
    await send_week(message)


@router.message(F.text == NEXT_WEEK_BUTTON, flags={"chat_action": "typing"})
async def button_next(message: types.Message):
    await send_week(message, weeks_ahead=1)


@router.message(F.text, flags={"chat_action": "typing"})
async def free_text(message: types.Message):
    if is_potential_group_name(message.text):
        await handle_group_search(message, message.text.strip())
        return

    await message.answer(
        "Используйте /search для поиска группы или введите номер группы"
    )


@router.callback_query(F.data.startswith(GROUP_CALLBACK_PREFIX))
async def group_selected(callback: types.CallbackQuery, bot: Bot):
    group_id = callback.data[len(GROUP_CALLBACK_PREFIX):]

    # messages older than 48h are no longer accessible
    if callback.message is None:
        await callback.answer("Сообщение устарело, повторите поиск")
        return

    chat_id = callback.message.chat.id
    try:
        await bot.send_chat_action(chat_id=chat_id, action="typing")
        await save_user_group(chat_id, group_id)

        start, end = week_bounds(date.today())
        await send_schedule(callback.message, group_id, start, end)
    except Exception as e:
        logger.error(f"Group selection error for {group_id}: {e}", exc_info=e)
        await callback.message.answer("⚠ Ошибка при загрузке расписания")
    finally:
        await callback.answer()
