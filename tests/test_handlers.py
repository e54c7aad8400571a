from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.filters import CommandObject

from urfu_schedule.telegram import handlers
from urfu_schedule.urfu.errors import NetworkError
from urfu_schedule.urfu.schemas import GroupInfo, ScheduleEvent, ScheduleResult


def make_message(text="", chat_id=42):
    message = AsyncMock()
    message.text = text
    message.chat.id = chat_id
    return message


def answered_texts(message):
    return [call.args[0] for call in message.answer.await_args_list]


@pytest.fixture
def fake_service(monkeypatch):
    service = MagicMock()
    service.search_groups = AsyncMock(return_value=[])
    service.get_schedule = AsyncMock(return_value=ScheduleResult())
    monkeypatch.setattr(handlers, "ScheduleService", lambda: service)
    return service


@pytest.fixture
def saved_group(monkeypatch):
    get_group = AsyncMock(return_value="59774")
    save_group = AsyncMock()
    monkeypatch.setattr(handlers, "get_user_group", get_group)
    monkeypatch.setattr(handlers, "save_user_group", save_group)
    return get_group, save_group


@pytest.mark.asyncio
async def test_start_sends_welcome_with_keyboard():
    message = make_message("/start")

    await handlers.cmd_start(message)

    text = answered_texts(message)[0]
    assert "Бот расписания УрФУ" in text
    assert message.answer.await_args.kwargs["reply_markup"] is not None


@pytest.mark.asyncio
async def test_search_without_args_asks_for_group(fake_service):
    message = make_message("/search")

    await handlers.cmd_search(message, CommandObject(prefix="/", command="search", args=None))

    fake_service.search_groups.assert_not_awaited()
    assert "/search" in answered_texts(message)[0]


@pytest.mark.asyncio
async def test_search_shows_groups_keyboard(fake_service):
    fake_service.search_groups.return_value = [GroupInfo(id="59774", title="РИЗ-220501")]
    message = make_message("/search РИЗ-220501")

    await handlers.cmd_search(
        message, CommandObject(prefix="/", command="search", args=" РИЗ-220501 ")
    )

    fake_service.search_groups.assert_awaited_once_with("РИЗ-220501")
    markup = message.answer.await_args.kwargs["reply_markup"]
    assert markup.inline_keyboard[0][0].callback_data == "group_59774"


@pytest.mark.asyncio
async def test_search_without_results(fake_service):
    message = make_message()

    await handlers.handle_group_search(message, "ЯЯЯ-000000")

    assert answered_texts(message) == ["Группы не найдены. Проверьте правильность запроса."]


@pytest.mark.asyncio
async def test_search_failure_is_reported(fake_service):
    fake_service.search_groups.side_effect = NetworkError("down")
    message = make_message()

    await handlers.handle_group_search(message, "РИЗ-220501")

    assert answered_texts(message) == ["⚠ Ошибка при поиске. Попробуйте позже."]


@pytest.mark.asyncio
async def test_free_text_group_name_triggers_search(fake_service):
    message = make_message(" РИЗ-220501 ")

    await handlers.free_text(message)

    fake_service.search_groups.assert_awaited_once_with("РИЗ-220501")


@pytest.mark.asyncio
async def test_free_text_other_gets_hint(fake_service):
    message = make_message("привет")

    await handlers.free_text(message)

    fake_service.search_groups.assert_not_awaited()
    assert "/search" in answered_texts(message)[0]


@pytest.mark.asyncio
async def test_week_without_saved_group(fake_service, saved_group):
    saved_group[0].return_value = None
    message = make_message("/week")

    await handlers.cmd_week(message)

    fake_service.get_schedule.assert_not_awaited()
    assert answered_texts(message) == [handlers.NO_GROUP_TEXT]


@pytest.mark.asyncio
async def test_next_week_queries_following_monday(fake_service, saved_group):
    message = make_message("/next")

    await handlers.cmd_next(message)

    query = fake_service.get_schedule.await_args.args[0]
    assert query.group_id == "59774"
    assert query.start_date.weekday() == 0
    assert (query.end_date - query.start_date).days == 6
    assert query.start_date > date.today()
    assert answered_texts(message) == ["Расписание не найдено"]


@pytest.mark.asyncio
async def test_schedule_failure_is_reported(fake_service):
    fake_service.get_schedule.return_value = ScheduleResult(error=NetworkError("down"))
    message = make_message()

    await handlers.send_schedule(message, "59774", date(2025, 3, 17), date(2025, 3, 23))

    assert answered_texts(message) == ["Не удалось загрузить расписание для выбранной группы"]


@pytest.mark.asyncio
async def test_schedule_is_sent_as_formatted_text(fake_service):
    event = ScheduleEvent(
        title="Мат. анализ",
        date="2025-03-18",
        time_begin="09:00:00",
        time_end="10:30:00",
        teacher_name="Иванов И.И.",
    )
    fake_service.get_schedule.return_value = ScheduleResult(events=[event])
    message = make_message()

    await handlers.send_schedule(message, "59774", date(2025, 3, 17), date(2025, 3, 23))

    text = answered_texts(message)[0]
    assert "📆 Период: 17.03.2025 - 23.03.2025" in text
    assert "<b>Мат. анализ</b>" in text


@pytest.mark.asyncio
async def test_group_selection_saves_group_and_sends_week(fake_service, saved_group):
    callback = AsyncMock()
    callback.data = "group_59774"
    callback.message = make_message(chat_id=7)
    bot = AsyncMock()

    await handlers.group_selected(callback, bot)

    saved_group[1].assert_awaited_once_with(7, "59774")
    bot.send_chat_action.assert_awaited_once_with(chat_id=7, action="typing")
    assert fake_service.get_schedule.await_args.args[0].group_id == "59774"
    callback.answer.assert_awaited_once()


@pytest.mark.asyncio
async def test_group_selection_error_still_answers_callback(fake_service, saved_group):
    saved_group[1].side_effect = RuntimeError("database is locked")
    callback = AsyncMock()
    callback.data = "group_59774"
    callback.message = make_message(chat_id=7)

    await handlers.group_selected(callback, AsyncMock())

    assert answered_texts(callback.message) == ["⚠ Ошибка при загрузке расписания"]
    callback.answer.assert_awaited_once()


@pytest.mark.asyncio
async def test_group_selection_on_inaccessible_message(fake_service, saved_group):
    callback = AsyncMock()
    callback.data = "group_59774"
    callback.message = None
    bot = AsyncMock()

    await handlers.group_selected(callback, bot)

    saved_group[1].assert_not_awaited()
    fake_service.get_schedule.assert_not_awaited()
    bot.send_chat_action.assert_not_awaited()
    callback.answer.assert_awaited_once()
