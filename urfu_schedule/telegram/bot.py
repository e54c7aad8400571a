from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from urfu_schedule.config import settings

dp = Dispatcher()


def create_bot() -> Bot:
    if not settings.BOT_TOKEN:
        raise RuntimeError("BOT_TOKEN is not set")

    return Bot(
        token=settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
