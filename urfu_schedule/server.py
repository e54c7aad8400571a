import asyncio
import os
from contextlib import asynccontextmanager

import uvicorn
from aiogram import Bot
from aiogram.utils.chat_action import ChatActionMiddleware
from fastapi import FastAPI

from urfu_schedule.config import settings
from urfu_schedule.database.engine import init_db
from urfu_schedule.logger import quiet_library_loggers, setup_logger
from urfu_schedule.telegram.bot import create_bot, dp
from urfu_schedule.telegram.handlers import router as telegram_router

logger = setup_logger(__name__, settings.LOG_LEVEL)

dp.include_router(telegram_router)
dp.message.middleware(ChatActionMiddleware())


def start_polling(bot: Bot) -> asyncio.Task:
    task = asyncio.create_task(
        dp.start_polling(bot, drop_pending_updates=True, handle_signals=False),
        name="telegram-polling",
    )
    task.add_done_callback(_log_polling_exit)
    return task


def _log_polling_exit(task: asyncio.Task) -> None:
    if task.cancelled():
        logger.info("Bot polling stopped")
    elif task.exception() is not None:
        logger.error("Bot polling crashed", exc_info=task.exception())


async def stop_polling(bot: Bot, task: asyncio.Task) -> None:
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    await bot.session.close()


def bot_status(app: FastAPI) -> str:
    task = getattr(app.state, "polling_task", None)
    if task is None:
        return "stopped"
    return "crashed" if task.done() and not task.cancelled() else "running"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()

    bot = create_bot()
    app.state.polling_task = start_polling(bot)
    logger.info("UrFU schedule bot is polling for updates")

    yield

    await stop_polling(bot, app.state.polling_task)
    app.state.polling_task = None


app = FastAPI(title="urfu-schedule-bot", lifespan=lifespan)


@app.get("/")
async def health_check():
    status = bot_status(app)
    return {"status": "ok" if status == "running" else "degraded", "bot": status}


def run():
    quiet_library_loggers()
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))


if __name__ == "__main__":
    run()
