from __future__ import annotations

import logging

from telegram.ext import Application, CallbackQueryHandler, CommandHandler, MessageHandler, filters

from gridcal.bot import handlers, keyboards
from gridcal.bot.session import SessionStore
from gridcal.infra.config import Settings, load_settings, validate_startup_env
from gridcal.infra.llm import OpenAIClient
from gridcal.infra.logging_config import configure_logging

LOGGER = logging.getLogger(__name__)


def _register_handlers(application: Application) -> None:
    application.add_handler(CommandHandler("start", handlers.start))
    application.add_handler(CommandHandler("help", handlers.help_command))
    application.add_handler(CommandHandler("calendar", handlers.calendar_command))
    # Non-blocking so /cancel and button presses run while a parse is outstanding.
    application.add_handler(CommandHandler("new", handlers.new_command, block=False))
    application.add_handler(CommandHandler("cancel", handlers.cancel_command))
    application.add_handler(
        CallbackQueryHandler(handlers.callback, pattern=f"^{keyboards.CALLBACK_PREFIX}", block=False)
    )
    application.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND, handlers.text_message, block=False)
    )
    application.add_error_handler(handlers.error_handler)


def build_bot_data(settings: Settings, *, llm_enabled: bool) -> dict[str, object]:
    llm_client = None
    if llm_enabled and settings.openai_api_key:
        llm_client = OpenAIClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.openai_timeout_seconds,
        )
    return {
        "settings": settings,
        "sessions": SessionStore(tz=settings.tz, seed_demo_events=settings.seed_demo_events),
        "llm_client": llm_client,
    }


def build_application(settings: Settings) -> Application:
    features = validate_startup_env(settings)
    application = Application.builder().token(settings.bot_token).build()
    application.bot_data.update(build_bot_data(settings, llm_enabled=features.llm_enabled))
    _register_handlers(application)
    return application


def main() -> None:
    configure_logging()
    settings = load_settings()
    application = build_application(settings)
    LOGGER.info(
        "Startup: tz=%s time_format=%s llm=%s seed_demo=%s",
        settings.timezone_name,
        settings.time_format,
        application.bot_data.get("llm_client") is not None,
        settings.seed_demo_events,
    )
    if settings.dry_run:
        LOGGER.info("DRY_RUN enabled; configuration checked, not polling")
        return
    application.run_polling()


if __name__ == "__main__":
    main()
