"""
Webhook HTTP server for the skill.

Voice platforms POST their request JSON to ``/webhook`` and receive the
rendered response JSON.
"""

from typing import Optional

from aiohttp import web

from voiceskill.application import App
from voiceskill.config import settings
from voiceskill.config.logging_config import get_logger
from voiceskill.utils.error_handling import AppError, PlatformNotSupportedError, RequestError

logger = get_logger(__name__)

SKILL_APP_KEY = "skill_app"


async def handle_webhook(request: web.Request) -> web.Response:
    """Pass a platform request through the skill."""
    skill_app: App = request.app[SKILL_APP_KEY]

    try:
        body = await request.json()
    except ValueError as e:
        logger.warning(f"Rejected webhook request with invalid JSON: {e}")
        return web.json_response({"error": "Invalid JSON body"}, status=400)

    try:
        result = await skill_app.handle(body)
    except (RequestError, PlatformNotSupportedError) as e:
        return web.json_response({"error": e.to_dict()}, status=400)
    except AppError as e:
        return web.json_response({"error": e.to_dict()}, status=500)

    return web.json_response(result)


async def handle_health(request: web.Request) -> web.Response:
    skill_app: App = request.app[SKILL_APP_KEY]
    return web.json_response({
        "status": "ok",
        "app": settings.app_name,
        "version": settings.app_version,
        "repository_connected": skill_app.repository.is_connected,
    })


async def _close_skill_app(app: web.Application) -> None:
    await app[SKILL_APP_KEY].close()


def create_webhook_app(skill_app: App) -> web.Application:
    """Build the aiohttp application serving ``skill_app``."""
    app = web.Application()
    app[SKILL_APP_KEY] = skill_app
    app.router.add_post("/webhook", handle_webhook)
    app.router.add_get("/health", handle_health)
    app.on_cleanup.append(_close_skill_app)
    return app


def run_webhook(skill_app: App, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the webhook until interrupted."""
    host = host or settings.server.host
    port = port or settings.server.port
    logger.info(f"Webhook listening on http://{host}:{port}/webhook")
    web.run_app(create_webhook_app(skill_app), host=host, port=port, print=None)
