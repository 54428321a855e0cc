"""FastAPI application receiving Slack events, interactions and commands."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import parse_qs

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from slack_sdk.signature import SignatureVerifier

from .config import Settings, load_settings
from .handlers import COMMAND_STATUSES, WfoBot
from .models import Status
from .slack_client import SlackClient
from .snapshot import load_snapshot, save_snapshot

logger = logging.getLogger(__name__)

SHORTCUT_STATUSES = {"wfo": Status.OFFICE, "wfh": Status.HOME}


def _parse_form(body: bytes) -> Dict[str, str]:
    return {key: values[0] for key, values in parse_qs(body.decode("utf-8")).items()}


def create_app(settings: Optional[Settings] = None, client: Optional[SlackClient] = None) -> FastAPI:
    settings = settings or load_settings()
    slack_client = client or SlackClient(settings.slack_bot_token)
    store, directory = load_snapshot(settings.data_dir, slack_client.fetch_user_profile)
    bot = WfoBot(store, directory, slack_client, today=settings.today)
    verifier = SignatureVerifier(settings.slack_signing_secret)

    async def verified_body(request: Request) -> bytes:
        body = await request.body()
        if not verifier.is_valid_request(body, dict(request.headers)):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid slack signature")
        return body

    app = FastAPI(title="WFO Bot", version="1.0.0")
    app.state.bot = bot

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        try:
            save_snapshot(settings.data_dir, store, directory)
        except (OSError, TypeError, ValueError):
            logger.exception("Could not save snapshot to %s", settings.data_dir)
        finally:
            await slack_client.close()

    @app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/slack/events")
    async def slack_events(body: bytes = Depends(verified_body)) -> Dict[str, Any]:
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            raise HTTPException(status_code=400, detail="invalid JSON body") from exc

        if payload.get("type") == "url_verification":
            return {"challenge": payload.get("challenge")}

        event = payload.get("event") or {}
        if event.get("type") == "app_home_opened" and event.get("tab", "home") == "home":
            await bot.home_opened(event)
        return {}

    @app.post("/slack/interactions")
    async def slack_interactions(body: bytes = Depends(verified_body)) -> Response:
        try:
            payload = json.loads(_parse_form(body)["payload"])
        except (KeyError, json.JSONDecodeError) as exc:
            raise HTTPException(status_code=400, detail="invalid interaction payload") from exc

        kind = payload.get("type")
        if kind == "block_actions":
            action_id = (payload.get("actions") or [{}])[0].get("action_id")
            if action_id == "join_office":
                await bot.join_office(payload)
            elif action_id == "leave_office":
                await bot.leave_office(payload)
            elif action_id == "add_office":
                await bot.open_add_office(payload)
            elif action_id == "unset_status":
                await bot.unset_status(payload)
            else:
                logger.warning("Ignoring unknown action %s", action_id)
        elif kind == "view_submission":
            callback_id = payload.get("view", {}).get("callback_id")
            if callback_id == "add_office":
                await bot.submit_add_office(payload)
            elif callback_id == "status":
                await bot.submit_status(payload)
            else:
                logger.warning("Ignoring unknown view submission %s", callback_id)
        elif kind == "shortcut" and payload.get("callback_id") in SHORTCUT_STATUSES:
            await bot.open_status_form(payload, SHORTCUT_STATUSES[payload["callback_id"]])
        else:
            logger.warning("Ignoring interaction of type %s", kind)
        return Response(status_code=status.HTTP_200_OK)

    @app.post("/slack/commands")
    async def slack_commands(body: bytes = Depends(verified_body)) -> Response:
        form = _parse_form(body)
        command = form.get("command")
        if command in COMMAND_STATUSES:
            reply = await bot.status_command(form)
        elif command == "/wfclear":
            reply = await bot.unset_command(form)
        else:
            raise HTTPException(status_code=400, detail=f"unsupported command {command}")

        if not reply:
            return Response(status_code=status.HTTP_200_OK)
        return Response(
            content=json.dumps({"response_type": "ephemeral", "text": reply}),
            media_type="application/json",
        )

    return app


__all__ = ["create_app"]
