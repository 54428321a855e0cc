"""JSON snapshot persistence for the attendance store and user directory."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .directory import ProfileResolver, UserDirectory
from .errors import ValidationError, WfoBotError
from .models import UserProfile
from .store import AttendanceStore

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
STATUS_FILE = "status.json"


def store_to_documents(
    store: AttendanceStore, directory: UserDirectory
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Serialize to the ``(config, status)`` pair of plain mappings."""

    offices: Dict[str, Any] = {}
    for office in store.offices():
        offices[office.name] = {
            "imageUrl": office.image_url,
            "channel": office.channel,
            "createdBy": dict(office.created_by),
            "users": {user_id: {"name": handle} for user_id, handle in office.members.items()},
        }
    users = {
        profile.id: {
            "name": profile.name,
            "realName": profile.real_name,
            "imageUrl": profile.image_url,
        }
        for profile in directory.profiles()
    }
    dates = {
        key: {"users": {user_id: {"status": status.value} for user_id, status in statuses.items()}}
        for key, statuses in store.dates().items()
    }
    return {"offices": offices, "users": users}, {"dates": dates}


def store_from_documents(
    config: Dict[str, Any] | None,
    status: Dict[str, Any] | None,
    resolver: Optional[ProfileResolver] = None,
) -> Tuple[AttendanceStore, UserDirectory]:
    store = AttendanceStore()
    directory = UserDirectory(resolver)
    config = config or {}
    status = status or {}

    try:
        for name, payload in (config.get("offices") or {}).items():
            office = store.create_office(
                name,
                payload.get("imageUrl", ""),
                payload.get("channel"),
                payload.get("createdBy") or {},
            )
            for user_id, member in (payload.get("users") or {}).items():
                store.join_office(user_id, office.name, (member or {}).get("name"))

        for user_id, payload in (config.get("users") or {}).items():
            directory.add(
                UserProfile(
                    id=user_id,
                    name=payload.get("name") or user_id,
                    real_name=payload.get("realName") or payload.get("name") or user_id,
                    image_url=payload.get("imageUrl"),
                )
            )

        for key, payload in (status.get("dates") or {}).items():
            for user_id, entry in (payload.get("users") or {}).items():
                store.set_status(user_id, key, entry["status"])
    except ValidationError:
        raise
    except (AttributeError, KeyError, TypeError, WfoBotError) as exc:
        raise ValidationError(f"malformed snapshot: {exc}") from exc

    return store, directory


def _read_document(path: Path) -> Dict[str, Any] | None:
    if not path.exists():
        return None
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return None
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{path} is not valid JSON") from exc
    if not isinstance(document, dict):
        raise ValidationError(f"{path} must contain a JSON object")
    return document


def _write_document(path: Path, document: Dict[str, Any]) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(document, handle, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def load_snapshot(
    data_dir: Path, resolver: Optional[ProfileResolver] = None
) -> Tuple[AttendanceStore, UserDirectory]:
    """Load the store from ``data_dir``; missing or empty files mean empty state."""

    config = _read_document(data_dir / CONFIG_FILE)
    status = _read_document(data_dir / STATUS_FILE)
    store, directory = store_from_documents(config, status, resolver)
    logger.info(
        "Loaded snapshot from %s: %d offices, %d dates",
        data_dir,
        len(store.offices()),
        len(store.dates()),
    )
    return store, directory


def save_snapshot(data_dir: Path, store: AttendanceStore, directory: UserDirectory) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    config, status = store_to_documents(store, directory)
    _write_document(data_dir / CONFIG_FILE, config)
    _write_document(data_dir / STATUS_FILE, status)
    logger.info("Saved snapshot to %s", data_dir)


__all__ = [
    "CONFIG_FILE",
    "STATUS_FILE",
    "store_to_documents",
    "store_from_documents",
    "load_snapshot",
    "save_snapshot",
]
