# tests/test_mcp_server.py
from datetime import date

import pytest

from wfo_bot import mcp_server
from wfo_bot.directory import UserDirectory
from wfo_bot.errors import NotFoundError
from wfo_bot.snapshot import save_snapshot


@pytest.fixture
def data_dir(tmp_path, monkeypatch, hq_store):
    hq_store.set_status("U1", "2024-03-01", "wfo")
    hq_store.set_status("U2", "2024-03-02", "wfh")
    save_snapshot(tmp_path, hq_store, UserDirectory())
    monkeypatch.setattr(mcp_server, "_data_dir", tmp_path)
    return tmp_path


def test_list_offices(data_dir):
    result = mcp_server.list_offices()

    assert result["offices"] == [
        {"name": "HQ", "channel": "C1", "members": ["U1", "U2"]},
        {"name": "Annex", "channel": "C2", "members": ["U3"]},
    ]


def test_get_office_week(data_dir):
    result = mcp_server.get_office_week("HQ", start="2024-03-01")

    assert len(result["days"]) == 7
    assert result["days"][0] == {"date": "2024-03-01", "label": "Today", "office": ["U1"], "home": []}
    assert result["days"][1]["home"] == ["U2"]


def test_get_office_week_unknown_office(data_dir):
    with pytest.raises(NotFoundError):
        mcp_server.get_office_week("Nowhere")


def test_get_user_status(data_dir):
    assert mcp_server.get_user_status("U2", "2024-03-02") == {
        "user_id": "U2",
        "date": "2024-03-02",
        "office": "HQ",
        "status": "home",
    }
    assert mcp_server.get_user_status("U3", "2024-03-02")["status"] is None
    assert mcp_server._ensure_date(None) == date.today()
