"""Entry point — uvicorn is started on the app with configured host and port."""

import uvicorn

from car_registry import __main__ as entrypoint
from car_registry.config import Settings


def test_main_runs_uvicorn_with_settings(monkeypatch):
    calls = []
    monkeypatch.setattr(
        entrypoint, "get_settings", lambda: Settings(host="0.0.0.0", port=9123),
    )
    monkeypatch.setattr(uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))

    entrypoint.main()

    assert calls == [(
        ("car_registry.main:app",),
        {"host": "0.0.0.0", "port": 9123, "log_config": None},
    )]
