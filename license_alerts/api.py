from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException, Query

from license_alerts.config import Settings
from license_alerts.db import SupabaseClient
from license_alerts.errors import ConfigError, RemoteCallError
from license_alerts.expirations import (
    get_check_logs,
    get_check_stats,
    get_latest_check_log,
    trigger_expiration_check,
)
from license_alerts.scheduler import build_scheduler
from license_alerts.workflow import run_license_alerts

_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_client(settings: Settings = Depends(get_settings)):
    try:
        client = SupabaseClient.from_settings(settings)
    except ConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))
    try:
        yield client
    finally:
        client.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = build_scheduler(settings, background=True)
        scheduler.start()
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)


app = FastAPI(title="License Expiration Alerts", lifespan=lifespan)


def remote_error(e: RemoteCallError) -> HTTPException:
    return HTTPException(status_code=502, detail=e.message)


@app.get("/health")
def health():
    return {"status": "ok", "time_utc": datetime.now(timezone.utc).isoformat()}


@app.get("/expiration-checks")
def list_checks(limit: int = Query(10, ge=1, le=100), client: SupabaseClient = Depends(get_client)):
    try:
        logs = get_check_logs(client, limit=limit)
    except RemoteCallError as e:
        raise remote_error(e)
    return [log.to_dict() for log in logs]


@app.get("/expiration-checks/latest")
def latest_check(client: SupabaseClient = Depends(get_client)):
    try:
        log = get_latest_check_log(client)
    except RemoteCallError as e:
        raise remote_error(e)
    if log is None:
        raise HTTPException(status_code=404, detail="No expiration checks recorded")
    return log.to_dict()


@app.get("/expiration-checks/stats")
def check_stats(client: SupabaseClient = Depends(get_client)):
    try:
        stats = get_check_stats(client)
    except RemoteCallError as e:
        raise remote_error(e)
    return asdict(stats)


@app.post("/expiration-checks")
def trigger_check(client: SupabaseClient = Depends(get_client)):
    try:
        alerts_created = trigger_expiration_check(client)
    except RemoteCallError as e:
        raise remote_error(e)
    return {"success": True, "alerts_created": alerts_created}


@app.post("/workflow/run")
def run_workflow(settings: Settings = Depends(get_settings)):
    result = run_license_alerts(settings)
    return {
        "success": result.success,
        "exit_code": result.exit_code,
        "duration_ms": result.duration_ms,
        "check": {"success": result.check.success, "error": result.check.error},
        "notify": None if result.notify is None else {
            "success": result.notify.success,
            "error": result.notify.error,
        },
    }
