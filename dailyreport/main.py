# dailyreport/main.py
import os
from dataclasses import asdict

from fastapi import FastAPI, Request, Query, Header, HTTPException
from fastapi.responses import JSONResponse

from .errors import build_error_notice
from .logger import logger
from .report_job import run_daily_report
from .scheduler import start_scheduler, tick

app = FastAPI(title="Daily School Report")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    notice = build_error_notice(exc, {"op": request.url.path or "global"})
    logger.error(f"[{notice.code}] {notice.debug} (ref={notice.support_id})")
    return JSONResponse(
        {"error": notice.title, "message": notice.user_message, "ref": notice.support_id, "code": notice.code},
        status_code=500,
    )


@app.on_event("startup")
def check_env():
    must = ["LESSON_PLAN_FOLDER_ID", "MEAL_PLAN_FOLDER_ID", "CURRENT_REPORT_DOC_ID", "CRON_TOKEN",
            "SMTP_USERNAME", "SMTP_PASSWORD"]
    missing = [k for k in must if not os.getenv(k)]
    if missing:
        logger.debug(f"⚠️ Missing env vars: {', '.join(missing)}")  # log, don’t crash


@app.on_event("startup")
def on_startup():
    # On Cloud Run use Cloud Scheduler hitting /cron/check instead.
    if os.getenv("ENABLE_INPROC_SCHEDULER") == "1":
        start_scheduler()


def _check_token(token, x_cron_token):
    expected = os.getenv("CRON_TOKEN")
    provided = token or x_cron_token
    if not expected or provided != expected:
        raise HTTPException(status_code=401, detail="unauthorized")


@app.get("/healthz")
def healthz():
    return {"ok": True}


# Manual trigger: rebuild the current document from today's report
@app.post("/report/run")
def report_run(
    token: str | None = Query(None),
    x_cron_token: str | None = Header(None),
):
    _check_token(token, x_cron_token)
    return asdict(run_daily_report())


# Cloud Scheduler trigger (every few minutes): only acts on a new, unread report
@app.post("/cron/check")
def cron_check(
    token: str | None = Query(None),
    x_cron_token: str | None = Header(None),
):
    _check_token(token, x_cron_token)
    return asdict(tick())
