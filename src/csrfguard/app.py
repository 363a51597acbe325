import air
from air.responses import JSONResponse
from air.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from csrfguard.csrf import get_csrf_guard
from csrfguard.logging_config import setup_logging
from csrfguard.middleware import CsrfMiddleware
from csrfguard.routes.items import router as item_router
from csrfguard.settings import settings
from csrfguard.utils import jinja

setup_logging(settings.log_level)

# Cookie/session tuning
COOKIE_NAME = "sessionid"
COOKIE_SECURE = settings.environment == "production"
COOKIE_SAMESITE = "lax"
COOKIE_MAX_AGE = 60 * 60 * 24 * 14  # 14 days

LAST_MESSAGE_KEY = "last_message"


app = air.Air()

app.add_middleware(CsrfMiddleware)
# Added last so it wraps CsrfMiddleware, which needs request.session
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie=COOKIE_NAME,
    same_site=COOKIE_SAMESITE,
    https_only=COOKIE_SECURE,
    max_age=COOKIE_MAX_AGE,
)
app.include_router(item_router)


@app.get("/")
def index(request: air.Request):
    guard = get_csrf_guard(request)
    return jinja(
        request,
        "form.html",
        {
            "csrf_token": guard.generate_token(),
            "form_key": guard.form_key,
            "ok": request.query_params.get("ok"),
            "last_message": request.session.get(LAST_MESSAGE_KEY),
        },
    )


@app.post("/submit")
async def submit(request: air.Request):
    form_data = await request.form()
    request.session[LAST_MESSAGE_KEY] = str(form_data.get("message", ""))
    return RedirectResponse(url="/?ok=1", status_code=303)


@app.get("/healthz")
def healthz():
    return JSONResponse({"ok": True})
