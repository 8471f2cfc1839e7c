"""Admin — middleware, mounted collections, converters, and services.

A timing middleware wraps every request. The ``/admin`` collection is
guarded by a token check that answers 401 through the app's error
handler, and user ids are converted to ``User`` objects loaded from a
store registered on the app injector.

Run:
    python app.py
"""

import logging
import time
from dataclasses import dataclass

from monorail import App, Context, Next, Request, ResponseWriter, RouteCollection

logger = logging.getLogger("admin")


@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str


class UserStore:
    def __init__(self) -> None:
        self._users = {1: User(1, "ada"), 2: User(2, "grace")}

    def get(self, user_id: int) -> User | None:
        return self._users.get(user_id)


app = App(None, UserStore())


def timing(ctx: Context, next: Next) -> None:
    t0 = time.monotonic()
    next()
    logger.info("%s %s took %.3fs", ctx.request.method, ctx.request.path, time.monotonic() - t0)


def require_token(request: Request, rw: ResponseWriter, next: Next) -> None:
    if request.headers.get("x-admin-token") != "letmein":
        rw.write_header(401)
        return
    next()


def load_user(raw: str, store: UserStore) -> User | None:
    return store.get(int(raw))


def show_user(ctx: Context) -> None:
    user = ctx.converted_vars["user"]
    if user is None:
        ctx.response.write_header(404)
        return
    ctx.write_json(user)


admin = RouteCollection()
admin.use("/", require_token)
admin.get("/users/:user", show_user).assert_("user", r"\d+").convert("user", load_user)

app.use("/", timing)
app.mount("/admin", admin)


@app.error(401)
def unauthorized(ctx: Context) -> None:
    ctx.write_string("Who are you?")


if __name__ == "__main__":
    app.run()
