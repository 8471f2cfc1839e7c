"""Hello World — the simplest monorail app.

Demonstrates path variables, optional segments, return values, form
posts, and a custom error handler.

Run:
    python app.py
"""

from monorail import App, Context, Request

app = App()


@app.route("/")
def index() -> str:
    return "Hello, World!"


@app.route("/hello/:name")
def hello(ctx: Context) -> str:
    return f"Hello {ctx.request_vars['name']}"


@app.route("/shelf/:tag?/book")
def shelf(ctx: Context) -> str:
    return f"Books tagged {ctx.request_vars.get('tag', 'anything')}"


@app.route("/api/status")
def status() -> dict[str, str]:
    return {"status": "ok"}


@app.route("/hello", methods=["POST"])
def hello_form(request: Request) -> tuple[str, int]:
    return f"Hello {request.form()['name']}", 201


@app.error(404)
def not_found(ctx: Context) -> None:
    ctx.write_string("Nothing at ", ctx.request.path)


if __name__ == "__main__":
    app.run()
