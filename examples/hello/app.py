"""Hello World — the simplest trill app.

Demonstrates view routes wrapped in the built-in layout, service routes
returned as-is, path parameters, and Response chaining.

Run:
    pip install trill[server]
    python app.py
"""

from trill import App, AppConfig, Response
from trill.tags import h1, p

app = App(config=AppConfig(static_dir=None))


@app.route("/")
def index():
    return h1("Hello, World!")


@app.route("/greet/{name}")
def greet(name: str):
    return p(f"Hello, {name}!")


@app.route("/api/status", service=True)
def status():
    return {"status": "ok", "version": "0.1.0"}


@app.route("/custom", service=True)
def custom():
    return Response("Created").with_status(201).with_header("X-Custom", "trill")


if __name__ == "__main__":
    app.run()
