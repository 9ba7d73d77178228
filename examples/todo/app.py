"""Todo List — tag trees, UI events, and validation with trill.

Every button carries a command. Clicking it posts the event back to
``/``; the event handler updates the list and the page body comes back
as a JSON patch. The text input is bound to a local, so its value
survives the round-trip.

Run:
    pip install trill[server]
    python app.py
"""

import os
import threading
from dataclasses import dataclass
from pathlib import Path

from trill import App, AppConfig
from trill.tags import button, div, h2, input_, li, p, span, ul
from trill.validation import max_length, required, validate

TEMPLATES_DIR = Path(__file__).parent / "templates"

app = App(
    config=AppConfig(
        template_dir=TEMPLATES_DIR,
        static_dir=None,
        secret_key=os.environ.get("TRILL_SECRET_KEY", "dev-only-not-for-production"),
    )
)

# ---------------------------------------------------------------------------
# Data model — frozen, replaced on every change
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Todo:
    id: int
    text: str
    done: bool = False


_todos: dict[int, Todo] = {}
_lock = threading.Lock()
_next_id = 1


def _all() -> list[Todo]:
    with _lock:
        return list(_todos.values())


def _todo_item(todo: Todo):
    return li(
        span(todo.text).with_attr("class", "done" if todo.done else "open"),
        button("toggle").with_command("toggle", todo.id),
        button("delete").with_command("delete", todo.id),
    )


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


@app.route("/")
def index(exchange):
    return {
        "todos": ul([_todo_item(t) for t in _all()]).with_attr("id", "todo-list"),
        "new_todo": input_().with_attr("id", "text").bind(exchange.var("text", "")),
        "add": button("Add").with_command("add"),
    }


@app.screen("todo")
def todo_screen(exchange, action, ident):
    """``/todo/<id>`` shows a single item; other actions fall through to 404."""
    if action != "view" or not ident.isdigit():
        return None
    with _lock:
        todo = _todos.get(int(ident))
    if todo is None:
        return None
    return div(h2(todo.text), p("Done" if todo.done else "Open"))


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@app.event("add")
def add(exchange):
    global _next_id
    result = validate(exchange.locals, {"text": [required, max_length(200)]})
    if not result:
        exchange.reject(result)
        return
    with _lock:
        _todos[_next_id] = Todo(_next_id, result.data["text"].strip())
        _next_id += 1
    exchange.put_local("text", "")


@app.event("toggle")
def toggle(todo_id):
    with _lock:
        todo = _todos.get(todo_id)
        if todo is not None:
            _todos[todo_id] = Todo(todo.id, todo.text, not todo.done)


@app.event("delete")
def delete(todo_id):
    with _lock:
        _todos.pop(todo_id, None)


if __name__ == "__main__":
    app.run()
