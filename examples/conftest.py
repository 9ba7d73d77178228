"""Fixtures for the trill example apps.

Every example directory holds an ``app.py`` defining a module-level
``app`` and a ``test_app.py`` exercising it. Example apps keep their data
in module globals (the todo list, the id counter), so ``example_app``
imports a fresh copy of ``app.py`` for every test.
"""

import importlib.util
from pathlib import Path

import pytest

from trill import App


def load_example(app_path: Path) -> App:
    """Import *app_path* under a private module name and return its ``app``."""
    module_name = f"trill_example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load example app from {app_path}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> App:
    """The ``app`` from the ``app.py`` beside the requesting test file."""
    return load_example(Path(request.path).parent / "app.py")
