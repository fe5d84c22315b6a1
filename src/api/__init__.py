"""Text extraction API package root.

The FastAPI application lives in :pymod:`src.api.app`; ``app`` is re-exported
so entry-points can refer to ``src.api:app``.
"""

from __future__ import annotations

from importlib import import_module as _import_module

_app_module = _import_module(".app", package=__name__)
app = _app_module.app  # type: ignore[attr-defined]
