"""FastAPI error handlers for preset access failures.

Requires the ``fastapi`` extra.
"""

from __future__ import annotations

try:
    import fastapi as _fastapi_check  # noqa: F401

    del _fastapi_check
except ImportError as exc:
    raise ImportError(
        "preset_authz.integrations.fastapi needs fastapi; "
        "pip install preset-authz[fastapi] to enable it"
    ) from exc

from preset_authz.integrations.fastapi._errors import install_error_handlers

__all__ = ["install_error_handlers"]
