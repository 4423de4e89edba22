"""Base controller module."""

from kubescope.controllers.base.base_controller import (
    BaseController,
    FetchResult,
    run_fetch,
)

__all__ = ["BaseController", "FetchResult", "run_fetch"]
