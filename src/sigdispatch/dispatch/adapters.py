"""Handlers that bridge Closer and Reloader components into dispatch."""

from __future__ import annotations

import logging

from sigdispatch.models import Closer, Handler, Reloader


def closer_handler(component: Closer, logger: logging.Logger) -> Handler:
    """Build a handler that closes *component* and logs any failure."""

    def _close() -> None:
        try:
            component.close()
        except Exception as e:
            logger.error("Closer on shutdown failed with %s", e)

    return _close


def reloader_handler(component: Reloader, logger: logging.Logger) -> Handler:
    """Build a handler that reloads *component* and logs any failure."""

    def _reload() -> None:
        try:
            component.reload()
        except Exception as e:
            logger.error("Reloader failed with %s", e)

    return _reload
