"""UI controllers: editing actions split out of MainWindow.

Every controller reaches shared state through an AppContext and mutates the
project only through ``ctx.history``.
"""

from snapthumb.ui.controllers.app_context import AppContext

__all__ = ["AppContext"]
