"""FastAPI route modules.

Exports all route modules for inclusion in the main application.
"""

from ndrdesk.api.routes import ndr

__all__ = ["ndr"]
