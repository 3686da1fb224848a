"""practice-starter: a FastAPI CRUD/web starter with JWT authentication.

The package version can be overridden at build time with the
``PROJECT_VERSION`` environment variable.
"""

import os

__version__ = os.environ.get("PROJECT_VERSION") or "0.0.1.dev0"
