"""
Interactive shell with the registry pre-loaded.

Usage:
    python shell.py          # SHAKER_DATABASE_URL selects the database (default sqlite:///shaker.db)

Available in the REPL:
    db          — active SQLAlchemy session (call db.close() when done)
    settings    — shaker settings object
    registry    — UserRegistry bound to db
    User        — User ORM model
"""

import code

# ── app context ───────────────────────────────────────────────────────────────
from shaker.core.config import settings
from shaker.db.session import SessionLocal
from shaker.models.user import User
from shaker.services.registry import UserRegistry

db = SessionLocal()
registry = UserRegistry(db)

namespace = {
    "db": db,
    "settings": settings,
    "registry": registry,
    "User": User,
}

BANNER = """
Shaker interactive shell
────────────────────────
  db        → SQLAlchemy session
  settings  → shaker config
  registry  → user identity registry
  User      → User model

Example:
  registry.register("U-abc123", "Alice")
  registry.find_by_external_id("U-abc123")
  db.query(User).filter(User.display_name == "Alice").all()
"""

# ── try IPython, fall back to stdlib REPL ────────────────────────────────────
try:
    from IPython import start_ipython
    from traitlets.config import Config

    cfg = Config()
    cfg.TerminalInteractiveShell.banner1 = BANNER
    start_ipython(argv=[], config=cfg, user_ns=namespace)
except ImportError:
    code.interact(banner=BANNER, local=namespace)
finally:
    db.close()
