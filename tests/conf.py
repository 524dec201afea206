"""
Settings of the unit test environment
"""

import os
import tempfile
from typing import Optional

# SQLAlchemy URL of a database server to run the tests against, e.g. to
# check the row locks with a real database; every test drops all tables
DATABASE_URL: Optional[str] = os.environ.get("UNITTEST_DATABASE_URL") or None

# Without DATABASE_URL, each test uses its own sqlite file in the temp
# directory, named after the PID and a random suffix, removed afterwards
DATABASE_DEFAULT_FILE_FORMAT: str = os.path.join(tempfile.gettempdir(), "inventory_unittest_{}_{}.db")
DATABASE_URL_FORMAT: str = "sqlite:///{}"

# Log all SQL statements of the tests
SQLALCHEMY_ECHOING: bool = os.environ.get("UNITTEST_ECHO_SQL", "").lower() in ("1", "true", "yes")

# Single origin allowed for cross-origin requests in the API tests
ALLOWED_ORIGIN: str = "http://localhost:8080"
