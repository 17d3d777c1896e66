# Importing the layout modules registers them by shape name
from . import tax_records  # noqa: F401
from . import companies  # noqa: F401
