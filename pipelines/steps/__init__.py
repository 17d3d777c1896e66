# Namespace for pipeline steps
from .decode_rows import DecodeRows  # noqa: F401
from .write_json import WriteJsonArray  # noqa: F401
from .declare_collection import DeclareCollection  # noqa: F401
from .import_batches import ImportBatches  # noqa: F401
