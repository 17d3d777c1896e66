from .tax_record import TaxRecord
from .company import Company
from .collection_schema import CollectionField, CollectionSchema
from .import_report import ImportReport

__all__ = [
    "TaxRecord",
    "Company",
    "CollectionField",
    "CollectionSchema",
    "ImportReport",
]
