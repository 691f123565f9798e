"""Document store transport."""

from docexport.store.client import DocumentStoreClient

__all__ = ["DocumentStoreClient"]
