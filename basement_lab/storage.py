# basement_lab/storage.py
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from . import db
from .errors import StorageError
from .models.blob import StoredBlob


class BlobStore:
    """get / set / remove over opaque string blobs."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, blob: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryBlobStore(BlobStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, blob):
        self.data[key] = blob

    def remove(self, key):
        self.data.pop(key, None)


class SqlBlobStore(BlobStore):
    """Blobs kept in the ``stored_blobs`` table; needs an app context."""

    def get(self, key):
        try:
            row = db.session.get(StoredBlob, key)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f"failed to read '{key}': {e}") from e
        return row.value if row else None

    def set(self, key, blob):
        try:
            row = db.session.get(StoredBlob, key)
            if row is None:
                db.session.add(StoredBlob(key=key, value=blob))
            else:
                row.value = blob
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f"failed to write '{key}': {e}") from e

    def remove(self, key):
        try:
            row = db.session.get(StoredBlob, key)
            if row is not None:
                db.session.delete(row)
                db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f"failed to remove '{key}': {e}") from e
