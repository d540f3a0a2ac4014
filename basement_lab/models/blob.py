# basement_lab/models/blob.py
from datetime import datetime
from .. import db

class StoredBlob(db.Model):
    __tablename__ = "stored_blobs"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )
