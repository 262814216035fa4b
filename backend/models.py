"""Database models for stored scripts."""
from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

SCRIPT_STATUSES = ('valid', 'error')


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Script(db.Model):
    """User-authored Lua script with its last check status."""
    __tablename__ = 'scripts'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(10), nullable=False, default='error', index=True)  # valid, error
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def apply_check(self, result):
        """Set status from a CheckResult."""
        self.status = result.status
        return self.status

    def touch(self):
        self.updated_at = utcnow()

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': str(self.id),
            'name': self.name,
            'content': self.content,
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
