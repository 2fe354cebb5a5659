from flask_sqlalchemy import SQLAlchemy
from datetime import datetime, timezone

db = SQLAlchemy()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Post(db.Model):
    __tablename__ = 'posts'

    id = db.Column(db.Integer, primary_key=True)
    # rows written outside the app fall back to the store's CURRENT_TIMESTAMP
    ts = db.Column(db.DateTime, nullable=False, default=utcnow, server_default=db.func.current_timestamp())
    title = db.Column(db.Text, nullable=False, default='')
    content = db.Column(db.Text, nullable=False, default='')

    def __repr__(self) -> str:
        return f'<Post {self.id} {self.title!r} at {self.ts}>'
