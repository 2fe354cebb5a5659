import logging
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError
from models import Post

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    '''A post could not be written to or read from the store.'''

    def __init__(self, operation: str, cause: Exception) -> None:
        super().__init__(f'{operation} failed: {cause}')
        self.operation : str = operation
        self.cause : Exception = cause


class PostRepository:
    '''Inserts and lists posts. Every call commits or rolls back on its own.'''

    def __init__(self, database: SQLAlchemy) -> None:
        self.db : SQLAlchemy = database

    def insert(self, title: str, content: str) -> Post:
        post : Post = Post(title=title, content=content)
        try:
            self.db.session.add(post)
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise PersistenceError('insert', exc) from exc
        logger.debug('Inserted post %s', post.id)
        return post

    def list_all(self) -> list[Post]:
        query = self.db.select(Post).order_by(Post.ts.desc(), Post.id.desc())
        try:
            posts : list[Post] = list(self.db.session.execute(query).scalars().all())
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise PersistenceError('list', exc) from exc
        return posts
