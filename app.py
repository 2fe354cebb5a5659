import os, sys, argparse, logging
from flask import Flask, render_template, redirect, request, url_for, abort
from jinja2 import TemplateError
from sqlalchemy.exc import SQLAlchemyError
from typing import Union, Optional, Any
from dotenv import load_dotenv
from models import db, Post
from repository import PostRepository, PersistenceError

DEFAULT_ADDR : str = ':8080'
DEFAULT_DB : str = 'db.ql'


def init_storage(app: Flask) -> None:
    '''Create the posts table if it is missing. Exits the process on failure.'''
    path : str = app.config['SQLALCHEMY_DATABASE_URI']
    try:
        with app.app_context():
            db.create_all()
    except (SQLAlchemyError, OSError) as exc:
        app.logger.error('Failed to initialize database %s: %s', path, exc)
        raise SystemExit(1) from exc


def render_index(posts: list[Post]) -> str:
    return render_template('index.html', posts=posts)


def create_app(database_path: str, repository: Optional[PostRepository] = None) -> Flask:
    app : Flask = Flask(__name__)
    app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///' + os.path.abspath(database_path)
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    # request threads share the pooled connections
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {'connect_args': {'check_same_thread': False}}
    db.init_app(app)
    init_storage(app)

    posts : PostRepository = repository if repository is not None else PostRepository(db)

    @app.route('/')
    def index() -> Union[str, Any]:
        try:
            entries : list[Post] = posts.list_all()
        except PersistenceError as exc:
            app.logger.error("Failed to query table 'posts': %s", exc.cause)
            abort(500)
        try:
            return render_index(entries)
        except TemplateError:
            app.logger.exception("Failed to execute template 'index.html'")
            abort(500)

    @app.route('/post', methods=['POST'])
    def submit_post() -> Union[str, Any]:
        title : str = request.form.get('title', '')
        content : str = request.form.get('content', '')
        try:
            posts.insert(title, content)
        except PersistenceError as exc:
            app.logger.error('Failed to insert post: %s', exc.cause)
            abort(500)
        return redirect(url_for('index'), code=302)

    @app.errorhandler(500)
    def internal_error(_error) -> Union[str, Any]:
        return render_template('500.html'), 500

    return app


def parse_address(addr: str) -> tuple[str, int]:
    '''Split ``host:port``. An empty host listens on every interface.'''
    host, sep, port = addr.rpartition(':')
    if not sep or not port.isdigit() or int(port) > 65535:
        raise ValueError(f'invalid address {addr!r}')
    host = host.strip('[]') or '0.0.0.0'
    return host, int(port)


def build_parser() -> argparse.ArgumentParser:
    parser : argparse.ArgumentParser = argparse.ArgumentParser(
        prog='poultry',
        usage='%(prog)s [options]',
        description='A single page blog backed by SQLite.',
    )
    parser.add_argument('-addr', '--addr', type=parse_address,
                        default=os.getenv('POULTRY_ADDR', DEFAULT_ADDR),
                        help='The address to listen on. (default: %(default)s)')
    parser.add_argument('-db', '--db', default=os.getenv('POULTRY_DB', DEFAULT_DB),
                        help='The database to use. (default: %(default)s)')
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    args : argparse.Namespace = build_parser().parse_args(argv)
    host, port = args.addr

    app : Flask = create_app(args.db)
    try:
        app.logger.info('Poultry serving %s on %s:%d', args.db, host, port)
        app.run(host=host, port=port, threaded=True)
    except OSError as exc:
        app.logger.error('Server failed: %s', exc)
        sys.exit(1)
    finally:
        with app.app_context():
            db.engine.dispose()


if __name__ == '__main__':
    main()
