import logging
import os
import sys
from flask_swagger_ui import get_swaggerui_blueprint
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from .request import AttachableRequest
from .response import AttachableResponse
from .json_encoder import AttachableJSONProvider
import attachable
import flask.app


class Attachable:
    """This class configures the Flask application to serve the relationship endpoints
    :param app: a Flask application.
    :param prefix: URL prefix where the swagger ui should be hosted. Default is ''
    :param LOGLEVEL: loglevel configuration variable, values from logging module (0: trace, .. 50: critical)
    """

    # Configuration settings are stored as class variables
    ATTACHABLE_PAGE_LIMIT = 15
    MAX_PAGE_OFFSET = 2**31
    ATTACHABLE_SYNC_REPORT = False
    LOGLEVEL = logging.WARNING

    def __init__(self, app: flask.app.Flask, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(
        self,
        app: flask.app.Flask,
        prefix: str = "",
        app_db: SQLAlchemy = None,
        swaggerui_blueprint: bool = True,
        api_spec_url: str = "/swagger",
        docs_url: str = "/docs",
        **kwargs,
    ) -> None:
        """
        Bind the database and install the request/response classes
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if app_db is None:
            app_db = app.extensions["sqlalchemy"]

        attachable.DB = self.db = app_db

        app.request_class = AttachableRequest
        app.response_class = AttachableResponse
        app.json = AttachableJSONProvider(app)
        app.url_map.strict_slashes = False

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        if swaggerui_blueprint is True:
            swaggerui_blueprint = get_swaggerui_blueprint(
                f"{prefix}{docs_url}", f"{prefix}{api_spec_url}.json", config={"docExpansion": "none", "defaultModelsExpandDepth": -1}
            )
            app.register_blueprint(swaggerui_blueprint)

        for conf_name, conf_val in kwargs.items():
            setattr(Attachable, conf_name, conf_val)

        # pylint: disable=unused-argument,unused-variable
        @app.teardown_appcontext
        def shutdown_session(exception=None):
            """cfr. http://flask.pocoo.org/docs/0.12/patterns/sqlalchemy/"""
            self.db.session.remove()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stderr so we redirect everything to sys.stderr
        """
        log = logging.getLogger("attachable")
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# DB and logging initialization
#
DB = SQLAlchemy()

try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = Attachable.init_logging(LOGLEVEL)
