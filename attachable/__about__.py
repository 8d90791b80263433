__version__ = "1.0.0"
__description__ = "attachable : attach, detach and sync SQLAlchemy relationships over Flask-RESTful"
