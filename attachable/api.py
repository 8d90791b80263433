# flask_restful_swagger2 API subclass
from http import HTTPStatus
from functools import wraps
from flask.app import Flask
from flask_restful_swagger_2 import Api as FRSApiBase, swagger
from sqlalchemy.orm import Query
import attachable
from .util import query_entity

HTTP_METHODS = ["GET", "POST", "PATCH", "DELETE", "PUT"]
UPDATE_METHODS = ["POST", "PATCH", "DELETE", "PUT"]
API_CLASSNAME_FMT = "{}_API"
ENDPOINT_FMT = "{}_attachable"


def parse_summary(func):
    """
    :return: the first line of the method docstring
    """
    for line in (func.__doc__ or "").splitlines():
        if line.strip():
            return line.strip()
    return ""


def relationship_swagger_doc(owner_name, tags):
    """
    swagger documentation for the AttachableResource methods
    :param owner_name: name of the owner class shown in the summaries
    :param tags: swagger tags
    """

    def swagger_doc_gen(func):
        http_method = func.__name__.lower()
        parameters = [
            {"name": "id", "in": "path", "type": "string", "required": True, "description": f"{owner_name} id"},
            {"name": "relation", "in": "path", "type": "string", "required": True, "description": "relationship name"},
        ]
        responses = {str(HTTPStatus.NOT_FOUND.value): {"description": HTTPStatus.NOT_FOUND.description}}

        if http_method == "get":
            parameters.append(
                {"name": "page[offset]", "in": "query", "type": "integer", "required": False, "description": "Page offset"}
            )
            responses[str(HTTPStatus.OK.value)] = {"description": "Page of related items"}
        else:
            parameters.append(
                {
                    "name": f"{http_method.upper()} body",
                    "in": "body",
                    "description": "Item ids, keyed by the relationship name",
                    "schema": {"type": "object"},
                    "required": True,
                }
            )
            responses[str(HTTPStatus.OK.value)] = {"description": '{"status": "ok"}'}
            responses[str(HTTPStatus.UNPROCESSABLE_ENTITY.value)] = {"description": "Validation Error"}
            responses[str(HTTPStatus.INTERNAL_SERVER_ERROR.value)] = {"description": "Relation Error"}

        # flask_restful_swagger_2 uses the first docstring line as the summary
        func.__doc__ = parse_summary(func).format(owner_name=owner_name)
        doc = {
            "tags": tags,
            "parameters": parameters,
            "responses": responses,
            "produces": ["application/json"],
        }
        return swagger.doc(doc)(func)

    return swagger_doc_gen


def api_decorator(cls, swagger_decorator):
    """Add the swagger documentation to the HTTP methods of an api class

    The methods are wrapped so the documentation of the parent class methods isn't changed

    :param cls: The class that will be decorated (an AttachableResource subclass)
    :param swagger_decorator: function that will generate the swagger
    :return: decorated class
    """

    def wrap(method):
        @wraps(method)
        def method_wrapper(self, *args, **kwargs):
            return method(self, *args, **kwargs)

        return method_wrapper

    for method_name in [m.lower() for m in HTTP_METHODS]:
        method = getattr(cls, method_name, None)
        if not method:
            continue
        try:
            setattr(cls, method_name, swagger_decorator(wrap(method)))
        except Exception as exc:  # pragma: no cover
            attachable.log.exception(exc)
            attachable.log.error(f"Failed to generate documentation for {cls.__name__}.{method_name}")
    return cls


def owner_name(resource):
    """
    :return: name of the owner class of an AttachableResource, used in the documentation
    """
    model = resource.Model
    if model is None:
        return resource.__name__
    if isinstance(model, Query):
        model = query_entity(model)
    return model.__name__


class AttachableAPI(FRSApiBase):
    """
    Subclass of the flask_restful_swagger API class where we add the expose method
    this method creates the relationship endpoints for an AttachableResource and the
    corresponding swagger documentation
    """

    def __init__(
        self,
        app: Flask,
        host: str = "localhost",
        port: int = 5000,
        prefix: str = "",
        description: str = "Attachable API",
        app_db=None,
        swaggerui_blueprint: bool = True,
        api_spec_url: str = "/swagger",
        **kwargs,
    ) -> None:
        """
        :param app: Flask app
        :param host: the host shown in the swagger ui
        :param port: port shown in the swagger ui, None to hide it (eg when proxied)
        :param prefix: url prefix of the api
        :param app_db: Flask-SQLAlchemy db, by default the one registered with the app
        """
        attachable.Attachable(app, app_db=app_db, prefix=prefix, swaggerui_blueprint=swaggerui_blueprint, api_spec_url=api_spec_url)
        if port:
            host = f"{host}:{port}"

        super().__init__(
            app,
            api_spec_url=api_spec_url,
            host=host,
            description=description,
            prefix=prefix,
            base_path=prefix or "/",
            **kwargs,
        )

    def expose(self, resource, url_prefix, tags=None, endpoint=None):
        """
        Expose the relationships of the resource owner:

        {url_prefix}/<id>/<relation>
        {url_prefix}/<id>/<relation>/<param_key>

        :param resource: AttachableResource subclass
        :param url_prefix: url of the owners, e.g. /posts
        :param tags: swagger tags
        :param endpoint: endpoint name, derived from the resource name by default
        :return: the exposed api class
        """
        url_prefix = "/" + url_prefix.strip("/")
        name = resource.__name__
        if tags is None:
            tags = [url_prefix.strip("/")]

        swagger_decorator = relationship_swagger_doc(owner_name(resource), tags)
        api_class = api_decorator(type(API_CLASSNAME_FMT.format(name), (resource,), {}), swagger_decorator)

        if endpoint is None:
            endpoint = ENDPOINT_FMT.format(name)

        url = f"{url_prefix}/<string:id>/<string:relation>"
        attachable.log.info(f"Exposing relationships of {name} on {url}, endpoint: {endpoint}")
        self.add_resource(api_class, url, endpoint=endpoint, methods=HTTP_METHODS)

        # the items may be sent under another key than the relationship name
        # this url isn't documented in the swagger
        param_url = f"{url}/<string:param_key>"
        attachable.log.info(f"Exposing relationships of {name} on {param_url}")
        # pylint: disable=bad-super-call
        super(FRSApiBase, self).add_resource(api_class, param_url, endpoint=f"{endpoint}_param", methods=UPDATE_METHODS)
        return api_class
