#  flask-restful resource exposing the AttachableMixin operations
#
#  GET     /<prefix>/<id>/<relation>                 : attached
#  POST    /<prefix>/<id>/<relation>[/<param_key>]   : attach
#  DELETE  /<prefix>/<id>/<relation>[/<param_key>]   : detach
#  PUT     /<prefix>/<id>/<relation>[/<param_key>]   : sync
#  PATCH   /<prefix>/<id>/<relation>[/<param_key>]   : sync
#
# pylint: disable=redefined-builtin,invalid-name
#
from functools import wraps
from typing import Callable
import werkzeug
from flask import jsonify, make_response
from flask_restful_swagger_2 import Resource as FRSResource
from sqlalchemy.exc import SQLAlchemyError
import attachable
from .controller import AttachableMixin
from .errors import AttachableError, GenericError
from .formatting import error_document


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the HTTP methods (get, post, put, patch, delete)
    - commit the database
    - convert all exceptions to a json error response and roll back the session

    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        """Wrap the method and perform error handling
        :param *args:
        :param **kwargs:
        :return: result of the wrapped method
        """
        try:
            result = fun(*args, **kwargs)
            attachable.DB.session.commit()
            return result

        except AttachableError as exc:
            # this also catches attachable.errors.NotFoundError
            error = exc

        except werkzeug.exceptions.HTTPException:
            attachable.DB.session.rollback()
            raise

        except SQLAlchemyError as exc:
            attachable.log.exception(exc)
            error = GenericError(f"Commit failed: {exc}")

        except Exception as exc:
            attachable.log.exception(exc)
            error = GenericError(f"{type(exc).__name__}: {exc}")

        attachable.DB.session.rollback()
        return make_response(jsonify(error_document(error)), error.status_code)

    return method_wrapper


class AttachableResource(AttachableMixin, FRSResource):
    """
    Resource for the relationships of the Model owners, e.g.

        class PostResource(AttachableResource):
            Model = Post

        api.expose(PostResource, "/posts")
    """

    method_decorators = [http_method_decorator]

    # pylint: disable=unused-argument
    def get(self, id, relation, param_key=None):
        """
        Retrieve the related items of a {owner_name}
        """
        return self.attached(id, relation)

    def post(self, id, relation, param_key=None):
        """
        Attach items to a {owner_name} relationship
        """
        return self.attach(id, relation, param_key)

    def delete(self, id, relation, param_key=None):
        """
        Detach items from a {owner_name} relationship
        """
        return self.detach(id, relation, param_key)

    def put(self, id, relation, param_key=None):
        """
        Sync the items of a {owner_name} relationship
        """
        return self.sync(id, relation, param_key)

    def patch(self, id, relation, param_key=None):
        """
        Sync the items of a {owner_name} relationship
        """
        return self.sync(id, relation, param_key)
