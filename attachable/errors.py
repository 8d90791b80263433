# Exception Handlers
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, internal error text is returned in the GenericError detail !
#
# The exceptions will be caught in http_method_decorator and formatted, for example:
# {
#     "errors": [
#         {"title": "Not Found", "detail": "Not Found", "code": "404"}
#     ]
# }
#
from http import HTTPStatus
from werkzeug.exceptions import NotFound
import attachable
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class AttachableError(Exception):
    """
    Base class for the errors that are converted to an error response
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    title = HTTPStatus.INTERNAL_SERVER_ERROR.phrase
    message = ""

    def to_errors(self):
        """
        :return: list of json:api error objects
        """
        return [dict(title=self.title, detail=self.message or self.title, code=str(self.status_code))]


class NotFoundError(AttachableError, NotFound):
    """
    This exception is raised when the owner of a relationship was not found.
    Nothing but the status is returned to the client
    """

    status_code = HTTPStatus.NOT_FOUND.value
    title = HTTPStatus.NOT_FOUND.phrase

    def __init__(self, message=""):
        AttachableError.__init__(self, message)
        attachable.log.info("Not found: %s", message)
        self.message = HTTPStatus.NOT_FOUND.phrase


class ValidationError(AttachableError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the field errors to the client in the response

    :param message: summary message
    :param errors: dict mapping the request field to a list of messages
    """

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY.value
    title = "Validation Error"

    def __init__(self, message="The given data was invalid.", errors=None, status_code=HTTPStatus.UNPROCESSABLE_ENTITY.value):
        AttachableError.__init__(self, message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}
        attachable.log.warning("ValidationError: %s %s", message, self.errors)

    def to_errors(self):
        if not self.errors:
            return super().to_errors()
        result = []
        for field, messages in self.errors.items():
            for message in messages:
                result.append(dict(title=self.title, detail=message, code=str(self.status_code), source={"pointer": f"/{field}"}))
        return result


class RelationOperationError(AttachableError):
    """
    This exception is raised when a relationship can't be resolved or modified:
    unknown relationship, to-one relationship, unknown related ids or a database failure.

    The internal message is only logged, the client gets the hint set by the controller
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    title = "Relation Error"

    def __init__(self, message="", hint=None):
        AttachableError.__init__(self, message)
        self.internal_message = message
        self.message = hint or "Something went wrong."


class GenericError(AttachableError):
    """
    This exception is raised when an unexpected error occurred
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    title = "Internal Error"

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        AttachableError.__init__(self, message)
        self.status_code = status_code
        attachable.log.error("Generic Error: %s", message)
        if is_debug():
            self.message = str(message)
        else:
            self.message = HIDDEN_LOG
