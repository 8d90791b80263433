# Response class
from flask import Response


class AttachableResponse(Response):
    """
    Response class, json by default
    """

    default_mimetype = "application/json"
