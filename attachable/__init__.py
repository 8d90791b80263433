# flake8: noqa: F401
#
# Convenience endpoints to list, attach, detach and sync the members of
# SQLAlchemy to-many relationships
#
from .attachable_init import DB, log, Attachable, AttachableRequest
from .errors import ValidationError, GenericError, NotFoundError, RelationOperationError
from .json_encoder import AttachableJSONProvider
from .resolver import RelationResolver, camel_case
from .controller import AttachableMixin
from .resource import AttachableResource
from .api import AttachableAPI
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "Attachable",
    "AttachableAPI",
    "AttachableResource",
    "AttachableMixin",
    # relation names
    "RelationResolver",
    "camel_case",
    # json
    "AttachableJSONProvider",
    # Errors:
    "ValidationError",
    "GenericError",
    "NotFoundError",
    "RelationOperationError",
    # request
    "AttachableRequest",
)
