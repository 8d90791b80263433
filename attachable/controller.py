#  Shortcuts for to-many relationship updates
#
#  AttachableMixin implements the controller operations, it is composed into a
#  flask-restful resource by AttachableResource:
#  - attached : paginated list of the relationship members
#  - attach : add items to the relationship
#  - detach : remove items from the relationship
#  - sync : replace the relationship members by the items
#
#  The items are read from the request body, under the relationship name or
#  the param_key when it is given:
#      POST /posts/1/tags   { "tags" : [1, 2] }
#
# pylint: disable=redefined-builtin,invalid-name
#
from contextlib import contextmanager
from flask import jsonify, make_response, request
from http import HTTPStatus
from sqlalchemy.exc import SQLAlchemyError
import attachable
from . import relations
from .config import get_bool_config
from .errors import AttachableError, GenericError, NotFoundError, RelationOperationError, ValidationError
from .formatting import page_limit, paginated_document, simple_paginate, status_document
from .resolver import RelationResolver
from .util import find
from .validation import validate


class AttachableMixin:
    """
    Many-to-many attachment operations for the owner looked up by model()

    Subclasses set Model or override model(). Model is either a mapped class or
    an sqla query, e.g. to restrict the owners that can be modified:

        class PostResource(AttachableResource):
            def model(self):
                return Post.query.filter_by(published=True)
    """

    Model = None
    resolver = RelationResolver
    relation_error_fmt = "Something went wrong. Are you sure the {} exists?"
    validation_rule = "required|array"

    def model(self):
        """
        :return: the owner class or query
        """
        if self.Model is None:  # pragma: no cover
            raise NotImplementedError(f"{type(self).__name__} should set Model or implement model()")
        return self.Model

    def attach_model(self):
        """
        The model to use in the attach and attached methods. Defaults to model()
        """
        return self.model()

    def detach_model(self):
        """
        The model to use in the detach method. Defaults to model()
        """
        return self.model()

    def sync_model(self):
        """
        The model to use in the sync method. Defaults to model()
        """
        return self.model()

    # pylint: disable=unused-argument
    def prepare_attach_items(self, items, owner, relation):
        """
        Prepares the items to attach to the owner on the given relation

        :param items: list of items from the request
        :param owner: owner instance
        :param relation: resolved relationship name
        :return: list of items
        """
        return items

    def prepare_detach_items(self, items, owner, relation):
        """
        Prepares the items to detach from the owner on the given relation
        """
        return items

    def prepare_sync_items(self, items, owner, relation):
        """
        Prepares the items to sync with the owner on the given relation
        """
        return items

    def validation_error_message(self):
        return "The given data was invalid."

    def relation_error_message(self, param_key):
        """
        :return: the message returned to the client when the relationship update fails
        """
        return self.relation_error_fmt.format(param_key.replace("_", " "))

    def find_owner(self, model, id):
        """
        :param model: owner class or query
        :param id: owner id
        :return: owner instance, NotFoundError is raised if it doesn't exist
        """
        owner = find(model, id)
        if owner is None:
            raise NotFoundError(f'Invalid owner ID "{id}"')
        return owner

    def validate_items(self, param_key):
        """
        :param param_key: request parameter holding the items
        :return: the items from the request body
        """
        passed, errors = validate(request, {param_key: self.validation_rule})
        if not passed:
            raise ValidationError(self.validation_error_message(), errors)
        return request.input(param_key)

    @contextmanager
    def relation_guard(self, param_key):
        """
        Convert the failures of a relationship operation:
        - relationship errors and database errors are logged and the client gets a hint
        - client errors (ValidationError) are passed on
        - anything else is an internal error
        """
        try:
            yield
        except RelationOperationError as exc:
            attachable.log.error(exc.internal_message)
            exc.message = self.relation_error_message(param_key)
            raise
        except SQLAlchemyError as exc:
            attachable.log.error(str(exc))
            raise RelationOperationError(str(exc), self.relation_error_message(param_key)) from exc
        except AttachableError:
            raise
        except Exception as exc:
            attachable.log.exception(exc)
            raise GenericError(f"{type(exc).__name__}: {exc}") from exc

    def respond(self, document, status_code=HTTPStatus.OK):
        return make_response(jsonify(document), status_code)

    def ok(self, **extra):
        return self.respond(status_document(**extra))

    def paginated_list(self, instances, links=None, meta=None):
        return self.respond(paginated_document(instances, links, meta))

    def _update(self, operation, locator, prepare, id, relation, param_key):
        """
        Validate the request, look up the owner and apply the relationship operation

        :return: relationship change report
        """
        param_key = param_key or relation
        items = self.validate_items(param_key)
        owner = self.find_owner(locator(), id)
        with self.relation_guard(param_key):
            prop = self.resolver.resolve(type(owner), relation)
            items = prepare(items, owner, prop.key)
            report = operation(owner, prop, items)
            attachable.DB.session.flush()
        attachable.log.info(
            f"{operation.__name__} {owner!r}.{prop.key}: attached {report['attached']}, detached {report['detached']}"
        )
        return report

    def attached(self, id, relation):
        """
        Fetches a paginated list of related items

        :param id: owner id
        :param relation: relationship name
        :return: Response
        """
        owner = self.find_owner(self.attach_model(), id)
        with self.relation_guard(relation):
            prop = self.resolver.resolve(type(owner), relation)
            members = relations.get_collection(owner, prop)
            links, instances, meta = simple_paginate(members, page_limit(prop.mapper.class_))
        return self.paginated_list(instances, links, meta)

    def attach(self, id, relation, param_key=None):
        """
        Attaches a list of items to the owner at the given id

        :param id: owner id
        :param relation: relationship name
        :param param_key: request parameter holding the items, defaults to the relation
        :return: Response
        """
        self._update(relations.attach, self.attach_model, self.prepare_attach_items, id, relation, param_key)
        return self.ok()

    def detach(self, id, relation, param_key=None):
        """
        Detaches a list of items from the owner at the given id
        """
        self._update(relations.detach, self.detach_model, self.prepare_detach_items, id, relation, param_key)
        return self.ok()

    def sync(self, id, relation, param_key=None):
        """
        Syncs a list of items with the existing attached items on the owner at the given id

        The ids that were added and removed are only returned when ATTACHABLE_SYNC_REPORT is set
        """
        report = self._update(relations.sync, self.sync_model, self.prepare_sync_items, id, relation, param_key)
        if get_bool_config("ATTACHABLE_SYNC_REPORT"):
            return self.ok(added=report["attached"], removed=report["detached"])
        return self.ok()
