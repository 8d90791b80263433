#  Operations on to-many relationship collections
#
#  http://jsonapi.org/format/#crud-updating-to-many-relationships
#
#  - attach: add the items, the existing members are kept
#  - detach: remove the items, items that aren't members are ignored
#  - sync: replace the members by the items, members that are also items are left alone
#
#  The collection is either an InstrumentedList or, for lazy="dynamic" relationships,
#  an AppenderQuery. Both support append() and remove().
#
#  Every operation returns a report:
#  { "attached" : [ids], "detached" : [ids], "updated" : [] }
#
import attachable
from .errors import RelationOperationError
from .util import coerce_pk


def _report(attached=None, detached=None):
    return {"attached": attached or [], "detached": detached or [], "updated": []}


def _jsonapi_id(identity):
    """
    :param identity: primary key tuple
    :return: json encodable id
    """
    return identity[0] if len(identity) == 1 else list(identity)


def _identity(prop, instance):
    return tuple(prop.mapper.primary_key_from_instance(instance))


def get_collection(owner, prop):
    """
    :param owner: instance owning the relationship
    :param prop: sqla RelationshipProperty
    :return: relationship collection
    """
    if not prop.uselist:
        raise RelationOperationError(f'"{prop}" is a to-one relationship, it has no members to attach or detach')
    return getattr(owner, prop.key)


def parse_item_ids(prop, items):
    """
    Parse the client items:
    - primary key values : 1, "1"
    - resource identifiers : { "id" : 1, "type" : "tags" }

    Duplicates are removed, the order is kept
    :param prop: sqla RelationshipProperty
    :param items: list of items
    :return: list of primary key tuples
    """
    target = prop.mapper.class_
    target_type = prop.target.name
    result = []
    for item in items:
        if isinstance(item, dict):
            item_type = item.get("type")
            if item_type is not None and item_type != target_type:
                raise RelationOperationError(f'Invalid type "{item_type}", expected "{target_type}"')
            item = item.get("id")
        if item is None or isinstance(item, (dict, bool)):
            raise RelationOperationError(f'Invalid "{target.__name__}" id {item!r}')
        if isinstance(item, (list, tuple)):
            identity = tuple(item)
        else:
            try:
                identity = (coerce_pk(target, item),)
            except ValueError:
                raise RelationOperationError(f'Invalid "{target.__name__}" id {item!r}')
        if identity not in result:
            result.append(identity)
    return result


def load_items(prop, items):
    """
    :return: list of target instances, an error is raised if an item doesn't exist
    """
    target = prop.mapper.class_
    instances = []
    for identity in parse_item_ids(prop, items):
        try:
            instance = attachable.DB.session.get(target, identity)
        except (OverflowError, ValueError, TypeError) as exc:
            # e.g. an integer that doesn't fit the database column
            raise RelationOperationError(f'Invalid "{target.__name__}" ID "{_jsonapi_id(identity)}": {exc}')
        if instance is None:
            raise RelationOperationError(f'Invalid "{target.__name__}" ID "{_jsonapi_id(identity)}"')
        instances.append(instance)
    return instances


def attach(owner, prop, items):
    """
    Add the items to the relationship without detaching the current members
    """
    relation = get_collection(owner, prop)
    current = {_identity(prop, member) for member in relation}
    attached = []
    for child in load_items(prop, items):
        identity = _identity(prop, child)
        if identity in current:
            continue
        relation.append(child)
        current.add(identity)
        attached.append(_jsonapi_id(identity))
    return _report(attached=attached)


def detach(owner, prop, items):
    """
    Remove the items from the relationship
    """
    relation = get_collection(owner, prop)
    identities = parse_item_ids(prop, items)
    detached = []
    for member in list(relation):
        identity = _identity(prop, member)
        if identity in identities:
            relation.remove(member)
            detached.append(_jsonapi_id(identity))
    for identity in identities:
        if _jsonapi_id(identity) not in detached:
            attachable.log.debug(f"Item with id {_jsonapi_id(identity)} not in relation {prop}")
    return _report(detached=detached)


def sync(owner, prop, items):
    """
    Make the relationship members identical to the items
    """
    relation = get_collection(owner, prop)
    children = load_items(prop, items)
    wanted = {_identity(prop, child) for child in children}
    current = {}
    for member in list(relation):
        current[_identity(prop, member)] = member

    detached = []
    for identity, member in current.items():
        if identity not in wanted:
            relation.remove(member)
            detached.append(_jsonapi_id(identity))

    attached = []
    for child in children:
        identity = _identity(prop, child)
        if identity not in current:
            relation.append(child)
            attached.append(_jsonapi_id(identity))

    return _report(attached=attached, detached=detached)
