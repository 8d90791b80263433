#
# Primary key helpers
#
import re
import sqlalchemy
from sqlalchemy.orm import Query
import attachable

_INTEGER = re.compile(r"[+-]?\d+")


def primary_key_column(model):
    """
    :param model: mapped class
    :return: the primary key column or None for composite primary keys
    """
    primary_key = sqlalchemy.inspect(model).primary_key
    if len(primary_key) != 1:
        return None
    return primary_key[0]


def _to_int(value):
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
        return int(value)
    raise ValueError(f"{value!r} is not an integer")


def coerce_pk(model, value):
    """
    Convert an identifier (usually a url string) to the python type of the model primary key

    Only lossless conversions are done: 3, 3.0 and "3" are integer keys, 3.9 isn't

    :param model: mapped class
    :param value: identifier
    :return: converted identifier
    :raises ValueError: the identifier can't be converted
    """
    column = primary_key_column(model)
    if column is None or value is None:
        return value
    try:
        python_type = column.type.python_type
    except NotImplementedError:  # pragma: no cover
        return value
    if python_type is int:
        return _to_int(value)
    if isinstance(value, python_type):
        return value
    try:
        return python_type(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Can't convert {value!r} to {python_type.__name__}") from exc


def query_entity(query):
    """
    :return: the mapped class queried by an sqla Query
    """
    return query.column_descriptions[0]["entity"]


def find(model, id):
    """
    Look up an instance by primary key

    :param model: mapped class or sqla Query (e.g. a filtered query) for the owner
    :param id: primary key value
    :return: instance or None, also when the id isn't a valid primary key value
    """
    # pylint: disable=redefined-builtin
    entity = query_entity(model) if isinstance(model, Query) else model
    try:
        pk = coerce_pk(entity, id)
        if isinstance(model, Query):
            column = primary_key_column(entity)
            if column is None:  # pragma: no cover
                return model.get(id)
            return model.filter(column == pk).first()
        return attachable.DB.session.get(model, pk)
    except (OverflowError, ValueError) as exc:
        attachable.log.debug(f"Invalid {entity.__name__} id {id!r}: {exc}")
        return None
