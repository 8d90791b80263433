# attachable to json encoding

import datetime
import decimal
import sqlalchemy
from flask.json.provider import DefaultJSONProvider
from sqlalchemy.orm.state import InstanceState
from uuid import UUID
import attachable
from .config import is_debug


def sqla_encode(obj):
    """
    encode an SQLAlchemy instance: use its to_dict() if available,
    otherwise return the column attributes
    :param obj: sqlalchemy instance to be encoded
    :return: json-encodable dict
    """
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    mapper = sqlalchemy.inspect(obj).mapper
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


class AttachableJSONProvider(DefaultJSONProvider):
    """
    Flask JSON encoding for sqla instances and common types
    """

    sort_keys = False

    # pylint: disable=too-many-return-statements,method-hidden
    @staticmethod
    def default(obj):
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if obj is None:
            return None
        if isinstance(sqlalchemy.inspect(obj, raiseerr=False), InstanceState):
            return sqla_encode(obj)
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, set):
            return list(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, decimal.Decimal):
            return float(obj)
        if isinstance(obj, bytes):
            if obj == b"":
                return ""
            attachable.log.debug("AttachableJSONProvider: serializing bytes obj")
            return obj.hex()

        if not is_debug():  # pragma: no cover
            attachable.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
            return {"error": "AttachableJSONProvider invalid object"}

        return str(obj)
