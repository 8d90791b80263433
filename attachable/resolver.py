"""
Relation name resolution

Relationship names arrive in the url, e.g. /posts/1/featured-tags, and are mapped
onto the relationships declared on the owner's mapper:

- a name found in the relationship table is used as-is
- otherwise hyphens are replaced by underscores and the name is camelCased
  ("featured-tags" => "featuredTags")

Aliases can be added to the table with RelationResolver.register.
"""
import re
import sqlalchemy
from .errors import RelationOperationError

_WORD_DELIMITERS = re.compile(r"[\s_]+")


def camel_case(value: str) -> str:
    """
    :param value: e.g. "user_roles" or "user roles"
    :return: camelCased value, e.g. "userRoles"
    """
    words = [word for word in _WORD_DELIMITERS.split(value) if word]
    studly = "".join(word[:1].upper() + word[1:] for word in words)
    return studly[:1].lower() + studly[1:]


def normalize_relation_name(relation: str) -> str:
    return camel_case(relation.replace("-", "_"))


class RelationResolver:
    """
    Resolve a relationship name against the relationship table of a mapped class
    """

    # {mapped class: {alias: relationship key}}
    _aliases = {}

    @classmethod
    def register(cls, model, alias, key):
        """
        Register an alias for a relationship

        :param model: mapped class
        :param alias: name used in the urls
        :param key: relationship attribute name
        """
        if key not in sqlalchemy.inspect(model).relationships:
            raise ValueError(f'"{model.__name__}" has no relationship "{key}"')
        cls._aliases.setdefault(model, {})[alias] = key

    @classmethod
    def unregister(cls, model, alias=None):
        if alias is None:
            cls._aliases.pop(model, None)
        else:
            cls._aliases.get(model, {}).pop(alias, None)

    @classmethod
    def relations(cls, model):
        """
        :param model: mapped class
        :return: dict mapping names to sqla RelationshipProperty objects
        """
        mapper_relationships = sqlalchemy.inspect(model).relationships
        result = {prop.key: prop for prop in mapper_relationships}
        for klass in reversed(model.__mro__):
            for alias, key in cls._aliases.get(klass, {}).items():
                result[alias] = mapper_relationships[key]
        return result

    @classmethod
    def resolve_name(cls, model, relation):
        """
        :param model: mapped class
        :param relation: relationship name as supplied by the client
        :return: the name to look up in the relationship table
        """
        if relation in cls.relations(model):
            return relation
        return normalize_relation_name(relation)

    @classmethod
    def resolve(cls, model, relation):
        """
        :param model: mapped class
        :param relation: relationship name as supplied by the client
        :return: sqla RelationshipProperty
        """
        name = cls.resolve_name(model, relation)
        prop = cls.relations(model).get(name)
        if prop is None:
            raise RelationOperationError(f'"{model.__name__}" has no relationship "{relation}" ({name})')
        return prop
