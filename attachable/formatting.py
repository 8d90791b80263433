#
# Response documents and pagination of relationship members
#
import sqlalchemy
import sqlalchemy.orm.collections
from flask import request
import attachable
from .config import get_config
from .errors import GenericError, ValidationError

STATUS_OK = "ok"


def page_limit(target):
    """
    :param target: relationship target class
    :return: the page size: the "per_page" attribute of the target, if set, or the ATTACHABLE_PAGE_LIMIT config
    """
    limit = getattr(target, "per_page", None) or get_config("ATTACHABLE_PAGE_LIMIT")
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        raise GenericError(f"Invalid page limit {limit!r}")
    return max(limit, 1)


def simple_paginate(relation, limit):
    """
    Paginate the relationship members without counting them:
    one extra item is fetched to find out whether there's a next page

    We use page[offset], where offset is the number of records to skip

    :param relation: InstrumentedList or (dynamic relationship) query
    :param limit: page size
    :return: links, instances, meta
    """

    def get_link(offset):
        ignore_args = "page[offset]", "page[number]", "page[limit]"
        args = [f"{k}={v}" for k, v in request.args.items() if k not in ignore_args] + [f"page[offset]={offset}"]
        return request.base_url + "?" + "&".join(args)

    page_offset = request.get_page_offset(limit)

    if isinstance(relation, (list, sqlalchemy.orm.collections.InstrumentedList)):
        instances = list(relation[page_offset : page_offset + limit + 1])
    else:
        try:
            instances = relation.offset(page_offset).limit(limit + 1).all()
        except OverflowError:
            raise ValidationError("Pagination Overflow Error", {"page": ["The page is out of range."]})

    has_more = len(instances) > limit
    instances = instances[:limit]

    links = {"self": get_link(page_offset)}
    if page_offset > 0:
        links["first"] = get_link(0)
        links["prev"] = get_link(max(page_offset - limit, 0))
    if has_more:
        links["next"] = get_link(page_offset + limit)

    meta = {"limit": limit, "offset": page_offset, "count": len(instances)}
    attachable.log.debug(f"page at offset {page_offset}: {len(instances)} items, more: {has_more}")
    return links, instances, meta


def paginated_document(data, links=None, meta=None):
    """
    :return: response dict for a page of items
    """
    result = dict(data=data)
    if meta:
        result["meta"] = meta
    if links:
        result["links"] = links
    return result


def status_document(**extra):
    """
    :return: response dict of a successful update
    """
    result = dict(status=STATUS_OK)
    result.update(extra)
    return result


def error_document(exc):
    """
    :param exc: AttachableError
    :return: response dict with the json:api error objects
    """
    return dict(errors=exc.to_errors())
