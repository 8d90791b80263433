"""
Request class used by the Attachable extension

The item lists are read from the json body, html form posts are supported as well.
Only "[]" suffixed form fields are arrays, like php does:
    tags[]=1&tags[]=2  => ["1", "2"]
    tags=1             => "1"
"""

from flask import Request
import attachable
from .config import get_config
from .errors import ValidationError


# pylint: disable=too-many-ancestors
class AttachableRequest(Request):
    """
    Parse the request arguments:
    - query args: page[offset], page[number]
    - body: json or form input
    """

    @property
    def payload(self):
        """
        :return: the json body, an empty dict if the body isn't json
        """
        result = self.get_json(silent=True)
        if result is None:
            result = {}
        return result

    def input(self, key, default=None):
        """
        Retrieve an input parameter from the body

        :param key: parameter name
        :param default: returned when the parameter isn't present
        """
        payload = self.payload
        if isinstance(payload, dict) and key in payload:
            return payload[key]
        if self.form:
            if f"{key}[]" in self.form:
                return self.form.getlist(f"{key}[]")
            if key in self.form:
                # the last value wins for repeated scalar fields
                return self.form.getlist(key)[-1]
        return default

    def get_page_offset(self, limit):
        """
        :param limit: page size
        :return: page offset requested by the client when fetching lists

        If the client uses page[number] instead of page[offset], then we transform the
        number parameter to an offset
        """
        try:
            page_offset = self.args.get("page[offset]", 0, type=int)
            if page_offset == 0 and "page[number]" in self.args:
                page_number = int(self.args.get("page[number]"))
                page_offset = (page_number - 1) * limit
        except ValueError:
            raise ValidationError("Pagination Value Error", {"page": ["The page must be an integer."]})

        if page_offset < 0:
            page_offset = 0
        max_offset = int(get_config("MAX_PAGE_OFFSET"))
        if page_offset > max_offset:
            attachable.log.debug(f"page offset {page_offset} exceeds {max_offset}")
            page_offset = max_offset
        return page_offset
