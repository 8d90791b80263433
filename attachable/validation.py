"""
Request input validation

Rules are given as a pipe separated string per input parameter, e.g.

    validate(request, {"tags": "required|array"})

Supported rules:
- required : the parameter must be present and not empty (None, "", [] and {} are empty)
- array : the parameter must be a list
- string : the parameter must be a string
- integer : the parameter must be an integer
- nullable : None is allowed, the other rules are skipped for None
"""
from typing import Any, Callable, Dict, List, Tuple

_MISSING = object()

RuleSet = Dict[str, str]
FieldErrors = Dict[str, List[str]]


def _attribute(name: str) -> str:
    return name.replace("_", " ").replace("-", " ")


def _is_empty(value: Any) -> bool:
    return value is _MISSING or value is None or (isinstance(value, (str, list, tuple, dict)) and len(value) == 0)


def _required(value: Any) -> bool:
    return not _is_empty(value)


def _array(value: Any) -> bool:
    return value is _MISSING or isinstance(value, list)


def _string(value: Any) -> bool:
    return value is _MISSING or isinstance(value, str)


def _integer(value: Any) -> bool:
    if value is _MISSING:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and value.lstrip("-").isdigit()


RULES: Dict[str, Tuple[Callable[[Any], bool], str]] = {
    "required": (_required, "The {attribute} field is required."),
    "array": (_array, "The {attribute} must be an array."),
    "string": (_string, "The {attribute} must be a string."),
    "integer": (_integer, "The {attribute} must be an integer."),
}


def validate_data(data: Dict[str, Any], rules: RuleSet) -> Tuple[bool, FieldErrors]:
    """
    :param data: input parameters
    :param rules: {parameter: "rule|rule"}
    :return: passed, {parameter: [messages]}
    """
    errors: FieldErrors = {}
    for key, rule_string in rules.items():
        rule_names = [name.strip() for name in rule_string.split("|") if name.strip()]
        value = data.get(key, _MISSING)
        if "nullable" in rule_names and value is None:
            continue
        for rule_name in rule_names:
            if rule_name == "nullable":
                continue
            try:
                check, message = RULES[rule_name]
            except KeyError:
                raise ValueError(f'Unknown validation rule "{rule_name}"')
            if not check(value):
                errors.setdefault(key, []).append(message.format(attribute=_attribute(key)))
                if rule_name == "required":
                    break
    return not errors, errors


def validate(request, rules: RuleSet) -> Tuple[bool, FieldErrors]:
    """
    Validate the request input parameters

    :param request: AttachableRequest
    :param rules: {parameter: "rule|rule"}
    :return: passed, {parameter: [messages]}
    """
    data = {key: request.input(key, _MISSING) for key in rules}
    return validate_data(data, rules)
