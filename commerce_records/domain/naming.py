"""Helpers deriving REST names from record class names."""
import re

_FIRST_CAP = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP = re.compile(r"([a-z0-9])([A-Z])")


def underscore(name: str) -> str:
    """
    Convert a CamelCase model name to its lower-case underscored form.

    >>> underscore("PriceList")
    'price_list'
    """
    partial = _FIRST_CAP.sub(r"\1_\2", name)
    return _ALL_CAP.sub(r"\1_\2", partial).lower()


def camelize(name: str) -> str:
    """
    Convert an underscored name to CamelCase.

    >>> camelize("payment_method")
    'PaymentMethod'
    """
    return "".join(part.capitalize() for part in name.split("_") if part)


def pluralize(name: str) -> str:
    """
    Collection path for a JSON root.

    >>> pluralize("company")
    'companies'
    >>> pluralize("address")
    'addresses'
    """
    if re.search(r"[^aeiou]y$", name):
        return name[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", name):
        return name + "es"
    return name + "s"



def singularize(name: str) -> str:
    """
    Singular form of a collection key, covering the plurals used by resources.

    >>> singularize("addresses")
    'address'
    """
    if name.endswith("ies"):
        return name[:-3] + "y"
    if name.endswith("sses"):
        return name[:-2]
    if name.endswith("s"):
        return name[:-1]
    return name
