from datetime import datetime
from decimal import Decimal, InvalidOperation

from django import template
from django.conf import settings
from django.contrib.humanize.templatetags.humanize import intcomma

from base.forms import record_id

register = template.Library()


@register.filter
def get_item(dictionary, key):
    """Get item from dictionary by key, following dotted paths"""
    value = dictionary
    for part in str(key).split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


@register.filter
def key_exists(dictionary, key):
    return key in (dictionary or {})


@register.filter
def pk(record):
    return record_id(record)


@register.filter
def money(value):
    """1234.5 -> "₹1,234.50" """
    try:
        amount = Decimal(str(value if value not in (None, "") else 0))
    except InvalidOperation:
        return value
    return f"{settings.CURRENCY_SYMBOL}{intcomma(f'{amount:.2f}')}"


@register.filter
def api_date(value, fmt="%d/%m/%Y"):
    """Format an ISO date/timestamp string from the API."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime(fmt)


@register.filter
def label(value):
    """"cocurricular" / "in_progress" -> "Cocurricular" / "In Progress" """
    return str(value or "").replace("_", " ").title()


@register.simple_tag(takes_context=True)
def query_with(context, **kwargs):
    """Current query string with some parameters replaced."""
    query = context["request"].GET.copy()
    for key, value in kwargs.items():
        query[key] = value
    return query.urlencode()
