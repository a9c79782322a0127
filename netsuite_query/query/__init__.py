"""Query building and translation components."""

from netsuite_query.query.operators import Backend, OperatorTranslator, translate_operator
from netsuite_query.query.search import SearchTranslator
from netsuite_query.query.suiteql import SuiteQLTranslator
from netsuite_query.query.translator import enforce_result_ceiling, resolve_order
from netsuite_query.query.validation import validate_param_filters

__all__ = [
    "Backend",
    "OperatorTranslator",
    "translate_operator",
    "SearchTranslator",
    "SuiteQLTranslator",
    "enforce_result_ceiling",
    "resolve_order",
    "validate_param_filters",
]
