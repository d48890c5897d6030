"""Regex patterns for uri parsing and placeholder rendering."""

import re

# Pattern matching expressions
constraint_expr = re.compile(
    r"(?P<token>:\w+\??|\{\w+\??\})\((?P<body>(?:\\.|[^()\\])*)\)"
)
unparsed_expr = re.compile(r"(:\w+\??|\{\w+\??\})\(")
brace_pattern = re.compile(r"\{(?P<name>\w+)(?P<optional>\?)?\}")
param_pattern = re.compile(r":(?P<name>\w+)(?P<optional>\?)?")
placeholder_pattern = re.compile(r"(?P<sep>/)?:(?P<name>\w+)(?P<optional>\?)?")
backslashes_expr = re.compile(r"\\+")
separators_expr = re.compile(r"/{2,}")
