"""Path parameter converters.

Supported segment forms: ``{id}``, ``{id:int}``, ``{ratio:float}``, and
``{rest:path}`` (the only one that may span ``/``).
"""

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}

