"""Resource schema loading.

Typical usage::

    from provider_scripts.schema import find_schema, load_schema

    schema = load_schema(find_schema(project_dir))
    for token, resource in schema.resources.items():
        ...
"""

from provider_scripts.schema.loader import SCHEMA_FILENAMES, find_schema, load_schema

__all__ = ["SCHEMA_FILENAMES", "find_schema", "load_schema"]
