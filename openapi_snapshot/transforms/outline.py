# openapi_snapshot/transforms/outline.py
"""
Outline projection of an OpenAPI document.

    {
      "paths":   {"/pets": {"get": {"query": [...], "request": ..., "responses": {...}}}},
      "schemas": {"Pet": {"type": "object", "required": [...], "properties": {...}}}
    }

Descriptions, examples and vendor extensions are dropped. Anything structurally
invalid raises OutlineError with a message naming where it was found.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..errors import OutlineError

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head", "trace")
COMPOSITIONS = ("oneOf", "anyOf", "allOf")
JSON_CONTENT = "application/json"


def outline_openapi(document: Any) -> Dict[str, Any]:
    if not isinstance(document, dict):
        raise OutlineError("OpenAPI document must be a JSON object")
    paths = document.get("paths")
    if not isinstance(paths, dict):
        raise OutlineError("OpenAPI document missing paths")

    try:
        return {
            "paths": _outline_paths(paths),
            "schemas": _outline_schemas(document.get("components")),
        }
    except RecursionError as e:
        raise OutlineError("schema nesting too deep to outline") from e


# ---- paths / operations ------------------------------------------------------

def _outline_paths(paths: Dict[str, Any]) -> Dict[str, Any]:
    outlined: Dict[str, Any] = {}
    for path, item in paths.items():
        if not isinstance(item, dict):
            raise OutlineError(f"path item must be an object: {path}")
        methods: Dict[str, Any] = {}
        for method, op in item.items():
            if method not in HTTP_METHODS:
                continue
            where = f"{method.upper()} {path}"
            if not isinstance(op, dict):
                raise OutlineError(f"operation must be an object: {where}")
            methods[method] = {
                "query": _outline_query(op, where),
                "request": _outline_request(op, where),
                "responses": _outline_responses(op, where),
            }
        outlined[path] = methods
    return outlined


def _ref_of(value: Any, where: str) -> Optional[str]:
    if not isinstance(value, dict) or "$ref" not in value:
        return None
    ref = value["$ref"]
    if not isinstance(ref, str):
        raise OutlineError(f"$ref must be a string: {where}")
    return ref


def _outline_query(op: Dict[str, Any], where: str) -> List[Any]:
    params = op.get("parameters")
    if params is None:
        return []
    if not isinstance(params, list):
        raise OutlineError(f"parameters must be an array: {where}")
    return [_outline_query_param(p, where) for p in params]


def _outline_query_param(param: Any, where: str) -> Dict[str, Any]:
    ref = _ref_of(param, f"parameter of {where}")
    if ref is not None:
        return {"$ref": ref}
    if not isinstance(param, dict):
        raise OutlineError(f"parameter must be an object: {where}")

    name = param.get("name")
    location = param.get("in")
    if location != "query":
        raise OutlineError(f"non-query parameter {name!r} (in: {location}): {where}")
    if not isinstance(name, str) or not name:
        raise OutlineError(f"query parameter missing name: {where}")
    required = param.get("required", False)
    if not isinstance(required, bool):
        raise OutlineError(f"query parameter {name!r} required must be a boolean: {where}")
    if "schema" not in param:
        raise OutlineError(f"query parameter {name!r} missing schema: {where}")

    return {
        "name": name,
        "required": required,
        "schema": schema_ref_or_type(param["schema"], f"query parameter {name!r} of {where}"),
    }


def _select_content_schema(content: Any, where: str) -> Any:
    if not isinstance(content, dict):
        raise OutlineError(f"content must be an object: {where}")
    preferred = content.get(JSON_CONTENT)
    if isinstance(preferred, dict) and "schema" in preferred:
        return schema_ref_or_type(preferred["schema"], where)
    for entry in content.values():
        if isinstance(entry, dict) and "schema" in entry:
            return schema_ref_or_type(entry["schema"], where)
    raise OutlineError(f"no schema in content: {where}")


def _outline_request(op: Dict[str, Any], where: str) -> Any:
    if "requestBody" not in op:
        return None
    body = op["requestBody"]
    where = f"request body of {where}"
    ref = _ref_of(body, where)
    if ref is not None:
        return ref
    if not isinstance(body, dict):
        raise OutlineError(f"must be an object: {where}")
    return _select_content_schema(body.get("content"), where)


def _outline_responses(op: Dict[str, Any], where: str) -> Dict[str, Any]:
    responses = op.get("responses")
    if not isinstance(responses, dict):
        raise OutlineError(f"missing responses: {where}")
    outlined: Dict[str, Any] = {}
    for code, response in responses.items():
        code_where = f"response {code} of {where}"
        ref = _ref_of(response, code_where)
        if ref is not None:
            outlined[code] = ref
            continue
        if not isinstance(response, dict):
            raise OutlineError(f"must be an object: {code_where}")
        outlined[code] = _select_content_schema(response.get("content"), code_where)
    return outlined


# ---- schemas -----------------------------------------------------------------

def _composition(schema: Dict[str, Any], where: str) -> Optional[Dict[str, Any]]:
    for keyword in COMPOSITIONS:
        if keyword not in schema:
            continue
        items = schema[keyword]
        if not isinstance(items, list):
            raise OutlineError(f"{keyword} must be an array: {where}")
        return {keyword: [schema_ref_or_type(i, where) for i in items]}
    return None


def _schema_type(schema: Dict[str, Any], where: str) -> Optional[str]:
    schema_type = schema.get("type")
    if schema_type is not None and not isinstance(schema_type, str):
        raise OutlineError(f"schema type must be a string: {where}")
    return schema_type


def _array_items(schema: Dict[str, Any], where: str) -> Any:
    if "items" not in schema:
        raise OutlineError(f"array schema missing items: {where}")
    return schema_ref_or_type(schema["items"], where)


def simplify_object(schema: Dict[str, Any], where: str) -> Dict[str, Any]:
    """{"type": "object"} plus `required` and projected `properties` when present."""
    out: Dict[str, Any] = {"type": "object"}
    if "required" in schema:
        required = schema["required"]
        if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
            raise OutlineError(f"required must be an array of strings: {where}")
        out["required"] = list(required)
    if "properties" in schema:
        props = schema["properties"]
        if not isinstance(props, dict):
            raise OutlineError(f"properties must be an object: {where}")
        out["properties"] = {
            name: schema_ref_or_type(value, f"property {name!r} of {where}")
            for name, value in props.items()
        }
    return out


def schema_ref_or_type(schema: Any, where: str = "schema") -> Any:
    """
    Collapse a schema to its lightest useful form: a $ref string, a type name,
    an array/composition wrapper, or a simplified object.
    """
    if not isinstance(schema, dict):
        raise OutlineError(f"schema missing type: {where}")
    ref = _ref_of(schema, where)
    if ref is not None:
        return ref
    composed = _composition(schema, where)
    if composed is not None:
        return composed
    schema_type = _schema_type(schema, where)
    if schema_type == "array":
        return {"type": "array", "items": _array_items(schema, where)}
    if schema_type in (None, "object"):
        return simplify_object(schema, where)
    return schema_type


def simplify_schema_definition(schema: Any, where: str) -> Dict[str, Any]:
    """Like schema_ref_or_type, but always an object so named schemas keep their shape."""
    if not isinstance(schema, dict):
        raise OutlineError(f"schema missing type: {where}")
    ref = _ref_of(schema, where)
    if ref is not None:
        return {"$ref": ref}
    composed = _composition(schema, where)
    if composed is not None:
        return composed
    schema_type = _schema_type(schema, where)
    if schema_type == "array":
        return {"type": "array", "items": _array_items(schema, where)}
    if schema_type in (None, "object"):
        return simplify_object(schema, where)
    return {"type": schema_type}


def _outline_schemas(components: Any) -> Dict[str, Any]:
    if components is None:
        return {}
    if not isinstance(components, dict):
        raise OutlineError("components must be an object")
    schemas = components.get("schemas")
    if schemas is None:
        return {}
    if not isinstance(schemas, dict):
        raise OutlineError("components.schemas must be an object")
    return {
        name: simplify_schema_definition(schema, f"schema {name!r}")
        for name, schema in schemas.items()
    }
