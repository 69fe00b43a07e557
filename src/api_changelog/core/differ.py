"""Structural comparison of two OpenAPI documents.

The differ walks both documents side by side and emits ``ChangeRecord``s
organised the way the changelog is traversed: per path and operation, per
schema, for the ``components`` section as a whole, and as one flattened list.
References are compared as strings and never resolved.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from api_changelog.errors import ChangelogError, DiffError
from api_changelog.models.change import (
    HTTP_METHODS,
    ChangeKind,
    ChangeRecord,
    DocumentChanges,
    OperationChanges,
    PathChanges,
)

logger = logging.getLogger(__name__)

COMPONENT_GROUPS = (
    "parameters",
    "responses",
    "requestBodies",
    "headers",
    "securitySchemes",
    "examples",
    "links",
    "callbacks",
)

# Guards against self-referencing YAML anchors.
MAX_SCHEMA_DEPTH = 10

SchemaGroups = List[Tuple[str, List[ChangeRecord]]]


def stringify(value: Any) -> str:
    """Render a document value the way change records carry it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _ordered_keys(old: Dict[str, Any], new: Dict[str, Any]) -> List[str]:
    """Keys of ``new`` in document order, then keys only ``old`` has."""
    keys = list(new)
    keys.extend(key for key in old if key not in new)
    return keys


def compare_value(
    prop: str, old: Any, new: Any, breaking: bool = False
) -> Optional[ChangeRecord]:
    """Compare a scalar field; None when both sides render the same."""
    original = stringify(old)
    current = stringify(new)
    if original == current:
        return None
    if not original:
        kind = ChangeKind.PROPERTY_ADDED
    elif not current:
        kind = ChangeKind.PROPERTY_REMOVED
    else:
        kind = ChangeKind.MODIFIED
    return ChangeRecord(
        property=prop,
        original=original,
        new=current,
        change_kind=kind,
        breaking=breaking,
    )


def compare_members(
    prop: str,
    old_names: Iterable[str],
    new_names: Iterable[str],
    breaking_removal: bool = True,
) -> List[ChangeRecord]:
    """Report named members that appear on only one side."""
    old_names = list(old_names)
    new_names = list(new_names)
    records = [
        ChangeRecord(
            property=prop,
            original=name,
            change_kind=ChangeKind.OBJECT_REMOVED,
            breaking=breaking_removal,
        )
        for name in old_names
        if name not in new_names
    ]
    records.extend(
        ChangeRecord(property=prop, new=name, change_kind=ChangeKind.OBJECT_ADDED)
        for name in new_names
        if name not in old_names
    )
    return records


def compare_field(
    name: str, old: Dict[str, Any], new: Dict[str, Any], breaking: bool = False
) -> Optional[ChangeRecord]:
    """Compare the field ``name`` of two mappings."""
    return compare_value(name, old.get(name), new.get(name), breaking=breaking)


def compare_required(old: Any, new: Any) -> Optional[ChangeRecord]:
    """Flip of a boolean ``required`` flag; becoming required is breaking."""
    return compare_value(
        "required", bool(old), bool(new), breaking=bool(new) and not bool(old)
    )


def compare_deprecated(
    old: Dict[str, Any], new: Dict[str, Any]
) -> Optional[ChangeRecord]:
    """Compare ``deprecated`` flags; a missing flag counts as false."""
    if bool(old.get("deprecated")) == bool(new.get("deprecated")):
        return None
    return compare_field("deprecated", old, new)


def compare_extensions(old: Dict[str, Any], new: Dict[str, Any]) -> List[ChangeRecord]:
    records = []
    for key in _ordered_keys(old, new):
        if not key.startswith("x-"):
            continue
        record = compare_value(key, old.get(key), new.get(key))
        if record is not None:
            records.append(record)
    return records


def _collect(*records: Optional[ChangeRecord]) -> List[ChangeRecord]:
    return [record for record in records if record is not None]


class DocumentDiffer:
    """Builds a ``DocumentChanges`` tree from two parsed documents."""

    def compare(
        self, previous: Dict[str, Any], latest: Dict[str, Any]
    ) -> DocumentChanges:
        """Compare ``previous`` against ``latest``.

        Raises:
            DiffError: If either document cannot be walked
        """
        try:
            changes = self._compare(_mapping(previous), _mapping(latest))
        except ChangelogError:
            raise
        except Exception as e:
            raise DiffError(f"failed to compare OpenAPI documents: {e}") from e

        logger.debug(
            "Differ found %d changes (%d paths, %d schemas)",
            changes.total_changes,
            len(changes.paths),
            len(changes.schemas),
        )
        return changes

    def _compare(
        self, previous: Dict[str, Any], latest: Dict[str, Any]
    ) -> DocumentChanges:
        root_records = self._compare_root(previous, latest)

        path_records = []
        paths = {}
        old_paths = _mapping(previous.get("paths"))
        new_paths = _mapping(latest.get("paths"))
        for path in _ordered_keys(old_paths, new_paths):
            if path not in new_paths:
                path_records.append(
                    ChangeRecord(
                        property=path,
                        original=path,
                        change_kind=ChangeKind.OBJECT_REMOVED,
                        breaking=True,
                    )
                )
            elif path not in old_paths:
                path_records.append(
                    ChangeRecord(
                        property=path, new=path, change_kind=ChangeKind.OBJECT_ADDED
                    )
                )
            else:
                path_changes = self._compare_path_item(
                    path, _mapping(old_paths[path]), _mapping(new_paths[path])
                )
                if path_changes.operations:
                    paths[path] = path_changes

        schemas, components = self._compare_components(
            _mapping(previous.get("components")), _mapping(latest.get("components"))
        )

        all_changes = root_records + path_records
        for path_changes in paths.values():
            for operation in path_changes.iter_operations():
                all_changes.extend(operation.records)
        all_changes.extend(components)

        return DocumentChanges(
            paths=paths,
            schemas=schemas,
            components=components,
            all_changes=all_changes,
        )

    def _compare_root(
        self, previous: Dict[str, Any], latest: Dict[str, Any]
    ) -> List[ChangeRecord]:
        old_info = _mapping(previous.get("info"))
        new_info = _mapping(latest.get("info"))
        records = _collect(
            compare_field("version", old_info, new_info),
            compare_field("title", old_info, new_info),
            compare_field("description", old_info, new_info),
        )
        records.extend(compare_extensions(old_info, new_info))

        records.extend(
            compare_members(
                "servers",
                self._server_urls(previous.get("servers")),
                self._server_urls(latest.get("servers")),
            )
        )
        records.extend(
            compare_members(
                "tags",
                self._tag_names(previous.get("tags")),
                self._tag_names(latest.get("tags")),
                breaking_removal=False,
            )
        )
        records.extend(compare_extensions(previous, latest))
        return records

    def _server_urls(self, servers: Any) -> List[str]:
        if not isinstance(servers, list):
            return []
        return [stringify(s.get("url")) for s in servers if isinstance(s, dict)]

    def _tag_names(self, tags: Any) -> List[str]:
        if not isinstance(tags, list):
            return []
        return [stringify(t.get("name")) for t in tags if isinstance(t, dict)]

    def _compare_path_item(
        self, path: str, old_item: Dict[str, Any], new_item: Dict[str, Any]
    ) -> PathChanges:
        """Compare the operations of a path present in both documents."""
        path_changes = PathChanges(path=path)
        for method in HTTP_METHODS:
            old_op = old_item.get(method.lower())
            new_op = new_item.get(method.lower())
            if old_op is None and new_op is None:
                continue

            if old_op is None:
                records = [
                    ChangeRecord(
                        property="operation",
                        new=method,
                        change_kind=ChangeKind.OBJECT_ADDED,
                    )
                ]
            elif new_op is None:
                records = [
                    ChangeRecord(
                        property="operation",
                        original=method,
                        change_kind=ChangeKind.OBJECT_REMOVED,
                        breaking=True,
                    )
                ]
            else:
                records = self._compare_operation(
                    _mapping(old_op),
                    _mapping(new_op),
                    self._parameters(old_item.get("parameters")),
                    self._parameters(new_item.get("parameters")),
                )

            if records:
                path_changes.operations[method] = OperationChanges(
                    method=method, path=path, records=records
                )
        return path_changes

    def _compare_operation(
        self,
        old: Dict[str, Any],
        new: Dict[str, Any],
        old_shared: Dict[Tuple[str, str], Dict[str, Any]],
        new_shared: Dict[Tuple[str, str], Dict[str, Any]],
    ) -> List[ChangeRecord]:
        records = _collect(
            compare_field("summary", old, new),
            compare_field("description", old, new),
            compare_field("operationId", old, new, breaking=True),
            compare_deprecated(old, new),
            compare_field("tags", old, new),
        )

        # Operation-level parameters override the path-level ones.
        old_params = dict(old_shared)
        old_params.update(self._parameters(old.get("parameters")))
        new_params = dict(new_shared)
        new_params.update(self._parameters(new.get("parameters")))
        records.extend(self._compare_parameters(old_params, new_params))

        records.extend(
            self._compare_request_body(old.get("requestBody"), new.get("requestBody"))
        )
        records.extend(
            self._compare_responses(
                _mapping(old.get("responses")), _mapping(new.get("responses"))
            )
        )
        records.extend(compare_extensions(old, new))
        return records

    def _parameters(self, params: Any) -> Dict[Tuple[str, str], Dict[str, Any]]:
        """Index parameters by location and name (or by ``$ref``)."""
        indexed = {}
        if not isinstance(params, list):
            return indexed
        for param in params:
            if not isinstance(param, dict):
                continue
            if "$ref" in param:
                key = ("$ref", stringify(param["$ref"]))
            else:
                key = (stringify(param.get("in")), stringify(param.get("name")))
            indexed[key] = param
        return indexed

    def _compare_parameters(
        self,
        old: Dict[Tuple[str, str], Dict[str, Any]],
        new: Dict[Tuple[str, str], Dict[str, Any]],
    ) -> List[ChangeRecord]:
        records = []
        for key in _ordered_keys(old, new):
            name = key[1]
            if key not in new:
                records.append(
                    ChangeRecord(
                        property="parameters",
                        original=name,
                        change_kind=ChangeKind.OBJECT_REMOVED,
                        breaking=True,
                    )
                )
            elif key not in old:
                records.append(
                    ChangeRecord(
                        property="parameters",
                        new=name,
                        change_kind=ChangeKind.OBJECT_ADDED,
                        breaking=bool(new[key].get("required")),
                    )
                )
            else:
                old_param = old[key]
                new_param = new[key]
                records.extend(
                    _collect(
                        compare_required(
                            old_param.get("required"), new_param.get("required")
                        ),
                        compare_field("description", old_param, new_param),
                        compare_deprecated(old_param, new_param),
                    )
                )
                records.extend(
                    self._compare_schema_shape(
                        _mapping(old_param.get("schema")),
                        _mapping(new_param.get("schema")),
                    )
                )
        return records

    def _compare_schema_shape(
        self, old: Dict[str, Any], new: Dict[str, Any]
    ) -> List[ChangeRecord]:
        """Reference, type and format of an inline schema."""
        return _collect(
            compare_field("$ref", old, new),
            compare_field("type", old, new, breaking=True),
            compare_field("format", old, new, breaking=True),
        )

    def _compare_content(
        self, old: Dict[str, Any], new: Dict[str, Any]
    ) -> List[ChangeRecord]:
        records = compare_members("content", list(old), list(new))
        for media_type in new:
            if media_type in old:
                records.extend(
                    self._compare_schema_shape(
                        _mapping(_mapping(old[media_type]).get("schema")),
                        _mapping(_mapping(new[media_type]).get("schema")),
                    )
                )
        return records

    def _compare_request_body(self, old: Any, new: Any) -> List[ChangeRecord]:
        if old is None and new is None:
            return []
        old = _mapping(old)
        new = _mapping(new)
        if not old:
            return [
                ChangeRecord(
                    property="requestBody",
                    new=stringify(list(_mapping(new.get("content")))) or "true",
                    change_kind=ChangeKind.OBJECT_ADDED,
                    breaking=bool(new.get("required")),
                )
            ]
        if not new:
            return [
                ChangeRecord(
                    property="requestBody",
                    original=stringify(list(_mapping(old.get("content")))) or "true",
                    change_kind=ChangeKind.OBJECT_REMOVED,
                    breaking=True,
                )
            ]

        records = _collect(
            compare_field("$ref", old, new),
            compare_required(old.get("required"), new.get("required")),
            compare_field("description", old, new),
        )
        records.extend(
            self._compare_content(
                _mapping(old.get("content")), _mapping(new.get("content"))
            )
        )
        return records

    def _compare_responses(
        self, old: Dict[str, Any], new: Dict[str, Any]
    ) -> List[ChangeRecord]:
        old_codes = {stringify(code): response for code, response in old.items()}
        new_codes = {stringify(code): response for code, response in new.items()}
        records = compare_members("codes", list(old_codes), list(new_codes))
        for code, response in new_codes.items():
            if code not in old_codes:
                continue
            old_response = _mapping(old_codes[code])
            new_response = _mapping(response)
            records.extend(
                _collect(
                    compare_field("$ref", old_response, new_response),
                    compare_field("description", old_response, new_response),
                )
            )
            records.extend(
                self._compare_content(
                    _mapping(old_response.get("content")),
                    _mapping(new_response.get("content")),
                )
            )
        return records

    def _compare_components(
        self, old: Dict[str, Any], new: Dict[str, Any]
    ) -> Tuple[Dict[str, List[ChangeRecord]], List[ChangeRecord]]:
        """Compare ``components``.

        Returns:
            Schema changes keyed by dotted schema path, and every component
            change (schema changes included) as one list
        """
        old_schemas = _mapping(old.get("schemas"))
        new_schemas = _mapping(new.get("schemas"))
        components = compare_members("schemas", list(old_schemas), list(new_schemas))
        for group in COMPONENT_GROUPS:
            components.extend(
                compare_members(
                    group,
                    list(_mapping(old.get(group))),
                    list(_mapping(new.get(group))),
                )
            )

        schemas = {}
        for name, schema in new_schemas.items():
            if name not in old_schemas:
                continue
            for key, records in self._compare_schema(
                name, _mapping(old_schemas[name]), _mapping(schema)
            ):
                schemas[key] = records
                components.extend(records)
        return schemas, components

    def _compare_schema(
        self,
        key: str,
        old: Dict[str, Any],
        new: Dict[str, Any],
        extra: Optional[List[ChangeRecord]] = None,
        depth: int = 0,
    ) -> SchemaGroups:
        """Compare a schema and its nested properties.

        Returns:
            ``(dotted key, records)`` pairs, parent first, for every schema
            that changed
        """
        records = list(extra or [])
        records.extend(self._compare_schema_shape(old, new))
        records.extend(
            _collect(
                compare_field("description", old, new),
                compare_deprecated(old, new),
                compare_field("nullable", old, new),
            )
        )

        old_enum = old.get("enum") if isinstance(old.get("enum"), list) else []
        new_enum = new.get("enum") if isinstance(new.get("enum"), list) else []
        enum_change = compare_value(
            "enum",
            old_enum,
            new_enum,
            breaking=any(value not in new_enum for value in old_enum),
        )
        if enum_change is not None:
            records.append(enum_change)

        old_props = _mapping(old.get("properties"))
        new_props = _mapping(new.get("properties"))
        old_required = self._required_names(old)
        new_required = self._required_names(new)
        for prop in _ordered_keys(old_props, new_props):
            if prop not in new_props:
                records.append(
                    ChangeRecord(
                        property="properties",
                        original=prop,
                        change_kind=ChangeKind.OBJECT_REMOVED,
                        breaking=True,
                    )
                )
            elif prop not in old_props:
                records.append(
                    ChangeRecord(
                        property="properties",
                        new=prop,
                        change_kind=ChangeKind.OBJECT_ADDED,
                        breaking=prop in new_required,
                    )
                )
        records.extend(compare_extensions(old, new))

        groups = [(key, records)] if records else []
        if depth >= MAX_SCHEMA_DEPTH:
            return groups

        for prop, schema in new_props.items():
            if prop not in old_props:
                continue
            flip = compare_required(prop in old_required, prop in new_required)
            groups.extend(
                self._compare_schema(
                    f"{key}.{prop}",
                    _mapping(old_props[prop]),
                    _mapping(schema),
                    extra=_collect(flip),
                    depth=depth + 1,
                )
            )

        old_items = old.get("items")
        new_items = new.get("items")
        if isinstance(old_items, dict) and isinstance(new_items, dict):
            groups.extend(
                self._compare_schema(f"{key}[]", old_items, new_items, depth=depth + 1)
            )
        return groups

    def _required_names(self, schema: Dict[str, Any]) -> List[str]:
        required = schema.get("required")
        if not isinstance(required, list):
            return []
        return [stringify(name) for name in required]
