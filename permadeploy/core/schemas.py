"""JSON schemas for persisted state and project configuration"""

from ..constants import MANIFEST_TYPE

_ADDRESS = {"type": "string", "minLength": 1}

MANIFEST_SCHEMA = {
    "type": "object",
    "required": ["manifest", "version", "paths"],
    "properties": {
        "manifest": {"const": MANIFEST_TYPE},
        "version": {"type": "string"},
        "index": {
            "type": "object",
            "required": ["path"],
            "properties": {"path": {"type": "string"}},
        },
        "paths": {
            "type": "object",
            "additionalProperties": {
                "oneOf": [
                    _ADDRESS,
                    {
                        "type": "object",
                        "required": ["id"],
                        "properties": {"id": _ADDRESS},
                    },
                ]
            },
        },
    },
}

TRACKER_SCHEMA = {
    "type": "object",
    "properties": {
        "lastDeployedReference": {"type": ["string", "null"]},
        "fileHashes": {
            "type": "object",
            "additionalProperties": {"type": "string"},
        },
        "deploymentCount": {"type": "integer", "minimum": 0},
        "lastDeployedAt": {"type": ["string", "null"]},
        "recentDeployments": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["reference", "contentAddress"],
                "properties": {
                    "reference": {"type": "string"},
                    "contentAddress": {"type": "string"},
                    "changedPaths": {"type": "array", "items": {"type": "string"}},
                    "timestamp": {"type": ["string", "null"]},
                },
            },
        },
    },
}

_ENDPOINT = {
    "type": "object",
    "properties": {
        "type": {"type": "string"},
        "path": {"type": "string"},
        "url": {"type": "string"},
        "token": {"type": "string"},
        "timeout": {"type": "number", "exclusiveMinimum": 0},
    },
    "additionalProperties": False,
}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "app_name": {"type": "string", "minLength": 1},
        "content_store": {
            **_ENDPOINT,
            "properties": {
                **_ENDPOINT["properties"],
                "type": {"enum": ["filesystem", "gateway"]},
            },
        },
        "name_registry": {
            **_ENDPOINT,
            "properties": {
                **_ENDPOINT["properties"],
                "type": {"enum": ["filesystem", "http"]},
            },
        },
        "registry_ttl": {"type": "integer", "minimum": 1},
        "registry_timeout": {"type": "number", "exclusiveMinimum": 0},
        "name_length": {"type": "integer", "minimum": 1, "maximum": 40},
        "history_limit": {"type": "integer", "minimum": 1},
        "upload_concurrency": {"type": "integer", "minimum": 1},
        "strict_name_claims": {"type": "boolean"},
        "tags": {
            "type": "object",
            "additionalProperties": {"type": ["string", "number", "boolean"]},
        },
    },
    "additionalProperties": False,
}
