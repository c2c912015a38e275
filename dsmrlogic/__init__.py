from . import (
    canon,
    types,
    exceptions,
    config,
    validate,
    fields,
    header,
    assemble,
    ingest,
    transform,
    render,
    pipeline,
)

__all__ = [
    "canon",
    "types",
    "exceptions",
    "config",
    "validate",
    "fields",
    "header",
    "assemble",
    "ingest",
    "transform",
    "render",
    "pipeline",
]
