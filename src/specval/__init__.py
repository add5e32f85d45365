"""specval -- Generate pydantic validators from OpenAPI 3.x documents.

This package reads an OpenAPI document, inlines its ``$ref`` pointers and
writes, for every operation (path + HTTP method), a request validator module
and a responses validator module, plus one shared ``validator_types.py``.

Typical workflow::

    specval --input openapi.yaml --output validators/

    from specval.runtime import load_generated_module

    responses = load_generated_module("validators/users.get.responsesValidator.py")
    responses.validate({"statusCode": 200, "contentType": "application/json", "body": []})

Modules:
    app: Typer application and CLI entry point.
    pipeline: Load, resolve, enumerate, compile and emit.
    parser: Document loading, ``$ref`` resolution and operation lookup.
    compiler: Parameter, body and response compilation into validator source.
    naming: Artifact names derived from path and method.
    emitter: Atomic, all-or-nothing writing of generated modules.
    models: Pydantic models shared across the entire package.
    config: Precedence resolution of flags, environment and ``specval.json``.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    runtime: Import helper for generated modules.
"""

__version__ = "0.1.0"
