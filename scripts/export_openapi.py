#!/usr/bin/env python
"""Export the OpenAPI schema of the content API for client code generation."""

import json
from pathlib import Path

from dega.entrypoints.api.app import app


def main() -> None:
    """Export OpenAPI schema to JSON file."""
    output_path = Path(__file__).parent.parent / "openapi.json"
    schema = app.openapi()

    with open(output_path, "w") as f:
        json.dump(schema, f, indent=2)

    print(f"OpenAPI schema exported to {output_path}")


if __name__ == "__main__":
    main()
