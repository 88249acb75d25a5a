from pathlib import Path

from servicequote.verticals.registry import is_registered, register
from servicequote.verticals.schema import ServiceSchema

SERVICE_SCHEMA_DIR = Path(__file__).parent / "service_schemas"


def register_verticals() -> None:
    for path in sorted(SERVICE_SCHEMA_DIR.glob("*.yaml")):
        schema = ServiceSchema.from_yaml_file(path)
        if not is_registered(schema.service_id):
            register(schema)
