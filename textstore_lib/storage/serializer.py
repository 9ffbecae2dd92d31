from typing import Any, Protocol
import json
import yaml


class Serializer(Protocol):
    """Serialize/deserialize Python values to the text kept in a versioned store.

    Implementations should be symmetric: `dump` -> str, `load` <- str.
    """

    def dump(self, value: Any) -> str: ...

    def load(self, text: str) -> Any: ...


class JSONSerializer:
    """Serializer using JSON. Objects without a JSON form are dumped via `__dict__`."""

    def dump(self, value: Any) -> str:
        return json.dumps(value, default=lambda o: o.__dict__)

    def load(self, text: str) -> Any:
        return json.loads(text)


class YAMLSerializer:
    """Serializer using YAML. Caller must ensure values are YAML-serializable."""

    def dump(self, value: Any) -> str:
        return yaml.safe_dump(value)

    def load(self, text: str) -> Any:
        return yaml.safe_load(text)
