"""Loading and writing configuration and state files as TOML or CBOR."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any
import os
import tomllib

import cbor2
import tomli_w


class SerializationError(Exception):
    """A file could not be read, parsed or written."""


class Serializer(ABC):
    """A file format that values can be loaded from and written to."""

    @abstractmethod
    def load(self, path: str | os.PathLike) -> Any:
        """Read and decode the file at ``path``."""

    @abstractmethod
    def write(self, path: str | os.PathLike, value: Any) -> Any:
        """Encode ``value`` into the file at ``path`` and return ``value``."""

    def load_or_generate_default(
        self,
        path: str | os.PathLike,
        default: Callable[[], Any],
        default_on_parse_failure: bool,
    ) -> Any:
        """Load ``path``; write and return ``default()`` if it is missing.

        With ``default_on_parse_failure`` an unreadable file is overwritten
        by the default as well.
        """
        path = Path(path)
        if not path.exists():
            return self.write(path, default())
        try:
            return self.load(path)
        except SerializationError as error:
            if default_on_parse_failure:
                return self.write(path, default())
            raise SerializationError(f"Unable to parse {path}: {error}") from error


def _without_none(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _without_none(item) for key, item in value.items() if item is not None}
    if isinstance(value, (list, tuple)):
        return [_without_none(item) if isinstance(item, Mapping) else item for item in value]
    return value


class TomlSerializer(Serializer):
    """TOML files; ``None`` values in tables are left out when writing."""

    def load(self, path: str | os.PathLike) -> dict[str, Any]:
        path = Path(path)
        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            raise SerializationError(f"Unable to read {path}: {error}") from error
        try:
            return tomllib.loads(contents)
        except tomllib.TOMLDecodeError as error:
            raise SerializationError(f"Unable to parse toml {path}: {error}") from error

    def write(self, path: str | os.PathLike, value: Any) -> Any:
        path = Path(path)
        if not isinstance(value, Mapping):
            raise SerializationError(
                f"Failed serializing value: a {type(value).__name__} is not a TOML table"
            )
        try:
            content = tomli_w.dumps(_without_none(value))
        except (TypeError, ValueError) as error:
            raise SerializationError(f"Failed serializing value: {error}") from error
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as error:
            raise SerializationError(f"Failed writing content to {path}: {error}") from error
        return value


class CborSerializer(Serializer):
    """Binary CBOR files."""

    def load(self, path: str | os.PathLike) -> Any:
        path = Path(path)
        try:
            contents = path.read_bytes()
        except OSError as error:
            raise SerializationError(f"Unable to read {path}: {error}") from error
        try:
            return cbor2.loads(contents)
        except (cbor2.CBORDecodeError, ValueError) as error:
            raise SerializationError(f"Unable to parse CBOR {path}: {error}") from error

    def write(self, path: str | os.PathLike, value: Any) -> Any:
        path = Path(path)
        try:
            handle = path.open("wb")
        except OSError as error:
            raise SerializationError(f"Failed creating file {path}: {error}") from error
        with handle:
            try:
                cbor2.dump(value, handle)
            except (cbor2.CBOREncodeError, OSError) as error:
                raise SerializationError(
                    f"Failed writing content to {path}: {error}"
                ) from error
        return value


TOML = TomlSerializer()
CBOR = CborSerializer()