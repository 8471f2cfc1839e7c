"""Multi-valued string parameters from query strings and urlencoded forms."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Immutable ``name -> [values]`` mapping.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    _data: dict[str, list[str]]
    _raw: str

    __slots__ = ("_data", "_raw")

    def __init__(self, encoded: str | bytes = "") -> None:
        text = encoded.decode("latin-1") if isinstance(encoded, bytes) else encoded
        object.__setattr__(self, "_raw", text)
        object.__setattr__(self, "_data", parse_qs(text, keep_blank_values=True))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def get_list(self, key: str) -> list[str]:
        return list(self._data.get(key, []))

    @property
    def raw(self) -> str:
        """The encoded string the params were parsed from."""
        return self._raw
