"""
Read-only response views handed to the rule engines.

Rule engines only need four things from a response: a header existence test,
the first value of a header, every (name, value) pair in wire order (Set-Cookie
repeats), and the body as text. HttpResponse carries those for replayed
traffic and tests; MitmResponse adapts a live mitmproxy response.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

HeaderPairs = List[Tuple[str, str]]


def _normalize_headers(headers: Union[Dict[str, Any], Iterable, None]) -> HeaderPairs:
    if not headers:
        return []
    if isinstance(headers, dict):
        items = headers.items()
    else:
        items = headers

    pairs = []
    for item in items:
        try:
            name, value = item
        except (TypeError, ValueError):
            continue
        if isinstance(value, (list, tuple)):
            # {"Set-Cookie": ["a=1", "b=2"]} style logs
            pairs.extend((str(name), str(v)) for v in value)
        else:
            pairs.append((str(name), "" if value is None else str(value)))
    return pairs


class ResponseView:
    """Case-insensitive header access shared by both response flavours."""

    def headers(self) -> HeaderPairs:
        raise NotImplementedError

    @property
    def text(self) -> str:
        raise NotImplementedError

    def has_header(self, name: str) -> bool:
        return self.header_value(name) is not None

    def header_value(self, name: str) -> Optional[str]:
        wanted = name.lower()
        for header_name, value in self.headers():
            if header_name.lower() == wanted:
                return value
        return None

    def header_values(self, name: str) -> List[str]:
        wanted = name.lower()
        return [value for header_name, value in self.headers() if header_name.lower() == wanted]

    @property
    def content_type(self) -> str:
        return self.header_value("Content-Type") or ""


@dataclass
class HttpResponse(ResponseView):
    """
    Plain response record used for replayed traffic and tests.

    Headers may be given as a dict or as a list of (name, value) pairs;
    only the list form can express repeated headers faithfully.
    """

    header_pairs: HeaderPairs = field(default_factory=list)
    body: str = ""
    status_code: Optional[int] = None

    def __post_init__(self):
        self.header_pairs = _normalize_headers(self.header_pairs)
        if isinstance(self.body, bytes):
            self.body = self.body.decode("utf-8", errors="ignore")
        elif self.body is None:
            self.body = ""

    @classmethod
    def from_dict(cls, entry: Dict[str, Any]) -> "HttpResponse":
        """
        Build a response from a captured traffic record.

        Args:
            entry (dict): Record with 'headers', optional 'body' and 'status_code'

        Returns:
            HttpResponse
        """
        return cls(
            header_pairs=entry.get("headers") or [],
            body=entry.get("body") or "",
            status_code=entry.get("status_code"),
        )

    def headers(self) -> HeaderPairs:
        return list(self.header_pairs)

    @property
    def text(self) -> str:
        return self.body


class MitmResponse(ResponseView):
    """Adapter over a ``mitmproxy.http.Response``; never mutates it."""

    def __init__(self, response):
        self._response = response

    def headers(self) -> HeaderPairs:
        return [(str(k), str(v)) for k, v in self._response.headers.items(multi=True)]

    def header_value(self, name: str) -> Optional[str]:
        # headers.get() joins repeated values with ", "; we want the first one
        values = self._response.headers.get_all(name)
        return values[0] if values else None

    def header_values(self, name: str) -> List[str]:
        return list(self._response.headers.get_all(name))

    @property
    def text(self) -> str:
        try:
            return self._response.get_text(strict=False) or ""
        except ValueError:
            content = self._response.get_content(strict=False) or b""
            return content.decode("utf-8", errors="ignore")
