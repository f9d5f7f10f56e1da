"""Shared builders and fakes for unit and integration tests."""
import io
import zipfile
from typing import Dict, List

import httpx

QUICK_FOX = "The quick brown fox jumps over the lazy dog."


def build_docx(paragraphs: List[str]) -> bytes:
    """Minimal DOCX container holding only word/document.xml."""
    body = "".join(
        f'<w:p><w:r><w:t>{text}</w:t></w:r></w:p>' for text in paragraphs
    )
    xml = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f'<w:body>{body}</w:body></w:document>'
    )
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("word/document.xml", xml)
    return buffer.getvalue()


class FakeSearchProvider:
    """Returns canned URLs and records the queries it was asked."""

    def __init__(self, urls: List[str], fail: bool = False):
        self.urls = urls
        self.fail = fail
        self.queries: List[str] = []

    async def search(self, query: str, limit: int) -> List[str]:
        self.queries.append(query)
        if self.fail:
            raise RuntimeError("search backend down")
        return list(self.urls)


def html_page(text: str) -> str:
    return (
        "<html><head><title>t</title><script>var tracking = 1;</script></head>"
        f"<body><nav>Home | About</nav><p>{text}</p><footer>Copyright</footer></body></html>"
    )


def page_transport(pages: Dict[str, str]) -> httpx.MockTransport:
    """Serve ``pages`` by absolute URL; anything else is a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = pages.get(str(request.url))
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=body, headers={"content-type": "text/html"})

    return httpx.MockTransport(handler)
