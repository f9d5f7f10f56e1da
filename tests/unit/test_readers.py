"""Unit tests for the text extractor and its format parsers."""
import time

import pytest

from mindradix.models.similarity import Attachment
from mindradix.tools.readers import ExtractorCapabilities, TextExtractor
from mindradix.tools.readers.readers_pdf import PDFParser
from mindradix.tools.readers.utils.parser_map import get_parser_for_file, is_text_fallback
from tests.helpers import build_docx


@pytest.mark.unit
class TestParserMap:
    def test_bare_extension_name(self):
        assert get_parser_for_file(".pdf")[1] == "PDFParser"
        assert get_parser_for_file("archive.tar.DOCX")[1] == "DOCXParser"
        assert get_parser_for_file("trailing.")[1] == "PlainTextParser"

    def test_specialized_formats(self):
        assert get_parser_for_file("report.PDF")[1] == "PDFParser"
        assert get_parser_for_file("a.docx")[1] == "DOCXParser"
        assert get_parser_for_file("a.doc")[1] == "DOCParser"

    def test_unknown_extension_falls_back_to_text(self):
        assert get_parser_for_file("data.csv")[1] == "PlainTextParser"
        assert is_text_fallback("data.csv")
        assert not is_text_fallback("notes.md")


@pytest.mark.unit
class TestTextExtractor:
    def test_plain_text_utf8(self, no_pdf_extractor):
        assert no_pdf_extractor.extract_text("a.txt", "héllo".encode("utf-8")) == "héllo"

    def test_invalid_utf8_is_replaced(self, no_pdf_extractor):
        assert no_pdf_extractor.extract_text("a.txt", b"ok\xff") == "ok�"

    def test_html_tags_kept_at_extraction(self, no_pdf_extractor):
        assert no_pdf_extractor.extract_text("page.html", b"<p>Hi</p>") == "<p>Hi</p>"

    def test_docx_paragraphs(self, no_pdf_extractor):
        data = build_docx(["First paragraph", "Second paragraph"])
        assert no_pdf_extractor.extract_text("essay.docx", data) == "First paragraph\n\nSecond paragraph"

    def test_doc_named_docx_container(self, no_pdf_extractor):
        data = build_docx(["Legacy name, modern body"])
        assert no_pdf_extractor.extract_text("old.doc", data) == "Legacy name, modern body"

    def test_corrupt_docx_degrades_to_empty(self, no_pdf_extractor):
        result = no_pdf_extractor.try_extract("broken.docx", b"not a zip file")
        assert not result.ok
        assert result.text_or_empty() == ""
        assert result.error.details["filename"] == "broken.docx"

    def test_docx_without_document_xml(self, no_pdf_extractor):
        import io
        import zipfile

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("other.xml", "<x/>")
        assert no_pdf_extractor.extract_text("empty.docx", buffer.getvalue()) == ""

    def test_pdf_uses_injected_capability(self, fake_pdf_extractor):
        assert fake_pdf_extractor.extract_text("paper.pdf", b"pdf body text") == "pdf body text"

    def test_bare_pdf_name_uses_pdf_backend(self, fake_pdf_extractor, no_pdf_extractor):
        assert fake_pdf_extractor.extract_text(".pdf", b"pdf body text") == "pdf body text"
        assert not no_pdf_extractor.try_extract(".pdf", b"%PDF-raw-bytes").ok

    def test_pdf_unavailable_is_explicit_error(self, no_pdf_extractor):
        result = no_pdf_extractor.try_extract("paper.pdf", b"%PDF-1.4")
        assert not result.ok
        assert result.text_or_empty() == ""
        assert "PDF parser unavailable" in result.error.message

    def test_pdf_parser_failure_degrades(self):
        def explode(data: bytes) -> str:
            raise ValueError("bad xref table")

        extractor = TextExtractor(ExtractorCapabilities(parse_pdf=explode))
        assert extractor.extract_text("paper.pdf", b"%PDF") == ""

    def test_pdf_parser_from_capabilities(self):
        parser = PDFParser.from_capabilities(ExtractorCapabilities(parse_pdf=lambda data: "x"))
        assert parser.parse("a.pdf", b"").text == "x"

    def test_filename_without_extension(self, no_pdf_extractor):
        assert no_pdf_extractor.extract_text("README", b"plain") == "plain"


@pytest.mark.unit
class TestExtractMany:
    @pytest.mark.asyncio
    async def test_preserves_order_and_isolates_failures(self, fake_pdf_extractor):
        attachments = [
            Attachment(id="1", filename="a.txt", data=b"alpha"),
            Attachment(id="2", filename="b.docx", data=b"garbage"),
            Attachment(id="3", filename="c.pdf", data=b"gamma"),
        ]
        assert await fake_pdf_extractor.extract_many(attachments) == ["alpha", "", "gamma"]

    @pytest.mark.asyncio
    async def test_expired_deadline_yields_empty_text(self, no_pdf_extractor):
        attachments = [Attachment(id="1", filename="a.txt", data=b"alpha")]
        texts = await no_pdf_extractor.extract_many(attachments, deadline=time.monotonic() - 1)
        assert texts == [""]

    @pytest.mark.asyncio
    async def test_missing_filename_uses_id(self, no_pdf_extractor):
        attachments = [Attachment(id="notes.txt", filename="", data=b"beta")]
        assert await no_pdf_extractor.extract_many(attachments) == ["beta"]
