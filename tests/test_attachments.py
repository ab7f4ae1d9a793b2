"""Tests for UTI-based attachment rendering."""

import os
import unittest
from unittest.mock import MagicMock

from notes_fixtures import table_blob

from pynotestore.exceptions import AttachmentExportError, QueryError
from pynotestore.models import AttachmentRow, MediaRow, UrlCardRow
from pynotestore.rendering.attachments import (
    AttachmentContext,
    AttachmentUti,
    render_attachment,
)


class FakeDataSource:
    def __init__(self):
        self.alt_text = {}
        self.url_cards = {}
        self.mergeable = {}
        self.media_pks = {}
        self.modified_scans = {}
        self.scans = {}
        self.drawings = {}
        self.media = {}

    def get_alt_text(self, identifier):
        return self.alt_text.get(identifier)

    def get_url_card(self, identifier):
        return self.url_cards.get(identifier)

    def get_mergeable_gz(self, identifier):
        return self.mergeable.get(identifier)

    def get_media_pk(self, identifier):
        return self.media_pks.get(identifier)

    def get_modified_scan(self, identifier):
        return self.modified_scans.get(identifier)

    def get_scan(self, identifier):
        return self.scans.get(identifier)

    def get_drawing(self, identifier):
        return self.drawings.get(identifier)

    def get_media(self, media_pk):
        return self.media.get(media_pk)


class FakeExporter:
    def __init__(self):
        self.requests = []
        self.exported = 0

    def export(self, request, note_title):
        self.requests.append((request, note_title))
        return f"{note_title}_{request.name}.{request.extension}"


class AttachmentTestCase(unittest.TestCase):
    def setUp(self):
        self.ds = FakeDataSource()
        self.exporter = FakeExporter()

    def render(self, uti, identifier="ID", **kw):
        ctx = AttachmentContext(
            identifier=identifier,
            uti=uti,
            datasource=self.ds,
            exporter=kw.pop("exporter", self.exporter),
            note_title=kw.pop("note_title", "Note"),
            **kw,
        )
        return render_attachment(ctx)

    @property
    def request(self):
        self.assertEqual(len(self.exporter.requests), 1)
        return self.exporter.requests[0][0]


class InlineAttachmentTest(AttachmentTestCase):
    def test_hashtag_and_mention_use_alt_text(self):
        self.ds.alt_text["ID"] = "#work"
        self.assertEqual(self.render(AttachmentUti.HASHTAG.value), "#work")
        self.ds.alt_text["ID"] = "@Sam"
        self.assertEqual(self.render(AttachmentUti.MENTION.value), "@Sam")

    def test_hashtag_without_alt_text(self):
        self.assertEqual(self.render(AttachmentUti.HASHTAG.value, "TAG"), "#TAG")

    def test_url_card(self):
        self.ds.url_cards["ID"] = UrlCardRow(ztitle="Example", zurlstring="https://e.x")
        self.assertEqual(
            self.render(AttachmentUti.URL_CARD.value), "[**Example**](https://e.x)"
        )

    def test_url_card_missing(self):
        self.assertEqual(self.render(AttachmentUti.URL_CARD.value), "[URL Card]")


class TableAttachmentTest(AttachmentTestCase):
    def test_table(self):
        self.ds.mergeable["ID"] = table_blob({(0, 0): "A", (1, 1): "B"}, 2, 2)
        self.assertEqual(
            self.render(AttachmentUti.TABLE.value),
            "\n| A |  |\n| -- | -- |\n|  | B |\n\n",
        )

    def test_table_data_missing(self):
        self.assertEqual(
            self.render(AttachmentUti.TABLE.value), "\n\n*[Table data not found]*\n\n"
        )

    def test_table_blob_not_gzip(self):
        self.ds.mergeable["ID"] = b"not gzip"
        self.assertEqual(
            self.render(AttachmentUti.TABLE.value),
            "\n\n*[Table processing failed]*\n\n",
        )

    def test_table_without_root(self):
        self.ds.mergeable["ID"] = table_blob({}, 1, 1, root_type="other")
        self.assertEqual(
            self.render(AttachmentUti.TABLE.value),
            "\n\n*[Table could not be processed]*\n\n",
        )


class FileAttachmentTest(AttachmentTestCase):
    def test_modified_scan(self):
        self.ds.modified_scans["ID"] = AttachmentRow(
            zidentifier="ID", zfallbackpdfgeneration="G1", zcreationdate=10.0
        )
        out = self.render(AttachmentUti.MODIFIED_SCAN.value)
        self.assertEqual(out, "\n\n![Scan](attachments/Note_Scan.pdf)\n\n")
        self.assertEqual(
            self.request.source_path,
            os.path.join("FallbackPDFs", "ID", "G1", "FallbackPDF.pdf"),
        )
        self.assertEqual(self.request.created, 10.0)

    def test_modified_scan_without_generation(self):
        self.ds.modified_scans["ID"] = AttachmentRow(zidentifier="ID")
        self.render(AttachmentUti.MODIFIED_SCAN.value)
        self.assertEqual(
            self.request.source_path, os.path.join("FallbackPDFs", "ID", "FallbackPDF.pdf")
        )

    def test_scan(self):
        self.ds.scans["ID"] = AttachmentRow(
            zidentifier="ID", zsizewidth=800.0, zsizeheight=600.0
        )
        out = self.render(AttachmentUti.SCAN.value)
        self.assertEqual(out, "\n\n![Scan Page](attachments/Note_Scan Page.jpg)\n\n")
        self.assertEqual(
            self.request.source_path, os.path.join("Previews", "ID-1-800x600-0.jpeg")
        )

    def test_drawing_variants(self):
        self.ds.drawings["ID"] = AttachmentRow(zidentifier="ID")
        for uti in ("com.apple.paper", "com.apple.drawing", "com.apple.drawing.2"):
            with self.subTest(uti):
                out = self.render(uti)
                self.assertEqual(out, "\n\n![Drawing](attachments/Note_Drawing.png)\n\n")
        request = self.exporter.requests[-1][0]
        self.assertEqual(request.source_path, os.path.join("FallbackImages", "ID.jpg"))

    def test_drawing_with_generation(self):
        self.ds.drawings["ID"] = AttachmentRow(
            zidentifier="ID", zfallbackimagegeneration="G2"
        )
        self.render(AttachmentUti.DRAWING.value)
        self.assertEqual(
            self.request.source_path,
            os.path.join("FallbackImages", "ID", "G2", "FallbackImage.png"),
        )

    def test_handwriting_quote(self):
        self.ds.drawings["ID"] = AttachmentRow(
            zidentifier="ID", zhandwritingsummary="line one\nline two"
        )
        with_quote = self.render(AttachmentUti.DRAWING.value, include_handwriting=True)
        self.assertEqual(
            with_quote,
            "\n\n> [!note] Handwriting\n> line one\n> line two\n\n"
            "![Drawing](attachments/Note_Drawing.png)\n\n",
        )
        without = self.render(AttachmentUti.DRAWING.value)
        self.assertEqual(without, "\n\n![Drawing](attachments/Note_Drawing.png)\n\n")

    def test_media(self):
        self.ds.media_pks["ID"] = 42
        self.ds.media[42] = MediaRow(
            zidentifier="M", zfilename="trip.final.HEIC", zgeneration1="g"
        )
        out = self.render("public.heic")
        self.assertEqual(out, "\n\n![trip.final](attachments/Note_trip.final.HEIC)\n\n")
        self.assertEqual(
            self.request.source_path, os.path.join("Media", "M", "g", "trip.final.HEIC")
        )

    def test_media_without_extension(self):
        self.ds.media_pks["ID"] = 42
        self.ds.media[42] = MediaRow(zidentifier="M", zfilename="README")
        self.render("public.data")
        self.assertEqual((self.request.name, self.request.extension), ("README", "bin"))

    def test_media_dotfile_name(self):
        self.ds.media_pks["ID"] = 42
        self.ds.media[42] = MediaRow(zidentifier="M", zfilename=".pdf")
        self.render("com.adobe.pdf")
        self.assertEqual((self.request.name, self.request.extension), ("attachment", "pdf"))

    def test_internal_link_takes_media_path(self):
        out = self.render(AttachmentUti.INTERNAL_LINK.value)
        self.assertEqual(
            out,
            "\n\n*[Attachment: com.apple.notes.inlinetextattachment.link]*\n\n",
        )

    def test_unknown_uti_without_media(self):
        self.assertEqual(
            self.render("com.example.thing"),
            "\n\n*[Attachment: com.example.thing]*\n\n",
        )

    def test_media_row_missing(self):
        self.ds.media_pks["ID"] = 42
        self.assertEqual(
            self.render("public.jpeg"), "\n\n*[Media file not found]*\n\n"
        )

    def test_attachment_row_missing(self):
        self.assertEqual(
            self.render(AttachmentUti.SCAN.value),
            "\n\n*[Attachment data not found]*\n\n",
        )

    def test_no_exporter(self):
        self.ds.scans["ID"] = AttachmentRow(zidentifier="ID")
        self.assertEqual(
            self.render(AttachmentUti.SCAN.value, exporter=None),
            "\n\n*[Attachment: com.apple.notes.gallery]*\n\n",
        )


class AttachmentFailureTest(AttachmentTestCase):
    def test_copy_failure(self):
        self.ds.drawings["ID"] = AttachmentRow(zidentifier="ID")
        exporter = MagicMock()
        exporter.export.side_effect = AttachmentExportError(
            "denied", filename="Note_Drawing.png"
        )
        self.assertEqual(
            self.render(AttachmentUti.DRAWING.value, exporter=exporter),
            "\n\n*[Attachment file could not be exported: Note_Drawing.png]*\n\n",
        )

    def test_lookup_failure(self):
        self.ds.get_scan = MagicMock(side_effect=QueryError("no such column"))
        self.assertEqual(
            self.render(AttachmentUti.SCAN.value),
            "\n\n*[Attachment export failed]*\n\n",
        )

    def test_unexpected_failure(self):
        self.ds.get_alt_text = MagicMock(side_effect=RuntimeError("boom"))
        self.assertEqual(
            self.render(AttachmentUti.HASHTAG.value),
            "\n\n*[Attachment processing failed: "
            "com.apple.notes.inlinetextattachment.hashtag]*\n\n",
        )

    def test_media_lookup_failure(self):
        self.ds.get_media_pk = MagicMock(side_effect=QueryError("locked"))
        self.assertEqual(
            self.render("public.jpeg"),
            "\n\n*[Attachment processing failed: public.jpeg]*\n\n",
        )


if __name__ == "__main__":
    unittest.main()
