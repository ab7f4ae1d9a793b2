"""Tests for the typer command line interface."""

import os
import sqlite3
import tempfile
import unittest

from notes_fixtures import add_note, create_store, note_store_blob, table_blob
from typer.testing import CliRunner

from pynotestore.cli.main import app
from pynotestore.datasource import STORE_FILENAME


class CliTestCase(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, data):
        path = os.path.join(self.tmp, name)
        with open(path, "wb") as f:
            f.write(data)
        return path


class InspectCommandTest(CliTestCase):
    def test_body_blob(self):
        path = self.write("body.bin", note_store_blob("Title\nHello world"))
        result = self.runner.invoke(app, ["inspect", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Body", result.output)
        self.assertIn("Hello world", result.output)

    def test_raw_run_dump(self):
        blob = note_store_blob(
            "Title\nSee \ufffc", runs=[(10, None), (1, ("IMG", "public.jpeg"))]
        )
        path = self.write("body.bin", blob)
        result = self.runner.invoke(app, ["inspect", "--raw", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("[0] @0+10", result.output)
        self.assertIn("[1] @10+1 attachment=IMG uti=public.jpeg", result.output)
        self.assertIn("{OBJ}", result.output)

    def test_hex_table_blob(self):
        blob = table_blob({(0, 0): "A", (1, 1): "B"}, 2, 2)
        path = self.write("table.hex", blob.hex().upper().encode("ascii"))
        result = self.runner.invoke(app, ["inspect", "--hex", "--table", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("| A |  |", result.output)
        self.assertIn("|  | B |", result.output)

    def test_table_flag_on_body_blob(self):
        path = self.write("body.bin", note_store_blob("Title\nHello world"))
        result = self.runner.invoke(app, ["inspect", "--table", path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No table found", result.output)

    def test_not_gzip(self):
        path = self.write("junk.bin", b"not a blob")
        result = self.runner.invoke(app, ["inspect", path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error:", result.output)

    def test_missing_file(self):
        result = self.runner.invoke(app, ["inspect", os.path.join(self.tmp, "nope")])
        self.assertEqual(result.exit_code, 1)


class ExportCommandTest(CliTestCase):
    def test_missing_store(self):
        out = os.path.join(self.tmp, "out")
        result = self.runner.invoke(
            app, ["export", out, "--data-path", os.path.join(self.tmp, "missing")]
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error:", result.output)

    def test_export(self):
        data = os.path.join(self.tmp, "container")
        os.makedirs(data)
        conn = create_store(sqlite3.connect(os.path.join(data, STORE_FILENAME)))
        add_note(conn, 1, "Groceries", note_store_blob("Groceries\nMilk"))
        conn.commit()
        conn.close()
        out = os.path.join(self.tmp, "out")

        result = self.runner.invoke(
            app, ["export", out, "--data-path", data, "--include-first-line"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Exported", result.output)
        with open(os.path.join(out, "Groceries.md"), encoding="utf-8") as f:
            self.assertEqual(f.read(), "# Groceries\n\nGroceries\nMilk")


if __name__ == "__main__":
    unittest.main()
