import io
import tempfile
import unittest
from pathlib import Path

from paravision_params.errors import (
    ExcessTokensError,
    IncompleteRecordError,
    ParamParseError,
    StrayLineError,
)
from paravision_params.ingest.reader import ParavisionReader, ReaderConfig, parse, parse_text, read_params
from paravision_params.models.atoms import Bool, Float, Int, Text
from paravision_params.models.values import Array, Scalar, Str


ACQP = "\n".join(
    [
        "##TITLE=Parameter List, ParaVision 360 V3.5",
        "##JCAMPDX=4.24",
        "##DATATYPE=Parameter Values",
        "##ORIGIN=Bruker BioSpin MRI GmbH",
        "$$ Tue Feb 10 14:35:22 2026 CET (UT+1h)  wyatt",
        "$$ @vis= ACQ_size NR ACQ_ReceiverSelect",
        "##$NR=16",
        "##$ACQ_size=( 2 )",
        "128 2",
        "##$ACQ_method=( 64 )",
        "<User:ute3d>",
        "##$ACQ_ReceiverSelect=( 4 )",
        "Yes No Yes No",
        "##$ACQ_grad_matrix=( 1, 3, 3 )",
        "1 0 0",
        "0 1 0",
        "0 0 1",
        "##$BF1=300.33",
        "##$ACQ_experiment_mode=SingleExperiment",
        "##END=",
        "",
    ]
)


class TestParseExamples(unittest.TestCase):
    def test_array_example(self):
        store = parse_text("##$ACQ_size=( 2 )\n128 2\n")
        self.assertEqual(store.params["ACQ_size"], Array(dims=(2,), items=(Int(128), Int(2))))

    def test_scalar_example(self):
        store = parse_text("##$NR=16\n")
        self.assertEqual(store.params["NR"], Scalar(Int(16)))

    def test_receiver_select_example(self):
        store = parse_text("##$ACQ_ReceiverSelect=( 4 )\nYes No Yes No\n")
        v = store.params["ACQ_ReceiverSelect"]
        self.assertEqual(v, Array(dims=(4,), items=(Bool(True), Bool(False), Bool(True), Bool(False))))
        self.assertEqual(sum(v.as_bools()), 2)

    def test_meta_example(self):
        store = parse_text("##TITLE=My Scan\n")
        self.assertEqual(store.meta["TITLE"], "My Scan")
        store = parse_text("##title=My Scan\n")
        self.assertEqual(store.meta["TITLE"], "My Scan")
        self.assertNotIn("title", store.meta)

    def test_full_acqp(self):
        store = parse_text(ACQP)
        self.assertEqual(store.get_meta("jcampdx"), "4.24")
        self.assertEqual(store.meta["END"], "")
        self.assertEqual(store["ACQ_method"], Str("User:ute3d"))
        self.assertEqual(store.uints("ACQ_size"), [128, 2])
        self.assertEqual(store["NR"].as_uint(), 16)
        self.assertEqual(store["BF1"], Scalar(Float(300.33)))
        self.assertEqual(store["ACQ_experiment_mode"], Scalar(Text("SingleExperiment")))
        grad = store["ACQ_grad_matrix"]
        self.assertEqual(grad.dims, (1, 3, 3))
        self.assertEqual(grad.as_ints(), [1, 0, 0, 0, 1, 0, 0, 0, 1])
        self.assertEqual(store.warnings, ())

    def test_param_keys_are_case_sensitive(self):
        store = parse_text("##$nr=1\n##$NR=2\n")
        self.assertEqual(store["nr"], Scalar(Int(1)))
        self.assertEqual(store["NR"], Scalar(Int(2)))


class TestLineDriver(unittest.TestCase):
    def test_crlf_and_whitespace(self):
        store = parse(io.StringIO("##$NR=16\r\n   ##$ACQ_size=( 2 )  \r\n\t128   2\r\n"))
        self.assertEqual(store["NR"], Scalar(Int(16)))
        self.assertEqual(store.ints("ACQ_size"), [128, 2])

    def test_blank_and_comment_lines_inside_continuation(self):
        txt = "##$X=( 3 )\n1\n\n$$ comment\n2 3\n"
        store = parse_text(txt)
        self.assertEqual(store.ints("X"), [1, 2, 3])

    def test_stray_lines_ignored_with_warning(self):
        store = parse_text("stray text\n##$NR=1\n")
        self.assertEqual(store["NR"], Scalar(Int(1)))
        self.assertEqual(len(store), 1)
        self.assertEqual(len(store.warnings), 1)
        self.assertIn("line 1", store.warnings[0])

    def test_stray_lines_strict(self):
        cfg = ReaderConfig(strict_stray_lines=True)
        with self.assertRaises(StrayLineError) as cm:
            parse_text("##$NR=1\n1 2 3\n", cfg)
        self.assertEqual(cm.exception.line_no, 2)

    def test_split_invariance(self):
        values = [str(i) for i in range(12)]
        expected = Array(dims=(3, 4), items=tuple(Int(i) for i in range(12)))
        splits = [
            [values],
            [values[:1], values[1:]],
            [values[:5], values[5:6], values[6:]],
            [[v] for v in values],
            [values[:11], values[11:]],
        ]
        for chunks in splits:
            lines = ["##$M=( 3, 4 )"] + [" ".join(c) for c in chunks]
            store = parse(lines)
            self.assertEqual(store["M"], expected, msg=str(chunks))

    def test_excess_tokens_discarded(self):
        store = parse_text("##$X=( 2 )\n1\n2 3 4\n##$Y=5\n")
        self.assertEqual(store.ints("X"), [1, 2])
        self.assertEqual(store["Y"], Scalar(Int(5)))
        self.assertTrue(any("discarded 2" in w for w in store.warnings))

    def test_excess_tokens_strict(self):
        cfg = ReaderConfig(strict_excess_tokens=True)
        with self.assertRaises(ExcessTokensError):
            parse_text("##$X=( 2 )\n1 2 3\n", cfg)

    def test_zero_element_header_resolves_on_next_line(self):
        store = parse_text("##$E=( 0 )\n<>\n##$NR=4\n")
        self.assertEqual(store["E"], Str(""))
        self.assertEqual(store["NR"], Scalar(Int(4)))

    def test_next_line_character_stays_inside_string(self):
        txt = "##$S=( 8 )\n<a\x85b>\n"
        self.assertEqual(parse_text(txt)["S"], Str("a\x85b"))
        self.assertEqual(parse(io.StringIO(txt))["S"], Str("a\x85b"))

    def test_meta_keys_upper_cased_ascii_only(self):
        store = parse_text("##gro\xdfe=1\n")
        self.assertEqual(store.meta, {"GRO\xdfE": "1"})
        self.assertEqual(store.get_meta("gro\xdfe"), "1")

    def test_duplicate_keys_last_write_wins(self):
        store = parse_text("##$A=1\n##$B=2\n##$A=( 1 )\n3\n##TITLE=a\n##title=b\n")
        self.assertEqual(store["A"], Array(dims=(1,), items=(Int(3),)))
        self.assertEqual(list(store), ["B", "A"])
        self.assertEqual(store.meta["TITLE"], "b")
        self.assertEqual(sum("redefined" in w for w in store.warnings), 2)


class TestIncompleteRecord(unittest.TestCase):
    def test_eof_awaiting_kind(self):
        with self.assertRaises(IncompleteRecordError) as cm:
            parse_text("##$NR=16\n##$ACQ_size=( 2 )\n")
        err = cm.exception
        self.assertEqual(err.key, "ACQ_size")
        self.assertEqual(err.dims, (2,))
        self.assertEqual(err.n_items, 0)
        self.assertIn("ACQ_size", str(err))
        self.assertIn("(2)", str(err))

    def test_eof_after_zero_element_header(self):
        with self.assertRaises(IncompleteRecordError) as cm:
            parse_text("##$E=( 0 )\n")
        self.assertEqual(cm.exception.key, "E")
        self.assertEqual(cm.exception.dims, (0,))

    def test_eof_awaiting_items(self):
        with self.assertRaises(IncompleteRecordError) as cm:
            parse_text("##$M=( 2, 3 )\n1 2 3\n4\n$$ trailing comment\n")
        self.assertEqual(cm.exception.dims, (2, 3))
        self.assertEqual(cm.exception.n_items, 4)
        self.assertEqual(cm.exception.line_no, 1)

    def test_incomplete_is_a_parse_error(self):
        with self.assertRaises(ParamParseError):
            parse_text("##$S=( 8 )\n")
        with self.assertRaises(ValueError):
            parse_text("##$S=( 8 )\n")


class TestReadFile(unittest.TestCase):
    def test_read_params_file(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "acqp"
            p.write_text(ACQP + "##$ACQ_operator=( 16 )\n<M\xfcller>\n", encoding="latin-1")
            store = read_params(p)
            self.assertEqual(store.source_path, p.resolve())
            self.assertEqual(store["ACQ_operator"], Str("M\xfcller"))
            self.assertEqual(store.uints("ACQ_size"), [128, 2])

    def test_reader_class_with_config(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "method"
            p.write_text("##$PVM_NAverages=2\n", encoding="utf-8")
            store = ParavisionReader(ReaderConfig(encoding="utf-8")).read(p)
            self.assertEqual(store.ints("PVM_NAverages"), [2])

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(FileNotFoundError):
                read_params(Path(d) / "missing")

    def test_io_errors_propagate(self):
        def lines():
            yield "##$NR=1\n"
            raise OSError("device went away")

        with self.assertRaises(OSError):
            parse(lines())


if __name__ == "__main__":
    unittest.main()
