import json
import os
import tempfile
import unittest

from txviz.core.models import CellInfo, IllustrationData, OutPoint, Script, TransactionIllustrationConfig
from txviz.illustration.illustration import create_transaction_illustration
from txviz.io.output_writer import (
    write_data_json,
    write_scene_html,
    write_scene_json,
    write_scene_svg,
    write_summary_md,
)
from txviz.io.schemas import illustration_data_from_dict, illustration_data_to_dict, scene_to_dict
from txviz.io.svg import scene_to_svg

TX_HASH = "0x" + "cd" * 32
PREV_HASH = "0x" + "01" * 32


def _data() -> IllustrationData:
    lock_a = Script(code_hash="0x9bd7", args="0xaa", hash_type="type")
    lock_b = Script(code_hash="0x9bd7", args="0xbb", hash_type="type")
    return IllustrationData(
        inputs=[CellInfo("100000000000", lock_a, out_point=OutPoint(PREV_HASH, 0))],
        outputs=[
            CellInfo("60000000000", lock_b),
            CellInfo("39999000000", lock_a, type=Script("0x5e7a", "0x", "data1"), data="0x10"),
        ],
        tx_hash=TX_HASH,
    )


def _scene(data=None, **kwargs):
    return create_transaction_illustration(TransactionIllustrationConfig(data=data or _data(), **kwargs))


class SvgTests(unittest.TestCase):
    def test_svg_structure(self) -> None:
        svg = scene_to_svg(_scene())

        self.assertTrue(svg.startswith("<svg"))
        self.assertIn('xmlns="http://www.w3.org/2000/svg"', svg)
        self.assertIn('viewBox="-480 -30 960 60"', svg)
        self.assertEqual(svg.count("<path"), 3)
        self.assertEqual(svg.count("<circle"), 5)
        self.assertEqual(svg.count("<text"), 4)
        self.assertIn(">1000 CKB</text>", svg)
        self.assertIn(f'data-tx-hash="{PREV_HASH}"', svg)

    def test_hover_handlers_restore_resting_fill(self) -> None:
        scene = _scene()
        svg = scene_to_svg(scene)
        for g in scene.glyphs:
            self.assertIn(f"this.setAttribute('fill','{g.circle.fill}')", svg)
            self.assertIn(f"this.setAttribute('fill','{g.circle.hover_fill}')", svg)

    def test_labels_are_escaped(self) -> None:
        svg = scene_to_svg(_scene(render_transaction_info=lambda h: "<tx & co>"))
        self.assertIn("&lt;tx &amp; co&gt;", svg)
        self.assertNotIn("<tx & co>", svg)


class SchemaTests(unittest.TestCase):
    def test_scene_dict(self) -> None:
        d = scene_to_dict(_scene())

        self.assertEqual(d["viewBox"], [-480, -30, 960, 60])
        self.assertEqual([l["name"] for l in d["layers"]], [
            "inputs-links", "outputs-links", "inputs-nodes", "outputs-nodes",
        ])
        glyphs = [i for l in d["layers"] for i in l["items"] if i["type"] == "glyph"]
        self.assertEqual(len(glyphs), 5)
        self.assertEqual(glyphs[0]["txHash"], TX_HASH)
        self.assertEqual(glyphs[1]["label"]["text"], "1000 CKB")
        self.assertEqual(glyphs[1]["side"], "inputs")
        json.dumps(d)

    def test_data_dict_accepts_both_key_styles(self) -> None:
        camel = illustration_data_to_dict(_data())
        self.assertEqual(illustration_data_from_dict(camel), _data())

        snake = {
            "tx_hash": TX_HASH,
            "inputs": [{
                "capacity": "0x174876e800",
                "lock": {"code_hash": "0x9bd7", "args": "0xaa", "hash_type": "type"},
                "type": None,
                "out_point": {"tx_hash": PREV_HASH, "index": "0x2"},
            }],
        }
        data = illustration_data_from_dict(snake)
        self.assertEqual(data.tx_hash, TX_HASH)
        self.assertEqual(data.outputs, [])
        self.assertEqual(data.inputs[0].lock.code_hash, "0x9bd7")
        self.assertEqual(data.inputs[0].out_point, OutPoint(PREV_HASH, 2))
        self.assertEqual(data.inputs[0].data, "0x")


class WriterTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.out = os.path.join(self._tmp.name, "nested", "out")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _read(self, path: str) -> str:
        with open(path, encoding="utf-8") as f:
            return f.read()

    def test_writes_svg_json_and_html(self) -> None:
        scene = _scene()
        svg_path = write_scene_svg(scene, self.out)
        json_path = write_scene_json(scene, self.out)
        html_path = write_scene_html(scene, self.out, link_template="https://explorer/tx/{tx_hash}")

        self.assertTrue(self._read(svg_path).startswith("<?xml"))
        self.assertEqual(json.loads(self._read(json_path))["height"], 60)
        html = self._read(html_path)
        self.assertIn("<svg", html)
        self.assertIn('"https://explorer/tx/{tx_hash}"', html)
        self.assertNotIn("__SVG__", html)

    def test_html_without_link_template(self) -> None:
        html = self._read(write_scene_html(_scene(), self.out))
        self.assertIn("const linkTemplate = null;", html)

    def test_link_template_cannot_close_the_script(self) -> None:
        template = "https://explorer/</script><b>{tx_hash}"
        html = self._read(write_scene_html(_scene(), self.out, link_template=template))

        self.assertEqual(html.count("</script>"), 1)
        self.assertIn('"https://explorer/<\\/script><b>{tx_hash}"', html)

    def test_data_json_round_trips(self) -> None:
        path = write_data_json(_data(), self.out)
        with open(path, encoding="utf-8") as f:
            self.assertEqual(illustration_data_from_dict(json.load(f)), _data())

    def test_summary_reports_totals_and_fee(self) -> None:
        text = self._read(write_summary_md(_data(), self.out))
        self.assertIn("- Inputs: **1** (1000 CKB)", text)
        self.assertIn("- Outputs: **2** (999.99000000 CKB)", text)
        self.assertIn("- Fee: **0.01000000 CKB**", text)

    def test_summary_for_empty_transaction(self) -> None:
        text = self._read(write_summary_md(IllustrationData(tx_hash=""), self.out))
        self.assertIn("_No inputs (cellbase or unresolved)._", text)
        self.assertIn("_No outputs._", text)
        self.assertNotIn("Fee", text)


if __name__ == "__main__":
    unittest.main()
