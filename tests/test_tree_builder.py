import unittest

from txviz.core.enums import HashType
from txviz.core.models import CellInfo, CellNode, IllustrationData, OutPoint, Script, TransactionNode
from txviz.illustration.tree import build_trees, hierarchy


def _cell(capacity: str, args: str = "0xaa") -> CellInfo:
    return CellInfo(
        capacity=capacity,
        lock=Script(code_hash="0x9bd7", args=args, hash_type="type"),
        data="0x",
    )


class BuildTreesTests(unittest.TestCase):
    def test_inputs_and_outputs_hang_off_separate_roots(self) -> None:
        data = IllustrationData(
            inputs=[_cell("1"), _cell("2")],
            outputs=[_cell("3")],
            tx_hash="0xabc",
        )
        inputs, outputs = build_trees(data)

        self.assertIsInstance(inputs.data, TransactionNode)
        self.assertEqual(inputs.data.tx_hash, "0xabc")
        self.assertEqual([c.data.capacity for c in inputs.children], ["1", "2"])

        self.assertEqual(outputs.data.tx_hash, "")
        self.assertEqual([c.data.capacity for c in outputs.children], ["3"])

    def test_cell_nodes_carry_every_cell_field(self) -> None:
        op = OutPoint(tx_hash="0xprev", index=3)
        cell = CellInfo(
            capacity="10",
            lock=Script("0x01", "0xaa", HashType.DATA1.value),
            type=Script("0x02", "0xbb", HashType.TYPE.value),
            data="0xdead",
            out_point=op,
        )
        inputs, _ = build_trees(IllustrationData(inputs=[cell], tx_hash="0x1"))
        node = inputs.children[0].data

        self.assertIsInstance(node, CellNode)
        self.assertEqual(node.kind, "cell")
        self.assertEqual(node.lock, cell.lock)
        self.assertEqual(node.type, cell.type)
        self.assertEqual(node.data, "0xdead")
        self.assertEqual(node.out_point, op)

    def test_depth_height_and_links(self) -> None:
        inputs, outputs = build_trees(IllustrationData(inputs=[_cell("1"), _cell("2")], tx_hash="0x1"))

        self.assertEqual(inputs.height, 1)
        self.assertEqual(outputs.height, 0)
        self.assertEqual([n.depth for n in inputs], [0, 1, 1])
        self.assertEqual(len(inputs.links()), 2)
        self.assertEqual(outputs.links(), [])
        for parent, child in inputs.links():
            self.assertIs(parent, inputs)
            self.assertIs(child.parent, inputs)

    def test_empty_transaction(self) -> None:
        inputs, outputs = build_trees(IllustrationData(tx_hash="0x1"))
        self.assertEqual(inputs.descendants(), [inputs])
        self.assertEqual(outputs.leaves(), [outputs])

    def test_nested_hierarchy_orders(self) -> None:
        leaf = CellNode.from_cell(_cell("1"))
        root = hierarchy(TransactionNode("0xroot", children=(leaf, leaf, leaf)))
        self.assertEqual(len(list(root.each_before())), 4)
        self.assertIs(list(root.each_after())[-1], root)


if __name__ == "__main__":
    unittest.main()
