import unittest

from txviz.core.models import CellInfo, IllustrationData, Script, TransactionNode
from txviz.illustration.layout import TreeLayout, compute_layout
from txviz.illustration.tree import HierarchyNode, build_trees


def _cell(capacity: str = "100000000") -> CellInfo:
    return CellInfo(capacity=capacity, lock=Script("0x00", "0xaa", "type"))


def _trees(n_inputs: int, n_outputs: int):
    return build_trees(IllustrationData(
        inputs=[_cell() for _ in range(n_inputs)],
        outputs=[_cell() for _ in range(n_outputs)],
        tx_hash="0x1",
    ))


def _attach(parent: HierarchyNode, count: int):
    kids = []
    for _ in range(count):
        child = HierarchyNode(TransactionNode("0x"), parent=parent)
        parent.children.append(child)
        kids.append(child)
    return kids


class TreeLayoutTests(unittest.TestCase):
    def test_siblings_are_centred_on_the_root(self) -> None:
        root, _ = _trees(3, 0)
        TreeLayout(dx=20, dy=100)(root)

        self.assertEqual(root.x, 0)
        self.assertEqual(root.y, 0)
        self.assertEqual([c.x for c in root.children], [-20, 0, 20])
        self.assertEqual([c.y for c in root.children], [100, 100, 100])

    def test_cousins_get_a_double_gap_and_parents_centre(self) -> None:
        root = HierarchyNode(TransactionNode("0xroot"))
        a, b = _attach(root, 2)
        a1, a2 = _attach(a, 2)
        b1, b2 = _attach(b, 2)

        TreeLayout(dx=10, dy=50)(root)

        self.assertEqual([n.x for n in (a1, a2, b1, b2)], [-20, -10, 10, 20])
        self.assertEqual((a.x, b.x, root.x), (-15, 15, 0))
        self.assertEqual((root.y, a.y, b1.y), (0, 50, 100))

    def test_subtrees_never_overlap(self) -> None:
        root = HierarchyNode(TransactionNode("0xroot"))
        left, mid, right = _attach(root, 3)
        _attach(_attach(left, 1)[0], 3)
        _attach(right, 4)

        TreeLayout(dx=1, dy=1)(root)

        by_depth = {}
        for n in root:
            by_depth.setdefault(n.depth, []).append(n.x)
        for depth, xs in by_depth.items():
            with self.subTest(depth=depth):
                self.assertEqual(xs, sorted(xs))
                gaps = [b - a for a, b in zip(xs, xs[1:])]
                self.assertTrue(all(g >= 1 - 1e-9 for g in gaps), gaps)


class ComputeLayoutTests(unittest.TestCase):
    def test_one_input_one_output(self) -> None:
        inputs, outputs = _trees(1, 1)
        result = compute_layout(inputs, outputs, width=960, dx=20)

        self.assertEqual(result.dy, 320)
        self.assertEqual(inputs.children[0].y, 320)
        self.assertEqual((result.x0, result.x1), (0, 0))
        self.assertEqual(result.height, 40)
        self.assertEqual(result.view_box, (-480, -20, 960, 40))

    def test_extent_spans_both_trees(self) -> None:
        inputs, outputs = _trees(1, 5)
        result = compute_layout(inputs, outputs, width=960, dx=20)

        self.assertEqual((result.x0, result.x1), (-40, 40))
        self.assertEqual(result.height, 120)

    def test_empty_transaction_has_minimum_canvas(self) -> None:
        inputs, outputs = _trees(0, 0)
        result = compute_layout(inputs, outputs, width=960, dx=20)

        self.assertEqual(result.dy, 960)
        self.assertEqual(result.height, 40)
        for v in result.view_box:
            self.assertEqual(v, v)  # not NaN

    def test_view_box_centres_the_transaction_when_depths_match(self) -> None:
        for n, m in [(0, 0), (1, 1), (3, 8)]:
            with self.subTest(n=n, m=m):
                result = compute_layout(*_trees(n, m), width=960, dx=20)
                min_x, _, w, _ = result.view_box
                self.assertEqual(min_x + w / 2, 0)

    def test_lopsided_trees_stay_inside_the_view_box(self) -> None:
        # a cellbase tx has outputs only; a burn-everything tx inputs only
        for n, m in [(0, 1), (0, 4), (1, 0), (5, 0)]:
            with self.subTest(n=n, m=m):
                inputs, outputs = _trees(n, m)
                result = compute_layout(inputs, outputs, width=960, dx=20)
                min_x, min_y, w, h = result.view_box
                points = [(-p.y, p.x) for p in inputs.each()] + [(p.y, p.x) for p in outputs.each()]
                for px, py in points:
                    self.assertTrue(min_x < px < min_x + w, (px, result.view_box))
                    self.assertTrue(min_y < py < min_y + h, (py, result.view_box))

    def test_lopsided_view_box_origin(self) -> None:
        self.assertEqual(compute_layout(*_trees(0, 2), width=960, dx=20).view_box[0], -240)
        self.assertEqual(compute_layout(*_trees(2, 0), width=960, dx=20).view_box[0], -720)

    def test_height_at_least_two_slots(self) -> None:
        for n, m in [(0, 0), (1, 0), (0, 1), (2, 7)]:
            with self.subTest(n=n, m=m):
                result = compute_layout(*_trees(n, m), width=960, dx=20)
                self.assertGreaterEqual(result.height, 40)


if __name__ == "__main__":
    unittest.main()
