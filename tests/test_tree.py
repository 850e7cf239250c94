import random

import pytest

from grammergen.core import (
    GrammarNode,
    NodeKind,
    Slot,
    flatten,
    is_consistent,
    random_subtree,
    repair,
    walk_tree,
)


def sample_tree():
    return GrammarNode.join(
        GrammarNode.literal("a"),
        GrammarNode.optional(GrammarNode.literal("b")),
    )


def test_flatten_is_preorder_with_root_first():
    tree = sample_tree()
    slots = flatten(tree)
    assert [slot.node.name for slot in slots] == ["cat", "word", "opt", "word"]
    assert slots[0].node is tree
    assert [node for node in walk_tree(tree)] == [slot.node for slot in slots]


def test_slot_assignment_rewires_parent():
    tree = sample_tree()
    slots = flatten(tree)
    slots[1].node = GrammarNode.literal("z")
    assert tree.serialize() == '(cat (word "z") (opt (word "b")))'

    # Replacing the root slot gives a new root
    slots[0].node = GrammarNode.literal("root")
    assert slots[0].node.serialize() == '(word "root")'


def test_slot_swap_exchanges_subtrees():
    left = Slot.root(GrammarNode.literal("l"))
    right = Slot.root(GrammarNode.literal("r"))
    left.swap(right)
    assert left.node.payload == b"r"
    assert right.node.payload == b"l"


def test_walk_tree_orders():
    tree = sample_tree()
    assert [n.name for n in walk_tree(tree, "post")] == ["word", "word", "opt", "cat"]
    assert [n.name for n in walk_tree(tree, "bfs")] == ["cat", "word", "opt", "word"]
    with pytest.raises(ValueError):
        list(walk_tree(tree, "sideways"))


def test_random_subtree_picks_from_tree():
    tree = sample_tree()
    nodes = {id(node) for node in walk_tree(tree)}
    rng = random.Random(3)
    for _ in range(20):
        assert id(random_subtree(tree, rng).node) in nodes


def test_repair_enforces_arity():
    # A literal with stale children, an optional with a second child
    stale = GrammarNode(NodeKind.LITERAL, [GrammarNode.literal("x"), GrammarNode.literal("y")], b"a")
    crowded = GrammarNode(NodeKind.OPTIONAL, [stale, GrammarNode.literal("z")])
    tree = GrammarNode.join(crowded, GrammarNode.literal("c"))
    assert not is_consistent(tree)

    repair(tree)
    assert is_consistent(tree)
    assert tree.serialize() == '(cat (opt (word "a")) (word "c"))'


def test_repair_fills_missing_children_only_with_fill():
    tree = GrammarNode(NodeKind.JOIN, [GrammarNode.literal("a"), None])
    repair(tree)
    assert not is_consistent(tree)

    repair(tree, fill=lambda: GrammarNode.literal("f"))
    assert is_consistent(tree)
    assert tree.second.payload == b"f"


def test_repair_is_idempotent():
    tree = GrammarNode(NodeKind.ALTERNATION, [
        GrammarNode(NodeKind.LITERAL, [GrammarNode.literal("x"), None], b"a"),
        GrammarNode(NodeKind.OPTIONAL, [None, GrammarNode.literal("y")]),
    ])
    fill = lambda: GrammarNode.literal("f")
    once = repair(tree, fill).serialize()
    twice = repair(tree, fill).serialize()
    assert once == twice
    assert is_consistent(tree)
