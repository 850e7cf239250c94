from grammergen.core import EvaluationContext, GrammarNode, NodeKind


def foobar():
    return GrammarNode.join(GrammarNode.literal("foo"), GrammarNode.literal("bar"))


def test_join_matches_exact_concatenation_only():
    grammar = foobar()
    assert grammar.match(b"foobar")
    assert not grammar.match(b"foo")
    assert not grammar.match(b"foobarbaz")
    assert grammar.size() == 1 + 16 + 16


def test_optional_matches_empty_and_child():
    grammar = GrammarNode.optional(GrammarNode.literal("a"))
    assert grammar.match(b"")
    assert grammar.match(b"a")
    assert not grammar.match(b"b")
    # Optional counts its child twice
    assert grammar.size() == 1 + 2 * 16


def test_str_inputs_are_encoded():
    assert foobar().match("foobar")
    assert foobar().evaluate("foobar") == 1.0


def test_alternation_keeps_duplicate_candidates_in_order():
    grammar = GrammarNode.alternation(GrammarNode.literal("a"), GrammarNode.literal("ab"))
    ctx = EvaluationContext()
    assert grammar.parse(b"abc", ctx) == [b"bc", b"c"]

    same = GrammarNode.alternation(GrammarNode.literal("a"), GrammarNode.literal("a"))
    ctx = EvaluationContext()
    assert same.parse(b"ab", ctx) == [b"b", b"b"]
    assert ctx.match_count == 2
    # Each parse call adds the size of the node being parsed
    assert ctx.comparison_count == same.size() + 16 + 16


def test_optional_always_offers_identity_candidate():
    grammar = GrammarNode.optional(GrammarNode.literal("x"))
    ctx = EvaluationContext()
    assert grammar.parse(b"yz", ctx) == [b"yz"]
    assert ctx.match_count == 0


def test_join_backtracks_through_optional():
    # A greedy matcher would consume "a" in the optional and fail
    grammar = GrammarNode.join(
        GrammarNode.optional(GrammarNode.literal("a")),
        GrammarNode.literal("a"),
    )
    assert grammar.match(b"a")
    assert grammar.match(b"aa")
    assert not grammar.match(b"aaa")


def test_match_agrees_with_empty_candidate():
    grammar = GrammarNode.alternation(
        GrammarNode.literal("ab"),
        GrammarNode.join(GrammarNode.literal("a"), GrammarNode.optional(GrammarNode.literal("b"))),
    )
    for text in (b"a", b"ab", b"abb", b"b", b""):
        candidates = grammar.parse(text, EvaluationContext())
        assert grammar.match(text) == (b"" in candidates)


def test_evaluate_gives_partial_credit_below_one():
    grammar = foobar()
    assert grammar.evaluate(b"foobar") == 1.0
    # "foo" matched, "bar" did not
    assert grammar.evaluate(b"foobaz") == 0.5
    assert grammar.evaluate(b"xyz") == 0.0

    ctx = EvaluationContext()
    grammar.evaluate(b"foobaz", ctx)
    assert ctx.match_count == 1
    assert ctx.comparison_count == 33 + 16 + 16


def test_clone_is_equivalent_and_independent():
    source = foobar()
    copy = source.clone()
    assert copy.serialize() == source.serialize()
    for text in (b"foobar", b"foo", b""):
        assert copy.match(text) == source.match(text)
        assert copy.evaluate(text) == source.evaluate(text)

    copy.children[1] = GrammarNode.literal("baz")
    assert source.match(b"foobar")
    assert not source.match(b"foobaz")
    assert copy.match(b"foobaz")

    source.children[0].children[0] = GrammarNode.literal("zzz")
    assert copy.first.children[0] is None


def test_serialize_prefix_notation():
    assert foobar().serialize() == '(cat (word "foo") (word "bar"))'
    grammar = GrammarNode.alternation(
        GrammarNode.optional(GrammarNode.literal("a")),
        GrammarNode.literal('"'),
    )
    assert str(grammar) == '(or (opt (word "a")) (word "\\""))'
    assert GrammarNode.literal(b"\x00").serialize() == '(word "\\x00")'


def test_arity_and_names_per_kind():
    assert [kind.arity for kind in NodeKind] == [2, 2, 1, 0]
    assert [kind.symbol for kind in NodeKind] == ["cat", "or", "opt", "word"]
    assert GrammarNode.literal("a").arity == 0
    assert GrammarNode.optional(GrammarNode.literal("a")).arity == 1


def test_size_grows_with_nodes():
    inner = foobar()
    outer = GrammarNode.join(GrammarNode.literal("x"), inner.clone())
    assert inner.size() >= 1
    assert outer.size() > inner.size()
    assert outer.node_count() == 5
    assert outer.depth() == 3


def test_empty_slots_behave_as_empty_match():
    # Only seen before repair; JOIN passes the input through
    join = GrammarNode(NodeKind.JOIN, [GrammarNode.literal("a"), None])
    assert join.match(b"a")
    alternation = GrammarNode(NodeKind.ALTERNATION, [None, GrammarNode.literal("b")])
    assert alternation.match(b"b")
    assert not alternation.match(b"")


def test_join_parses_every_duplicate_first_candidate():
    doubled = GrammarNode.alternation(GrammarNode.literal("a"), GrammarNode.literal("a"))
    grammar = GrammarNode.join(doubled, GrammarNode.literal("b"))
    ctx = EvaluationContext()
    assert grammar.parse(b"ab", ctx) == [b"", b""]
    # Two hits on "a", then "b" once per duplicate path
    assert ctx.match_count == 4

    longer = GrammarNode.join(grammar, GrammarNode.literal("c"))
    assert longer.evaluate(b"abx") == 4 / 5
