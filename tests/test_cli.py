from click.testing import CliRunner

from grammergen.cli.main import main
from grammergen.core import GrammarNode
from grammergen.evolution import Checkpoint


def test_evolve_writes_checkpoint(tmp_path):
    corpus = tmp_path / "input.txt"
    corpus.write_text("ab\nabc\nb\n")
    output = tmp_path / "out.pkl"

    runner = CliRunner()
    result = runner.invoke(main, [
        "evolve", "-i", str(corpus), "-p", "4", "-n", "6",
        "--max-generations", "3", "--seed", "1", "-o", str(output), "--dump",
    ])

    assert result.exit_code == 0, result.output
    saved = Checkpoint.load(output)
    assert len(saved.trees) == 4
    assert saved.generation <= 3
    assert "(" in result.output


def test_evolve_reports_invalid_configuration(tmp_path):
    corpus = tmp_path / "input.txt"
    corpus.write_text("ab\n")

    result = CliRunner().invoke(main, ["evolve", "-i", str(corpus), "--elite-ratio", "1.5"])

    assert result.exit_code == 1
    assert "elite_ratio" in result.output


def test_show_and_match(tmp_path):
    path = tmp_path / "saved.pkl"
    best = GrammarNode.join(GrammarNode.literal("foo"), GrammarNode.literal("bar"))
    Checkpoint(trees=[best, GrammarNode.literal("x")], generation=2, best_fitness=1.0).save(path)

    runner = CliRunner()
    shown = runner.invoke(main, ["show", str(path), "--top", "1"])
    assert shown.exit_code == 0
    assert shown.output.splitlines() == [
        "# generation 2, best fitness 1.0",
        '(cat (word "foo") (word "bar"))',
    ]

    matched = runner.invoke(main, ["match", str(path), "foobar", "foo"])
    assert matched.exit_code == 0
    lines = matched.output.splitlines()
    assert lines[0] == "match\t1.0000\tfoobar"
    assert lines[1] == "no match\t0.5000\tfoo"


def test_show_and_match_report_unreadable_checkpoint(tmp_path):
    path = tmp_path / "garbage.pkl"
    path.write_bytes(b"\x00garbage")

    runner = CliRunner()
    for args in (["show", str(path)], ["match", str(path), "foo"]):
        result = runner.invoke(main, args)
        assert result.exit_code == 1
        assert "checkpoint" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
