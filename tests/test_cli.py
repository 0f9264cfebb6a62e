import json

import pytest

from cli.main import main


def approx_eq(a, b, eps=1e-9):
    return abs(a - b) <= eps


def test_relationships(capsys):
    assert main(["relationships"]) == 0
    out = capsys.readouterr().out
    assert "first-cousins" in out
    assert "Double 1st Cousins" in out


def test_scenarios(capsys):
    main(["scenarios"])
    assert "parents-first-cousins" in capsys.readouterr().out


def test_template_json(capsys):
    main(["template", "-r", "avuncular", "--json"])
    graph = json.loads(capsys.readouterr().out)
    assert graph["persons"]["p1"]["generation"] == 1
    assert {"parent_id": "sibling", "child_id": "p2"} in graph["edges"]


def test_evaluate_json_with_scenario(capsys):
    rc = main(["evaluate", "-r", "siblings", "--sex1", "M", "--sex2", "F", "--scenario", "parents-first-cousins", "--json"])
    assert rc == 0
    body = json.loads(capsys.readouterr().out)
    assert approx_eq(body["template_result"]["coefficient_of_relationship"], 0.53125)
    assert approx_eq(body["template_result"]["inbreeding_coefficient"], 0.265625)
    assert body["result"]["baseline_r"] == 0.5


def test_evaluate_text(capsys):
    rc = main(["evaluate", "-r", "first-cousins", "--declare", "p1:p2:half-siblings", "--factor", "parents:first-cousins"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "Cousin A and Cousin B: 1st Cousins (baseline r = 0.125)" in out
    assert "Common ancestors:" in out
    assert "father1" in out
    assert "Cousin A <-> Cousin B: half-siblings" in out
    assert "[template]" in out


def test_evaluate_unknown_scenario(capsys):
    assert main(["evaluate", "--scenario", "bogus"]) == 2


def test_bad_declaration_is_a_usage_error():
    with pytest.raises(SystemExit):
        main(["evaluate", "--declare", "p1:p2"])
    with pytest.raises(SystemExit):
        main(["evaluate", "--factor", "cousins:siblings"])


def test_options(capsys):
    main(["options", "-r", "avuncular", "p1", "p2"])
    out = capsys.readouterr().out
    assert "unrelated" in out
    assert "siblings" not in out


def test_toggle(capsys):
    main(["evaluate", "-r", "siblings", "--sex1", "M", "--sex2", "F", "--toggle", "p2", "--json"])
    body = json.loads(capsys.readouterr().out)
    assert body["result"]["y_linked_coefficient"] == 1.0


def test_evaluate_text_without_option_label(capsys):
    main(["evaluate", "-r", "parent-child"])
    out = capsys.readouterr().out
    assert "baseline r =" not in out
    assert "Common ancestors:" in out
