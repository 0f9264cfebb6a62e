"""Small example script that walks through a kinship session.

Builds the first-cousins template, prints the common-ancestor paths and the
results, then declares the two cousins' fathers to be the same person (by
declaring the cousins half-siblings) and prints the new results.

Run:
    python scripts/example_relationships.py
"""
from pathlib import Path
from pprint import pprint
import sys

# Ensure repo root is on sys.path when running this script directly
repo_root = Path(__file__).resolve().parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from kinship_py.consanguinity import FactorSequence
from kinship_py.cousins import cousin_label
from kinship_py.paths import path_depths
from kinship_py.session import Session
from kinship_py.templating import render_report


def show(session: Session, title: str):
    print(f"== {title}")
    for path in session.paths():
        label, _, _ = cousin_label(*path_depths(path))
        print(f"  via {path.common_ancestor_id}: steps={path.steps} ({label})")
    labels = session.labels()
    print(render_report(session.result(), labels["person1"], labels["person2"]))


def main():
    session = Session.start("first-cousins", "M", "F")
    show(session, "first cousins")

    session = session.declare("p1", "p2", "half-siblings")
    show(session, "after declaring half-siblings")

    print("Visible graph:")
    pprint(session.graph().to_dict()["edges"])

    seq = FactorSequence()
    session = session.reset().add_factor(seq, "parents", "first-cousins").add_factor(seq, "grandparents", "siblings")
    print("\nFactors:", [f.description for f in session.factors])
    labels = session.labels()
    print(render_report(session.template_result(), labels["person1"], labels["person2"]))


if __name__ == "__main__":
    main()
