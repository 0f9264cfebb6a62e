import argparse
import json
import logging
import sys

from kinship_py.config import load_config
from kinship_py.consanguinity import FactorSequence, scenario_consanguinity_factor
from kinship_py.cousins import archetype_for, cousin_label
from kinship_py.models import DeclaredRelationshipType, GenerationTier, relationship_values
from kinship_py.paths import path_depths
from kinship_py.pedigree_templates import CONSANGUINITY_SCENARIOS, RELATIONSHIP_OPTIONS, build_template, find_scenario, relationship_option
from kinship_py.session import Session
from kinship_py.templating import render_report

SEXES = ["M", "F"]
DECLARED = [d.value for d in DeclaredRelationshipType]
TIERS = [t.value for t in GenerationTier]


def parse_declaration(s):
    """Parse 'A:B:type' into (A, B, type)."""
    parts = s.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("declaration must look like PERSON_A:PERSON_B:TYPE")
    a, b, kind = parts
    if kind not in DECLARED:
        raise argparse.ArgumentTypeError(f"unknown relationship type {kind!r} (choose from {', '.join(DECLARED)})")
    return a, b, kind


def parse_factor(s):
    """Parse 'tier:relationship' into (tier, relationship)."""
    parts = s.split(":")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("factor must look like TIER:RELATIONSHIP")
    tier, rel = parts
    if tier not in TIERS:
        raise argparse.ArgumentTypeError(f"unknown tier {tier!r} (choose from {', '.join(TIERS)})")
    if rel not in relationship_values():
        raise argparse.ArgumentTypeError(f"unknown relationship {rel!r}")
    return tier, rel


def build_session(args):
    session = Session.start(args.relationship, args.sex1, args.sex2)
    for pid in args.toggle or []:
        session = session.toggle_sex(pid)
    for a, b, kind in args.declare or []:
        session = session.declare(a, b, kind)
    sequence = FactorSequence()
    for tier, rel in args.factor or []:
        session = session.add_factor(sequence, tier, rel)
    return session


def list_relationships(cfg, args):
    for opt in RELATIONSHIP_OPTIONS:
        print(f"{opt.value.value:<28} r = {opt.base_coefficient:<10} {opt.label}: {opt.description}")


def list_scenarios(cfg, args):
    for s in CONSANGUINITY_SCENARIOS:
        print(f"{s.id:<28} {s.label} ({s.description})")


def show_template(cfg, args):
    store = build_template(args.relationship, args.sex1, args.sex2)
    graph = store.to_visible_graph()
    if args.json:
        print(json.dumps(graph.to_dict(), indent=2))
        return
    print(f"Targets: {store.target_pair[0]}, {store.target_pair[1]}")
    for pid, p in graph.persons.items():
        print(f"  gen {p.generation}  {pid:<12} {p.sex.value}  {p.label}")
    print("Edges:")
    for e in graph.edges:
        print(f"  {e.parent_id} -> {e.child_id}")


def evaluate(cfg, args):
    session = build_session(args)
    scenario = find_scenario(args.scenario)
    if args.scenario and scenario is None:
        print(f"Unknown scenario {args.scenario!r}.")
        return 2
    factor = session.consanguinity_factor() + scenario_consanguinity_factor(scenario)
    path_result = session.result()
    template_result = session.template_result(factor)
    labels = session.labels()

    if args.json:
        print(json.dumps({
            "labels": labels,
            "paths": [p.to_dict() for p in session.paths()],
            "result": path_result.to_dict(),
            "consanguinity_factor": factor,
            "template_result": template_result.to_dict() if template_result else None,
        }, indent=2))
        return 0

    option = relationship_option(session.base_relationship)
    if option is not None:
        print(f"{labels['person1']} and {labels['person2']}: {option.label} (baseline r = {option.base_coefficient})")
    print("Common ancestors:")
    paths = session.paths()
    if not paths:
        print("  (none)")
    for path in paths:
        da, db = path_depths(path)
        label, _, _ = cousin_label(da, db)
        arch = archetype_for(da, db)
        print(f"  {path.common_ancestor_id:<12} steps={path.steps}  {' > '.join(path.person_ids)}  [{label}{', ' + arch.value if arch else ''}]")
    if session.pedigree.defined_relationships:
        print("Defined relationships:")
        for rel in session.pedigree.defined_relationships:
            p1 = session.pedigree.label_of(rel.person1_id, rel.person1_id)
            p2 = session.pedigree.label_of(rel.person2_id, rel.person2_id)
            print(f"  {p1} <-> {p2}: {rel.type.value}")

    print()
    print("[pedigree]")
    print(render_report(path_result, labels["person1"], labels["person2"], cfg.templates_dir))
    if template_result is not None:
        print("[template]")
        print(render_report(template_result, labels["person1"], labels["person2"], cfg.templates_dir))
    return 0


def show_options(cfg, args):
    session = build_session(args)
    opts = session.options(args.person_a, args.person_b)
    if not opts:
        print(f"Person {args.person_a} or {args.person_b} not found.")
        return
    for opt in opts:
        print(f"{opt['value']:<16} {opt['label']}")


def serve(cfg, args):
    import uvicorn

    logging.info("serving kinship_py on %s:%s", args.host, args.port)
    uvicorn.run("kinship_py.web.app:app", host=args.host, port=args.port)


def _add_pedigree_args(p, cfg):
    p.add_argument("--relationship", "-r", choices=relationship_values(), default=cfg.default_relationship)
    p.add_argument("--sex1", choices=SEXES, default=cfg.person1_sex)
    p.add_argument("--sex2", choices=SEXES, default=cfg.person2_sex)
    p.add_argument("--toggle", action="append", metavar="PERSON_ID", help="Flip the sex of a person")
    p.add_argument("--declare", action="append", type=parse_declaration, metavar="A:B:TYPE",
                   help=f"Declare a relationship ({', '.join(DECLARED)})")
    p.add_argument("--factor", action="append", type=parse_factor, metavar="TIER:RELATIONSHIP",
                   help="Add an ancestral consanguinity factor")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Relatedness calculator for small pedigrees")
    parser.add_argument("--config", default=None, help="Path to a JSON config file")
    parser.add_argument("--log-level", default=None)
    pre, _ = parser.parse_known_args(argv)
    cfg = load_config(pre.config)
    logging.basicConfig(level=getattr(logging, str(pre.log_level or cfg.log_level).upper(), logging.WARNING))

    subparsers = parser.add_subparsers(dest="command")

    parser_rel = subparsers.add_parser("relationships", help="List relationship archetypes")
    parser_rel.set_defaults(func=list_relationships)

    parser_sc = subparsers.add_parser("scenarios", help="List consanguinity presets")
    parser_sc.set_defaults(func=list_scenarios)

    parser_tpl = subparsers.add_parser("template", help="Show the pedigree template for a relationship")
    parser_tpl.add_argument("--relationship", "-r", choices=relationship_values(), default=cfg.default_relationship)
    parser_tpl.add_argument("--sex1", choices=SEXES, default=cfg.person1_sex)
    parser_tpl.add_argument("--sex2", choices=SEXES, default=cfg.person2_sex)
    parser_tpl.add_argument("--json", action="store_true")
    parser_tpl.set_defaults(func=show_template)

    parser_eval = subparsers.add_parser("evaluate", help="Compute relatedness coefficients")
    _add_pedigree_args(parser_eval, cfg)
    parser_eval.add_argument("--scenario", default=None, help="Consanguinity preset id")
    parser_eval.add_argument("--json", action="store_true")
    parser_eval.set_defaults(func=evaluate)

    parser_opt = subparsers.add_parser("options", help="List declarations allowed for a pair")
    _add_pedigree_args(parser_opt, cfg)
    parser_opt.add_argument("person_a")
    parser_opt.add_argument("person_b")
    parser_opt.set_defaults(func=show_options)

    parser_serve = subparsers.add_parser("serve", help="Run the JSON HTTP API")
    parser_serve.add_argument("--host", default="127.0.0.1")
    parser_serve.add_argument("--port", type=int, default=8000)
    parser_serve.set_defaults(func=serve)

    args = parser.parse_args(argv)
    if args.command:
        return args.func(cfg, args) or 0
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
