"""JSON HTTP adapter around the kinship engine.

The adapter is stateless: a request carries the whole command sequence
(template, sex toggles, declarations, consanguinity factors) and gets back
the visible graph and the results. Drawing and input handling belong to the
client.
"""
from fastapi import FastAPI, HTTPException, Body
from fastapi.responses import PlainTextResponse
from typing import Any, Dict, List, Optional
import logging

from ..config import load_config
from ..consanguinity import FactorSequence, scenario_consanguinity_factor
from ..cousins import archetype_for, cousin_label
from ..models import AncestorPath
from ..paths import path_depths
from ..pedigree_templates import CONSANGUINITY_SCENARIOS, RELATIONSHIP_OPTIONS, build_template, find_scenario
from ..session import Session
from ..templating import render_report

cfg = load_config()
logging.basicConfig(level=getattr(logging, str(cfg.log_level).upper(), logging.INFO))

app = FastAPI(title="kinship-py")


def _describe_path(path: AncestorPath) -> Dict[str, Any]:
    da, db = path_depths(path)
    label, _, _ = cousin_label(da, db)
    archetype = archetype_for(da, db)
    d = path.to_dict()
    d["label"] = label
    d["archetype"] = archetype.value if archetype else None
    return d


def _list_of(payload: Dict[str, Any], key: str, kind: type) -> List[Any]:
    """Return payload[key] as a list of `kind` items; raise ValueError otherwise."""
    value = payload.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, kind) for v in value):
        raise ValueError(f"{key} must be a list of {'objects' if kind is dict else 'strings'}")
    return value


def _person_id(d: Dict[str, Any], key: str) -> str:
    value = d[key]
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def session_from_payload(payload: Dict[str, Any]) -> Session:
    """Replay the commands described by payload onto a fresh Session.

    Raises ValueError / KeyError on malformed input.
    """
    session = Session.start(
        payload.get("relationship") or cfg.default_relationship,
        payload.get("person1_sex") or cfg.person1_sex,
        payload.get("person2_sex") or cfg.person2_sex,
    )
    for pid in _list_of(payload, "toggles", str):
        session = session.toggle_sex(pid)
    for decl in _list_of(payload, "declarations", dict):
        session = session.declare(_person_id(decl, "person1_id"), _person_id(decl, "person2_id"), decl["type"])
    sequence = FactorSequence()
    for factor in _list_of(payload, "factors", dict):
        session = session.add_factor(sequence, factor.get("generation", "parents"), factor["relationship"])
    return session


@app.get("/relationships")
def relationships() -> List[Dict[str, Any]]:
    return [opt.to_dict() for opt in RELATIONSHIP_OPTIONS]


@app.get("/scenarios")
def scenarios() -> List[Dict[str, Any]]:
    return [s.to_dict() for s in CONSANGUINITY_SCENARIOS]


@app.get("/template/{relationship}")
def template(relationship: str, sex1: str = "M", sex2: str = "F") -> Dict[str, Any]:
    try:
        store = build_template(relationship, sex1, sex2)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"pedigree": store.to_dict(), "graph": store.to_visible_graph().to_dict()}


@app.post("/evaluate")
def evaluate(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    try:
        session = session_from_payload(payload)
        scenario_id = payload.get("scenario")
        scenario = find_scenario(scenario_id)
        if scenario_id and scenario is None:
            raise ValueError(f"unknown scenario: {scenario_id}")
    except (ValueError, KeyError) as e:
        logging.info("rejected evaluate request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    factor = session.consanguinity_factor() + scenario_consanguinity_factor(scenario)
    template_result = session.template_result(factor)
    return {
        "graph": session.graph().to_dict(),
        "labels": session.labels(),
        "paths": [_describe_path(p) for p in session.paths()],
        "result": session.result().to_dict(),
        "consanguinity_factor": factor,
        "template_result": template_result.to_dict() if template_result else None,
        "defined_relationships": [r.to_dict() for r in session.pedigree.defined_relationships],
    }


@app.post("/options")
def options(payload: Dict[str, Any] = Body(...)) -> List[Dict[str, str]]:
    try:
        session = session_from_payload(payload)
        return session.options(_person_id(payload, "person1_id"), _person_id(payload, "person2_id"))
    except (ValueError, KeyError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/report", response_class=PlainTextResponse)
def report(relationship: Optional[str] = None, sex1: Optional[str] = None, sex2: Optional[str] = None, scenario: Optional[str] = None) -> str:
    try:
        session = Session.start(relationship or cfg.default_relationship, sex1 or cfg.person1_sex, sex2 or cfg.person2_sex)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    sc = find_scenario(scenario)
    if scenario and sc is None:
        raise HTTPException(status_code=404, detail=f"unknown scenario: {scenario}")
    result = session.template_result(scenario_consanguinity_factor(sc))
    labels = session.labels()
    return render_report(result, labels["person1"], labels["person2"], cfg.templates_dir)
