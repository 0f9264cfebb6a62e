from kinship_py.models import DeclaredRelationshipType, NodeRelationship, ParentChildEdge, Person, RelationshipType, Sex
from kinship_py.pedigree import PedigreeStore
from kinship_py.pedigree_templates import build_template


def test_resolve_unmapped_returns_input():
    store = PedigreeStore()
    assert store.resolve("nobody") == "nobody"


def test_resolve_follows_chain():
    store = PedigreeStore(merges={"a": "b", "b": "c"})
    assert store.resolve("a") == "c"
    assert store.resolve("b") == "c"
    assert store.resolve("c") == "c"


def test_resolve_terminates_on_cycle():
    store = PedigreeStore(merges={"a": "b", "b": "a"})
    assert store.resolve("a") in ("a", "b")
    assert store.resolve("b") in ("a", "b")


def test_with_merge_refuses_same_node():
    store = PedigreeStore(merges={"a": "b"})
    assert store.with_merge("b", "a") is store
    assert store.with_merge("a", "b") is store


def test_with_merge_is_copy_on_write():
    store = build_template("siblings")
    merged = store.with_merge("gf2", "gf1")
    assert store.merges == {}
    assert merged.merges == {"gf2": "gf1"}


def test_toggle_sex_returns_new_store():
    store = build_template("siblings", "M", "F")
    toggled = store.toggle_sex("p1")
    assert store.persons["p1"].sex is Sex.M
    assert toggled.persons["p1"].sex is Sex.F
    assert toggled.toggle_sex("unknown") is toggled


def test_label_fallback():
    store = build_template("siblings")
    assert store.label_of("p1", "Person A") == "Sibling A"
    assert store.label_of("ghost", "Person A") == "Person A"


def test_visible_graph_hides_merged_and_collapses_edges():
    store = build_template("first-cousins").with_merge("father2", "father1")
    graph = store.to_visible_graph()
    assert "father2" not in graph.persons
    assert "father1" in graph.persons
    # both edges gf-shared -> father1/father2 collapse into one
    pairs = [(e.parent_id, e.child_id) for e in graph.edges]
    assert pairs.count(("gf-shared", "father1")) == 1
    assert ("father1", "p2") in pairs
    assert len(pairs) == len(set(pairs))
    # history stays intact in the store itself
    assert "father2" in store.persons
    assert ParentChildEdge("father2", "p2") in store.edges


def test_visible_graph_links():
    store = build_template("siblings")
    for kind in DeclaredRelationshipType:
        store = store.with_relationship(NodeRelationship("gf1", "gf2", kind))
    links = store.to_visible_graph().consanguinity_links
    assert [link.relationship for link in links] == [
        RelationshipType.SIBLINGS,
        RelationshipType.HALF_SIBLINGS,
        RelationshipType.FIRST_COUSINS,
        RelationshipType.SECOND_COUSINS,
    ]


def test_visible_graph_is_idempotent():
    store = build_template("double-first-cousins").with_merge("mother2", "mother1")
    assert store.to_visible_graph() == store.to_visible_graph()


def test_parents_of_resolves_and_dedupes():
    store = PedigreeStore(
        persons={pid: Person(id=pid) for pid in ("c", "p", "q")},
        edges=(ParentChildEdge("p", "c"), ParentChildEdge("q", "c")),
        merges={"q": "p"},
    )
    assert store.parents_of("c") == ["p"]


def test_toggle_sex_follows_merges():
    store = build_template("first-cousins").with_merge("father2", "father1")
    toggled = store.toggle_sex("father2")
    assert toggled.persons["father1"].sex is Sex.F
    assert toggled.persons["father2"].sex is Sex.M
    assert toggled.to_visible_graph().persons["father1"].sex is Sex.F
