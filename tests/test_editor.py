from kinship_py.editor import add_relationship, get_relationship_options, to_visible_graph
from kinship_py.models import DeclaredRelationshipType, RelationshipType
from kinship_py.pedigree_templates import build_template


def test_siblings_merges_both_parents():
    store = build_template("first-cousins")
    new = add_relationship(store, "p1", "p2", "siblings")
    assert new.resolve("father2") == new.resolve("father1") == "father1"
    assert new.resolve("mother2") == new.resolve("mother1") == "mother1"
    graph = to_visible_graph(new)
    fathers = [pid for pid in graph.persons if pid.startswith("father")]
    assert fathers == ["father1"]
    assert "mother2" not in graph.persons
    # the input store is untouched
    assert store.merges == {}
    assert store.defined_relationships == ()


def test_half_siblings_merges_fathers_only():
    store = add_relationship(build_template("first-cousins"), "p1", "p2", "half-siblings")
    assert store.resolve("father2") == "father1"
    assert store.resolve("mother2") == "mother2"
    graph = store.to_visible_graph()
    assert "mother1" in graph.persons and "mother2" in graph.persons
    assert "father2" not in graph.persons


def test_merge_does_not_touch_edges():
    store = build_template("first-cousins")
    new = add_relationship(store, "p1", "p2", "siblings")
    assert new.edges == store.edges


def test_siblings_with_missing_mother():
    # second-cousins parents are single fathers
    store = add_relationship(build_template("second-cousins"), "p1", "p2", "siblings")
    assert store.merges == {"parent2": "parent1"}


def test_already_shared_parents_are_not_merged():
    store = add_relationship(build_template("siblings"), "p1", "p2", "siblings")
    assert store.merges == {}
    assert len(store.defined_relationships) == 1


def test_non_structural_declarations_only_log():
    store = build_template("first-cousins")
    for kind in ("spouse", "unrelated", "first-cousins", "second-cousins"):
        store = add_relationship(store, "father1", "mother2", kind)
    assert store.merges == {}
    assert [r.type.value for r in store.defined_relationships] == ["spouse", "unrelated", "first-cousins", "second-cousins"]


def test_log_is_append_only():
    store = build_template("first-cousins")
    store = add_relationship(store, "p1", "p2", "unrelated")
    store = add_relationship(store, "p1", "p2", "half-siblings")
    store = add_relationship(store, "p1", "p2", "half-siblings")
    kinds = [r.type for r in store.defined_relationships]
    assert kinds == [
        DeclaredRelationshipType.UNRELATED,
        DeclaredRelationshipType.HALF_SIBLINGS,
        DeclaredRelationshipType.HALF_SIBLINGS,
    ]


def test_visible_links_for_declarations():
    store = build_template("first-cousins")
    store = add_relationship(store, "mother1", "mother2", "first-cousins")
    store = add_relationship(store, "gf-a", "gm-b", "spouse")
    links = store.to_visible_graph().consanguinity_links
    assert len(links) == 1
    assert links[0].relationship is RelationshipType.FIRST_COUSINS
    assert (links[0].person1_id, links[0].person2_id) == ("mother1", "mother2")


def test_options_same_generation():
    store = build_template("first-cousins")
    values = [o["value"] for o in get_relationship_options(store, "father1", "mother2")]
    assert values == ["unrelated", "siblings", "half-siblings", "first-cousins", "second-cousins"]


def test_options_cross_generation():
    store = build_template("avuncular")
    assert [o["value"] for o in get_relationship_options(store, "p1", "p2")] == ["unrelated"]
    assert get_relationship_options(store, "p1", "ghost") == []


def test_siblings_between_parents_merges_grandparents():
    store = build_template("first-cousins")
    before = len(store.to_visible_graph().persons)
    store = add_relationship(store, "mother1", "father2", "siblings")
    # gf-shared/gm-shared collapse into gf-a/gm-a
    assert len(store.to_visible_graph().persons) == before - 2
