import pytest

from kinship_py.consanguinity import (
    BASE_COEFFICIENTS,
    FactorSequence,
    base_coefficient,
    calculate_probabilities,
    coefficient_of_relationship,
    compound_consanguinity_factor,
    consanguinity_factor,
    describe_factor,
    gene_overlap_probability,
    inbreeding_coefficient,
    new_factor,
    scenario_consanguinity_factor,
)
from kinship_py.models import AncestorPath, GenerationTier, Person, RelationshipType, Sex
from kinship_py.pedigree_templates import find_scenario


def approx_eq(a, b, eps=1e-9):
    return abs(a - b) <= eps


def _path(anc, steps):
    return AncestorPath(person_ids=("a", anc, "b"), common_ancestor_id=anc, steps=steps)


def test_path_formulas():
    paths = [_path("x", 2), _path("y", 4)]
    assert approx_eq(coefficient_of_relationship(paths), 0.25 + 0.0625)
    assert approx_eq(inbreeding_coefficient(paths), 0.125 + 0.03125)


def test_path_formulas_with_inbred_ancestor():
    paths = [_path("x", 2)]
    assert approx_eq(coefficient_of_relationship(paths, {"x": 0.5}), 0.375)
    assert approx_eq(inbreeding_coefficient(paths, {"x": 0.5}), 0.1875)
    # ancestors missing from the map count as not inbred
    assert approx_eq(coefficient_of_relationship(paths, {"other": 0.5}), 0.25)


def test_no_paths_means_unrelated():
    assert coefficient_of_relationship([]) == 0.0
    assert inbreeding_coefficient([]) == 0.0


def test_gene_overlap_is_r():
    assert gene_overlap_probability(0.125) == 0.125


def test_base_coefficients():
    assert base_coefficient("siblings") == 0.5
    assert base_coefficient(RelationshipType.FIRST_COUSINS) == 0.125
    assert base_coefficient("second-cousins") == 0.03125
    assert base_coefficient("third-cousins") == 0.0078125
    assert base_coefficient("bogus") == 0.0
    assert set(BASE_COEFFICIENTS) == set(RelationshipType)


@pytest.mark.parametrize("rel", list(RelationshipType))
def test_baseline_without_consanguinity(rel):
    res = calculate_probabilities(Person("a", sex=Sex.M), Person("b", sex=Sex.F), rel)
    assert res.coefficient_of_relationship == BASE_COEFFICIENTS[rel]
    assert res.baseline_r == BASE_COEFFICIENTS[rel]
    assert res.delta_from_baseline == 0.0


@pytest.mark.parametrize("rel", list(RelationshipType))
@pytest.mark.parametrize("c", [0.0, 0.0625, 0.3])
def test_scalar_inbreeding_is_half_r(rel, c):
    res = calculate_probabilities(Person("a"), Person("b"), rel, c)
    assert approx_eq(res.inbreeding_coefficient, res.coefficient_of_relationship / 2)
    assert res.gene_overlap_probability == res.coefficient_of_relationship


def test_single_factor_is_ancestral_f():
    assert consanguinity_factor("first-cousins") == 0.0625
    assert consanguinity_factor(None) == 0.0


def test_compound_factors_are_additive():
    seq = FactorSequence()
    f = new_factor(seq, "grandparents", "first-cousins")
    single = compound_consanguinity_factor([f])
    assert approx_eq(compound_consanguinity_factor([f, f]), 2 * single)
    assert compound_consanguinity_factor([]) == 0.0


def test_generation_multipliers():
    seq = FactorSequence()
    parents = compound_consanguinity_factor([new_factor(seq, "parents", "siblings")])
    grand = compound_consanguinity_factor([new_factor(seq, "grandparents", "siblings")])
    great = compound_consanguinity_factor([new_factor(seq, "great-grandparents", "siblings")])
    assert approx_eq(parents, 0.25)
    assert approx_eq(grand, parents / 2)
    assert approx_eq(great, parents / 4)


def test_scenarios():
    assert scenario_consanguinity_factor(None) == 0.0
    assert scenario_consanguinity_factor(find_scenario("none")) == 0.0
    assert approx_eq(scenario_consanguinity_factor(find_scenario("parents-first-cousins")), 0.0625)
    assert approx_eq(scenario_consanguinity_factor(find_scenario("grandparents-siblings")), 0.125)


def test_siblings_with_parents_first_cousins():
    c = scenario_consanguinity_factor(find_scenario("parents-first-cousins"))
    res = calculate_probabilities(Person("a", sex=Sex.M), Person("b", sex=Sex.F), "siblings", c)
    assert approx_eq(res.coefficient_of_relationship, 0.53125)
    assert approx_eq(res.inbreeding_coefficient, 0.265625)
    assert approx_eq(res.delta_from_baseline, 0.03125)
    assert res.baseline_r == 0.5


def test_first_cousins_male_female():
    res = calculate_probabilities(Person("a", sex=Sex.M), Person("b", sex=Sex.F), "first-cousins")
    assert res.coefficient_of_relationship == 0.125
    assert res.inbreeding_coefficient == 0.0625
    assert res.x_linked_coefficient == 0.125
    assert res.y_linked_coefficient == 0.0


def test_factor_sequence_is_scoped():
    seq = FactorSequence()
    assert seq.next_id() == "factor-1"
    assert seq.next_id() == "factor-2"
    # a second owner starts over
    assert FactorSequence().next_id() == "factor-1"


def test_new_factor_description():
    f = new_factor(FactorSequence(), GenerationTier.GRANDPARENTS, RelationshipType.SIBLINGS)
    assert f.id == "factor-1"
    assert f.description == "Grandparents are Siblings"
    assert describe_factor("parents", "first-cousins") == "Parents are 1st Cousins"
