"""
afsat Test Suite — core

Tests covering:
- Framework model: sizing, naming, attacker index
- SAT backend: formula copies, sessions
- Encoder / decoder
- Engine: complete, stable, preferred labellings
- APX bridge and presets
"""
import os
import sys
from itertools import product

import pytest

# Add repo root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from afsat.argumentation import (  # noqa: E402
    Acceptability,
    ApxBridge,
    ApxParseError,
    ArgumentationEngine,
    ArgumentationFramework,
    Attack,
    Labelling,
    PRESETS,
    Semantics,
    compute_labellings,
    get_preset,
)

IN, OUT, UNDEC = Acceptability.IN, Acceptability.OUT, Acceptability.UNDEC


def lab(*statuses):
    return Labelling(tuple(statuses))


def brute_force_complete(af):
    """Every labelling where IN iff all attackers OUT, OUT iff some attacker IN."""
    attackers = af.attacker_index()
    result = set()
    for statuses in product([IN, OUT, UNDEC], repeat=af.num_args):
        legal = True
        for i, status in enumerate(statuses):
            all_out = all(statuses[j] == OUT for j in attackers[i])
            some_in = any(statuses[j] == IN for j in attackers[i])
            if (status == IN) != all_out or (status == OUT) != some_in:
                legal = False
                break
        if legal:
            result.add(Labelling(tuple(statuses)))
    return result


def brute_force_preferred(af):
    complete = brute_force_complete(af)
    return {
        c for c in complete
        if not any(c.accepted < other.accepted for other in complete)
    }


SMALL_FRAMEWORKS = [
    [(0, 1)],
    [(0, 1), (1, 0)],
    [(0, 1), (1, 2), (2, 0)],
    [(0, 0), (0, 1)],
    [(0, 1), (1, 0), (1, 2), (2, 2)],
    [(0, 1), (1, 2), (2, 3), (3, 0), (4, 0)],
    [(0, 1), (1, 0), (2, 3), (3, 2), (1, 2)],
    [(0, 1), (0, 1), (1, 2)],
]


# ── Framework Model Tests ──────────────────────────────────────

class TestArgumentationFramework:
    def test_empty_framework(self):
        af = ArgumentationFramework.from_attacks([])
        assert af.num_args == 0
        assert af.attacks == ()
        assert af.attacker_index() == []

    def test_size_from_highest_index(self):
        af = ArgumentationFramework.from_attacks([(0, 3), (2, 1)])
        assert af.num_args == 4

    def test_accepts_attack_objects(self):
        af = ArgumentationFramework.from_attacks([Attack(1, 0)])
        assert af.num_args == 2
        assert af.attacks == (Attack(1, 0),)

    def test_attackers_of(self):
        af = ArgumentationFramework.from_attacks([(2, 0), (1, 0), (0, 1)])
        assert sorted(af.attackers_of(0)) == [1, 2]
        assert af.attackers_of(1) == [0]
        assert af.attackers_of(2) == []

    def test_attacker_index_keeps_duplicates(self):
        af = ArgumentationFramework.from_attacks([(0, 1), (0, 1)])
        assert af.attacker_index() == [[], [0, 0]]

    def test_attacker_index_order_independent_as_set(self):
        a = ArgumentationFramework.from_attacks([(0, 2), (1, 2), (2, 0)])
        b = ArgumentationFramework.from_attacks([(2, 0), (1, 2), (0, 2)])
        assert [set(x) for x in a.attacker_index()] == [set(x) for x in b.attacker_index()]

    def test_from_names_first_seen_order(self):
        af = ArgumentationFramework.from_names(["b", "a", "b", "c"], [("a", "c")])
        assert af.num_args == 3
        assert af.names_by_index() == ("b", "a", "c")
        assert af.attacks == (Attack(1, 2),)
        assert af.name_of(0) == "b"

    def test_named_size_includes_unattacked(self):
        af = ArgumentationFramework.from_named({"x": 0, "y": 1, "z": 2}, [(0, 1)])
        assert af.num_args == 3

    def test_named_rejects_out_of_range_attack(self):
        with pytest.raises(ValueError):
            ArgumentationFramework.from_named({"x": 0}, [(0, 1)])

    def test_named_rejects_non_bijective_table(self):
        with pytest.raises(ValueError):
            ArgumentationFramework.from_named({"x": 0, "y": 0}, [])

    def test_unnamed_has_no_names(self):
        af = ArgumentationFramework.from_attacks([(0, 1)])
        assert af.name_of(0) is None
        assert af.display_names() == ["0", "1"]

    def test_frameworks_are_immutable(self):
        af = ArgumentationFramework.from_attacks([(0, 1)])
        with pytest.raises(Exception):
            af.num_args = 5

    def test_fingerprint_depends_on_attacks(self):
        a = ArgumentationFramework.from_attacks([(0, 1)])
        b = ArgumentationFramework.from_attacks([(1, 0)])
        assert a.fingerprint != b.fingerprint
        assert a.fingerprint == ArgumentationFramework.from_attacks([(0, 1)]).fingerprint


# ── SAT Backend Tests ──────────────────────────────────────────

class TestSatBackend:
    def test_new_variables_are_fresh(self):
        from afsat.argumentation.sat import Formula
        f = Formula()
        assert f.new_variables(3) == [1, 2, 3]
        assert f.new_variables(2) == [4, 5]

    def test_copy_is_not_an_alias(self):
        from afsat.argumentation.sat import Formula
        f = Formula()
        x, y = f.new_variables(2)
        f.add_clause([x, y])
        g = f.copy()
        g.add_clause([-x])
        assert len(f) == 1
        assert len(g) == 2
        assert g.new_variables(1) == [3]

    def test_rejects_empty_clause(self):
        from afsat.argumentation.sat import Formula
        with pytest.raises(ValueError):
            Formula().add_clause([])

    def test_session_unsat(self):
        from afsat.argumentation.sat import Formula, SatSession
        f = Formula()
        (x,) = f.new_variables(1)
        f.add_clause([x])
        with SatSession(f) as session:
            assert session.solve() is not None
            session.add_clause([-x])
            assert session.solve() is None

    def test_session_extends_its_own_formula(self):
        from afsat.argumentation.sat import Formula, SatSession
        base = Formula()
        x, y = base.new_variables(2)
        base.add_clause([x, y])
        with SatSession(base.copy()) as session:
            session.add_clause([-x])
            model = session.solve()
            assert y in model
        assert len(base) == 1


# ── Encoder Tests ──────────────────────────────────────────────

class TestEncoding:
    def test_variable_layout(self):
        from afsat.argumentation.encoding import encode_complete
        encoded = encode_complete(ArgumentationFramework.from_attacks([(0, 1)]))
        v = encoded.variables
        assert v.inn == (1, 2)
        assert v.out == (3, 4)
        assert v.und == (5, 6)

    def test_unattacked_argument_forced_in(self):
        from afsat.argumentation.encoding import encode_complete
        encoded = encode_complete(ArgumentationFramework.from_attacks([(0, 1)]))
        v = encoded.variables
        clauses = encoded.formula.clauses
        assert [v.inn[0]] in clauses
        assert [-v.out[0]] in clauses
        assert [-v.und[0]] in clauses

    def test_stable_forbids_undecided(self):
        from afsat.argumentation.encoding import encode_stable
        encoded = encode_stable(ArgumentationFramework.from_attacks([(0, 1), (1, 0)]))
        for u in encoded.variables.und:
            assert [-u] in encoded.formula.clauses

    def test_decode_labelling(self):
        from afsat.argumentation.encoding import LabelVariables, decode_labelling
        v = LabelVariables(inn=(1, 2, 3), out=(4, 5, 6), und=(7, 8, 9))
        model = [1, -2, -3, -4, 5, -6, -7, -8, 9]
        assert decode_labelling(model, v) == lab(IN, OUT, UNDEC)

    def test_decode_prefers_in_then_out(self):
        from afsat.argumentation.encoding import LabelVariables, decode_labelling
        v = LabelVariables(inn=(1, 2), out=(3, 4), und=(5, 6))
        assert decode_labelling([1, -2, 3, 4, 5, -6], v) == lab(IN, OUT)
        assert decode_labelling([], v) == lab(UNDEC, UNDEC)


# ── Engine Tests ───────────────────────────────────────────────

class TestArgumentationEngine:
    def _make_engine(self):
        return ArgumentationEngine()

    def test_empty_framework(self):
        engine = self._make_engine()
        af = ArgumentationFramework.from_attacks([])
        assert engine.complete_labellings(af) == [Labelling()]
        assert engine.stable_labellings(af) == [Labelling()]
        assert engine.preferred_labellings(af) == [Labelling()]

    def test_no_attacks_all_accepted(self):
        engine = self._make_engine()
        af = ArgumentationFramework.from_names(["a", "b", "c"])
        assert engine.complete_labellings(af) == [lab(IN, IN, IN)]

    def test_single_attack(self):
        """0 → 1: complete = stable = [{0}]"""
        engine = self._make_engine()
        af = ArgumentationFramework.from_attacks([(0, 1)])
        assert engine.complete_labellings(af) == [lab(IN, OUT)]
        assert engine.stable_labellings(af) == [lab(IN, OUT)]
        assert engine.preferred_labellings(af) == [lab(IN, OUT)]

    def test_self_attack_is_undecided(self):
        engine = self._make_engine()
        af = ArgumentationFramework.from_attacks([(0, 0)])
        complete = engine.complete_labellings(af)
        assert complete == [lab(UNDEC)]
        assert engine.stable_labellings(af) == []
        assert engine.preferred_labellings(af) == [lab(UNDEC)]

    def test_mutual_attack(self):
        """a ↔ b: two labellings under every semantics."""
        engine = self._make_engine()
        af = ArgumentationFramework.from_attacks([(0, 1), (1, 0)])
        both = {lab(IN, OUT), lab(OUT, IN)}

        assert set(engine.complete_labellings(af)) == both | {lab(UNDEC, UNDEC)}
        assert set(engine.stable_labellings(af)) == both
        assert set(engine.preferred_labellings(af)) == both

    def test_reinstatement(self):
        """a → b → c: a defends c"""
        engine = self._make_engine()
        af = ArgumentationFramework.from_attacks([(0, 1), (1, 2)])
        assert engine.complete_labellings(af) == [lab(IN, OUT, IN)]

    def test_odd_cycle_degenerate_preferred(self):
        engine = self._make_engine()
        af = ArgumentationFramework.from_attacks([(0, 1), (1, 2), (2, 0)])
        assert engine.complete_labellings(af) == [lab(UNDEC, UNDEC, UNDEC)]
        assert engine.stable_labellings(af) == []
        assert engine.preferred_labellings(af) == [lab(UNDEC, UNDEC, UNDEC)]

    @pytest.mark.parametrize("attacks", SMALL_FRAMEWORKS)
    def test_complete_matches_brute_force(self, attacks):
        af = ArgumentationFramework.from_attacks(attacks)
        complete = self._make_engine().complete_labellings(af)
        assert len(complete) == len(set(complete))
        assert set(complete) == brute_force_complete(af)

    @pytest.mark.parametrize("attacks", SMALL_FRAMEWORKS)
    def test_stable_subset_of_complete(self, attacks):
        engine = self._make_engine()
        af = ArgumentationFramework.from_attacks(attacks)
        stable = engine.stable_labellings(af)
        assert set(stable) <= set(engine.complete_labellings(af))
        assert all(UNDEC not in s for s in stable)

    @pytest.mark.parametrize("attacks", SMALL_FRAMEWORKS)
    def test_preferred_are_maximal_complete(self, attacks):
        af = ArgumentationFramework.from_attacks(attacks)
        preferred = self._make_engine().preferred_labellings(af)
        assert len(preferred) == len(set(preferred))
        assert set(preferred) == brute_force_preferred(af)

    def test_preferred_on_presets(self):
        engine = self._make_engine()
        for index in range(3):
            af = get_preset(index).framework()
            assert set(engine.preferred_labellings(af)) == brute_force_preferred(af)

    def test_two_cycles_counts(self):
        engine = self._make_engine()
        af = get_preset(1).framework()
        assert len(engine.complete_labellings(af)) == 9
        assert len(engine.stable_labellings(af)) == 4
        assert len(engine.preferred_labellings(af)) == 4

    def test_enumerate_does_not_touch_formula(self):
        from afsat.argumentation.encoding import encode_complete
        encoded = encode_complete(ArgumentationFramework.from_attacks([(0, 1), (1, 0)]))
        before = len(encoded.formula)
        result = self._make_engine().enumerate(encoded.formula, encoded.variables)
        assert len(result) == 3
        assert len(encoded.formula) == before

    def test_resolve_produces_result(self):
        engine = self._make_engine()
        af = ArgumentationFramework.from_names(["a", "b"], [("a", "b"), ("b", "a")])
        result = engine.resolve(af, Semantics.PREFERRED)
        assert result.semantics == Semantics.PREFERRED
        assert set(result.extensions) == {frozenset({0}), frozenset({1})}
        assert result.framework_summary["stats"]["num_arguments"] == 2
        assert result.framework_summary["framework_hash"] == af.fingerprint
        assert result.resolution_time_ms >= 0

    def test_compute_labellings_dispatch(self):
        af = ArgumentationFramework.from_attacks([(0, 1)])
        for semantics in Semantics:
            assert compute_labellings(af, semantics) == [lab(IN, OUT)]

    def test_alternative_solver(self):
        af = ArgumentationFramework.from_attacks([(0, 1), (1, 0)])
        engine = ArgumentationEngine(solver_name="minisat22")
        assert len(engine.stable_labellings(af)) == 2


# ── Labelling Tests ────────────────────────────────────────────

class TestLabelling:
    def test_index_sets(self):
        labelling = lab(IN, OUT, UNDEC, IN)
        assert labelling.accepted == frozenset({0, 3})
        assert labelling.rejected == frozenset({1})
        assert labelling.undecided == frozenset({2})

    def test_to_dict_with_names(self):
        d = lab(IN, OUT).to_dict(["a", "b"])
        assert d["statuses"] == ["in", "out"]
        assert d["accepted"] == ["a"]
        assert d["rejected"] == ["b"]
        assert d["undecided"] == []

    def test_value_equality(self):
        assert lab(IN, OUT) == lab(IN, OUT)
        assert len({lab(IN, OUT), lab(IN, OUT)}) == 1


# ── APX Bridge Tests ───────────────────────────────────────────

class TestApxBridge:
    def test_parse_simple(self):
        report = ApxBridge().parse("arg(a).\narg(b).\natt(a,b).\n")
        af = report.framework
        assert af.names_by_index() == ("a", "b")
        assert af.attacks == (Attack(0, 1),)
        assert report.skipped == []

    def test_comments_whitespace_and_optional_period(self):
        text = "# header\n% apx comment\n\n  arg( x )  \narg(y).\natt( y , x )\n"
        af = ApxBridge().build_framework(text)
        assert af.names_by_index() == ("x", "y")
        assert af.attacks == (Attack(1, 0),)

    def test_attack_before_declaration(self):
        af = ApxBridge().build_framework("att(a,b).\narg(a).\narg(b).\n")
        assert af.attacks == (Attack(0, 1),)

    def test_duplicate_declarations_collapse(self):
        af = ApxBridge().build_framework("arg(a).\narg(a).\narg(b).\n")
        assert af.num_args == 2

    def test_lenient_skips_bad_lines(self):
        text = "arg(a).\nnonsense\natt(a).\natt(a,zz).\nfoo(a).\n"
        report = ApxBridge().parse(text)
        assert report.framework.num_args == 1
        assert report.framework.attacks == ()
        assert [s.line_no for s in report.skipped] == [2, 3, 5, 4]
        assert "undeclared" in report.skipped[-1].reason

    def test_strict_raises(self):
        with pytest.raises(ApxParseError) as exc:
            ApxBridge(strict=True).parse("arg(a).\natt(a,b).\n")
        assert exc.value.line_no == 2

    def test_empty_text(self):
        af = ApxBridge().build_framework("")
        assert af.num_args == 0

    def test_to_apx_reparses(self):
        af = ArgumentationFramework.from_names(["p", "q"], [("q", "p"), ("p", "p")])
        again = ApxBridge(strict=True).build_framework(ApxBridge.to_apx(af))
        assert again.names_by_index() == af.names_by_index()
        assert again.attacks == af.attacks

    @pytest.mark.parametrize("name", ["a,b", "f(x)", " pad", "two\nlines", ""])
    def test_to_apx_rejects_unwritable_names(self, name):
        af = ArgumentationFramework.from_names([name, "ok"], [(name, "ok")])
        with pytest.raises(ValueError):
            ApxBridge.to_apx(af)


# ── Preset Tests ───────────────────────────────────────────────

class TestPresets:
    def test_all_presets_parse_strictly(self):
        for preset in PRESETS:
            assert preset.framework().num_args > 0

    def test_random_preset_size(self):
        af = get_preset(3).framework()
        assert af.num_args == 30
        assert len(af.attacks) == 45

    def test_unknown_preset(self):
        with pytest.raises(IndexError):
            get_preset(len(PRESETS))
