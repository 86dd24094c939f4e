from routewatch.navdb.procedures import (
    ProcedureCandidate,
    ProcedureMatch,
    score_procedure,
    select_procedure,
    split_designator,
)


def test_split_designator():
    assert split_designator('ETARI1A') == ('ETARI', '1A')
    assert split_designator('ETARI') == ('ETARI', '')
    assert split_designator('123') == ('123', '')


def test_exact_match_outranks_everything():
    result = score_procedure('ETARI1A', ProcedureCandidate('ETARI1A'))
    assert result.match == ProcedureMatch.EXACT_MATCH
    # exact + token + prefix + suffix
    assert result.score == 165


def test_exact_match_ignores_suffix_after_slash():
    result = score_procedure('ETARI1A/26L', ProcedureCandidate('ETARI1A'))
    assert result.match == ProcedureMatch.EXACT_MATCH
    assert result.score == 115


def test_transition_is_part_of_the_key():
    result = score_procedure('ABC1DEF', ProcedureCandidate('ABC1', 'DEF'))
    assert result.match == ProcedureMatch.EXACT_MATCH


def test_prefix_and_suffix_matches():
    prefix = score_procedure('ETARI2B', ProcedureCandidate('ETARI1A'))
    assert prefix.match == ProcedureMatch.PREFIX_MATCH
    assert prefix.score == 10

    suffix = score_procedure('KEPER1A', ProcedureCandidate('ETARI1A'))
    assert suffix.match == ProcedureMatch.SUFFIX_MATCH
    assert suffix.score == 5


def test_no_match():
    result = score_procedure('KEPER2B', ProcedureCandidate('ETARI1A'))
    assert result.score == 0
    assert result.match == ProcedureMatch.NO_MATCH


def test_select_highest_score():
    candidates = [
        ProcedureCandidate('ETARI2B'),
        ProcedureCandidate('ETARI1A'),
        ProcedureCandidate('KEPER1A'),
    ]
    assert select_procedure('ETARI1A', candidates) == ProcedureCandidate('ETARI1A')


def test_select_tie_goes_to_first_candidate():
    candidates = [ProcedureCandidate('ETARI3C'), ProcedureCandidate('ETARI4D')]
    assert select_procedure('ETARI9Z', candidates) == ProcedureCandidate('ETARI3C')


def test_select_none_when_nothing_matches():
    assert select_procedure('KEPER2B', [ProcedureCandidate('ETARI1A')]) is None
    assert select_procedure('KEPER2B', []) is None
