from datetime import date, timedelta
from fractions import Fraction

import pytest

from juris_calc.core.fraction_table import build_sentence
from juris_calc.core.sentence import (
    compute_sentence_dates,
    compute_simple_sentence,
    custody_status,
    days_served_until,
    remission_until,
    simple_sentence_case,
)
from juris_calc.core.types import Crime, CustodyEpisode, RemissionCredit

DAY_ZERO = date(2020, 1, 1)


def day(n: int) -> date:
    return DAY_ZERO + timedelta(days=n)


def make_sentence(years=6, months=0, days=0, classification="primary", regime="closed"):
    crime = Crime(
        description="Tráfico de drogas",
        article="Art. 33 Lei 11.343/06",
        years=years,
        months=months,
        days=days,
        classification=classification,
    )
    return build_sentence([crime], regime)


def test_continuous_custody_without_remission():
    sentence = make_sentence()
    episodes = [CustodyEpisode(start=day(0))]

    result = compute_sentence_dates(sentence, episodes, [], day(400))

    assert sentence.total_days == 2190
    assert result.days_served_today == 400
    assert result.progression_days_required == 365
    assert result.progression_date == day(365)
    assert result.release_date == day(730)
    assert result.termination_date == day(2190)
    assert result.days_to_progression == 0
    assert result.days_to_termination == 1790
    assert result.custody_status == "in_custody"
    assert result.next_regime == "semi_open"


def test_remission_credit_moves_progression_earlier():
    sentence = make_sentence()
    episodes = [CustodyEpisode(start=day(0))]
    remissions = [RemissionCredit(credit_date=day(200), days=100)]

    result = compute_sentence_dates(sentence, episodes, remissions, day(400))

    assert result.progression_date == day(265)
    assert result.release_date == day(630)
    assert result.termination_date == day(2090)
    assert result.remission_today == 100
    assert result.days_to_termination == 2190 - 500


def test_calculation_on_termination_date_is_complete():
    sentence = make_sentence()
    episodes = [CustodyEpisode(start=day(0))]

    first = compute_sentence_dates(sentence, episodes, [], day(400))
    again = compute_sentence_dates(sentence, episodes, [], first.termination_date)

    assert again.days_served_today == sentence.total_days
    assert again.days_to_termination == 0
    assert again.days_to_progression == 0
    assert again.termination_date == first.termination_date


def test_same_inputs_same_result():
    sentence = make_sentence(classification="heinous_repeat")
    episodes = [CustodyEpisode(start=day(0), end=day(90)), CustodyEpisode(start=day(120))]
    remissions = [RemissionCredit(credit_date=day(150), days=20)]

    assert compute_sentence_dates(sentence, episodes, remissions, day(300)) == compute_sentence_dates(
        sentence, episodes, remissions, day(300)
    )


def test_more_remission_never_delays_any_date():
    sentence = make_sentence(years=3, classification="repeat_offender")
    episodes = [CustodyEpisode(start=day(0), end=day(180)), CustodyEpisode(start=day(250))]

    previous = None
    for credit in (0, 10, 45, 120, 400):
        remissions = [RemissionCredit(credit_date=day(100), days=credit)]
        result = compute_sentence_dates(sentence, episodes, remissions, day(300))
        if previous is not None:
            assert result.progression_date <= previous.progression_date
            assert result.release_date <= previous.release_date
            assert result.termination_date <= previous.termination_date
        previous = result


@pytest.mark.parametrize("classification", ["primary", "repeat_offender", "heinous_primary", "heinous_repeat"])
def test_key_dates_are_ordered(classification):
    sentence = make_sentence(years=8, months=4, classification=classification)
    episodes = [CustodyEpisode(start=day(0), end=day(300)), CustodyEpisode(start=day(400))]
    remissions = [RemissionCredit(credit_date=day(350), days=30)]

    result = compute_sentence_dates(sentence, episodes, remissions, day(500))

    assert result.progression_date <= result.release_date <= result.termination_date


def test_credit_after_as_of_at_liberty_keeps_dates_ordered():
    sentence = make_sentence(years=0, days=100)
    episodes = [CustodyEpisode(start=day(0), end=day(20))]
    remissions = [RemissionCredit(credit_date=day(200), days=20)]

    result = compute_sentence_dates(sentence, episodes, remissions, day(30))

    assert result.progression_date == day(17)
    assert result.release_date == day(200)
    assert result.termination_date == day(260)
    assert result.progression_date <= result.release_date <= result.termination_date
    assert result.days_to_termination == 80


def test_larger_credit_after_as_of_never_delays_termination():
    sentence = make_sentence(years=0, days=100)
    episodes = [CustodyEpisode(start=day(0), end=day(60))]

    terminations = []
    for credit in (0, 10, 30, 50, 90):
        remissions = [RemissionCredit(credit_date=day(200), days=credit)]
        result = compute_sentence_dates(sentence, episodes, remissions, day(100))
        assert result.progression_date <= result.release_date <= result.termination_date
        terminations.append(result.termination_date)

    assert terminations == [day(240), day(230), day(210), day(200), day(200)]


def test_termination_at_liberty_projects_from_last_event():
    sentence = make_sentence(years=0, days=100)
    episodes = [CustodyEpisode(start=day(0), end=day(60))]
    remissions = [RemissionCredit(credit_date=day(10), days=5)]

    result = compute_sentence_dates(sentence, episodes, remissions, day(100))

    assert result.termination_date == day(135)
    assert result.days_to_termination == 35

def test_interrupted_custody_projects_from_reopened_episode():
    sentence = make_sentence()
    episodes = [CustodyEpisode(start=day(0), end=day(100)), CustodyEpisode(start=day(200))]

    result = compute_sentence_dates(sentence, episodes, [], day(300))

    assert result.days_served_today == 200
    assert result.progression_date == day(465)
    assert result.days_to_progression == 165
    assert result.termination_date == day(2290)


def test_threshold_inside_closed_episode_is_interpolated():
    sentence = make_sentence(years=1)
    episodes = [CustodyEpisode(start=day(0), end=day(100))]

    result = compute_sentence_dates(sentence, episodes, [], day(150))

    assert result.progression_days_required == Fraction(365, 6)
    assert result.progression_date == day(61)
    assert result.release_date is None
    assert result.days_to_release == 22
    assert result.termination_date == day(150 + 265)
    assert result.custody_status == "at_liberty"


def test_remission_at_liberty_dates_threshold_on_credit_day():
    sentence = make_sentence(years=1)
    remissions = [RemissionCredit(credit_date=day(10), days=70, reason="study")]

    result = compute_sentence_dates(sentence, [], remissions, day(20))

    assert result.progression_date == day(10)
    assert result.release_date is None
    assert result.termination_date == day(20 + 295)


def test_no_countable_episodes_is_not_an_error():
    sentence = make_sentence()
    episodes = [CustodyEpisode(start=day(0), countable=False)]

    result = compute_sentence_dates(sentence, episodes, [], day(50))

    assert result.days_served_today == 0
    assert result.progression_date is None
    assert result.release_date is None
    assert result.progression_days_required == 365
    assert result.days_to_progression == 365
    assert result.termination_date == day(50 + 2190)
    assert result.custody_status == "at_liberty"


def test_zero_length_sentence_is_already_complete():
    sentence = make_sentence(years=0)

    result = compute_sentence_dates(sentence, [CustodyEpisode(start=day(0))], [], day(30))

    assert result.progression_date == day(30)
    assert result.release_date == day(30)
    assert result.termination_date == day(30)
    assert result.days_to_termination == 0
    assert result.days_to_progression == 0


def test_include_release_day_counts_the_last_day():
    episodes = [CustodyEpisode(start=day(0), end=day(10))]
    assert days_served_until(episodes, day(30)) == 10
    assert days_served_until(episodes, day(30), include_release_day=True) == 11
    assert days_served_until(episodes, day(5), include_release_day=True) == 5


def test_include_release_day_flows_through_simulation():
    sentence = make_sentence(years=0, days=11)
    episodes = [CustodyEpisode(start=day(0), end=day(10))]

    without = compute_sentence_dates(sentence, episodes, [], day(20))
    with_day = compute_sentence_dates(sentence, episodes, [], day(20), include_release_day=True)

    assert without.days_to_termination == 1
    assert with_day.days_to_termination == 0
    assert with_day.termination_date == day(10)


def test_remission_until_ignores_future_credits():
    remissions = [
        RemissionCredit(credit_date=day(10), days=5),
        RemissionCredit(credit_date=day(40), days=7),
    ]
    assert remission_until(remissions, day(10)) == 5
    assert remission_until(remissions, day(40)) == 12


def test_custody_status_treats_end_day_as_liberty():
    episodes = [CustodyEpisode(start=day(0), end=day(10))]
    assert custody_status(episodes, day(-1)) == "at_liberty"
    assert custody_status(episodes, day(0)) == "in_custody"
    assert custody_status(episodes, day(9)) == "in_custody"
    assert custody_status(episodes, day(10)) == "at_liberty"


def test_inverted_episode_rejected():
    with pytest.raises(ValueError, match="start must be on or before end"):
        compute_sentence_dates(make_sentence(), [CustodyEpisode(start=day(10), end=day(5))], [], day(20))


def test_negative_remission_rejected():
    with pytest.raises(ValueError, match="non-negative"):
        compute_sentence_dates(make_sentence(), [], [RemissionCredit(credit_date=day(1), days=-3)], day(20))


def test_simple_sentence_uses_simple_entry_fractions():
    base = date(2024, 6, 1)
    result = compute_simple_sentence(6, 0, 0, "repeat_offender", "closed", 100, base)

    # 1/5 of 2190 days, 100 of them already served before the base date
    assert result.progression_days_required == 438
    assert result.progression_date == base + timedelta(days=338)
    assert result.release_date == base + timedelta(days=995)
    assert result.days_served_today == 100
    assert result.custody_status == "in_custody"


def test_simple_sentence_heinous_primary_release_fraction():
    result = compute_simple_sentence(5, 0, 0, "heinous_primary", "closed", 0, date(2024, 6, 1))
    assert result.release_days_required == Fraction(2, 3) * 1825


def test_simple_sentence_closed_detention_episode():
    base = date(2024, 6, 1)
    result = compute_simple_sentence(6, 0, 0, "primary", "semi_open", 400, base, still_in_custody=False)

    assert result.days_served_today == 400
    assert result.progression_date == base - timedelta(days=35)
    assert result.release_date is None
    assert result.termination_date == base + timedelta(days=1790)
    assert result.custody_status == "at_liberty"
    assert result.next_regime == "open"


def test_simple_sentence_rejects_negative_detention():
    with pytest.raises(ValueError):
        compute_simple_sentence(1, 0, 0, "primary", "closed", -1, date(2024, 6, 1))


def test_simple_sentence_case_is_what_gets_computed():
    base = date(2024, 6, 1)
    sentence, episodes = simple_sentence_case(6, 0, 0, "heinous_primary", "closed", 30, base)

    (crime,) = sentence.crimes
    assert crime.description == "Crime informado"
    assert sentence.progression_fraction == Fraction(2, 5)
    assert episodes[0].start == base - timedelta(days=30)
    assert episodes[0].end is None
    assert compute_sentence_dates(sentence, episodes, [], base) == compute_simple_sentence(
        6, 0, 0, "heinous_primary", "closed", 30, base
    )
