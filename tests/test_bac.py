"""Tests for the BAC simulator, status and drink log. Run from project root: pytest tests/ -v"""
import math
from datetime import datetime

import pytest

from drinkosaur.calculations import (
    HOUR_MS,
    MINUTE_MS,
    METABOLISM_RATE,
    absorption_event,
    bac_trend,
    potential_bac,
    simulate_bac,
)
from drinkosaur.catalog import build_drink, parsed_drink_from_dict
from drinkosaur.display import dashboard_summary
from drinkosaur.drinks import DrinkEvent, InvalidDrinkError, alcohol_grams, consumption_duration_ms
from drinkosaur.profile import UserProfile
from drinkosaur.session import Session
from drinkosaur.status import (
    BUZZY,
    FUNNY_EXPRESSIONS,
    LOADED,
    SETUP_REQUIRED,
    SOBER,
    THEME_COLORS,
    TIPSY,
    BacStatus,
    calculate_status,
    classify_bac,
)

T0 = 1_700_000_000_000
MALE_70 = UserProfile(weight_kg=70, gender="male", drinking_speed="average")
ELIM_PER_MIN = METABOLISM_RATE / 60


def beer(ts=T0, volume=500, abv=5.0, chug=True, drink_id="b1"):
    return DrinkEvent(id=drink_id, name="Beer", volume_ml=volume, abv=abv, timestamp=ts, is_chug=chug, type="beer")


def test_alcohol_grams():
    assert alcohol_grams(500, 5.0) == pytest.approx(19.725)


def test_consumption_duration_by_type_and_speed():
    wine = DrinkEvent("w", "Wine", 125, 12.0, T0, type="wine")
    assert consumption_duration_ms(wine, "average") == pytest.approx(125 / 7 * MINUTE_MS)
    assert consumption_duration_ms(wine, "fast") == pytest.approx(125 / 8 * MINUTE_MS)
    odd = DrinkEvent("x", "Mystery", 150, 10.0, T0, type="punch")
    assert consumption_duration_ms(odd, "slow") == pytest.approx(150 / 10 * MINUTE_MS)
    assert consumption_duration_ms(beer(chug=True)) == 0


def test_absorption_event_for_chugged_beer():
    event = absorption_event(beer(), MALE_70)
    assert event.start == T0
    assert event.end == T0 + 45 * MINUTE_MS
    assert event.total_bac == pytest.approx(0.0402551, abs=1e-6)
    assert event.rate_per_ms == pytest.approx(event.total_bac / (45 * MINUTE_MS))


def test_absorption_window_includes_consumption_time():
    sipped = beer(chug=False)
    event = absorption_event(sipped, UserProfile(70, "male", "slow"))
    assert event.end - event.start == pytest.approx((500 / 17) * MINUTE_MS + 45 * MINUTE_MS)


def test_zero_length_window_adds_full_dose_without_nan():
    event = absorption_event(beer(), MALE_70, absorption_delay_min=0)
    assert event.is_instant
    assert event.rate_per_ms == 0
    points = simulate_bac([beer()], MALE_70, T0, T0 + 10 * MINUTE_MS, absorption_delay_min=0)
    assert all(math.isfinite(p.bac) for p in points)
    assert points[0].bac == pytest.approx(event.total_bac - ELIM_PER_MIN)


def test_invalid_drink_contributes_nothing():
    bad = DrinkEvent("bad", "Broken", -100, 5.0, T0)
    too_strong = DrinkEvent("bad2", "Broken", 100, 150.0, T0)
    assert potential_bac(bad, MALE_70) == 0
    points = simulate_bac([bad, too_strong], MALE_70, T0, T0 + HOUR_MS)
    assert all(p.bac == 0 for p in points)


def test_chugged_beer_scenario():
    points = simulate_bac([beer()], MALE_70, T0, T0 + 12 * HOUR_MS, 60_000)
    total = absorption_event(beer(), MALE_70).total_bac
    assert [p.time for p in points[:3]] == [T0, T0 + MINUTE_MS, T0 + 2 * MINUTE_MS]
    # 45 absorbing steps, each also eliminating one minute's worth.
    assert points[44].bac == pytest.approx(total - 45 * ELIM_PER_MIN)
    for i in range(45, 160):
        assert points[i].bac == pytest.approx(points[i - 1].bac - ELIM_PER_MIN)
    assert points[160].bac > 0
    assert points[161].bac == 0
    assert all(p.bac == 0 for p in points[161:])


def test_monotonic_decay_after_absorption():
    drink = beer(chug=False, volume=330, abv=8.0)
    event = absorption_event(drink, MALE_70)
    points = simulate_bac([drink], MALE_70, T0, T0 + 10 * HOUR_MS)
    after = [p.bac for p in points if p.time >= event.end]
    assert after[0] > 0
    assert all(b2 <= b1 for b1, b2 in zip(after, after[1:]))
    first_zero = after.index(0.0)
    assert all(b == 0 for b in after[first_zero:])


def test_additivity_of_separate_drinks():
    a = beer(ts=T0, drink_id="a")
    b = beer(ts=T0 + 2 * HOUR_MS, volume=330, abv=7.0, drink_id="b")
    end = T0 + 6 * HOUR_MS
    together = simulate_bac([a, b], MALE_70, T0, end, metabolism_rate=0)
    only_a = simulate_bac([a], MALE_70, T0, end, metabolism_rate=0)
    only_b = simulate_bac([b], MALE_70, T0, end, metabolism_rate=0)
    assert len(together) == len(only_a) == len(only_b)
    for p, pa, pb in zip(together, only_a, only_b):
        assert p.time == pa.time == pb.time
        assert p.bac == pytest.approx(pa.bac + pb.bac, abs=1e-12)


def test_no_negative_samples():
    drinks = [beer(ts=T0, drink_id="1"), beer(ts=T0 + 5 * HOUR_MS, volume=40, abv=40.0, drink_id="2")]
    for step in (60_000, 300_000, 17_000):
        points = simulate_bac(drinks, MALE_70, T0 - HOUR_MS, T0 + 12 * HOUR_MS, step)
        assert all(p.bac >= 0 for p in points)


def test_empty_input_is_zero_everywhere():
    points = simulate_bac([], MALE_70, T0, T0 + HOUR_MS, 5 * MINUTE_MS)
    assert len(points) == 13
    assert points[-1].time == T0 + HOUR_MS
    assert all(p.bac == 0 for p in points)


def test_points_before_first_drink_are_zero():
    points = simulate_bac([beer(ts=T0 + HOUR_MS)], MALE_70, T0, T0 + 2 * HOUR_MS)
    before = [p for p in points if p.time < T0 + HOUR_MS]
    assert len(before) == 60
    assert all(p.bac == 0 for p in before)
    assert any(p.bac > 0 for p in points)


def test_step_must_be_positive():
    with pytest.raises(ValueError):
        simulate_bac([beer()], MALE_70, T0, T0 + HOUR_MS, 0)


def test_back_to_back_drinks_have_no_discontinuity():
    first = beer(ts=T0, drink_id="1")
    second_ts = absorption_event(first, MALE_70).end
    second = beer(ts=int(second_ts), volume=330, abv=6.0, drink_id="2")
    rate1 = absorption_event(first, MALE_70).rate_per_ms * MINUTE_MS
    rate2 = absorption_event(second, MALE_70).rate_per_ms * MINUTE_MS
    points = simulate_bac([first, second], MALE_70, T0, T0 + 3 * HOUR_MS)
    jumps = [b.bac - a.bac for a, b in zip(points, points[1:])]
    assert max(jumps) <= max(rate1, rate2) + 1e-12
    handover = next(i for i, p in enumerate(points) if p.time == second_ts)
    assert jumps[handover - 1] == pytest.approx(rate2 - ELIM_PER_MIN)


def test_unordered_input_is_sorted():
    a = beer(ts=T0, drink_id="a")
    b = beer(ts=T0 + HOUR_MS, drink_id="b")
    assert simulate_bac([b, a], MALE_70, T0, T0 + 4 * HOUR_MS) == simulate_bac([a, b], MALE_70, T0, T0 + 4 * HOUR_MS)


def test_trend_window_and_step():
    points = bac_trend([beer()], MALE_70, T0)
    assert points[0].time == T0 - 7 * HOUR_MS
    assert points[-1].time == T0 + 7 * HOUR_MS
    assert len(points) == 14 * 12 + 1


@pytest.mark.parametrize("bac,label,theme", [
    (0, SOBER, "safe"),
    (0.0001, BUZZY, "buzz"),
    (0.049999, BUZZY, "buzz"),
    (0.05, TIPSY, "drunk"),
    (0.099999, TIPSY, "drunk"),
    (0.10, LOADED, "danger"),
    (0.149999, LOADED, "danger"),
])
def test_classify_boundaries(bac, label, theme):
    assert classify_bac(bac) == (label, THEME_COLORS[theme])


def test_classify_escalates_and_cycles():
    assert classify_bac(0.15)[0] == FUNNY_EXPRESSIONS[0]
    assert classify_bac(0.1549)[0] == FUNNY_EXPRESSIONS[0]
    assert classify_bac(0.155)[0] == FUNNY_EXPRESSIONS[1]
    wrap = 0.15 + 0.005 * len(FUNNY_EXPRESSIONS)
    assert classify_bac(wrap + 0.001)[0] == FUNNY_EXPRESSIONS[0]
    assert classify_bac(0.4)[1] == THEME_COLORS["danger"]


def test_status_unset_profile_short_circuits():
    for profile in (UserProfile(weight_kg=0), UserProfile(weight_kg=-5)):
        status = calculate_status([beer()], profile, now=T0)
        assert status == BacStatus(0.0, 0.0, None, None, SETUP_REQUIRED, THEME_COLORS["safe"])


def test_status_no_drinks_is_sober():
    status = calculate_status([], MALE_70, now=T0)
    assert status.status_message == SOBER
    assert status.current_bac == 0 and status.peak_bac == 0
    assert status.peak_time is None and status.sober_timestamp is None


def test_status_after_chugged_beer():
    now = T0 + 30 * MINUTE_MS
    status = calculate_status([beer()], MALE_70, now=now)
    total = absorption_event(beer(), MALE_70).total_bac
    assert status.current_bac == round(30 * (total / 45 - ELIM_PER_MIN) + total / 45 - ELIM_PER_MIN, 4)
    assert status.status_message == BUZZY
    assert status.peak_time == T0 + 44 * MINUTE_MS
    assert status.peak_bac == round(total - 45 * ELIM_PER_MIN, 4)
    assert status.sober_timestamp == T0 + 161 * MINUTE_MS


def test_status_now_after_sober_is_zero():
    status = calculate_status([beer()], MALE_70, now=T0 + 10 * HOUR_MS)
    assert status.current_bac == 0
    assert status.status_message == SOBER
    assert status.peak_bac > 0
    assert status.sober_timestamp is not None


def test_status_heavy_session_still_finds_sober_time():
    # Enough alcohol that the default 24h horizon would end before sobriety.
    drinks = [
        DrinkEvent(str(i), "Vodka", 200, 40.0, T0 + i * 10 * MINUTE_MS, type="spirit")
        for i in range(6)
    ]
    status = calculate_status(drinks, MALE_70, now=T0)
    assert status.peak_bac > 0.5
    assert status.sober_timestamp is not None
    assert status.sober_timestamp > T0 + 24 * HOUR_MS


def test_build_drink_with_mixer():
    drink = build_drink("vodka", 40, timestamp=T0, mixer_id="tonic", mixer_ml=160)
    assert drink.name == "Vodka & Tonic Water"
    assert drink.volume_ml == 200
    assert drink.abv == 8.0
    assert drink.type == "spirit"
    assert drink.timestamp == T0
    assert drink.id


def test_build_drink_rejects_bad_input():
    with pytest.raises(InvalidDrinkError):
        build_drink("vodka", 0)
    with pytest.raises(InvalidDrinkError):
        build_drink("no-such-drink", 100)
    with pytest.raises(InvalidDrinkError):
        build_drink("vodka", 40, mixer_id="no-such-mixer", mixer_ml=100)


def test_drink_from_dict_contract():
    drink = DrinkEvent.from_dict({
        "id": "d1", "name": "Lager", "volumeMl": 500, "abv": 5, "timestamp": T0, "isChug": True, "type": "beer",
    })
    assert drink.volume_ml == 500 and drink.is_chug and drink.type == "beer"
    assert DrinkEvent.from_dict({"volumeMl": 100, "abv": 5, "timestamp": T0, "type": "mead"}).type == "other"
    with pytest.raises(InvalidDrinkError):
        DrinkEvent.from_dict({"volumeMl": 0, "abv": 5, "timestamp": T0})
    with pytest.raises(InvalidDrinkError):
        DrinkEvent.from_dict({"volumeMl": 100, "abv": 101, "timestamp": T0})


def test_parsed_drink_contract():
    parsed = parsed_drink_from_dict({"name": "Pint of cider", "volumeMl": 568, "abv": 4.5, "icon": "🍏"})
    drink = parsed.to_drink_event(timestamp=T0)
    assert drink.type == "other" and drink.volume_ml == 568 and drink.timestamp == T0
    with pytest.raises(InvalidDrinkError):
        parsed_drink_from_dict({"name": "Mystery", "volumeMl": 100})


def test_profile_from_dict():
    profile = UserProfile.from_dict({"weightKg": "65", "gender": "female", "drinkingSpeed": "fast"})
    assert profile == UserProfile(65.0, "female", "fast")
    assert profile.widmark_ratio == 0.6
    assert not UserProfile.from_dict(None).is_setup
    assert UserProfile.from_dict({"weightKg": 80, "drinkingSpeed": "zoom"}).drinking_speed == "average"
    with pytest.raises(ValueError):
        UserProfile.from_dict({"weightKg": 80, "gender": "robot"}, strict=True)


def test_session_add_remove_and_status():
    s = Session(MALE_70)
    s.add_drink(beer(ts=T0 + HOUR_MS, drink_id="late"))
    s.add_drink(beer(ts=T0, drink_id="early"))
    assert [d.id for d in s.drinks] == ["early", "late"]
    assert s.status(T0 + 30 * MINUTE_MS).current_bac > 0
    assert len(s.trend(T0)) == 169
    assert s.remove_drink("early") is True
    assert s.remove_drink("early") is False
    assert [d.id for d in s.drinks] == ["late"]
    with pytest.raises(InvalidDrinkError):
        s.add_drink(beer(volume=0, drink_id="empty"))


def test_session_history_by_day():
    day1 = int(datetime(2024, 3, 1, 20, 0).timestamp() * 1000)
    day2 = int(datetime(2024, 3, 2, 1, 0).timestamp() * 1000)
    s = Session(MALE_70)
    s.add_drink(beer(ts=day1, drink_id="a"))
    s.add_drink(beer(ts=day1 + HOUR_MS, drink_id="b"))
    s.add_drink(beer(ts=day2, drink_id="c"))
    history = s.history_by_day()
    assert [day.isoformat() for day, _ in history] == ["2024-03-02", "2024-03-01"]
    assert [d.id for d in history[1][1]] == ["b", "a"]


def test_dashboard_summary_units():
    status = BacStatus(0.0612, 0.0812, T0, T0 + HOUR_MS, TIPSY, THEME_COLORS["drunk"])
    percent = dashboard_summary(status)
    assert percent["value"] == 0.061
    assert percent["unit"] == "%"
    assert percent["show_peak"] is True
    assert percent["driving_warning"] is True
    assert percent["over_legal_limit"] is False
    assert percent["limit_load_percent"] == 31
    grams = dashboard_summary(status, unit="g/L")
    assert grams["value"] == 0.61
    assert grams["peak"] == 0.81
    assert grams["unit"] == "g/L"


def test_dashboard_summary_caps_limit_load():
    status = BacStatus(0.31, 0.31, T0, None, FUNNY_EXPRESSIONS[0], THEME_COLORS["danger"])
    summary = dashboard_summary(status)
    assert summary["limit_load_percent"] == 100
    assert summary["show_peak"] is False
    assert summary["over_legal_limit"] is True
