import pytest

from propcompare.models.property import ComparableProperty
from propcompare.services.area_stats import competition_level, get_area_stats, normalize_area_code
from propcompare.services.market import (
    classify_market_position,
    effective_price,
    peer_group_key,
    peer_group_medians,
)

from conftest import make_property


def _props(*records):
    return [ComparableProperty.model_validate(make_property(**r)) for r in records]


def test_effective_price_prefers_sold_then_asking_then_capitalised_rent():
    sold, asking, rental = _props(
        {"soldPrice": 350000, "askingPrice": 360000},
        {"askingPrice": 360000},
        {"askingPrice": None, "monthlyRent": 2000, "kind": "rental"},
    )
    assert effective_price(sold) == 350000
    assert effective_price(asking) == 360000
    assert effective_price(rental) == 480000


def test_peer_group_key_buckets_types_and_defaults_beds():
    semi, flat, cottage = _props(
        {"beds": 3, "propertyType": "Semi-Detached House"},
        {"beds": None, "propertyType": "Flat"},
        {"beds": 2, "propertyType": "Cottage"},
    )
    assert peer_group_key(semi) == "3bed_house"
    assert peer_group_key(flat) == "1bed_apartment"
    assert peer_group_key(cottage) == "2bed_other"


def test_peer_group_medians_even_and_odd_groups():
    props = _props(
        {"askingPrice": 300000},
        {"askingPrice": 500000},
        {"askingPrice": 400000, "beds": 3, "propertyType": "House"},
        {"askingPrice": 200000, "beds": 3, "propertyType": "House"},
        {"askingPrice": 900000, "beds": 3, "propertyType": "House"},
    )
    medians = peer_group_medians(props)
    assert medians == {"2bed_apartment": 400000.0, "3bed_house": 400000.0}


def test_peer_group_medians_ignore_input_order():
    props = _props({"askingPrice": 300000}, {"askingPrice": 500000}, {"askingPrice": 450000})
    assert peer_group_medians(props) == peer_group_medians(list(reversed(props)))


def test_peer_group_medians_skip_non_positive_prices():
    props = _props({"askingPrice": 0}, {"askingPrice": 420000})
    assert peer_group_medians(props) == {"2bed_apartment": 420000.0}


@pytest.mark.parametrize(
    "price, expected",
    [
        (102000, "at"),
        (98000, "at"),
        (102000.1, "above"),
        (97999.9, "below"),
    ],
)
def test_position_dead_band_is_inclusive(price, expected):
    assert classify_market_position(price, 100000).position == expected


def test_position_percentage_sign():
    result = classify_market_position(115000, 100000)
    assert result.position == "above"
    assert result.percentage == pytest.approx(15.0)


def test_zero_median_is_at_market():
    result = classify_market_position(300000, 0)
    assert result.position == "at"
    assert result.percentage == 0.0


@pytest.mark.parametrize("code", ["D6W", "d6w", "Dublin 6w", "dublin-6W", " D6w "])
def test_area_code_normalisation(code):
    assert normalize_area_code(code) == "D6W"


def test_area_lookup_is_exact():
    assert get_area_stats("Dublin 15").median_price == 380000
    assert get_area_stats("D1").median_price == 420000
    assert get_area_stats("D10").median_price == 455000
    assert get_area_stats(None).avg_days_on_market == 18


def test_competition_thresholds():
    assert competition_level(85) == "high"
    assert competition_level(70) == "medium"
    assert competition_level(45) == "medium"
    assert competition_level(40) == "low"


@pytest.mark.parametrize(
    "property_type, bucket",
    [
        ("Terraced House", "house"),
        ("End of Terrace", "house"),
        ("Semi-Detached", "house"),
        ("Detached", "other"),
        ("Bungalow", "other"),
        ("Duplex", "other"),
    ],
)
def test_house_bucket_keywords(property_type, bucket):
    (prop,) = _props({"beds": 3, "propertyType": property_type})
    assert peer_group_key(prop) == f"3bed_{bucket}"
