from awardbot.config import PipelineConfig
from awardbot.formatters.whatsapp import NO_RESULTS_MESSAGE, format_award, format_awards
from awardbot.rank.grouper import group_awards
from awardbot.types import FlightAward


def award(**kw):
    base = dict(airline="GOL", origin_code="JFK", dest_code="GRU",
                departure_time="08:30", arrival_time="20:15")
    base.update(kw)
    return FlightAward(**base)


def test_no_groups_gives_fixed_message(config):
    assert format_awards([], config) == NO_RESULTS_MESSAGE


def test_both_cabins_block(config):
    lines = format_award(award(economy_points=35000, business_points=90000, taxes_local=150), config)
    assert lines == [
        "JFK 8:30am - GRU 8:15pm",
        "  Economy pts: 35000 | Business pts: 90000",
        "  1=35000 (points)  2=$30 (USD taxes)",
        "    (points value est: $157.50)",
        "    (points value est: $360.00)",
    ]


def test_business_only_uses_business_as_lowest_and_dash_for_zero_taxes(config):
    lines = format_award(award(business_points=65000, departure_time="", arrival_time="00:05"), config)
    assert lines[0] == "JFK  - GRU 12:05am"
    assert lines[1] == "  Economy pts: - | Business pts: 65000"
    assert lines[2] == "  1=65000 (points)  2=$- (USD taxes)"
    assert lines[3:] == ["    (points value est: $260.00)"]


def test_two_decimal_tax_display():
    cfg = PipelineConfig(currency_rate=5.28, tax_decimals=2)
    lines = format_award(award(economy_points=10000, taxes_local=150), cfg)
    assert "2=$28.41 (USD taxes)" in lines[2]


def test_sections_and_sub_headers_layout(config):
    groups = group_awards([
        award(economy_points=20000, business_points=60000, origin_code="EWR", airline="United"),
        award(economy_points=15000),
        award(business_points=70000, departure_time="13:00"),
    ])
    text = format_awards(groups, config)
    assert text.startswith("=== Both Economy & Business ===\n\nUnited from EWR:\nEWR 8:30am - GRU 8:15pm\n")
    assert "\n\n=== Economy only ===\n\nGOL from JFK:\n" in text
    assert "\n\n=== Business only ===\n\nGOL from JFK:\nJFK 1:00pm - GRU 8:15pm\n" in text
    assert text.endswith("(points value est: $280.00)\n\n")


def test_lowest_is_the_smaller_count_even_when_business_is_cheaper(config):
    lines = format_award(award(economy_points=80000, business_points=60000), config)
    assert lines[2] == "  1=60000 (points)  2=$- (USD taxes)"
    # value lines still go economy first
    assert lines[3:] == ["    (points value est: $320.00)", "    (points value est: $258.00)"]
