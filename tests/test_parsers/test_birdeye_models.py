"""Test Birdeye Data Services API Pydantic models."""

from decimal import Decimal

from src.parsers.birdeye.models import BirdeyeTokenOverview, BirdeyeTokenSecurity


def test_token_overview_minimal():
    overview = BirdeyeTokenOverview(address="test_addr")
    assert overview.address == "test_addr"
    assert overview.price is None
    assert overview.marketCap is None
    assert overview.net_buys_1h is None


def test_token_overview_full():
    overview = BirdeyeTokenOverview(
        address="So111...",
        name="Wrapped SOL",
        symbol="SOL",
        price=Decimal("150.5"),
        marketCap=Decimal("60000000000"),
        fdv=Decimal("70000000000"),
        liquidity=Decimal("500000"),
        holder=1000000,
        v1hUSD=Decimal("50000"),
        v24hUSD=Decimal("2000000"),
        buy1h=500,
        sell1h=400,
        priceChange1hPercent=Decimal("2.5"),
        extensions={"website": "https://solana.com"},
    )
    assert overview.price == Decimal("150.5")
    assert overview.holder == 1000000
    assert overview.sell1h == 400
    assert overview.net_buys_1h == 100
    assert overview.extensions["website"] == "https://solana.com"


def test_token_overview_extra_fields_ignored():
    overview = BirdeyeTokenOverview(
        address="test",
        unknownField="should_be_ignored",
        anotherExtra=123,
    )
    assert overview.address == "test"


def test_token_overview_net_buys_needs_both_counts():
    assert BirdeyeTokenOverview(buy1h=10).net_buys_1h is None
    assert BirdeyeTokenOverview(buy1h=10, sell1h=25).net_buys_1h == -15


def test_token_security_mintable():
    sec = BirdeyeTokenSecurity(
        mintAuthority="SomeMintAuthority123",
        freezeAuthority=None,
    )
    assert sec.is_mintable is True
    assert sec.is_freezable is False


def test_token_security_not_mintable():
    sec = BirdeyeTokenSecurity(
        mintAuthority=None,
        freezeAuthority=None,
    )
    assert sec.is_mintable is False


def test_token_security_freezable():
    sec = BirdeyeTokenSecurity(freezeAuthority="FreezeAuth456")
    assert sec.is_freezable is True


def test_token_security_dev_fraction():
    sec = BirdeyeTokenSecurity(
        creatorPercentage=Decimal("0.12"),
        ownerPercentage=Decimal("0.03"),
    )
    assert sec.dev_fraction == Decimal("0.12")
    assert BirdeyeTokenSecurity(ownerPercentage=Decimal("0.03")).dev_fraction == Decimal("0.03")
    assert BirdeyeTokenSecurity().dev_fraction is None


def test_token_security_extra_ignored():
    sec = BirdeyeTokenSecurity(
        top10HolderPercent=Decimal("0.355"),
        someNewApiField="ignored",
    )
    assert sec.top10HolderPercent == Decimal("0.355")
