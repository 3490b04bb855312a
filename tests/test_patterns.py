"""Price, currency, and name/description heuristics."""

import pytest

from menus.extractor import (
    collapse_whitespace,
    detect_currency,
    has_currency_number,
    looks_like_menu_container_text,
    match_price,
    split_name_description,
)


def test_dash_delimited_line_splits_name_and_description():
    text = "Margherita Pizza - Classic tomato and mozzarella $12.50"

    price = match_price(text)

    assert price is not None
    assert price.price_text == "$12.50"
    assert price.currency == "$"
    assert split_name_description(price.strip_from(text)) == (
        "Margherita Pizza",
        "Classic tomato and mozzarella",
    )


def test_period_split_with_trailing_iso_code():
    text = "Caesar Salad. Crisp romaine, parmesan. 9.00 USD"

    price = match_price(text)

    assert price is not None
    assert price.price_text == "9.00 USD"
    assert price.currency == "USD"
    assert split_name_description(price.strip_from(text)) == (
        "Caesar Salad",
        "Crisp romaine, parmesan",
    )


def test_line_without_price_does_not_match():
    assert match_price("Our chef's special selection") is None
    assert match_price("") is None


def test_leftmost_price_wins():
    price = match_price("Combo £7 or €9")

    assert price is not None
    assert price.price_text == "£7"
    assert price.span == (6, 8)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("€ 8", "€"),
        ("12 EUR", "EUR"),
        ("1,200 GBP", "GBP"),
        ("$3", "$"),
    ],
)
def test_price_currency(text, expected):
    price = match_price(text)

    assert price is not None
    assert price.currency == expected


def test_detect_currency_is_case_insensitive():
    assert detect_currency("from 10 usd") == "usd"
    assert detect_currency("ask your server") == ""


@pytest.mark.parametrize("delimiter", ["-", "–", "—", ":"])
def test_spaced_delimiters_split(delimiter):
    name, description = split_name_description(f"Burger {delimiter} beef, cheddar")

    assert name == "Burger"
    assert description == "beef, cheddar"


def test_unspaced_hyphen_is_not_a_delimiter():
    assert split_name_description("Stir-fry noodles") == ("Stir-fry noodles", "")


def test_only_first_delimiter_splits():
    assert split_name_description("Wrap - chicken - spicy") == ("Wrap", "chicken - spicy")


def test_collapse_whitespace():
    assert collapse_whitespace("  Tacos\n\t  al   pastor ") == "Tacos al pastor"


def test_currency_number_sweep():
    assert has_currency_number("Lunch special $ 9")
    assert has_currency_number("menu from 15 EUR")
    assert not has_currency_number("Open daily from 9")


def test_menu_container_markers():
    assert looks_like_menu_container_text("Ingredients: flour, water")
    assert looks_like_menu_container_text("350 Cal")
    assert not looks_like_menu_container_text("Home About Contact")
