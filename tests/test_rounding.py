import pytest

from cloudvolume.rounding import (
    QuantityOverflowError,
    parse_quantity,
    round_up_to_b,
    round_up_to_gib,
    round_up_to_gib_int,
    round_up_to_gib_int32,
    round_up_to_kb,
    round_up_to_kb_int,
    round_up_to_kib,
    round_up_to_kib_int,
    round_up_to_mb,
    round_up_to_mb_int,
    round_up_to_mib,
    round_up_to_mib_int,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000Ki", 1),
        ("1000k", 1),
        ("1000Mi", 1),
        ("1000M", 1),
        ("1000G", 932),
        ("1000Gi", 1000),
        ("1.2Gi", 2),
        ("8191Pi", 8588886016),
    ],
)
def test_round_up_to_gib(text, expected):
    assert round_up_to_gib(parse_quantity(text)) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000Ki", 2),
        ("1000k", 1),
        ("1000Mi", 1049),
        ("1000M", 1000),
        ("1000G", 1000000),
        ("1000Gi", 1073742),
        ("1.2Gi", 1289),
        ("8191Pi", 9222246136948),
    ],
)
def test_round_up_to_mb(text, expected):
    assert round_up_to_mb(parse_quantity(text)) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000Ki", 1),
        ("1000k", 1),
        ("1000Mi", 1000),
        ("1000M", 954),
        ("1000G", 953675),
        ("1000Gi", 1024000),
        ("1.2Gi", 1229),
        ("8191Pi", 8795019280384),
    ],
)
def test_round_up_to_mib(text, expected):
    assert round_up_to_mib(parse_quantity(text)) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000Ki", 1024),
        ("1000k", 1000),
        ("1000Mi", 1048576),
        ("1000M", 1000000),
        ("1000G", 1000000000),
        ("1000Gi", 1073741824),
        ("1.2Gi", 1288491),
        ("8191Pi", 9222246136947934),
    ],
)
def test_round_up_to_kb(text, expected):
    assert round_up_to_kb(parse_quantity(text)) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000Ki", 1000),
        ("1000k", 977),
        ("1000Mi", 1024000),
        ("1000M", 976563),
        ("1000G", 976562500),
        ("1000Gi", 1048576000),
        ("1.2Gi", 1258292),
    ],
)
def test_round_up_to_kib(text, expected):
    assert round_up_to_kib(parse_quantity(text)) == expected


def test_round_up_to_kib_big_value_is_exact_division():
    size = parse_quantity("8191Pi")
    assert round_up_to_kib(size) * 1024 == round_up_to_b(size)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1000Ki", 1),
        ("1000k", 1),
        ("1000Mi", 1),
        ("1000M", 1),
        ("1000G", 932),
        ("1000Gi", 1000),
        ("1.2Gi", 2),
        ("2047Pi", 2146435072),
    ],
)
def test_round_up_to_gib_int32(text, expected):
    assert round_up_to_gib_int32(parse_quantity(text)) == expected


def test_round_up_to_gib_int32_overflow():
    with pytest.raises(QuantityOverflowError, match="overflows int32"):
        round_up_to_gib_int32(parse_quantity("2048Pi"))


@pytest.mark.parametrize(
    "text, expected",
    [
        ("987m", 1),
        ("1.2Gi", 1288490189),
        ("8191Pi", 9222246136947933184),
    ],
)
def test_round_up_to_b(text, expected):
    assert round_up_to_b(parse_quantity(text)) == expected


@pytest.mark.parametrize(
    "func",
    [round_up_to_gib, round_up_to_mb, round_up_to_mib, round_up_to_kb, round_up_to_kib, round_up_to_b],
)
def test_int64_overflow(func):
    with pytest.raises(QuantityOverflowError, match="overflows int64"):
        func(parse_quantity("8192Pi"))


@pytest.mark.parametrize(
    "int_func, int64_func",
    [
        (round_up_to_gib_int, round_up_to_gib),
        (round_up_to_mb_int, round_up_to_mb),
        (round_up_to_mib_int, round_up_to_mib),
        (round_up_to_kb_int, round_up_to_kb),
        (round_up_to_kib_int, round_up_to_kib),
    ],
)
def test_int_variants_match_int64_variants(int_func, int64_func):
    for text in ["1000Ki", "1000M", "1.2Gi", "1000G"]:
        size = parse_quantity(text)
        assert int_func(size) == int64_func(size)


def test_value_rounds_up():
    assert parse_quantity("987m").value() == 1
    assert parse_quantity("1.2Gi").value() == 1288490189
    assert parse_quantity("5").value() == 5


def test_cmp_int():
    size = parse_quantity("1Ki")
    assert size.cmp_int(1024) == 0
    assert size.cmp_int(1023) == 1
    assert size.cmp_int(1025) == -1


def test_exponent_and_exa_suffixes():
    assert parse_quantity("1e3").value() == 1000
    assert parse_quantity("1E").value() == 10**18


def test_equal_quantities_compare_equal():
    assert parse_quantity("1Ki") == parse_quantity("1024")
    assert str(parse_quantity("1.2Gi")) == "1.2Gi"


@pytest.mark.parametrize("text", ["", "Gi", "1.2.3", "1Xi", "abc", "1 Gi"])
def test_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_quantity(text)