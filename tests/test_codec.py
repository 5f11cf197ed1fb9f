from __future__ import annotations

from codec import (
    decode_customer,
    decode_discount,
    decode_history,
    decode_service,
    decode_vehicle,
    encode_history,
    encode_service,
    format_number,
    read_leading_id,
)
from models import Customer, HistoryEntry, ServiceItem


def test_customer_missing_trailing_fields_default_to_empty():
    c = decode_customer("7|Bob")
    assert c == Customer(7, "Bob", "", "")


def test_customer_extra_fields_are_ignored():
    c = decode_customer("3|Ann|555|ann@example.com|extra|more")
    assert c == Customer(3, "Ann", "555", "ann@example.com")


def test_non_numeric_id_is_skipped():
    assert decode_customer("invalid|data") is None
    assert decode_customer("|John|1|j@x") is None


def test_vehicle_requires_numeric_owner():
    assert decode_vehicle("1|x|KA01|Swift|Red") is None
    v = decode_vehicle("1|4|KA01|Swift|Red")
    assert v.customer_id == 4
    assert v.reg_no == "KA01"


def test_service_missing_price_is_skipped():
    assert decode_service("5|Oil") is None
    assert decode_service("5|Oil|") is None


def test_decimal_fields_accept_integer_and_fractional_text():
    assert decode_service("1|Oil Change|1200").price == 1200
    assert decode_service("1|Oil Change|1200.0").price == 1200
    assert decode_discount("2|Half|12.5|note").percent == 12.5


def test_number_rendering():
    assert format_number(1200) == "1200"
    assert format_number(1200.0) == "1200"
    assert format_number(12.5) == "12.5"
    assert encode_service(ServiceItem(1, "Car Wash", 500.0)) == "1|Car Wash|500"


def test_history_service_ids_slot():
    h = HistoryEntry(4, 1, 2, [1, 2], "2026-01-11 10:00:00", 2000, -1, 0, 2000, "Pending")
    assert encode_history(h) == "4|1|2|1,2|2026-01-11 10:00:00|2000|-1|0|2000|Pending"

    h.service_ids = []
    assert encode_history(h) == "4|1|2||2026-01-11 10:00:00|2000|-1|0|2000|Pending"


def test_history_list_drops_empty_tokens_and_rejects_bad_ones():
    h = decode_history("1|1|1|1,,3,|2026-01-11 10:00:00|1700|-1|0|1700|Completed")
    assert h.service_ids == [1, 3]
    assert h.status == "Completed"

    assert decode_history("1|1|1|1,x|2026-01-11 10:00:00|1700|-1|0|1700|Pending") is None


def test_history_truncated_line_is_skipped():
    assert decode_history("1|1|1|1,2|2026-01-11 10:00:00") is None


def test_read_leading_id():
    assert read_leading_id("12|anything") == 12
    assert read_leading_id("12") == 12
    assert read_leading_id("abc|12") is None
    assert read_leading_id("") is None


def test_numeric_fields_accept_plain_ascii_digits_only():
    assert decode_customer("1_0|x") is None
    assert decode_customer("١|x") is None  # Arabic-Indic one
    assert decode_service("1|Oil|1_200") is None
    assert decode_discount("1|Promo|٥|note") is None


def test_signed_and_exponent_numbers_still_parse():
    h = decode_history("1|1|1|2|2026-01-11 10:00:00|800|-1|+0|8e2|Pending")
    assert h.discount_id == -1
    assert h.discount_percent == 0
    assert h.total == 800
    assert decode_service("1|Oil|.5").price == 0.5
