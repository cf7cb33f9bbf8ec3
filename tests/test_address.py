import pytest

from geolocator.address import get_country_from_headers, get_observed_address


def test_real_ip_header_wins_over_everything() -> None:
    context = {
        "HTTP_X_REAL_IP": "198.51.100.1",
        "HTTP_X_FORWARDED_FOR": "203.0.113.5",
        "REMOTE_ADDR": "10.0.0.1",
    }
    assert get_observed_address(context) == "198.51.100.1"


def test_real_ip_header_is_sanitized_but_not_validated() -> None:
    assert get_observed_address({"HTTP_X_REAL_IP": " <i>proxy-says-hi</i> "}) == "proxy-says-hi"


def test_forwarded_for_uses_first_entry() -> None:
    context = {"HTTP_X_FORWARDED_FOR": " 203.0.113.5 , 10.0.0.1, 10.0.0.2", "REMOTE_ADDR": "10.0.0.1"}
    assert get_observed_address(context) == "203.0.113.5"


def test_forwarded_for_ipv6() -> None:
    assert get_observed_address({"HTTP_X_FORWARDED_FOR": "2001:db8::1, 10.0.0.1"}) == "2001:db8::1"


@pytest.mark.parametrize("header", ["", "   ", "unknown", "not-an-ip, 203.0.113.5", ",203.0.113.5", "999.1.1.1"])
def test_invalid_forwarded_for_yields_empty_string(header: str) -> None:
    """A bad first entry is rejected outright; later entries and REMOTE_ADDR are not consulted."""
    context = {"HTTP_X_FORWARDED_FOR": header, "REMOTE_ADDR": "10.0.0.1"}
    assert get_observed_address(context) == ""


def test_remote_addr_used_last() -> None:
    assert get_observed_address({"REMOTE_ADDR": "192.0.2.10"}) == "192.0.2.10"


@pytest.mark.parametrize("context", [None, {}, {"HTTP_USER_AGENT": "curl/8.0"}])
def test_no_address_available(context) -> None:
    assert get_observed_address(context) == ""


def test_country_headers_follow_priority_order() -> None:
    context = {
        "HTTP_X_COUNTRY_CODE": "gb",
        "HTTP_CF_IPCOUNTRY": "de",
        "GEOIP_COUNTRY_CODE": "",
    }
    assert get_country_from_headers(context) == "DE"


def test_country_header_is_sanitized_and_uppercased() -> None:
    assert get_country_from_headers({"MM_COUNTRY_CODE": " <b>nl</b> "}) == "NL"


@pytest.mark.parametrize("context", [None, {}, {"HTTP_CF_IPCOUNTRY": ""}])
def test_no_country_header(context) -> None:
    assert get_country_from_headers(context) == ""
