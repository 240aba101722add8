import httpx
import pytest

from services.currency_service import (
    CurrencyConversionError,
    CurrencyService,
    ExchangeRateClient,
    RateCache,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_cache_entries_expire_after_ttl():
    clock = FakeClock()
    cache = RateCache(ttl_seconds=60, clock=clock)
    cache.put("USD", {"VND": 25000.0})
    clock.now += 59
    assert cache.get("USD") == {"VND": 25000.0}
    clock.now += 1
    assert cache.get("USD") is None


def test_service_uses_cache_until_expiry(make_rate_client):
    clock = FakeClock()
    client = make_rate_client()
    svc = CurrencyService(client, RateCache(ttl_seconds=60, clock=clock))

    assert svc.get_rate("USD") == 25000.0
    assert svc.get_rate("USD") == 25000.0
    assert client.calls == ["USD"]

    clock.now += 61
    svc.get_rate("USD")
    assert client.calls == ["USD", "USD"]


def test_clear_cache_forces_refetch(make_rate_client):
    client = make_rate_client()
    svc = CurrencyService(client, RateCache())
    svc.get_rate("USD")
    svc.clear_cache()
    svc.get_rate("USD")
    assert client.calls == ["USD", "USD"]


def test_vnd_needs_no_lookup(make_rate_client):
    client = make_rate_client()
    svc = CurrencyService(client)
    assert svc.convert_to_vnd(150_000, "VND") == 150_000
    assert client.calls == []


def test_convert_rounds_to_whole_dong(make_rate_client):
    svc = CurrencyService(make_rate_client({"USD": {"VND": 25431.7}}))
    assert svc.convert_to_vnd(2, "USD") == 50863


def test_unsupported_currency(make_rate_client):
    svc = CurrencyService(make_rate_client())
    with pytest.raises(CurrencyConversionError):
        svc.get_rate("XYZ")


def test_fallback_rate_when_api_fails(make_rate_client):
    svc = CurrencyService(make_rate_client(fail=True), fallback_rates={"USD": 24000.0})
    assert svc.convert_to_vnd(10, "USD") == 240000


def test_failure_without_fallback_raises(make_rate_client):
    svc = CurrencyService(make_rate_client(fail=True))
    with pytest.raises(CurrencyConversionError):
        svc.get_rate("EUR")


def test_missing_vnd_rate_raises(make_rate_client):
    svc = CurrencyService(make_rate_client({"USD": {"EUR": 0.9}}))
    with pytest.raises(CurrencyConversionError):
        svc.get_rate("USD")


def test_http_client_reads_rates():
    def handler(request):
        assert request.url.path == "/v4/latest/USD"
        return httpx.Response(200, json={"base": "USD", "rates": {"VND": 25100.0}})

    http = httpx.Client(transport=httpx.MockTransport(handler))
    client = ExchangeRateClient("https://rates.test/v4/latest/", http_client=http)
    assert client.fetch_rates("USD") == {"VND": 25100.0}
    client.close()


@pytest.mark.parametrize("response", [
    httpx.Response(500, text="boom"),
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"result": "error"}),
])
def test_http_client_wraps_failures(response):
    http = httpx.Client(transport=httpx.MockTransport(lambda request: response))
    client = ExchangeRateClient("https://rates.test/latest", http_client=http)
    with pytest.raises(CurrencyConversionError):
        client.fetch_rates("USD")


def test_http_client_wraps_network_errors():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    http = httpx.Client(transport=httpx.MockTransport(handler))
    client = ExchangeRateClient("https://rates.test/latest", http_client=http)
    with pytest.raises(CurrencyConversionError):
        client.fetch_rates("USD")
